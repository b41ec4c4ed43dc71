"""
业务服务层
"""
from .bank_service import BankService
from .question_service import QuestionService
from .csv_service import CsvService
from .wrong_book_service import WrongBookService
from .settings_service import SettingsService
from .practice_service import PracticeService
from .ai_service import AiService
from .operation_log_service import OperationLogService
from .prompt_service import PromptService
from .chat_history_service import ChatHistoryService

__all__ = [
    "BankService",
    "QuestionService",
    "CsvService",
    "WrongBookService",
    "SettingsService",
    "PracticeService",
    "AiService",
    "OperationLogService",
    "PromptService",
    "ChatHistoryService",
]
