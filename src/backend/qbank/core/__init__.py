"""
核心逻辑：题目模型、校验、归一化、CSV 解析、错题本计数、AI 结果后处理

除 database 外均为纯函数，不依赖数据库和网络。
"""
from .question_types import QuestionType, TYPE_LABELS, count_blanks
from .question_model import QuestionDraft, QuestionOption, ValidationResult
from .validator import QuestionValidator, validate_question, validate_bank_name
from .answer_normalizer import AnswerNormalizer
from .csv_parser import CsvQuestionParser, CsvParseResult, CsvRowError
from .wrong_book import WrongBookAccounting, WrongBookState
from .ai_response import AiParseResponseNormalizer, parse_completion
from .grading import grade_answer
from .exceptions import QBankError, ValidationError, ConfigurationError, NotFoundError

__all__ = [
    "QuestionType",
    "TYPE_LABELS",
    "count_blanks",
    "QuestionDraft",
    "QuestionOption",
    "ValidationResult",
    "QuestionValidator",
    "validate_question",
    "validate_bank_name",
    "AnswerNormalizer",
    "CsvQuestionParser",
    "CsvParseResult",
    "CsvRowError",
    "WrongBookAccounting",
    "WrongBookState",
    "AiParseResponseNormalizer",
    "parse_completion",
    "grade_answer",
    "QBankError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
]
