"""
Models package
Export all database models
"""
import logging

from .base import Base
from .bank import QuestionBank
from .question import Question
from .wrong_book import WrongBookEntry
from .setting import Setting
from .practice_record import PracticeRecord
from .operation_log import OperationLog
from .ai_prompt import AiPrompt
from .chat_history import ChatHistory

logger = logging.getLogger(__name__)

__all__ = [
    "Base",
    "QuestionBank",
    "Question",
    "WrongBookEntry",
    "Setting",
    "PracticeRecord",
    "OperationLog",
    "AiPrompt",
    "ChatHistory",
]


def init_db():
    """初始化数据库"""
    from ..core.database import engine

    Base.metadata.create_all(bind=engine)
    logger.info("数据库表已创建")


def drop_all():
    """删除所有表（仅开发测试用）"""
    from ..core.database import engine

    Base.metadata.drop_all(bind=engine)
    logger.warning("所有数据表已删除")
