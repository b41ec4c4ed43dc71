"""
聊天记录服务
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.models import ChatHistory

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "新对话"
TITLE_MAX_LENGTH = 100
DEFAULT_HISTORY_LIMIT = 50


def _check_messages(messages: Any):
    if not messages or not isinstance(messages, list):
        raise ValidationError("聊天记录不能为空")


class ChatHistoryService:
    """AI 问答聊天记录"""

    @staticmethod
    def save(
        db: Session,
        messages: List[Dict[str, str]],
        title: Optional[str] = None,
        prompt_id: Optional[str] = None,
    ) -> ChatHistory:
        """
        保存新的聊天记录

        Args:
            messages: 对话消息，不含系统提示词
            title: 标题，为空时使用 "新对话"
            prompt_id: 对话使用的提示词

        Raises:
            ValidationError: 消息为空
        """
        _check_messages(messages)
        title = (title or "").strip()[:TITLE_MAX_LENGTH] or DEFAULT_TITLE

        history = ChatHistory(
            id=str(uuid.uuid4()),
            title=title,
            messages=list(messages),
            prompt_id=prompt_id,
        )
        db.add(history)
        db.commit()
        db.refresh(history)
        logger.info(f"保存聊天记录: {history.title} ({len(messages)} 条消息)")
        return history

    @classmethod
    def update(cls, db: Session, history_id: str, messages: List[Dict[str, str]]) -> ChatHistory:
        """
        用完整消息列表替换聊天记录

        Raises:
            ValidationError: 消息为空
            NotFoundError: 记录不存在
        """
        _check_messages(messages)
        history = cls.require(db, history_id)

        history.messages = list(messages)
        history.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(history)
        return history

    @staticmethod
    def get_all(db: Session, limit: int = DEFAULT_HISTORY_LIMIT) -> List[ChatHistory]:
        """最近更新的聊天记录"""
        return (
            db.query(ChatHistory)
            .order_by(ChatHistory.updated_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get(db: Session, history_id: str) -> Optional[ChatHistory]:
        return db.query(ChatHistory).filter(ChatHistory.id == history_id).first()

    @classmethod
    def require(cls, db: Session, history_id: str) -> ChatHistory:
        history = cls.get(db, history_id)
        if not history:
            raise NotFoundError("聊天记录不存在")
        return history

    @classmethod
    def delete(cls, db: Session, history_id: str):
        """
        Raises:
            NotFoundError: 记录不存在
        """
        history = cls.require(db, history_id)
        db.delete(history)
        db.commit()
