"""
AI 问答聊天记录模型
"""
from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime

from .base import Base


class ChatHistory(Base):
    """一次问答会话；messages 为 [{"role", "content"}]，不含系统提示词"""
    __tablename__ = "chat_history"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    messages = Column(JSON, nullable=False)
    prompt_id = Column(String(36), nullable=True)  # 提示词被删除后保留原值
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_summary(self):
        """列表用，不含消息内容"""
        return {
            "id": self.id,
            "title": self.title,
            "prompt_id": self.prompt_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_dict(self):
        return {**self.to_summary(), "messages": self.messages}

    def __repr__(self):
        return f"<ChatHistory(id='{self.id}' title='{self.title}')>"
