"""
AI 问答提示词模型
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime
from datetime import datetime

from .base import Base


class AiPrompt(Base):
    """用户自定义的问答系统提示词；is_default 的那条不能删除"""
    __tablename__ = "ai_prompts"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    content = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "content": self.content,
            "is_default": self.is_default,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<AiPrompt(id='{self.id}' name='{self.name}')>"
