"""
题目模型
"""
from sqlalchemy import Column, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from .base import Base


class Question(Base):
    """
    题目模型

    answer 的语法取决于题型：
    - single: "A"
    - multiple: "A|C"
    - boolean: "正确" / "错误"
    - fill: "答案1|答案2"（与空栏一一对应）
    - short: 任意文本
    """
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, index=True)
    bank_id = Column(String(36), ForeignKey("question_banks.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)  # single | multiple | boolean | fill | short
    content = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)  # [{"id": "A", "text": "..."}]，仅选择题
    answer = Column(Text, nullable=False, default="")
    analysis = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系
    bank = relationship("QuestionBank", back_populates="questions")

    def to_dict(self):
        return {
            "id": self.id,
            "bank_id": self.bank_id,
            "type": self.type,
            "content": self.content,
            "options": self.options,
            "answer": self.answer,
            "analysis": self.analysis,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Question(id='{self.id}' type='{self.type}' content='{self.content[:30]}...')>"
