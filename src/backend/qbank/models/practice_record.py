"""
练习记录模型
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from .base import Base


class PracticeRecord(Base):
    """一次练习的汇总（每次练习创建新记录，从不更新）"""
    __tablename__ = "practice_records"

    id = Column(String(36), primary_key=True)
    bank_id = Column(String(36), ForeignKey("question_banks.id"), nullable=False, index=True)
    total = Column(Integer, nullable=False)
    correct = Column(Integer, nullable=False)
    wrong = Column(Integer, nullable=False)
    accuracy = Column(Integer, nullable=False)  # 百分比取整
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # 关系
    bank = relationship("QuestionBank", back_populates="practice_records")

    def to_dict(self):
        return {
            "id": self.id,
            "bank_id": self.bank_id,
            "total": self.total,
            "correct": self.correct,
            "wrong": self.wrong,
            "accuracy": self.accuracy,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<PracticeRecord(id='{self.id}' bank='{self.bank_id}' accuracy={self.accuracy})>"
