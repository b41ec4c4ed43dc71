"""
题库模型
"""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from .base import Base


class QuestionBank(Base):
    """题库：题目的容器，删除时级联删除题目"""
    __tablename__ = "question_banks"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, index=True)

    # 关系
    questions = relationship("Question", back_populates="bank", cascade="all, delete-orphan")
    practice_records = relationship("PracticeRecord", back_populates="bank", cascade="all, delete-orphan")

    def touch(self):
        """题库内容变更时刷新更新时间"""
        self.updated_at = datetime.utcnow()

    def __repr__(self):
        return f"<QuestionBank(id='{self.id}' name='{self.name}')>"
