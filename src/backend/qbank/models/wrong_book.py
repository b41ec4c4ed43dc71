"""
错题本模型
"""
from sqlalchemy import Column, String, Integer, DateTime
from datetime import datetime

from .base import Base


class WrongBookEntry(Base):
    """
    错题本条目（每道题最多一条）

    不对 questions 建外键：题目删除后残留的条目在读取前统一清理。
    bank_id 记录最近一次答错时题目所属的题库。
    """
    __tablename__ = "wrong_book"

    question_id = Column(String(36), primary_key=True)
    bank_id = Column(String(36), nullable=False, index=True)
    wrong_count = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime, default=datetime.utcnow)
    last_wrong_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<WrongBookEntry(qid='{self.question_id}' wrong={self.wrong_count} correct={self.correct_count})>"
