"""
操作日志模型
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime

from .base import Base


class OperationLog(Base):
    """用户操作记录（创建题库、导入题目、完成练习等），只追加"""
    __tablename__ = "operation_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(50), nullable=False)
    detail = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "action": self.action,
            "detail": self.detail,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<OperationLog(id={self.id} action='{self.action}')>"
