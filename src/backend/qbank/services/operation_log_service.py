"""
操作日志服务

各业务服务在提交前调用 add(commit=False)，日志与业务数据在同一事务中写入。
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from qbank.models import OperationLog

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 10


class OperationLogService:
    """操作日志"""

    @staticmethod
    def add(db: Session, action: str, detail: str = "", commit: bool = True) -> OperationLog:
        """
        记录一条操作

        Args:
            action: 操作名称（如 "创建题库"）
            detail: 详细描述
            commit: False 时只加入会话，由调用方提交
        """
        log = OperationLog(action=action, detail=detail or "")
        db.add(log)
        if commit:
            db.commit()
        logger.debug(f"操作日志: {action} {detail}")
        return log

    @staticmethod
    def get_recent(db: Session, limit: int = DEFAULT_LOG_LIMIT) -> List[OperationLog]:
        """最近的操作（按时间倒序，同一时刻按写入顺序倒序）"""
        return (
            db.query(OperationLog)
            .order_by(OperationLog.created_at.desc(), OperationLog.id.desc())
            .limit(limit)
            .all()
        )
