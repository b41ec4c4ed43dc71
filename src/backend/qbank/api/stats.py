"""
统计API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from qbank.core.database import get_db
from qbank.services import OperationLogService

router = APIRouter(prefix="/stats", tags=["统计"])


@router.get("/operation-logs", response_model=List[dict])
def get_operation_logs(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    """最近的操作日志"""
    return [log.to_dict() for log in OperationLogService.get_recent(db, limit)]
