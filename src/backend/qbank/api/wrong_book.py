"""
错题本API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import ConfigurationError
from qbank.services import SettingsService, WrongBookService

router = APIRouter(prefix="/wrong-book", tags=["错题本"])


class PracticeResultItem(BaseModel):
    question_id: str
    bank_id: str
    is_correct: bool


class UpdateFromPracticeRequest(BaseModel):
    """按练习结果更新错题本；threshold 为空时读取设置"""
    results: List[PracticeResultItem]
    threshold: Optional[int] = None


@router.get("/counts", response_model=List[dict])
def get_counts_by_bank(db: Session = Depends(get_db)):
    """各题库错题数量"""
    return WrongBookService.get_counts_by_bank(db)


@router.get("/items", response_model=dict)
def get_items(
    bank_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """分页获取错题（按最近答错时间倒序）"""
    return WrongBookService.get_items(db, bank_id, page, page_size)


@router.get("/random", response_model=List[dict])
def get_random_questions(
    bank_id: Optional[str] = None,
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """随机抽取错题用于重练"""
    questions = WrongBookService.get_random_questions(db, bank_id, limit)
    if not questions:
        raise HTTPException(status_code=404, detail="没有错题可重练")
    return [q.to_dict() for q in questions]


@router.post("/update")
def update_from_practice(request: UpdateFromPracticeRequest, db: Session = Depends(get_db)):
    """按练习结果同步错题本"""
    try:
        threshold = SettingsService.resolve_threshold(db, request.threshold)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    processed = WrongBookService.update_from_practice(
        db, [item.model_dump() for item in request.results], threshold
    )
    return {"success": True, "processed": processed}


@router.delete("/items/{question_id}")
def remove_item(question_id: str, db: Session = Depends(get_db)):
    """手动移出错题本"""
    if not WrongBookService.remove_item(db, question_id):
        raise HTTPException(status_code=404, detail="错题不存在")
    return {"success": True}


@router.delete("")
def clear_wrong_book(bank_id: Optional[str] = None, db: Session = Depends(get_db)):
    """清空错题本（可按题库）"""
    removed = WrongBookService.clear(db, bank_id)
    return {"success": True, "removed": removed}
