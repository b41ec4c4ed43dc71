"""
练习API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import ConfigurationError, NotFoundError, ValidationError
from qbank.services import PracticeService

router = APIRouter(prefix="/practice", tags=["练习"])


class AnswerItem(BaseModel):
    question_id: str
    answer: Optional[str] = ""
    is_correct: Optional[bool] = None  # 简答题自评


class SubmitPracticeRequest(BaseModel):
    bank_id: str
    answers: List[AnswerItem]
    threshold: Optional[int] = None


@router.post("/submit", response_model=dict)
def submit_practice(request: SubmitPracticeRequest, db: Session = Depends(get_db)):
    """提交练习：判分、保存记录并同步错题本"""
    try:
        return PracticeService.submit_session(
            db,
            request.bank_id,
            [item.model_dump() for item in request.answers],
            request.threshold,
        )
    except (ValidationError, ConfigurationError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/records/{bank_id}", response_model=List[dict])
def get_records(bank_id: str, limit: int = Query(20, ge=1, le=200), db: Session = Depends(get_db)):
    """题库最近的练习记录"""
    return [r.to_dict() for r in PracticeService.get_records(db, bank_id, limit)]


@router.get("/stats", response_model=List[dict])
def get_all_stats(db: Session = Depends(get_db)):
    """各题库练习统计"""
    return PracticeService.get_all_stats(db)
