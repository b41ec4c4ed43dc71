"""
题库管理API
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.services import BankService
from qbank.services.bank_service import bank_to_dict

router = APIRouter(prefix="/banks", tags=["题库管理"])


class BankRequest(BaseModel):
    """创建/更新题库请求"""
    name: str
    description: Optional[str] = ""


@router.get("", response_model=List[dict])
def get_banks(db: Session = Depends(get_db)):
    """获取所有题库（含题目数量）"""
    return BankService.get_all_banks(db)


@router.post("", response_model=dict)
def create_bank(request: BankRequest, db: Session = Depends(get_db)):
    """创建题库"""
    try:
        bank = BankService.create_bank(db, request.name, request.description)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return bank_to_dict(bank, 0)


@router.get("/{bank_id}", response_model=dict)
def get_bank(bank_id: str, db: Session = Depends(get_db)):
    """获取题库详情"""
    bank = BankService.get_bank(db, bank_id)
    if not bank:
        raise HTTPException(status_code=404, detail="题库不存在")
    return bank_to_dict(bank, BankService.count_questions(db, bank_id))


@router.put("/{bank_id}", response_model=dict)
def update_bank(bank_id: str, request: BankRequest, db: Session = Depends(get_db)):
    """更新题库"""
    try:
        bank = BankService.update_bank(db, bank_id, request.name, request.description)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return bank_to_dict(bank, BankService.count_questions(db, bank_id))


@router.delete("/{bank_id}")
def delete_bank(bank_id: str, db: Session = Depends(get_db)):
    """删除题库（级联删除题目）"""
    try:
        BankService.delete_bank(db, bank_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return {"success": True}
