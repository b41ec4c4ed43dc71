"""
题库服务
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.core.validator import QuestionValidator
from qbank.models import Question, QuestionBank, WrongBookEntry
from qbank.services.operation_log_service import OperationLogService

logger = logging.getLogger(__name__)


def bank_to_dict(bank: QuestionBank, question_count: int) -> Dict[str, Any]:
    return {
        "id": bank.id,
        "name": bank.name,
        "description": bank.description,
        "question_count": question_count,
        "created_at": bank.created_at.isoformat() if bank.created_at else None,
        "updated_at": bank.updated_at.isoformat() if bank.updated_at else None,
    }


class BankService:
    """题库服务"""

    @staticmethod
    def _check_name(name: Any):
        result = QuestionValidator.validate_bank_name(name)
        if not result.valid:
            raise ValidationError(result.first_error, result.errors)

    @staticmethod
    def get_bank(db: Session, bank_id: str) -> Optional[QuestionBank]:
        """根据ID获取题库"""
        return db.query(QuestionBank).filter(QuestionBank.id == bank_id).first()

    @classmethod
    def require_bank(cls, db: Session, bank_id: str) -> QuestionBank:
        """获取题库，不存在时抛出 NotFoundError"""
        bank = cls.get_bank(db, bank_id)
        if not bank:
            raise NotFoundError("题库不存在")
        return bank

    @staticmethod
    def count_questions(db: Session, bank_id: str) -> int:
        return db.query(func.count(Question.id)).filter(Question.bank_id == bank_id).scalar() or 0

    @classmethod
    def create_bank(cls, db: Session, name: str, description: Optional[str] = "") -> QuestionBank:
        """
        创建题库

        Raises:
            ValidationError: 名称为空、仅空白或超过 50 字符
        """
        cls._check_name(name)

        bank = QuestionBank(
            id=str(uuid.uuid4()),
            name=name.strip(),
            description=description or "",
        )
        db.add(bank)
        OperationLogService.add(db, "创建题库", f"创建题库: {bank.name}", commit=False)
        db.commit()
        db.refresh(bank)
        logger.info(f"创建题库: {bank.name} ({bank.id})")
        return bank

    @staticmethod
    def get_all_banks(db: Session) -> List[Dict[str, Any]]:
        """
        获取所有题库（含题目数量），按更新时间倒序
        """
        rows = (
            db.query(QuestionBank, func.count(Question.id))
            .outerjoin(Question, Question.bank_id == QuestionBank.id)
            .group_by(QuestionBank.id)
            .order_by(QuestionBank.updated_at.desc())
            .all()
        )
        return [bank_to_dict(bank, count) for bank, count in rows]

    @classmethod
    def update_bank(cls, db: Session, bank_id: str, name: str, description: Optional[str] = "") -> QuestionBank:
        """
        更新题库名称和描述

        Raises:
            ValidationError: 名称不合法
            NotFoundError: 题库不存在
        """
        cls._check_name(name)
        bank = cls.require_bank(db, bank_id)

        bank.name = name.strip()
        bank.description = description or ""
        bank.touch()
        OperationLogService.add(db, "更新题库", f"更新题库: {bank.name}", commit=False)
        db.commit()
        db.refresh(bank)
        return bank

    @classmethod
    def delete_bank(cls, db: Session, bank_id: str):
        """
        删除题库（级联删除题目、练习记录和对应的错题本条目）

        Raises:
            NotFoundError: 题库不存在
        """
        bank = cls.require_bank(db, bank_id)

        question_ids = [qid for (qid,) in db.query(Question.id).filter(Question.bank_id == bank_id).all()]
        if question_ids:
            db.query(WrongBookEntry).filter(
                WrongBookEntry.question_id.in_(question_ids)
            ).delete(synchronize_session=False)

        db.delete(bank)
        OperationLogService.add(db, "删除题库", f"删除题库: {bank.name}", commit=False)
        db.commit()
        logger.info(f"删除题库: {bank.name}，共 {len(question_ids)} 道题目")
