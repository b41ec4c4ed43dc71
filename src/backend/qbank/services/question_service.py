"""
题目服务

手动录入、编辑、分页查询，以及批量导入（CSV / JSON / AI 解析结果共用）
"""
import logging
import math
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from qbank.core.answer_normalizer import AnswerNormalizer
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.core.question_model import QuestionDraft
from qbank.core.question_types import CHOICE_TYPES, type_label
from qbank.core.validator import QuestionValidator
from qbank.models import Question, QuestionBank
from qbank.services.bank_service import BankService
from qbank.services.operation_log_service import OperationLogService

logger = logging.getLogger(__name__)


def _as_mapping(data: Any) -> Any:
    if isinstance(data, QuestionDraft):
        return data.to_dict()
    return data


def _prepare_candidate(candidate: Any) -> Any:
    """导入前归一化：结构化记录按宽松写法转换，其他数据原样交给校验器"""
    candidate = _as_mapping(candidate)
    if isinstance(candidate, Mapping):
        return AnswerNormalizer.normalize_question(candidate)
    return candidate


def _check_question(data: Any):
    result = QuestionValidator.validate_question(data)
    if not result.valid:
        raise ValidationError(result.first_error, result.errors)


def _apply_fields(question: Question, data: Mapping[str, Any]):
    """把已校验的题目数据写入 ORM 对象"""
    question_type = data["type"]
    question.type = question_type
    question.content = data["content"]
    question.options = [
        {"id": opt["id"], "text": opt["text"]} for opt in data.get("options") or []
    ] if question_type in CHOICE_TYPES else None
    question.answer = data.get("answer") or ""
    question.analysis = data.get("analysis") or None


class QuestionService:
    """题目服务"""

    @staticmethod
    def get_question(db: Session, question_id: str) -> Optional[Question]:
        """根据ID获取题目"""
        return db.query(Question).filter(Question.id == question_id).first()

    @staticmethod
    def create_question(db: Session, bank_id: str, data: Any) -> Question:
        """
        创建题目

        Args:
            db: 数据库会话
            bank_id: 题库ID
            data: dict 或 QuestionDraft（规范形式，不做同义词转换）

        Raises:
            ValidationError: 题目未通过校验，message 为第一条错误
            NotFoundError: 题库不存在
        """
        data = _as_mapping(data)
        _check_question(data)
        bank = BankService.require_bank(db, bank_id)

        question = Question(id=str(uuid.uuid4()), bank_id=bank_id)
        _apply_fields(question, data)
        db.add(question)
        bank.touch()
        OperationLogService.add(db, "添加题目", f"添加{type_label(question.type)}到题库: {bank.name}", commit=False)
        db.commit()
        db.refresh(question)
        return question

    @classmethod
    def update_question(cls, db: Session, question_id: str, data: Any) -> Question:
        """
        更新题目（整体替换题型、题干、选项、答案、解析）

        Raises:
            ValidationError: 题目未通过校验
            NotFoundError: 题目不存在
        """
        data = _as_mapping(data)
        _check_question(data)
        question = cls.get_question(db, question_id)
        if not question:
            raise NotFoundError("题目不存在")

        _apply_fields(question, data)
        question.updated_at = datetime.utcnow()
        question.bank.touch()
        OperationLogService.add(db, "更新题目", f"更新{type_label(question.type)}: {question.bank.name}", commit=False)
        db.commit()
        db.refresh(question)
        return question

    @staticmethod
    def delete_questions(db: Session, question_ids: List[str]) -> int:
        """
        批量删除题目，并刷新受影响题库的更新时间

        错题本中残留的条目在下次读取错题本时清理。

        Returns:
            int: 实际删除的题目数量
        """
        if not question_ids:
            return 0

        questions = db.query(Question).filter(Question.id.in_(question_ids)).all()
        bank_ids = {q.bank_id for q in questions}
        for question in questions:
            db.delete(question)
        for bank in db.query(QuestionBank).filter(QuestionBank.id.in_(bank_ids)).all():
            bank.touch()
        if questions:
            OperationLogService.add(db, "删除题目", f"删除 {len(questions)} 道题目", commit=False)
        db.commit()
        return len(questions)

    @staticmethod
    def list_questions(
        db: Session,
        bank_id: str,
        page: int = 1,
        page_size: int = 20,
        question_type: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        分页查询题目（按创建时间倒序）

        Args:
            db: 数据库会话
            bank_id: 题库ID
            page: 页码（从 1 开始）
            page_size: 每页数量
            question_type: 题型筛选
            keyword: 题干关键字

        Returns:
            Dict: {"data", "total", "page", "page_size", "total_pages"}
        """
        page = max(page, 1)
        query = db.query(Question).filter(Question.bank_id == bank_id)
        if question_type:
            query = query.filter(Question.type == question_type)
        if keyword:
            query = query.filter(Question.content.contains(keyword))

        total = query.count()
        questions = (
            query.order_by(Question.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {
            "data": [q.to_dict() for q in questions],
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size) if page_size else 0,
        }

    @staticmethod
    def get_all_questions(db: Session, bank_id: str) -> List[Question]:
        """题库中的全部题目（按创建时间正序，导出用）"""
        return (
            db.query(Question)
            .filter(Question.bank_id == bank_id)
            .order_by(Question.created_at.asc())
            .all()
        )

    @staticmethod
    def check_questions(candidates: List[Any]) -> Dict[str, Any]:
        """
        导入预检：只归一化和校验，不写数据库

        Returns:
            Dict: {"valid": [QuestionDraft], "errors": [{"index", "message"}]}
        """
        valid = []
        errors = []
        for index, candidate in enumerate(candidates):
            candidate = _prepare_candidate(candidate)
            result = QuestionValidator.validate_question(candidate)
            if not result.valid:
                errors.append({"index": index, "message": result.first_error})
                continue
            valid.append(QuestionDraft.from_dict(candidate))
        return {"valid": valid, "errors": errors}

    @staticmethod
    def import_questions(db: Session, bank_id: str, candidates: List[Any]) -> Dict[str, Any]:
        """
        批量导入题目

        每道题先归一化再校验，逐题提交；单题失败只记录错误，不影响其他题目。

        Args:
            db: 数据库会话
            bank_id: 题库ID
            candidates: 候选题目列表（dict 或 QuestionDraft）

        Returns:
            Dict: {"success": 成功数, "failed": 失败数, "errors": [{"index", "message"}]}

        Raises:
            NotFoundError: 题库不存在
            ValidationError: 没有可导入的题目
        """
        if not candidates:
            raise ValidationError("没有可导入的题目")
        bank = BankService.require_bank(db, bank_id)

        success = 0
        errors = []
        for index, candidate in enumerate(candidates):
            candidate = _prepare_candidate(candidate)
            result = QuestionValidator.validate_question(candidate)
            if not result.valid:
                errors.append({"index": index, "message": result.first_error})
                continue

            question = Question(id=str(uuid.uuid4()), bank_id=bank_id)
            _apply_fields(question, candidate)
            db.add(question)
            bank.touch()
            db.commit()
            success += 1

        if success:
            OperationLogService.add(db, "导入题目", f"导入 {success} 道题目到题库: {bank.name}")
        logger.info(f"导入题目到题库 {bank.name}: 成功 {success} 道，失败 {len(errors)} 道")
        return {"success": success, "failed": len(errors), "errors": errors}

    @staticmethod
    def get_stats(db: Session, bank_id: Optional[str] = None, recent_days: int = 7) -> Dict[str, Any]:
        """
        题目统计：总数、按题型分布、最近 N 天新增数
        """
        query = db.query(Question)
        if bank_id:
            query = query.filter(Question.bank_id == bank_id)

        by_type = dict(
            query.with_entities(Question.type, func.count(Question.id)).group_by(Question.type).all()
        )
        since = datetime.utcnow() - timedelta(days=recent_days)
        return {
            "total": sum(by_type.values()),
            "by_type": by_type,
            "recent": query.filter(Question.created_at >= since).count(),
        }
