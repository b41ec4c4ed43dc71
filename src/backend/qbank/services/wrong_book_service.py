"""
错题本服务

计数规则在 qbank.core.wrong_book 中，这里负责读写持久化状态。
读取前先清理已删除题目的残留条目。
"""
import logging
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from qbank.core.wrong_book import WrongBookAccounting, WrongBookState
from qbank.models import Question, WrongBookEntry
from qbank.services.operation_log_service import OperationLogService

logger = logging.getLogger(__name__)


def _to_state(entry: WrongBookEntry) -> WrongBookState:
    return WrongBookState(
        question_id=entry.question_id,
        bank_id=entry.bank_id,
        wrong_count=entry.wrong_count,
        correct_count=entry.correct_count,
        added_at=entry.added_at,
        last_wrong_at=entry.last_wrong_at,
    )


def _entry_to_dict(entry: WrongBookEntry, question: Question) -> Dict[str, Any]:
    return {
        "question_id": entry.question_id,
        "bank_id": entry.bank_id,
        "wrong_count": entry.wrong_count,
        "correct_count": entry.correct_count,
        "added_at": entry.added_at.isoformat() if entry.added_at else None,
        "last_wrong_at": entry.last_wrong_at.isoformat() if entry.last_wrong_at else None,
        "question": question.to_dict(),
    }


class WrongBookService:
    """错题本服务"""

    @staticmethod
    def cleanup_orphans(db: Session) -> int:
        """删除题目已不存在的错题本条目"""
        existing = select(Question.id)
        removed = (
            db.query(WrongBookEntry)
            .filter(~WrongBookEntry.question_id.in_(existing))
            .delete(synchronize_session=False)
        )
        db.commit()
        if removed:
            logger.info(f"清理错题本残留条目 {removed} 条")
        return removed

    @staticmethod
    def record_result(
        db: Session,
        question_id: str,
        bank_id: str,
        is_correct: bool,
        removal_threshold: int,
        now: Optional[datetime] = None,
    ) -> Optional[WrongBookEntry]:
        """
        记录一道题的答题结果并立即提交

        Returns:
            更新后的条目；不在错题本中时返回 None
        """
        entry = db.query(WrongBookEntry).filter(WrongBookEntry.question_id == question_id).first()
        state = WrongBookAccounting.apply_result(
            _to_state(entry) if entry else None,
            question_id=question_id,
            bank_id=bank_id,
            is_correct=is_correct,
            removal_threshold=removal_threshold,
            now=now,
        )

        if state is None:
            if entry is not None:
                db.delete(entry)
                logger.debug(f"题目已掌握，移出错题本: {question_id}")
            db.commit()
            return None

        if entry is None:
            entry = WrongBookEntry(question_id=question_id)
            db.add(entry)
        entry.bank_id = state.bank_id
        entry.wrong_count = state.wrong_count
        entry.correct_count = state.correct_count
        entry.added_at = state.added_at
        entry.last_wrong_at = state.last_wrong_at
        db.commit()
        return entry

    @classmethod
    def update_from_practice(
        cls,
        db: Session,
        results: Iterable[Mapping[str, Any]],
        removal_threshold: int,
    ) -> int:
        """
        按练习结果批量更新错题本

        每道题单独提交，中途失败时已处理的题目保持已提交状态。

        Args:
            results: [{"question_id", "bank_id", "is_correct"}]
            removal_threshold: 已校验的移除阈值

        Returns:
            int: 处理的结果条数（跳过缺少 ID 的结果）
        """
        cls.cleanup_orphans(db)

        processed = 0
        for result in results:
            question_id = result.get("question_id")
            bank_id = result.get("bank_id")
            if not question_id or not bank_id:
                continue
            cls.record_result(db, question_id, bank_id, bool(result.get("is_correct")), removal_threshold)
            processed += 1
        return processed

    @classmethod
    def get_counts_by_bank(cls, db: Session) -> List[Dict[str, Any]]:
        """各题库的错题数量"""
        cls.cleanup_orphans(db)
        rows = (
            db.query(WrongBookEntry.bank_id, func.count(WrongBookEntry.question_id))
            .group_by(WrongBookEntry.bank_id)
            .all()
        )
        return [{"bank_id": bank_id, "count": count} for bank_id, count in rows]

    @classmethod
    def count_items(cls, db: Session, bank_id: Optional[str] = None) -> int:
        cls.cleanup_orphans(db)
        query = db.query(WrongBookEntry)
        if bank_id:
            query = query.filter(WrongBookEntry.bank_id == bank_id)
        return query.count()

    @classmethod
    def get_items(
        cls,
        db: Session,
        bank_id: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Dict[str, Any]:
        """
        分页获取错题（按最近答错时间倒序）

        Returns:
            Dict: {"data", "total", "page", "page_size", "total_pages"}
        """
        page = max(page, 1)
        total = cls.count_items(db, bank_id)

        query = db.query(WrongBookEntry, Question).join(Question, Question.id == WrongBookEntry.question_id)
        if bank_id:
            query = query.filter(WrongBookEntry.bank_id == bank_id)
        rows = (
            query.order_by(WrongBookEntry.last_wrong_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {
            "data": [_entry_to_dict(entry, question) for entry, question in rows],
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size) if page_size else 0,
        }

    @classmethod
    def get_random_questions(cls, db: Session, bank_id: Optional[str] = None, limit: int = 20) -> List[Question]:
        """随机抽取错题用于重练"""
        cls.cleanup_orphans(db)
        query = db.query(Question).join(WrongBookEntry, WrongBookEntry.question_id == Question.id)
        if bank_id:
            query = query.filter(WrongBookEntry.bank_id == bank_id)
        return query.order_by(func.random()).limit(limit if limit > 0 else 20).all()

    @staticmethod
    def remove_item(db: Session, question_id: str) -> bool:
        """手动移出错题本"""
        removed = db.query(WrongBookEntry).filter(WrongBookEntry.question_id == question_id).delete()
        db.commit()
        return bool(removed)

    @staticmethod
    def clear(db: Session, bank_id: Optional[str] = None) -> int:
        """清空错题本（指定题库时只清空该题库）"""
        query = db.query(WrongBookEntry)
        if bank_id:
            query = query.filter(WrongBookEntry.bank_id == bank_id)
        removed = query.delete(synchronize_session=False)
        OperationLogService.add(db, "清空错题本", f"清空错题本，共 {removed} 条", commit=False)
        db.commit()
        logger.info(f"清空错题本: bank_id={bank_id or '全部'}，共 {removed} 条")
        return removed
