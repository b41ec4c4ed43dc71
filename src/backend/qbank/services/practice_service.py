"""
练习服务

判分、保存练习记录，并把每道题的结果同步到错题本。
"""
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from qbank.core.exceptions import ValidationError
from qbank.core.grading import grade_answer
from qbank.models import PracticeRecord, Question, QuestionBank
from qbank.services.bank_service import BankService
from qbank.services.operation_log_service import OperationLogService
from qbank.services.settings_service import SettingsService
from qbank.services.wrong_book_service import WrongBookService

logger = logging.getLogger(__name__)


class PracticeService:
    """练习服务"""

    grade_answer = staticmethod(grade_answer)

    @classmethod
    def submit_session(
        cls,
        db: Session,
        bank_id: str,
        answers: List[Mapping[str, Any]],
        threshold: Any = None,
    ) -> Dict[str, Any]:
        """
        提交一次练习

        Args:
            db: 数据库会话
            bank_id: 练习的题库ID
            answers: [{"question_id", "answer", "is_correct"(可选，简答题自评)}]
            threshold: 错题本移除阈值，为 None 时读取设置

        Returns:
            Dict: {"record": 练习记录, "results": [{"question_id", "is_correct", "correct_answer"}]}

        Raises:
            NotFoundError: 题库不存在
            ValidationError: 没有答题数据
            ConfigurationError: 阈值非法
        """
        if not answers:
            raise ValidationError("没有答题数据")
        BankService.require_bank(db, bank_id)
        removal_threshold = SettingsService.resolve_threshold(db, threshold)

        question_ids = [a.get("question_id") for a in answers]
        questions = {
            q.id: q for q in db.query(Question).filter(Question.id.in_(question_ids)).all()
        }

        results = []
        for item in answers:
            question = questions.get(item.get("question_id"))
            if question is None:
                continue
            is_correct = grade_answer(question, item.get("answer"))
            if is_correct is None:
                # 简答题按用户自评
                is_correct = bool(item.get("is_correct"))
            results.append({
                "question_id": question.id,
                "bank_id": question.bank_id,
                "is_correct": is_correct,
                "correct_answer": question.answer,
            })

        if not results:
            raise ValidationError("答题数据中没有有效的题目")

        correct = sum(1 for r in results if r["is_correct"])
        total = len(results)
        record = PracticeRecord(
            id=str(uuid.uuid4()),
            bank_id=bank_id,
            total=total,
            correct=correct,
            wrong=total - correct,
            accuracy=round(correct * 100 / total),
        )
        db.add(record)
        OperationLogService.add(db, "完成练习", f"正确率: {record.accuracy}%", commit=False)
        db.commit()
        db.refresh(record)

        WrongBookService.update_from_practice(db, results, removal_threshold)
        logger.info(f"练习完成: bank={bank_id} 正确 {correct}/{total}")

        return {
            "record": record.to_dict(),
            "results": [
                {k: r[k] for k in ("question_id", "is_correct", "correct_answer")} for r in results
            ],
        }

    @staticmethod
    def get_records(db: Session, bank_id: str, limit: int = 20) -> List[PracticeRecord]:
        """题库最近的练习记录"""
        return (
            db.query(PracticeRecord)
            .filter(PracticeRecord.bank_id == bank_id)
            .order_by(PracticeRecord.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_all_stats(db: Session) -> List[Dict[str, Any]]:
        """各题库的练习次数、平均正确率、最近练习时间"""
        last_practice = func.max(PracticeRecord.created_at)
        rows = (
            db.query(
                PracticeRecord.bank_id,
                QuestionBank.name,
                func.count(PracticeRecord.id),
                func.avg(PracticeRecord.accuracy),
                last_practice,
            )
            .join(QuestionBank, QuestionBank.id == PracticeRecord.bank_id)
            .group_by(PracticeRecord.bank_id, QuestionBank.name)
            .order_by(last_practice.desc())
            .all()
        )
        return [
            {
                "bank_id": bank_id,
                "bank_name": name,
                "practice_count": count,
                "avg_accuracy": round(float(avg or 0)),
                "last_practice": last.isoformat() if last else None,
            }
            for bank_id, name, count, avg, last in rows
        ]
