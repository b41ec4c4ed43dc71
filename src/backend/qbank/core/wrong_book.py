"""
错题本计数状态机

每道题两个计数器：答错次数、答对次数。
- 答错：不存在则创建（wrong=1, correct=0），存在则 wrong+1 并刷新最近答错时间和所属题库
- 答对：存在则 correct+1，达到移除阈值即移出错题本；不存在则无需记录
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

DEFAULT_REMOVAL_THRESHOLD = 3
MIN_REMOVAL_THRESHOLD = 1
MAX_REMOVAL_THRESHOLD = 999


@dataclass(frozen=True)
class WrongBookState:
    """单道题的错题本状态"""
    question_id: str
    bank_id: str
    wrong_count: int
    correct_count: int
    added_at: datetime
    last_wrong_at: datetime


class WrongBookAccounting:
    """错题本计数规则"""

    @staticmethod
    def is_valid_threshold(threshold) -> bool:
        """移除阈值必须是 1-999 的整数"""
        return (
            isinstance(threshold, int)
            and not isinstance(threshold, bool)
            and MIN_REMOVAL_THRESHOLD <= threshold <= MAX_REMOVAL_THRESHOLD
        )

    @classmethod
    def apply_result(
        cls,
        state: Optional[WrongBookState],
        question_id: str,
        bank_id: str,
        is_correct: bool,
        removal_threshold: int = DEFAULT_REMOVAL_THRESHOLD,
        now: Optional[datetime] = None,
    ) -> Optional[WrongBookState]:
        """
        应用一次答题结果

        阈值由设置层保证合法，这里不再校验。

        Args:
            state: 当前状态，None 表示不在错题本中
            question_id: 题目ID
            bank_id: 题目当前所属题库ID
            is_correct: 是否答对
            removal_threshold: 答对多少次后移出错题本
            now: 当前时间（默认 utcnow）

        Returns:
            新状态；None 表示不在错题本中（已移除或无需记录）
        """
        now = now or datetime.utcnow()

        if not is_correct:
            if state is None:
                return WrongBookState(
                    question_id=question_id,
                    bank_id=bank_id,
                    wrong_count=1,
                    correct_count=0,
                    added_at=now,
                    last_wrong_at=now,
                )
            return replace(
                state,
                bank_id=bank_id,
                wrong_count=state.wrong_count + 1,
                last_wrong_at=now,
            )

        if state is None:
            return None

        correct_count = state.correct_count + 1
        if correct_count >= removal_threshold:
            return None  # 已掌握
        return replace(state, correct_count=correct_count)
