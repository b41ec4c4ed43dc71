"""
练习判分

- 多选：选项集合相同即正确（与顺序无关）
- 填空：逐空去空白后比较
- 简答：不自动判分
- 其他：精确匹配
"""
from typing import Any, Mapping, Optional


def _get(question: Any, key: str) -> Any:
    if isinstance(question, Mapping):
        return question.get(key)
    return getattr(question, key, None)


def grade_answer(question: Any, user_answer: Optional[str]) -> Optional[bool]:
    """
    判断用户答案是否正确

    Args:
        question: dict 或题目 ORM 对象
        user_answer: 用户答案，语法与题目答案一致

    Returns:
        True/False；简答题返回 None（需要用户自评）
    """
    question_type = _get(question, "type")
    correct = _get(question, "answer") or ""
    user_answer = user_answer or ""

    if question_type == "short":
        return None

    if question_type == "multiple":
        expected = sorted(a.strip() for a in correct.split("|") if a.strip())
        actual = sorted(a.strip().upper() for a in user_answer.split("|") if a.strip())
        return expected == actual

    if question_type == "fill":
        expected = [a.strip() for a in correct.split("|")]
        actual = [a.strip() for a in user_answer.split("|")]
        return expected == actual

    if question_type == "single":
        return user_answer.strip().upper() == correct

    return user_answer.strip() == correct
