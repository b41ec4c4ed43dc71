"""
AI 解析结果后处理

AI 返回的是文本，可能被 ```json 代码块包裹；解析成功后结构也不可靠
（题型写成中文、选项是字符串、答案是数组或布尔值）。
这里只做尽力而为的形态修正，不做把关：无法识别的候选直接丢弃，
合法性交给 QuestionValidator 在导入时判定。
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .answer_normalizer import AnswerNormalizer
from .question_types import QUESTION_TYPES

logger = logging.getLogger(__name__)

CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


@dataclass
class CompletionResult:
    """
    AI 文本解析结果

    data 为 None 表示返回内容不是 JSON，按普通对话回复处理。
    """
    raw_text: str
    data: Optional[Any] = None

    @property
    def is_structured(self) -> bool:
        return self.data is not None

    def as_chat_reply(self) -> Dict[str, Any]:
        return {"success": True, "message": self.raw_text}


def extract_json_text(raw_text: str) -> str:
    """去掉 markdown 代码块包裹，返回其中的 JSON 文本"""
    if not raw_text:
        return ""
    match = CODE_BLOCK_PATTERN.search(raw_text)
    if match:
        return match.group(1).strip()
    return raw_text.strip()


def parse_completion(raw_text: Optional[str]) -> CompletionResult:
    """
    解析 AI 返回文本（从不抛异常）

    JSON 解析失败时降级为对话回复。
    """
    raw_text = raw_text or ""
    try:
        data = json.loads(extract_json_text(raw_text))
    except ValueError:
        logger.info("AI 返回内容不是 JSON，按对话回复处理")
        return CompletionResult(raw_text=raw_text)
    return CompletionResult(raw_text=raw_text, data=data)


class AiParseResponseNormalizer:
    """AI 题目解析结果归一化"""

    @staticmethod
    def normalize_candidate(candidate: Any) -> Optional[Dict[str, Any]]:
        """
        归一化单个候选题目

        Returns:
            归一化后的 dict；不是结构化记录或题型无法识别时返回 None
        """
        if not isinstance(candidate, Mapping):
            return None

        question = AnswerNormalizer.normalize_question(candidate)
        question_type = question["type"]
        if not isinstance(question_type, str) or question_type not in QUESTION_TYPES:
            return None
        return question

    @classmethod
    def normalize_questions(cls, candidates: Any) -> List[Dict[str, Any]]:
        """归一化候选列表，丢弃无法识别的候选"""
        if not isinstance(candidates, list):
            return []

        questions = []
        for index, candidate in enumerate(candidates):
            normalized = cls.normalize_candidate(candidate)
            if normalized is None:
                logger.debug(f"丢弃无法识别的 AI 候选题目: index={index}")
                continue
            questions.append(normalized)
        return questions

    @classmethod
    def normalize_parse_result(cls, payload: Any) -> Dict[str, Any]:
        """
        归一化整个解析结果 {"questions": [...]}

        顶层是数组时视为题目列表；其他字段原样保留；payload 不是对象时返回空题目列表。
        """
        if isinstance(payload, list):
            payload = {"questions": payload}
        if not isinstance(payload, Mapping):
            return {"questions": []}

        candidates = payload.get("questions")
        questions = cls.normalize_questions(candidates)
        dropped = len(candidates) - len(questions) if isinstance(candidates, list) else 0
        if dropped:
            logger.info(f"AI 解析结果中有 {dropped} 道题目无法识别，已丢弃")
        return {**payload, "questions": questions}

    @classmethod
    def normalize_completion(cls, raw_text: Optional[str]) -> Dict[str, Any]:
        """
        从 AI 原始文本得到题目列表

        非 JSON 文本降级为对话回复（questions 为空），不抛异常。
        """
        completion = parse_completion(raw_text)
        if not completion.is_structured:
            return {**completion.as_chat_reply(), "questions": []}
        return cls.normalize_parse_result(completion.data)
