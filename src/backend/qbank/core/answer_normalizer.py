"""
答案与选项归一化

把上游各种写法（AI 自由输出、宽松 JSON、表格单元格）统一成校验器期望的规范形式：

- 题型：中文同义词 -> 规范题型
- 选项：{"id", "text"} 对象 / "A. 文本" 字符串 / {"A": "文本"} 映射 -> [{"id", "text"}]
- 答案：按题型转换（多选分隔符、判断同义词、填空分段）

所有归一化函数都是幂等的：AI 数据会先经过解析后处理，再经过通用导入归一化，
重复归一化必须得到相同结果。
"""
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .question_types import (
    BOOLEAN_FALSE,
    BOOLEAN_TRUE,
    CHOICE_TYPES,
    QUESTION_TYPES,
    TYPE_SYNONYMS,
    count_blanks,
    option_letter,
)

# JSON 导入时允许的中文字段名
FIELD_ALIASES = {
    "type": ("type", "题型"),
    "content": ("content", "题目", "题干", "question"),
    "options": ("options", "选项"),
    "answer": ("answer", "答案"),
    "analysis": ("analysis", "解析"),
}
ALIAS_KEYS = frozenset(key for keys in FIELD_ALIASES.values() for key in keys)

# 判断题同义词
BOOLEAN_TRUE_VALUES = frozenset({"正确", "对", "true", "True", "TRUE", "是", "yes", "Yes", "YES", "√", "1"})
BOOLEAN_FALSE_VALUES = frozenset({"错误", "错", "false", "False", "FALSE", "否", "no", "No", "NO", "×", "0"})

# "A. 文本" / "A、文本" / "A．文本"
OPTION_MARKER_PATTERN = re.compile(r"^([A-Za-z])[.、．]\s*(.+)$", re.S)

MULTIPLE_SEPARATOR_PATTERN = re.compile(r"[,，、\s|]+")
FILL_SEPARATOR_PATTERN = re.compile(r"\s*[,，、;；]+\s*")
LETTERS_PATTERN = re.compile(r"^[A-Z]+$")


class AnswerNormalizer:
    """答案与选项归一化工具（纯函数集合）"""

    @staticmethod
    def canonical_fields(candidate: Mapping[str, Any]) -> Dict[str, Any]:
        """
        把中文字段名（题型、题干、选项、答案、解析）映射为规范字段名

        同一字段有多个写法时取第一个非 None 的值；其他字段原样保留。
        """
        result = {key: value for key, value in candidate.items() if key not in ALIAS_KEYS}
        for field_name, keys in FIELD_ALIASES.items():
            result[field_name] = next(
                (candidate[key] for key in keys if candidate.get(key) is not None),
                None,
            )
        return result

    @classmethod
    def normalize_question(cls, candidate: Mapping[str, Any]) -> Dict[str, Any]:
        """
        整题归一化：题型 -> 选项 -> 答案

        非选择题的选项置为 None；题型无法识别时只做题型去空白，其余原样返回。
        """
        question = cls.canonical_fields(candidate)
        question_type = cls.normalize_type(question["type"])
        question["type"] = question_type
        if isinstance(question["content"], str):
            question["content"] = question["content"].strip()

        if not isinstance(question_type, str) or question_type not in QUESTION_TYPES:
            return question

        if question_type in CHOICE_TYPES:
            question["options"] = cls.normalize_options(question["options"])
        else:
            question["options"] = None

        blank_count = count_blanks(question["content"]) if question_type == "fill" else None
        question["answer"] = cls.normalize_answer(question_type, question["answer"], blank_count=blank_count)
        return question

    @staticmethod
    def normalize_type(question_type: Any) -> Any:
        """
        题型归一化

        Args:
            question_type: 原始题型（如 "单选题"、"single"）

        Returns:
            规范题型；无法识别时原样返回，由调用方决定是否报错
        """
        if not isinstance(question_type, str):
            return question_type
        token = question_type.strip()
        return TYPE_SYNONYMS.get(token) or TYPE_SYNONYMS.get(token.lower()) or token

    @staticmethod
    def normalize_options(options: Any) -> Any:
        """
        选项归一化

        支持：
        - [{"id": "a", "text": "..."}]：id 去空白并转大写，缺失时按位置补字母
        - ["A. 选项", "B、选项", "无标记文本"]：解析字母前缀，无前缀按位置补字母
        - {"A": "...", "B": "..."}：按键值转换

        Args:
            options: 原始选项

        Returns:
            [{"id", "text"}] 列表；无法识别的结构原样返回
        """
        if isinstance(options, dict):
            options = [{"id": key, "text": value} for key, value in options.items()]
        if not isinstance(options, list):
            return options

        normalized = []
        for i, opt in enumerate(options):
            if isinstance(opt, str):
                match = OPTION_MARKER_PATTERN.match(opt.strip())
                if match:
                    normalized.append({"id": match.group(1).upper(), "text": match.group(2).strip()})
                else:
                    normalized.append({"id": option_letter(i), "text": opt.strip()})
                continue

            if not isinstance(opt, dict):
                continue

            raw_id = opt.get("id")
            opt_id = str(raw_id).strip().upper() if raw_id is not None else ""
            text = opt.get("text")
            if text is None:
                text = opt.get("content")
            normalized.append({
                **opt,
                "id": opt_id or option_letter(i),
                "text": "" if text is None else str(text),
            })
        return normalized

    @classmethod
    def normalize_answer(cls, question_type: str, answer: Any, blank_count: Optional[int] = None) -> Any:
        """
        答案归一化（按题型）

        Args:
            question_type: 规范题型
            answer: 原始答案（字符串、数组、布尔值、数字）
            blank_count: 填空题空栏数量，仅 fill 使用

        Returns:
            规范答案字符串；None 归一化为空字符串
        """
        if answer is None:
            return ""
        if question_type == "single":
            return cls.normalize_single_answer(answer)
        if question_type == "multiple":
            return cls.normalize_multiple_answer(answer)
        if question_type == "boolean":
            return cls.normalize_boolean_answer(answer)
        if question_type == "fill":
            return cls.normalize_fill_answer(answer, blank_count)
        return answer

    @staticmethod
    def normalize_single_answer(answer: Any) -> str:
        if isinstance(answer, (list, tuple)):
            return "|".join(str(a).strip().upper() for a in answer)
        return str(answer).strip().upper()

    @staticmethod
    def normalize_multiple_answer(answer: Any) -> str:
        """
        多选题答案归一化

        "a,b,B,a" -> "A|B"；"ABC" -> "A|B|C"；["A", "C"] -> "A|C"
        去重保留首次出现顺序。非字母片段原样保留，由校验器拒绝。
        """
        if isinstance(answer, (list, tuple)):
            answer = "|".join(str(a) for a in answer if a is not None)

        text = str(answer).strip().upper()
        if not text:
            return ""

        tokens = []
        for part in MULTIPLE_SEPARATOR_PATTERN.split(text):
            if not part:
                continue
            if LETTERS_PATTERN.match(part):
                # 连续字母（如 "ABC"）拆成单个字母
                tokens.extend(part)
            else:
                tokens.append(part)

        seen = set()
        unique = []
        for token in tokens:
            if token not in seen:
                seen.add(token)
                unique.append(token)
        return "|".join(unique)

    @staticmethod
    def normalize_boolean_answer(answer: Any) -> Any:
        """判断题同义词映射；无法识别的值原样返回（去空白）"""
        if answer is True:
            return BOOLEAN_TRUE
        if answer is False:
            return BOOLEAN_FALSE

        text = str(answer).strip()
        if text in BOOLEAN_TRUE_VALUES:
            return BOOLEAN_TRUE
        if text in BOOLEAN_FALSE_VALUES:
            return BOOLEAN_FALSE
        return text

    @staticmethod
    def normalize_fill_answer(answer: Any, blank_count: Optional[int] = None) -> Any:
        """
        填空题答案归一化

        只有一个空栏时不拆分字符串（单个答案里可能本身就有逗号）。
        多个空栏且还没有 "|" 时，才按逗号/顿号/分号拆分。
        """
        if isinstance(answer, (list, tuple)):
            if len(answer) != 1:
                return "|".join(str(a).strip() for a in answer)
            # 单元素数组按字符串处理，保证二次归一化结果不变
            answer = str(answer[0]).strip()
        if not isinstance(answer, str):
            answer = str(answer)
        if blank_count is None or blank_count <= 1:
            return answer
        if "|" in answer:
            return answer
        return FILL_SEPARATOR_PATTERN.sub("|", answer.strip())

    @staticmethod
    def relabel_options(options: List[dict]) -> List[dict]:
        """按位置重新分配选项字母 A, B, C ..."""
        return [{**opt, "id": option_letter(i)} for i, opt in enumerate(options)]

    @classmethod
    def remove_option(
        cls,
        options: List[dict],
        index: int,
        question_type: str,
        answer: str = "",
    ) -> Tuple[List[dict], str]:
        """
        删除选项并重排字母，同步修正答案

        例：删除 [A,B,C,D] 中的 B，得到 [A,B,C]（原 C、D 前移），
        多选答案 "A|C|D" 变为 "A|B|C"。

        Args:
            options: 当前选项
            index: 要删除的选项下标
            question_type: single / multiple
            answer: 当前答案

        Returns:
            (新选项列表, 新答案)
        """
        if index < 0 or index >= len(options):
            raise IndexError(f"选项下标越界: {index}")

        removed_id = options[index]["id"]
        old_ids = [opt["id"] for opt in options]
        remaining = [opt for i, opt in enumerate(options) if i != index]
        relabeled = cls.relabel_options(remaining)

        def remap(answer_id: str) -> str:
            if answer_id not in old_ids:
                return answer_id
            old_index = old_ids.index(answer_id)
            return option_letter(old_index - 1 if old_index > index else old_index)

        answer = answer or ""
        if question_type == "single":
            new_answer = "" if answer == removed_id else remap(answer) if answer else ""
        elif question_type == "multiple":
            answer_ids = [a for a in answer.split("|") if a and a != removed_id]
            new_answer = "|".join(remap(a) for a in answer_ids)
        else:
            new_answer = answer

        return relabeled, new_answer


normalize_type = AnswerNormalizer.normalize_type
normalize_options = AnswerNormalizer.normalize_options
normalize_answer = AnswerNormalizer.normalize_answer
