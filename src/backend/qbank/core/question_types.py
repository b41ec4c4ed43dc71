"""
题型定义与常量表

所有题型相关的只读查找表集中在这里，供校验、归一化、CSV 解析共用。
"""
import re
from enum import Enum
from types import MappingProxyType
from typing import Optional


class QuestionType(str, Enum):
    """规范题型"""
    SINGLE = "single"
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"
    FILL = "fill"
    SHORT = "short"


CHOICE_TYPES = frozenset({QuestionType.SINGLE.value, QuestionType.MULTIPLE.value})
QUESTION_TYPES = frozenset(t.value for t in QuestionType)

# 判断题的两个规范答案
BOOLEAN_TRUE = "正确"
BOOLEAN_FALSE = "错误"
BOOLEAN_ANSWERS = (BOOLEAN_TRUE, BOOLEAN_FALSE)

# 规范题型 -> 中文标签（CSV 模板的线上词汇，必须与旧模板逐字一致）
TYPE_LABELS = MappingProxyType({
    "single": "单选题",
    "multiple": "多选题",
    "boolean": "判断题",
    "fill": "填空题",
    "short": "简答题",
})

# 中文标签 -> 规范题型（CSV 只接受完整标签）
LABEL_TO_TYPE = MappingProxyType({label: t for t, label in TYPE_LABELS.items()})

# 题型同义词表（AI 解析 / JSON 导入使用，比 CSV 宽松）
TYPE_SYNONYMS = MappingProxyType({
    "单选题": "single",
    "单选": "single",
    "single": "single",
    "多选题": "multiple",
    "多选": "multiple",
    "multiple": "multiple",
    "判断题": "boolean",
    "判断": "boolean",
    "boolean": "boolean",
    "填空题": "fill",
    "填空": "fill",
    "fill": "fill",
    "简答题": "short",
    "简答": "short",
    "short": "short",
})

# 连续两个及以上下划线算一个空
BLANK_PATTERN = re.compile(r"_{2,}")

OPTION_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def count_blanks(content: Optional[str]) -> int:
    """统计填空题题干中的空栏数量（单个下划线不算空）"""
    if not content or not isinstance(content, str):
        return 0
    return len(BLANK_PATTERN.findall(content))


def option_letter(index: int) -> str:
    """按位置返回选项字母：0 -> A, 1 -> B ..."""
    if index < len(OPTION_LETTERS):
        return OPTION_LETTERS[index]
    return str(index + 1)


def type_label(question_type: str) -> str:
    """规范题型的中文标签，未知题型返回“题目”"""
    return TYPE_LABELS.get(question_type, "题目")
