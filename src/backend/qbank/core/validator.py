"""
题目与题库校验

校验规则（fail-fast）：
1. 候选数据必须是结构化记录
2. 题干去空白后不能为空
3. 按题型校验，遇到第一个错误立即返回

只做结构校验，不做格式转换；同义词等宽松输入应先经过 AnswerNormalizer。
"""
from typing import Any, List, Mapping

from .question_model import QuestionDraft, ValidationResult
from .question_types import BOOLEAN_ANSWERS, count_blanks

BANK_NAME_MAX_LENGTH = 50


def _split_answer(answer: str) -> List[str]:
    return [a.strip() for a in answer.split("|")]


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def _has_options(data: Mapping[str, Any]) -> bool:
    return data.get("options") is not None


class QuestionValidator:
    """题目校验器"""

    @staticmethod
    def validate_bank_name(name: Any) -> ValidationResult:
        """
        校验题库名称

        Args:
            name: 题库名称

        Returns:
            ValidationResult: 校验结果
        """
        if name is None or name == "":
            return ValidationResult.fail("题库名称不能为空")
        if not isinstance(name, str):
            return ValidationResult.fail("题库名称必须是字符串")
        if name.strip() == "":
            return ValidationResult.fail("题库名称不能仅包含空白字符")
        if len(name) > BANK_NAME_MAX_LENGTH:
            return ValidationResult.fail(f"题库名称长度不能超过{BANK_NAME_MAX_LENGTH}字符")
        return ValidationResult.ok()

    @staticmethod
    def validate_content(content: Any) -> ValidationResult:
        """校验题干"""
        if content is None or content == "":
            return ValidationResult.fail("题干内容不能为空")
        if not isinstance(content, str):
            return ValidationResult.fail("题干内容必须是字符串")
        if content.strip() == "":
            return ValidationResult.fail("题干内容不能仅包含空白字符")
        return ValidationResult.ok()

    @classmethod
    def validate_question(cls, candidate: Any) -> ValidationResult:
        """
        校验题目数据

        Args:
            candidate: dict 或 QuestionDraft

        Returns:
            ValidationResult: 校验结果（从不抛异常）
        """
        if isinstance(candidate, QuestionDraft):
            candidate = candidate.to_dict()
        if not candidate or not isinstance(candidate, Mapping):
            return ValidationResult.fail("题目数据无效")

        content_result = cls.validate_content(candidate.get("content"))
        if not content_result.valid:
            return content_result

        question_type = candidate.get("type")
        if question_type == "single":
            return cls.validate_single_choice(candidate)
        if question_type == "multiple":
            return cls.validate_multiple_choice(candidate)
        if question_type == "boolean":
            return cls.validate_boolean(candidate)
        if question_type == "fill":
            return cls.validate_fill_blank(candidate)
        if question_type == "short":
            return cls.validate_short_answer(candidate)
        return ValidationResult.fail("无效的题型")

    @staticmethod
    def _validate_options(options: Any, label: str) -> ValidationResult:
        if not isinstance(options, list) or len(options) < 2:
            return ValidationResult.fail(f"{label}至少需要2个选项")

        for i, opt in enumerate(options):
            if not isinstance(opt, Mapping) or not opt.get("id") or not opt.get("text"):
                return ValidationResult.fail(f"选项 {i + 1} 格式无效")
            if _is_blank(opt.get("text")):
                return ValidationResult.fail(f"选项 {opt.get('id')} 内容不能为空")
        return ValidationResult.ok()

    @classmethod
    def validate_single_choice(cls, data: Mapping[str, Any]) -> ValidationResult:
        """校验单选题"""
        options = data.get("options")
        answer = data.get("answer")

        result = cls._validate_options(options, "单选题")
        if not result.valid:
            return result

        if _is_blank(answer):
            return ValidationResult.fail("单选题必须设置正确答案")

        answer_ids = _split_answer(answer)
        if len(answer_ids) > 1:
            return ValidationResult.fail("单选题只能有一个答案")

        option_ids = [opt["id"] for opt in options]
        if answer_ids[0] not in option_ids:
            return ValidationResult.fail("答案必须是有效的选项")

        return ValidationResult.ok()

    @classmethod
    def validate_multiple_choice(cls, data: Mapping[str, Any]) -> ValidationResult:
        """校验多选题：答案顺序不限，但不能重复"""
        options = data.get("options")
        answer = data.get("answer")

        result = cls._validate_options(options, "多选题")
        if not result.valid:
            return result

        if _is_blank(answer):
            return ValidationResult.fail("多选题必须设置正确答案")

        answer_ids = [a for a in _split_answer(answer) if a]
        if len(answer_ids) < 1:
            return ValidationResult.fail("多选题必须至少选择一个正确答案")

        option_ids = [opt["id"] for opt in options]
        seen = set()
        for answer_id in answer_ids:
            if answer_id not in option_ids:
                return ValidationResult.fail(f'答案 "{answer_id}" 不是有效的选项')
            if answer_id in seen:
                return ValidationResult.fail(f'答案 "{answer_id}" 重复')
            seen.add(answer_id)

        return ValidationResult.ok()

    @staticmethod
    def validate_boolean(data: Mapping[str, Any]) -> ValidationResult:
        """校验判断题：只接受两个规范答案，不接受同义词"""
        if _has_options(data):
            return ValidationResult.fail("判断题不能设置选项")
        answer = data.get("answer")

        if _is_blank(answer):
            return ValidationResult.fail("判断题必须设置正确答案")
        if answer not in BOOLEAN_ANSWERS:
            return ValidationResult.fail('判断题答案必须是"正确"或"错误"')

        return ValidationResult.ok()

    @staticmethod
    def validate_fill_blank(data: Mapping[str, Any]) -> ValidationResult:
        """校验填空题：答案段数必须与空栏数严格相等"""
        if _has_options(data):
            return ValidationResult.fail("填空题不能设置选项")
        answer = data.get("answer")
        blank_count = count_blanks(data.get("content"))

        if blank_count == 0:
            return ValidationResult.fail("填空题题干中必须包含至少一个空栏标记（__或更多下划线）")

        if _is_blank(answer):
            return ValidationResult.fail("填空题必须设置答案")

        answers = answer.split("|")
        if len(answers) != blank_count:
            return ValidationResult.fail(f"答案数量({len(answers)})与空栏数量({blank_count})不匹配")

        for i, item in enumerate(answers):
            if item.strip() == "":
                return ValidationResult.fail(f"第 {i + 1} 个空的答案不能为空")

        return ValidationResult.ok()

    @staticmethod
    def validate_short_answer(data: Mapping[str, Any]) -> ValidationResult:
        """校验简答题：答案可以为空"""
        if _has_options(data):
            return ValidationResult.fail("简答题不能设置选项")
        answer = data.get("answer")
        if answer not in (None, "") and not isinstance(answer, str):
            return ValidationResult.fail("答案必须是字符串")
        return ValidationResult.ok()


validate_question = QuestionValidator.validate_question
validate_bank_name = QuestionValidator.validate_bank_name
