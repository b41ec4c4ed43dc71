"""
规范题目结构

QuestionDraft 是所有录入途径（手动表单、CSV、AI 解析、JSON 导入）
归一化后的统一形态，通过校验后交给存储层持久化。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class QuestionOption:
    """选项：id 为单个大写字母，按位置分配"""
    id: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text}


@dataclass
class QuestionDraft:
    """
    待入库题目

    Attributes:
        type: 规范题型（single/multiple/boolean/fill/short）
        content: 题干
        answer: 答案，语法取决于题型
        options: 选项列表，仅选择题有
        analysis: 解析（可选）
    """
    type: str
    content: str
    answer: str = ""
    options: Optional[List[QuestionOption]] = None
    analysis: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "content": self.content,
            "options": [opt.to_dict() for opt in self.options] if self.options is not None else None,
            "answer": self.answer,
            "analysis": self.analysis,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuestionDraft":
        options = data.get("options")
        return cls(
            type=data.get("type"),
            content=data.get("content"),
            answer=data.get("answer") if data.get("answer") is not None else "",
            options=[
                QuestionOption(id=opt.get("id"), text=opt.get("text"))
                for opt in options
                if isinstance(opt, Mapping)
            ] if isinstance(options, list) else None,
            analysis=data.get("analysis") or None,
        )


@dataclass
class ValidationResult:
    """校验结果：从不抛异常，错误以可读字符串返回"""
    valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True, errors=[])

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(valid=False, errors=[message])

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None
