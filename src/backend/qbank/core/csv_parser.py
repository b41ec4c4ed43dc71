"""
CSV 题目解析

输入是已经切分好的单元格网格（CSV 文本框架由调用方用 csv 模块处理），
列顺序固定：题型, 题干, 选项A-选项F, 答案, 解析。

批量导入需要一次报告所有问题：每个错误行记录一条错误，然后继续处理后续行。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .question_model import QuestionDraft, QuestionOption
from .question_types import (
    BOOLEAN_ANSWERS,
    CHOICE_TYPES,
    LABEL_TO_TYPE,
    TYPE_LABELS,
    count_blanks,
)

CSV_HEADERS = ["题型", "题干", "选项A", "选项B", "选项C", "选项D", "选项E", "选项F", "答案", "解析"]
CSV_OPTION_IDS = ["A", "B", "C", "D", "E", "F"]
TYPE_HEADER = CSV_HEADERS[0]


@dataclass
class CsvRowError:
    """行级错误：行号（从 1 开始，含表头）、字段名、原因"""
    row: int
    field: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "field": self.field, "message": self.message}


@dataclass
class CsvParseResult:
    """解析结果"""
    valid: List[QuestionDraft] = field(default_factory=list)
    errors: List[CsvRowError] = field(default_factory=list)
    total_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": [q.to_dict() for q in self.valid],
            "errors": [e.to_dict() for e in self.errors],
            "totalRows": self.total_rows,
        }


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class CsvQuestionParser:
    """CSV 网格 -> 题目"""

    @classmethod
    def parse(cls, rows: Sequence[Sequence[Any]]) -> CsvParseResult:
        """
        解析 CSV 网格

        Args:
            rows: 行列表，每行为单元格字符串列表

        Returns:
            CsvParseResult: 有效题目、行错误、有效行总数（不含表头和空行）
        """
        result = CsvParseResult()
        if not rows:
            return result

        start_index = 0
        first_row = rows[0]
        if first_row and _cell(first_row[0]).lstrip("\ufeff") == TYPE_HEADER:
            start_index = 1

        for i in range(start_index, len(rows)):
            row = rows[i]
            if not row or all(_cell(c) == "" for c in row):
                continue

            result.total_rows += 1
            draft, error = cls.parse_row(row, i + 1)
            if error is not None:
                result.errors.append(error)
            else:
                result.valid.append(draft)

        return result

    @classmethod
    def parse_row(cls, row: Sequence[Any], row_number: int):
        """
        解析单行

        Returns:
            (QuestionDraft, None) 或 (None, CsvRowError)
        """
        cells = [_cell(c) for c in row]
        cells += [""] * (len(CSV_HEADERS) - len(cells))
        type_label, content = cells[0], cells[1]
        option_cells = cells[2:8]
        answer, analysis = cells[8], cells[9]

        def error(field_name: str, message: str):
            return None, CsvRowError(row=row_number, field=field_name, message=message)

        if not type_label:
            return error("题型", "题型不能为空")

        question_type = LABEL_TO_TYPE.get(type_label)
        if not question_type:
            return error("题型", f"无效的题型: {type_label}")

        if not content:
            return error("题干", "题干不能为空")

        draft = QuestionDraft(
            type=question_type,
            content=content,
            answer=answer,
            analysis=analysis or None,
        )

        if question_type in CHOICE_TYPES:
            # 保留 A-F 的列位置作为选项 id
            options = [
                QuestionOption(id=opt_id, text=text)
                for opt_id, text in zip(CSV_OPTION_IDS, option_cells)
                if text
            ]
            if len(options) < 2:
                return error("选项", "选择题至少需要2个选项")
            draft.options = options

            if not answer:
                return error("答案", "选择题必须设置答案")

            option_ids = [opt.id for opt in options]
            answer_ids = [a.strip() for a in answer.split("|")]
            for answer_id in answer_ids:
                if answer_id not in option_ids:
                    return error("答案", f'答案 "{answer_id}" 不是有效的选项')

            if question_type == "single" and len(answer_ids) > 1:
                return error("答案", "单选题只能有一个答案")

            draft.answer = "|".join(answer_ids)

        elif question_type == "boolean":
            if not answer:
                return error("答案", "判断题必须设置答案")
            if answer not in BOOLEAN_ANSWERS:
                return error("答案", '判断题答案必须是"正确"或"错误"')

        elif question_type == "fill":
            blank_count = count_blanks(content)
            if blank_count == 0:
                return error("题干", "填空题题干必须包含空栏标记（__或更多下划线）")
            if not answer:
                return error("答案", "填空题必须设置答案")

            segments = answer.split("|")
            if len(segments) != blank_count:
                return error("答案", f"答案数量({len(segments)})与空栏数量({blank_count})不匹配")
            for i, segment in enumerate(segments):
                if not segment.strip():
                    return error("答案", f"第 {i + 1} 个空的答案不能为空")

        return draft, None


def template_rows() -> List[List[str]]:
    """CSV 导入模板的示例行"""
    return [
        ["单选题", "以下哪个是Python的不可变类型？", "tuple", "list", "dict", "set", "", "", "A", "元组创建后不能修改"],
        ["多选题", "以下哪些是Python的Web框架？", "Django", "Flask", "NumPy", "FastAPI", "", "", "A|B|D", "NumPy是科学计算库"],
        ["判断题", "Python是一种强类型语言。", "", "", "", "", "", "", "正确", "Python是动态强类型语言"],
        ["填空题", "HTML的全称是___，CSS的全称是___。", "", "", "", "", "", "", "HyperText Markup Language|Cascading Style Sheets", ""],
        ["简答题", "请简述什么是闭包？", "", "", "", "", "", "", "闭包是指引用了外部函数作用域中变量的函数", ""],
    ]


def question_to_row(question: Any) -> List[str]:
    """
    将题目转换为 CSV 行

    Args:
        question: dict 或带 type/content/options/answer/analysis 属性的对象
    """
    def get(key: str) -> Optional[Any]:
        if isinstance(question, dict):
            return question.get(key)
        return getattr(question, key, None)

    question_type = get("type")
    option_texts = {opt_id: "" for opt_id in CSV_OPTION_IDS}
    for opt in get("options") or []:
        opt_id = opt.get("id") if isinstance(opt, dict) else getattr(opt, "id", None)
        if opt_id in option_texts:
            option_texts[opt_id] = opt.get("text") if isinstance(opt, dict) else opt.text

    return [
        TYPE_LABELS.get(question_type, question_type),
        get("content") or "",
        *[option_texts[opt_id] or "" for opt_id in CSV_OPTION_IDS],
        get("answer") or "",
        get("analysis") or "",
    ]


parse_csv_rows = CsvQuestionParser.parse
