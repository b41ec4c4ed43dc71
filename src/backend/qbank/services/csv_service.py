"""
CSV 导入导出服务

文件读写统一使用 UTF-8 BOM，保证 Excel 打开不乱码。
"""
import csv
import io
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from sqlalchemy.orm import Session

from qbank.core.csv_parser import CSV_HEADERS, CsvParseResult, CsvQuestionParser, question_to_row, template_rows
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.services.bank_service import BankService
from qbank.services.operation_log_service import OperationLogService
from qbank.services.question_service import QuestionService

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def _write_rows(rows: List[List[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return BOM + buffer.getvalue()


class CsvService:
    """CSV 导入导出"""

    @staticmethod
    def read_grid(text: str) -> List[List[str]]:
        """CSV 文本 -> 单元格网格（去掉开头的 BOM）"""
        if text.startswith(BOM):
            text = text[len(BOM):]
        return [row for row in csv.reader(io.StringIO(text))]

    @classmethod
    def parse_text(cls, text: str) -> CsvParseResult:
        return CsvQuestionParser.parse(cls.read_grid(text))

    @classmethod
    def parse_file(cls, file_path: Union[str, Path]) -> CsvParseResult:
        """读取并解析 CSV 文件（UTF-8，可带 BOM）"""
        text = Path(file_path).read_text(encoding="utf-8-sig")
        return cls.parse_text(text)

    @classmethod
    def import_text(cls, db: Session, bank_id: str, text: str) -> Dict[str, Any]:
        """
        解析 CSV 并导入有效行

        Returns:
            Dict: {"totalRows", "success", "failed", "rowErrors", "errors"}
            rowErrors 为解析阶段的行错误，errors 为入库阶段的错误

        Raises:
            NotFoundError: 题库不存在
            ValidationError: 文件中没有可导入的题目
        """
        BankService.require_bank(db, bank_id)
        parsed = cls.parse_text(text)
        if not parsed.valid:
            raise ValidationError(
                "没有可导入的题目",
                [f"第 {e.row} 行 {e.field}: {e.message}" for e in parsed.errors] or None,
            )

        imported = QuestionService.import_questions(db, bank_id, parsed.valid)
        logger.info(f"CSV 导入: 共 {parsed.total_rows} 行，行错误 {len(parsed.errors)} 条，成功 {imported['success']} 道")
        return {
            "totalRows": parsed.total_rows,
            "success": imported["success"],
            "failed": imported["failed"] + len(parsed.errors),
            "rowErrors": [e.to_dict() for e in parsed.errors],
            "errors": imported["errors"],
        }

    @staticmethod
    def render_template() -> str:
        """导入模板（表头 + 示例行）"""
        return _write_rows([CSV_HEADERS] + template_rows())

    @staticmethod
    def export_bank(db: Session, bank_id: str) -> str:
        """
        导出题库为 CSV 文本

        Raises:
            NotFoundError: 题库不存在
            ValidationError: 题库中没有题目
        """
        bank = BankService.get_bank(db, bank_id)
        if not bank:
            raise NotFoundError("题库不存在")

        questions = QuestionService.get_all_questions(db, bank_id)
        if not questions:
            raise ValidationError("题库中没有题目")

        OperationLogService.add(db, "导出题库", f"导出题库: {bank.name}，共 {len(questions)} 道题目")
        logger.info(f"导出题库: {bank.name}，共 {len(questions)} 道题目")
        return _write_rows([CSV_HEADERS] + [question_to_row(q) for q in questions])
