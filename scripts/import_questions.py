#!/usr/bin/env python3
"""
题目导入脚本
将 CSV 或 JSON 文件导入到指定题库，题库不存在时按名称创建

JSON 文件可以是题目列表，也可以是 {"questions": [...]}；字段名支持中文别名（题型、题干、选项、答案、解析）。
"""
import argparse
import json
import sys
from pathlib import Path

# 添加项目路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / ".." / "src" / "backend"))

from sqlalchemy.orm import Session

from qbank.core.database import SessionLocal
from qbank.core.exceptions import QBankError
from qbank.models import QuestionBank, init_db
from qbank.services import BankService, CsvService, QuestionService


def get_or_create_bank(db: Session, bank_name: str) -> QuestionBank:
    bank = db.query(QuestionBank).filter(QuestionBank.name == bank_name).first()
    if bank:
        return bank
    print(f"  创建题库: {bank_name}")
    return BankService.create_bank(db, bank_name)


def load_json_questions(json_file: Path) -> list:
    with open(json_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("questions", [data])
    return data


def check_file(file_path: Path) -> dict:
    """
    只解析和校验，不写数据库

    Returns:
        dict: {"success": 可导入数, "failed": 错误数}
    """
    if file_path.suffix.lower() == ".csv":
        parsed = CsvService.parse_file(file_path)
        for error in parsed.errors:
            print(f"    第 {error.row} 行 [{error.field}] {error.message}")
        return {"success": len(parsed.valid), "failed": len(parsed.errors)}

    checked = QuestionService.check_questions(load_json_questions(file_path))
    for error in checked["errors"]:
        print(f"    第 {error['index'] + 1} 题: {error['message']}")
    return {"success": len(checked["valid"]), "failed": len(checked["errors"])}


def import_file(db: Session, file_path: Path, bank: QuestionBank) -> dict:
    """
    导入单个文件

    Returns:
        dict: 导入统计 {"success", "failed", "errors"}
    """
    if file_path.suffix.lower() == ".csv":
        result = CsvService.import_text(db, bank.id, file_path.read_text(encoding="utf-8-sig"))
        for error in result["rowErrors"]:
            print(f"    第 {error['row']} 行 [{error['field']}] {error['message']}")
    else:
        result = QuestionService.import_questions(db, bank.id, load_json_questions(file_path))

    for error in result["errors"]:
        print(f"    第 {error['index'] + 1} 题: {error['message']}")
    return result


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description="导入题目到指定题库")
    parser.add_argument("files", nargs="+", help="CSV 或 JSON 文件路径（支持多文件）")
    parser.add_argument("--bank", "-b", help="题库名称（不存在时自动创建）")
    parser.add_argument("--init-db", "-i", action="store_true", help="初始化数据库表")
    parser.add_argument("--dry-run", "-n", action="store_true", help="只校验文件，不导入")
    args = parser.parse_args()
    if not args.bank and not args.dry_run:
        parser.error("导入时必须指定 --bank")

    if args.init_db:
        init_db()

    db = SessionLocal()
    total_success = 0
    total_failed = 0
    try:
        bank = None if args.dry_run else get_or_create_bank(db, args.bank)
        for file_name in args.files:
            file_path = Path(file_name)
            if not file_path.exists():
                print(f"✗ 文件不存在: {file_path}")
                total_failed += 1
                continue

            try:
                if args.dry_run:
                    print(f"校验 {file_path.name}")
                    result = check_file(file_path)
                else:
                    print(f"导入 {file_path.name} -> {bank.name}")
                    result = import_file(db, file_path, bank)
            except (QBankError, json.JSONDecodeError) as e:
                print(f"  ✗ 导入失败: {e}")
                total_failed += 1
                continue
            print(f"  ✓ 成功 {result['success']} 道，失败 {result['failed']} 道")
            total_success += result["success"]
            total_failed += result["failed"]
    finally:
        db.close()

    print(f"\n完成！共成功 {total_success} 道，失败 {total_failed} 道")
    return 0 if total_failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
