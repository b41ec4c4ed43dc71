"""
操作日志测试

业务操作与日志在同一事务中写入，校验失败的操作不留日志
"""
import pytest

from qbank.core.exceptions import ValidationError
from qbank.services import (
    BankService,
    CsvService,
    OperationLogService,
    PracticeService,
    QuestionService,
    SettingsService,
    WrongBookService,
)


def actions(db_session, limit=20):
    return [log.action for log in OperationLogService.get_recent(db_session, limit)]


class TestOperationLogService:
    """日志读写"""

    def test_recent_first_with_limit(self, db_session):
        for action in ("下载模板", "导入题目", "导出题库"):
            OperationLogService.add(db_session, action)
        recent = OperationLogService.get_recent(db_session, limit=2)
        assert [log.action for log in recent] == ["导出题库", "导入题目"]

    def test_detail_defaults_to_empty(self, db_session):
        log = OperationLogService.add(db_session, "清空错题本", None)
        assert log.to_dict()["detail"] == ""

    def test_uncommitted_until_caller_commits(self, db_session):
        OperationLogService.add(db_session, "更改设置", commit=False)
        db_session.rollback()
        assert actions(db_session) == []


class TestLoggedActions:
    """业务操作写入日志"""

    def test_bank_lifecycle(self, db_session, bank):
        BankService.update_bank(db_session, bank.id, "Python 进阶")
        BankService.delete_bank(db_session, bank.id)
        logs = OperationLogService.get_recent(db_session)
        assert [log.action for log in logs] == ["删除题库", "更新题库", "创建题库"]
        assert logs[2].detail == "创建题库: Python 基础"

    def test_invalid_bank_not_logged(self, db_session):
        with pytest.raises(ValidationError):
            BankService.create_bank(db_session, "   ")
        assert actions(db_session) == []

    def test_question_actions(self, db_session, bank, single_question, fill_question):
        question = QuestionService.create_question(db_session, bank.id, single_question)
        QuestionService.update_question(db_session, question.id, fill_question)
        QuestionService.delete_questions(db_session, [question.id, "missing"])

        logs = OperationLogService.get_recent(db_session, 3)
        assert [log.action for log in logs] == ["删除题目", "更新题目", "添加题目"]
        assert logs[0].detail == "删除 1 道题目"
        assert logs[2].detail == "添加单选题到题库: Python 基础"

    def test_import_logged_only_on_success(self, db_session, bank, single_question):
        QuestionService.import_questions(db_session, bank.id, [{"type": "essay", "content": "x"}])
        assert "导入题目" not in actions(db_session)

        QuestionService.import_questions(db_session, bank.id, [single_question])
        log = OperationLogService.get_recent(db_session, 1)[0]
        assert (log.action, log.detail) == ("导入题目", "导入 1 道题目到题库: Python 基础")

    def test_export_logged(self, db_session, bank, single_question):
        QuestionService.create_question(db_session, bank.id, single_question)
        CsvService.export_bank(db_session, bank.id)
        log = OperationLogService.get_recent(db_session, 1)[0]
        assert log.detail == "导出题库: Python 基础，共 1 道题目"

    def test_practice_and_wrong_book(self, db_session, bank, single_question):
        question = QuestionService.create_question(db_session, bank.id, single_question)
        PracticeService.submit_session(db_session, bank.id, [{"question_id": question.id, "answer": "B"}])
        WrongBookService.clear(db_session)

        logs = OperationLogService.get_recent(db_session, 2)
        assert [log.action for log in logs] == ["清空错题本", "完成练习"]
        assert logs[1].detail == "正确率: 0%"

    def test_settings_logged(self, db_session):
        SettingsService.set_wrong_book_threshold(db_session, 5)
        SettingsService.set_api_config(db_session, {"api_key": "sk-x"})
        logs = OperationLogService.get_recent(db_session)
        assert [log.detail for log in logs] == ["更新 AI API 配置", "错题本移除阈值: 5"]
