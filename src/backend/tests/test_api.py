"""
HTTP 接口测试

只覆盖路由层的状态码映射和请求/响应形态，业务规则见各服务测试
"""
import json

from qbank import __version__
from qbank.services import QuestionService


class TestHealth:

    def test_index(self, client):
        assert client.get("/").json()["version"] == __version__

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}


class TestBanksApi:
    """题库接口"""

    def test_create_and_list(self, client):
        response = client.post("/api/banks", json={"name": "算法", "description": "LeetCode"})
        assert response.status_code == 200
        bank_id = response.json()["id"]

        banks = client.get("/api/banks").json()
        assert [b["id"] for b in banks] == [bank_id]
        assert banks[0]["question_count"] == 0

    def test_invalid_name(self, client):
        response = client.post("/api/banks", json={"name": "   "})
        assert response.status_code == 400
        assert response.json()["detail"] == "题库名称不能仅包含空白字符"

    def test_missing_bank(self, client):
        assert client.get("/api/banks/missing").status_code == 404
        assert client.delete("/api/banks/missing").status_code == 404


class TestQuestionsApi:
    """题目接口"""

    def test_create_and_get(self, client, bank, single_question):
        response = client.post(f"/api/banks/{bank.id}/questions", json=single_question)
        assert response.status_code == 200
        question_id = response.json()["id"]

        detail = client.get(f"/api/questions/{question_id}").json()
        assert detail["options"][0] == {"id": "A", "text": "tuple"}

    def test_create_invalid(self, client, bank):
        response = client.post(f"/api/banks/{bank.id}/questions", json={
            "type": "fill", "content": "没有空栏", "answer": "x",
        })
        assert response.status_code == 400

    def test_import(self, client, bank):
        response = client.post(f"/api/banks/{bank.id}/questions/import", json={"questions": [
            {"type": "判断", "content": "Python 支持多继承", "answer": "是"},
            {"type": "single", "content": "缺选项", "answer": "A"},
        ]})
        assert response.status_code == 200
        body = response.json()
        assert (body["success"], body["failed"]) == (1, 1)

    def test_import_empty(self, client, bank):
        response = client.post(f"/api/banks/{bank.id}/questions/import", json={"questions": []})
        assert response.status_code == 400

    def test_list_and_delete(self, client, db_session, bank, single_question):
        question = QuestionService.create_question(db_session, bank.id, single_question)
        page = client.get(f"/api/banks/{bank.id}/questions", params={"page_size": 10}).json()
        assert page["total"] == 1

        response = client.post("/api/questions/delete", json={"ids": [question.id]})
        assert response.json() == {"success": True, "deleted": 1}
        assert client.get(f"/api/questions/{question.id}").status_code == 404


class TestCsvApi:
    """CSV 接口"""

    def test_template_download(self, client):
        response = client.get("/api/csv/template")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "filename*=UTF-8''" in response.headers["content-disposition"]
        assert response.content.startswith("\ufeff".encode("utf-8"))

    def test_parse_preview(self, client):
        content = "题型,题干,选项A,选项B,选项C,选项D,选项E,选项F,答案,解析\n判断题,水是液体,,,,,,,正确,\n"
        body = client.post("/api/csv/parse", json={"content": content}).json()
        assert body["totalRows"] == 1
        assert body["valid"][0]["answer"] == "正确"

    def test_import_nothing_valid(self, client, bank):
        response = client.post(f"/api/csv/import/{bank.id}", json={"content": "问答题,x\n"})
        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "没有可导入的题目"

    def test_export_empty_bank(self, client, bank):
        assert client.get(f"/api/csv/export/{bank.id}").status_code == 400
        assert client.get("/api/csv/export/missing").status_code == 404


class TestPracticeAndWrongBookApi:
    """练习与错题本接口"""

    def test_submit_then_wrong_book(self, client, db_session, bank, single_question):
        question = QuestionService.create_question(db_session, bank.id, single_question)
        response = client.post("/api/practice/submit", json={
            "bank_id": bank.id,
            "answers": [{"question_id": question.id, "answer": "B"}],
        })
        assert response.status_code == 200
        assert response.json()["record"]["wrong"] == 1

        counts = client.get("/api/wrong-book/counts").json()
        assert counts == [{"bank_id": bank.id, "count": 1}]
        items = client.get("/api/wrong-book/items", params={"bank_id": bank.id}).json()
        assert items["data"][0]["wrong_count"] == 1

        assert client.delete(f"/api/wrong-book/items/{question.id}").status_code == 200
        assert client.delete(f"/api/wrong-book/items/{question.id}").status_code == 404

    def test_random_empty(self, client):
        assert client.get("/api/wrong-book/random").status_code == 404

    def test_invalid_threshold_on_submit(self, client, db_session, bank, single_question):
        question = QuestionService.create_question(db_session, bank.id, single_question)
        response = client.post("/api/practice/submit", json={
            "bank_id": bank.id,
            "answers": [{"question_id": question.id, "answer": "A"}],
            "threshold": 0,
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "阈值必须是 1-999 的数字"


class TestSettingsApi:
    """设置接口"""

    def test_threshold(self, client):
        assert client.get("/api/settings/wrong-book-threshold").json() == {"threshold": 3}
        assert client.put("/api/settings/wrong-book-threshold", json={"threshold": 5}).status_code == 200
        assert client.get("/api/settings/wrong-book-threshold").json() == {"threshold": 5}
        assert client.put("/api/settings/wrong-book-threshold", json={"threshold": 1000}).status_code == 400

    def test_api_config_hides_key(self, client, api_key):
        body = client.get("/api/settings/api-config").json()
        assert body["has_api_key"] is True
        assert "sk-test" not in json.dumps(body)


class TestAiApi:
    """AI 接口状态码映射"""

    def test_parse_without_key(self, client, monkeypatch, mock_llm):
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        response = client.post("/api/ai/parse", json={"content": "1+1=?"})
        assert response.status_code == 400

    def test_parse_llm_failure(self, client, api_key, mock_llm):
        mock_llm.error = RuntimeError("upstream down")
        response = client.post("/api/ai/parse", json={"content": "1+1=?"})
        assert response.status_code == 502

    def test_parse_success(self, client, api_key, mock_llm):
        mock_llm.reply = '[{"type": "boolean", "content": "1 是质数", "answer": "错"}]'
        response = client.post("/api/ai/parse", json={"content": "1 是质数吗"})
        assert response.status_code == 200
        assert response.json()["questions"][0]["answer"] == "错误"


    def test_chat_with_saved_prompt(self, client, api_key, mock_llm):
        prompt_id = client.post("/api/prompts", json={"name": "英语", "content": "只用英文回答"}).json()["id"]
        response = client.post("/api/ai/chat", json={
            "messages": [{"role": "user", "content": "hi"}],
            "prompt_id": prompt_id,
        })
        assert response.status_code == 200
        assert mock_llm.calls[0]["messages"][0]["content"] == "只用英文回答"

    def test_chat_with_missing_prompt(self, client, api_key, mock_llm):
        response = client.post("/api/ai/chat", json={
            "messages": [{"role": "user", "content": "hi"}],
            "prompt_id": "missing",
        })
        assert response.status_code == 404
        assert mock_llm.calls == []


class TestPromptsApi:
    """提示词接口"""

    def test_default_listed(self, client):
        prompts = client.get("/api/prompts").json()
        assert [p["name"] for p in prompts] == ["默认"]
        assert prompts[0]["is_default"] is True

    def test_crud(self, client):
        prompt_id = client.post("/api/prompts", json={"name": "数学", "content": "推导"}).json()["id"]
        response = client.put(f"/api/prompts/{prompt_id}", json={"name": "数学", "content": "逐步推导"})
        assert response.json()["content"] == "逐步推导"
        assert client.delete(f"/api/prompts/{prompt_id}").status_code == 200
        assert client.get(f"/api/prompts/{prompt_id}").status_code == 404

    def test_delete_default(self, client):
        default_id = client.get("/api/prompts").json()[0]["id"]
        response = client.delete(f"/api/prompts/{default_id}")
        assert response.status_code == 400
        assert response.json()["detail"] == "不能删除默认 Prompt"

    def test_empty_fields(self, client):
        assert client.post("/api/prompts", json={"name": "", "content": "x"}).status_code == 400


class TestChatHistoryApi:
    """聊天记录接口"""

    def test_save_update_list(self, client):
        messages = [{"role": "user", "content": "什么是 GIL？"}]
        saved = client.post("/api/chat-history", json={"messages": messages, "title": "GIL"}).json()
        assert saved["messages"] == messages

        messages.append({"role": "assistant", "content": "全局解释器锁"})
        updated = client.put(f"/api/chat-history/{saved['id']}", json={"messages": messages}).json()
        assert len(updated["messages"]) == 2

        summaries = client.get("/api/chat-history").json()
        assert [s["title"] for s in summaries] == ["GIL"]
        assert "messages" not in summaries[0]

    def test_empty_and_missing(self, client):
        assert client.post("/api/chat-history", json={"messages": []}).status_code == 400
        assert client.get("/api/chat-history/missing").status_code == 404
        assert client.delete("/api/chat-history/missing").status_code == 404


class TestStatsApi:
    """统计接口"""

    def test_operation_logs(self, client):
        client.post("/api/banks", json={"name": "算法"})
        client.post("/api/banks", json={"name": "数据结构"})
        logs = client.get("/api/stats/operation-logs", params={"limit": 1}).json()
        assert len(logs) == 1
        assert logs[0]["action"] == "创建题库"
        assert logs[0]["detail"] == "创建题库: 数据结构"


class TestCorsOptions:
    """跨域设置"""

    def test_explicit_origins(self, monkeypatch):
        from qbank.main import cors_options
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.example.com, http://b.example.com")
        assert cors_options() == {"allow_origins": ["http://a.example.com", "http://b.example.com"]}

    def test_dev_mode(self, monkeypatch):
        from qbank.main import LOCAL_ORIGIN_REGEX, cors_options
        monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
        monkeypatch.setenv("DEV_MODE", "true")
        assert cors_options() == {"allow_origin_regex": LOCAL_ORIGIN_REGEX}

    def test_default_denies(self, monkeypatch):
        from qbank.main import cors_options
        monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
        monkeypatch.delenv("DEV_MODE", raising=False)
        assert cors_options() == {"allow_origins": []}
