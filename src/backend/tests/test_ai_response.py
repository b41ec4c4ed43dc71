"""
AI 解析结果后处理测试
"""
import json

from qbank.core.ai_response import AiParseResponseNormalizer, extract_json_text, parse_completion
from qbank.core.validator import validate_question


class TestExtractJson:
    """代码块剥离与 JSON 解析"""

    def test_strip_json_fence(self):
        raw = '好的，结果如下：\n```json\n{"questions": []}\n```\n'
        assert extract_json_text(raw) == '{"questions": []}'

    def test_strip_plain_fence(self):
        assert extract_json_text('```\n[1, 2]\n```') == "[1, 2]"

    def test_no_fence(self):
        assert extract_json_text('  {"a": 1} ') == '{"a": 1}'

    def test_non_json_becomes_chat_reply(self):
        completion = parse_completion("抱歉，我没有看到题目内容。")
        assert not completion.is_structured
        assert completion.as_chat_reply() == {"success": True, "message": "抱歉，我没有看到题目内容。"}

    def test_empty_text(self):
        assert not parse_completion(None).is_structured


class TestNormalizeParseResult:
    """候选题目归一化"""

    def test_drops_non_records_and_unknown_types(self):
        payload = {
            "questions": [
                "不是对象",
                42,
                {"type": "论述题", "content": "x"},
                {"type": "判断题", "content": "地球是圆的", "answer": "对"},
            ]
        }
        result = AiParseResponseNormalizer.normalize_parse_result(payload)
        assert len(result["questions"]) == 1
        assert result["questions"][0]["type"] == "boolean"
        assert result["questions"][0]["answer"] == "正确"

    def test_drops_non_string_types(self):
        payload = {
            "questions": [
                {"type": ["single"], "content": "1+1=?", "options": ["1", "2"], "answer": "B"},
                {"type": {"name": "single"}, "content": "2+2=?"},
                {"type": None, "content": "无题型"},
                {"type": "判断", "content": "水是液体", "answer": "是"},
            ]
        }
        result = AiParseResponseNormalizer.normalize_parse_result(payload)
        assert len(result["questions"]) == 1
        assert result["questions"][0]["type"] == "boolean"
        assert result["questions"][0]["answer"] == "正确"

    def test_top_level_array(self):
        result = AiParseResponseNormalizer.normalize_parse_result([{"type": "short", "content": "简述GIL"}])
        assert result["questions"][0]["answer"] == ""

    def test_other_fields_preserved(self):
        result = AiParseResponseNormalizer.normalize_parse_result({"questions": [], "note": "无题目"})
        assert result == {"questions": [], "note": "无题目"}

    def test_non_mapping_payload(self):
        assert AiParseResponseNormalizer.normalize_parse_result("文本") == {"questions": []}
        assert AiParseResponseNormalizer.normalize_parse_result({"questions": "x"}) == {"questions": []}

    def test_choice_question_loose_shape(self):
        candidate = {
            "题型": "多选",
            "题干": "以下哪些是可变类型？",
            "选项": ["A. list", "B. tuple", "C. dict"],
            "答案": ["a", "c"],
        }
        question = AiParseResponseNormalizer.normalize_candidate(candidate)
        assert question["type"] == "multiple"
        assert question["options"] == [
            {"id": "A", "text": "list"},
            {"id": "B", "text": "tuple"},
            {"id": "C", "text": "dict"},
        ]
        assert question["answer"] == "A|C"
        assert validate_question(question).valid

    def test_fill_answer_split_by_blank_count(self):
        candidate = {"type": "fill", "content": "__是__的首都", "answer": ["北京", "中国"]}
        question = AiParseResponseNormalizer.normalize_candidate(candidate)
        assert question["answer"] == "北京|中国"
        assert question["options"] is None

    def test_fill_single_blank_keeps_commas(self):
        candidate = {"type": "fill", "content": "列举三种颜色：____", "answer": "红,黄,蓝"}
        assert AiParseResponseNormalizer.normalize_candidate(candidate)["answer"] == "红,黄,蓝"

    def test_idempotent(self):
        payload = {"questions": [
            {"type": "单选题", "content": " 1+1=? ", "options": {"a": "1", "b": "2"}, "answer": "b"},
            {"type": "判断", "content": "水是液体", "answer": True},
        ]}
        once = AiParseResponseNormalizer.normalize_parse_result(payload)
        twice = AiParseResponseNormalizer.normalize_parse_result(once)
        assert once == twice


class TestNormalizeCompletion:
    """从原始文本到题目列表"""

    def test_fenced_json(self):
        raw = "```json\n" + json.dumps({
            "questions": [{"type": "single", "content": "2+2=?", "options": ["3", "4"], "answer": "B"}]
        }, ensure_ascii=False) + "\n```"
        result = AiParseResponseNormalizer.normalize_completion(raw)
        assert result["questions"][0]["options"][1] == {"id": "B", "text": "4"}

    def test_plain_text_reply(self):
        result = AiParseResponseNormalizer.normalize_completion("请提供题目。")
        assert result == {"success": True, "message": "请提供题目。", "questions": []}
