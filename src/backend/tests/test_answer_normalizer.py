"""
答案与选项归一化测试
"""
import pytest

from qbank.core.answer_normalizer import AnswerNormalizer, normalize_answer, normalize_options, normalize_type
from qbank.core.validator import validate_question


class TestNormalizeType:
    """题型归一化"""

    @pytest.mark.parametrize("raw,expected", [
        ("单选题", "single"),
        ("单选", "single"),
        ("多选", "multiple"),
        ("判断题", "boolean"),
        ("填空", "fill"),
        ("简答题", "short"),
        (" single ", "single"),
        ("FILL", "fill"),
    ])
    def test_synonyms(self, raw, expected):
        assert normalize_type(raw) == expected

    def test_unknown_passes_through(self):
        assert normalize_type("论述题") == "论述题"
        assert normalize_type(None) is None


class TestNormalizeOptions:
    """选项归一化"""

    def test_marker_strings(self):
        options = normalize_options(["A. tuple", "b、list", "C．dict"])
        assert options == [
            {"id": "A", "text": "tuple"},
            {"id": "B", "text": "list"},
            {"id": "C", "text": "dict"},
        ]

    def test_plain_strings_get_positional_letters(self):
        assert normalize_options(["红", "绿"]) == [{"id": "A", "text": "红"}, {"id": "B", "text": "绿"}]

    def test_objects_trim_and_uppercase_ids(self):
        options = normalize_options([{"id": " a ", "text": "x"}, {"id": "", "text": "y"}, {"text": "z"}])
        assert [o["id"] for o in options] == ["A", "B", "C"]

    def test_mapping_form(self):
        assert normalize_options({"A": "是", "B": "否"}) == [{"id": "A", "text": "是"}, {"id": "B", "text": "否"}]

    def test_content_key_as_text(self):
        assert normalize_options([{"id": "A", "content": "文本"}])[0]["text"] == "文本"


class TestNormalizeAnswer:
    """答案归一化"""

    def test_multiple_canonicalization(self):
        """去重保留首次出现顺序"""
        assert normalize_answer("multiple", "a,b,B,a") == "A|B"

    @pytest.mark.parametrize("raw,expected", [
        ("ABC", "A|B|C"),
        ("A、C", "A|C"),
        ("a，d", "A|D"),
        ("C A", "C|A"),
        (["a", "c"], "A|C"),
        ("A|B", "A|B"),
    ])
    def test_multiple_forms(self, raw, expected):
        assert normalize_answer("multiple", raw) == expected

    @pytest.mark.parametrize("raw", [True, "对", "true", "YES", "√", "1", "是"])
    def test_boolean_truthy(self, raw):
        assert normalize_answer("boolean", raw) == "正确"

    @pytest.mark.parametrize("raw", [False, "错", "False", "no", "×", "0", "否"])
    def test_boolean_falsy(self, raw):
        assert normalize_answer("boolean", raw) == "错误"

    def test_boolean_unknown_passes_through(self):
        """无法识别的值保留，交给校验器拒绝"""
        assert normalize_answer("boolean", "也许") == "也许"

    def test_fill_single_blank_not_split(self):
        assert normalize_answer("fill", "北京,上海", blank_count=1) == "北京,上海"

    def test_fill_multi_blank_split(self):
        assert normalize_answer("fill", "北京,上海", blank_count=2) == "北京|上海"
        assert normalize_answer("fill", "北京；上海", blank_count=2) == "北京|上海"

    def test_fill_existing_pipe_kept(self):
        assert normalize_answer("fill", "a,b|c", blank_count=2) == "a,b|c"

    def test_fill_array(self):
        assert normalize_answer("fill", ["北京", " 上海 "], blank_count=2) == "北京|上海"

    def test_single_trim_upper(self):
        assert normalize_answer("single", " b ") == "B"

    def test_short_passthrough(self):
        assert normalize_answer("short", " 原样 ") == " 原样 "

    def test_none_becomes_empty(self):
        assert normalize_answer("single", None) == ""


class TestIdempotence:
    """重复归一化结果不变"""

    @pytest.mark.parametrize("question_type,raw,blank_count", [
        ("multiple", "c,a,A,b", None),
        ("multiple", ["B", "a"], None),
        ("boolean", "对", None),
        ("fill", "北京、上海", 2),
        ("fill", "北京,上海", 1),
        ("fill", ["北京,上海"], 2),
        ("fill", 2024, 2),
        ("single", " a ", None),
        ("short", "任意", None),
    ])
    def test_answer(self, question_type, raw, blank_count):
        once = normalize_answer(question_type, raw, blank_count=blank_count)
        twice = normalize_answer(question_type, once, blank_count=blank_count)
        assert once == twice

    def test_options(self):
        once = normalize_options(["A. x", "y", {"id": "c", "text": "z"}])
        assert normalize_options(once) == once

    def test_whole_question(self):
        raw = {"题型": "多选", "题干": " 选出偶数 ", "选项": ["A. 1", "B. 2", "C. 4"], "答案": "cb"}
        once = AnswerNormalizer.normalize_question(raw)
        assert AnswerNormalizer.normalize_question(once) == once


class TestNormalizeQuestion:
    """整题归一化"""

    def test_chinese_aliases(self):
        question = AnswerNormalizer.normalize_question({
            "题型": "判断题", "题目": "Python 是解释型语言", "答案": "对", "解析": "CPython 解释执行",
        })
        assert question == {
            "type": "boolean",
            "content": "Python 是解释型语言",
            "options": None,
            "answer": "正确",
            "analysis": "CPython 解释执行",
        }
        assert validate_question(question).valid

    def test_fill_uses_content_blank_count(self):
        question = AnswerNormalizer.normalize_question({
            "type": "fill", "content": "中国的首都是__，最大城市是__", "answer": "北京，上海",
        })
        assert question["answer"] == "北京|上海"

    def test_unknown_type_left_for_validator(self):
        question = AnswerNormalizer.normalize_question({"type": "论述", "content": "x", "answer": "y"})
        assert question["type"] == "论述"
        assert validate_question(question).first_error == "无效的题型"


class TestRemoveOption:
    """删除选项后重排字母"""

    OPTIONS = [
        {"id": "A", "text": "a"},
        {"id": "B", "text": "b"},
        {"id": "C", "text": "c"},
        {"id": "D", "text": "d"},
    ]

    def test_multiple_answer_remapped(self):
        options, answer = AnswerNormalizer.remove_option(self.OPTIONS, 1, "multiple", "A|C|D")
        assert [o["id"] for o in options] == ["A", "B", "C"]
        assert [o["text"] for o in options] == ["a", "c", "d"]
        assert answer == "A|B|C"

    def test_multiple_removed_answer_dropped(self):
        _, answer = AnswerNormalizer.remove_option(self.OPTIONS, 1, "multiple", "B|D")
        assert answer == "C"

    def test_single_removed_answer_cleared(self):
        _, answer = AnswerNormalizer.remove_option(self.OPTIONS, 0, "single", "A")
        assert answer == ""

    def test_single_answer_shifted(self):
        _, answer = AnswerNormalizer.remove_option(self.OPTIONS, 0, "single", "C")
        assert answer == "B"

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            AnswerNormalizer.remove_option(self.OPTIONS, 4, "single", "A")

    def test_relabel(self):
        relabeled = AnswerNormalizer.relabel_options([{"id": "C", "text": "x"}, {"id": "F", "text": "y"}])
        assert [o["id"] for o in relabeled] == ["A", "B"]
