"""
提示词加载器测试
"""
import pytest

from prompts import PromptLoader, PromptLoadError, PromptRenderError, prompt_loader


@pytest.fixture
def loader(tmp_path):
    (tmp_path / "greet.yaml").write_text(
        "parameters:\n"
        "  temperature: 0.2\n"
        "variables:\n"
        "  tone: 友好\n"
        "system_prompt: |\n"
        "  你是{{ tone }}的助手。\n"
        "user_prompt: |\n"
        "  问题：{{ question }}\n",
        encoding="utf-8",
    )
    (tmp_path / "broken.yaml").write_text("user_prompt: 只有用户消息\n", encoding="utf-8")
    return PromptLoader(templates_dir=tmp_path)


class TestPromptLoader:

    def test_get_messages(self, loader):
        messages = loader.get_messages("greet", question="什么是列表推导式？")
        assert messages == [
            {"role": "system", "content": "你是友好的助手。"},
            {"role": "user", "content": "问题：什么是列表推导式？"},
        ]

    def test_variables_override_defaults(self, loader):
        assert loader.render("greet", tone="严谨") == "你是严谨的助手。"

    def test_missing_variable(self, loader):
        with pytest.raises(PromptRenderError):
            loader.render("greet", "user_prompt")

    def test_missing_template(self, loader):
        with pytest.raises(PromptLoadError):
            loader.load("nope")

    def test_missing_required_field(self, loader):
        with pytest.raises(PromptLoadError):
            loader.load("broken")

    def test_parameters_copy(self, loader):
        params = loader.get_parameters("greet")
        params["temperature"] = 1.0
        assert loader.get_parameters("greet") == {"temperature": 0.2}

    def test_list_prompts(self, loader):
        assert loader.list_prompts() == ["broken", "greet"]

    def test_cache_cleared(self, loader, tmp_path):
        loader.load("greet")
        (tmp_path / "greet.yaml").write_text("system_prompt: 新版本\n", encoding="utf-8")
        assert loader.render("greet") == "你是友好的助手。"
        loader.clear_cache("greet")
        assert loader.render("greet") == "新版本"


class TestBundledPrompts:
    """内置模板"""

    def test_bundled_templates_load(self):
        assert {"question_parser", "chat_assistant", "connection_test"} <= set(prompt_loader.list_prompts())
        for name in prompt_loader.list_prompts():
            assert prompt_loader.load(name)["system_prompt"]

    def test_parser_embeds_content(self):
        messages = prompt_loader.get_messages("question_parser", content="1. 2+2=? A.3 B.4")
        assert messages[1]["content"].endswith("1. 2+2=? A.3 B.4")
        assert prompt_loader.get_parameters("question_parser")["temperature"] == 0.1
