"""
提示词模板

每个 templates/<name>.yaml 描述一次模型调用：

    parameters:      # 调用参数，原样传给 LLMClient.complete
      temperature: 0.1
    variables:       # 模板变量默认值
      ...
    system_prompt: | # 必需，Jinja2 模板
      ...
    user_prompt: |   # 可选，Jinja2 模板
      ...
"""

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jinja2 import StrictUndefined, Template, TemplateError

TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptLoadError(Exception):
    """模板文件缺失或内容不合法"""


class PromptRenderError(Exception):
    """模板渲染失败（缺少变量、语法错误）"""


class PromptLoader:
    """
    读取并渲染提示词模板，已读取的模板按名称缓存

        messages = prompt_loader.get_messages("question_parser", content=text)
        params = prompt_loader.get_parameters("question_parser")
    """

    REQUIRED_FIELDS = ("system_prompt",)

    def __init__(self, templates_dir: Optional[Path] = None, enable_cache: bool = True):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.enable_cache = enable_cache
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _read(self, name: str) -> Dict[str, Any]:
        path = self.templates_dir / f"{name}.yaml"
        if not path.is_file():
            raise PromptLoadError(f"找不到提示词模板: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise PromptLoadError(f"{path.name} 不是合法的 YAML: {e}")

        if not isinstance(data, dict):
            raise PromptLoadError(f"{path.name} 顶层必须是映射")
        missing = [f for f in self.REQUIRED_FIELDS if f not in data]
        if missing:
            raise PromptLoadError(f"{path.name} 缺少字段: {', '.join(missing)}")
        return data

    def load(self, name: str) -> Dict[str, Any]:
        """
        读取模板配置

        Raises:
            PromptLoadError: 文件不存在、YAML 错误或缺少 system_prompt
        """
        with self._lock:
            cached = self._cache.get(name) if self.enable_cache else None
            if cached is None:
                cached = self._read(name)
                if self.enable_cache:
                    self._cache[name] = cached
            return cached

    def render(self, name: str, template_key: str = "system_prompt", **variables) -> str:
        """
        渲染模板中的一段文本，调用方传入的变量覆盖 variables 默认值

        Raises:
            PromptRenderError: 该段不存在、缺少变量或渲染出错
        """
        data = self.load(name)
        source = data.get(template_key)
        if not source:
            raise PromptRenderError(f"{name}.yaml 没有 {template_key}")

        context = dict(data.get("variables") or {})
        context.update(variables)
        try:
            return Template(source, undefined=StrictUndefined).render(**context).strip()
        except TemplateError as e:
            raise PromptRenderError(f"渲染 {name}.{template_key} 失败: {e}")

    def get_messages(self, name: str, **variables) -> List[Dict[str, str]]:
        """system 消息，加上模板定义了 user_prompt 时的 user 消息"""
        roles = [("system", "system_prompt")]
        if self.load(name).get("user_prompt"):
            roles.append(("user", "user_prompt"))
        return [{"role": role, "content": self.render(name, key, **variables)} for role, key in roles]

    def get_parameters(self, name: str) -> Dict[str, Any]:
        """调用参数的副本"""
        return dict(self.load(name).get("parameters") or {})

    def clear_cache(self, name: Optional[str] = None):
        with self._lock:
            if name is None:
                self._cache.clear()
            else:
                self._cache.pop(name, None)

    def list_prompts(self) -> List[str]:
        if not self.templates_dir.is_dir():
            return []
        return sorted(path.stem for path in self.templates_dir.glob("*.yaml"))


prompt_loader = PromptLoader()
