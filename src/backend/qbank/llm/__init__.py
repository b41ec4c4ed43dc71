"""
LLM 访问层

    client = get_llm_client(get_llm_config(SettingsService.get_api_config(db)))
    completion = await client.complete(messages, temperature=0.1)
    completion.text
"""

from typing import Optional

from .base import Completion, LLMClient, LLMError, Message
from .config import LLMConfig, get_llm_config
from .openai_client import OpenAIClient

# 非 None 时所有调用都使用这个客户端（测试注入假实现）
_override_client: Optional[LLMClient] = None


def get_llm_client(config: Optional[LLMConfig] = None) -> LLMClient:
    """
    按配置创建客户端

    API 配置随时可能在设置页被修改，所以每次新建，不做缓存。

    Raises:
        ConfigurationError: 未传入配置，且环境变量中也没有 API Key
    """
    if _override_client is not None:
        return _override_client
    return OpenAIClient(config or get_llm_config())


def set_llm_client(client: Optional[LLMClient]):
    global _override_client
    _override_client = client


def reset_llm_client():
    set_llm_client(None)


__all__ = [
    "Completion",
    "LLMClient",
    "LLMConfig",
    "LLMError",
    "Message",
    "OpenAIClient",
    "get_llm_client",
    "get_llm_config",
    "reset_llm_client",
    "set_llm_client",
]
