"""
LLM 配置

配置来源优先级：设置表（用户在界面中填写）> 环境变量 > 默认值
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"


@dataclass
class LLMConfig:
    """OpenAI 兼容接口的连接参数；provider 只用于界面展示"""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    provider: str = "custom"
    timeout: float = 60.0
    max_retries: int = 3


def get_llm_config(overrides: Optional[Mapping[str, str]] = None) -> LLMConfig:
    """
    组装 LLM 配置

    环境变量：
        LLM_API_KEY: 设置表中没有 API Key 时使用
        LLM_BASE_URL: 接口地址
        LLM_MODEL: 默认模型
        LLM_TIMEOUT: 单次请求超时（秒）
        LLM_MAX_RETRIES: SDK 自动重试次数

    Args:
        overrides: 设置表中的 AI 配置（api_key/api_url/model_id/provider），非空值优先

    Raises:
        ConfigurationError: API Key 未配置
    """
    overrides = overrides or {}

    api_key = overrides.get("api_key") or os.getenv("LLM_API_KEY")
    if not api_key:
        raise ConfigurationError("请先在设置中配置 API Key")

    return LLMConfig(
        api_key=api_key,
        base_url=overrides.get("api_url") or os.getenv("LLM_BASE_URL", DEFAULT_BASE_URL),
        model=overrides.get("model_id") or os.getenv("LLM_MODEL", DEFAULT_MODEL),
        provider=overrides.get("provider") or "custom",
        timeout=float(os.getenv("LLM_TIMEOUT", "60.0")),
        max_retries=int(os.getenv("LLM_MAX_RETRIES", "3")),
    )
