"""
OpenAI 兼容接口客户端

DeepSeek、通义千问、本地 vLLM 等服务都提供 /chat/completions 兼容接口，
只需切换 base_url 和模型名。
"""

import logging
from typing import Any, Dict, List, Optional

from .base import Completion, LLMClient, LLMError, Message
from .config import LLMConfig

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """基于 openai SDK 的客户端，SDK 实例在首次请求时创建"""

    def __init__(self, config: LLMConfig):
        self._config = config
        self._sdk = None

    @property
    def model(self) -> str:
        return self._config.model

    def _get_sdk(self):
        if self._sdk is None:
            from openai import AsyncOpenAI
            self._sdk = AsyncOpenAI(
                api_key=self._config.api_key,
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                max_retries=self._config.max_retries,
            )
        return self._sdk

    def _request_params(
        self,
        messages: List[Message],
        temperature: Optional[float],
        max_tokens: Optional[int],
        extra: Dict[str, Any],
    ) -> Dict[str, Any]:
        params = {"model": extra.pop("model", None) or self._config.model, "messages": messages}
        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        params.update(extra)
        return params

    async def complete(
        self,
        messages: List[Message],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **params: Any
    ) -> Completion:
        request = self._request_params(messages, temperature, max_tokens, dict(params))
        try:
            response = await self._get_sdk().chat.completions.create(**request)
        except Exception as e:
            logger.error(f"请求模型失败 ({self._config.base_url}, {request['model']}): {e}")
            raise LLMError("请求模型失败", cause=e)

        if not response.choices:
            raise LLMError("模型没有返回任何结果")

        choice = response.choices[0]
        completion = Completion(
            text=choice.message.content or "",
            model=response.model,
            finish_reason=choice.finish_reason,
        )
        if completion.truncated:
            logger.warning(f"模型输出被截断: model={completion.model}")
        return completion
