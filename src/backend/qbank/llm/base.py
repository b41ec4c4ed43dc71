"""
LLM 客户端接口

题目解析、问答、连接测试都是一次性请求，不需要流式输出。
服务层只依赖 LLMClient，测试时注入假实现。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

Message = Dict[str, str]


@dataclass
class Completion:
    """
    模型返回结果

    Attributes:
        text: 回复文本（可能是 JSON，也可能是普通对话）
        model: 实际使用的模型
        finish_reason: 结束原因，"length" 表示输出被截断
    """
    text: str
    model: str
    finish_reason: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


class LLMClient(ABC):
    """LLM 客户端"""

    @abstractmethod
    async def complete(
        self,
        messages: List[Message],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **params: Any
    ) -> Completion:
        """
        发送消息并等待完整回复

        Args:
            messages: [{"role": "system" | "user" | "assistant", "content": "..."}]
            temperature: 温度，None 时使用服务端默认值
            max_tokens: 最大生成 Token 数

        Raises:
            LLMError: 请求失败或返回内容异常
        """

    @property
    @abstractmethod
    def model(self) -> str:
        """当前使用的模型"""


class LLMError(Exception):
    """模型调用失败"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}" if self.cause else self.message
