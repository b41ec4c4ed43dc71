"""
AI 服务

- 题目解析：把粘贴的文本交给模型，结果经 AiParseResponseNormalizer 归一化后返回（不入库）
- 问答：普通对话，可选用自定义提示词
- 连接测试

API 配置从设置表读取，每次调用按最新配置创建客户端。
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from prompts import prompt_loader
from qbank.core.ai_response import AiParseResponseNormalizer
from qbank.core.exceptions import ValidationError
from qbank.llm import LLMClient, get_llm_client, get_llm_config
from qbank.services.operation_log_service import OperationLogService
from qbank.services.prompt_service import PromptService
from qbank.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

PARSER_PROMPT = "question_parser"
CHAT_PROMPT = "chat_assistant"
CONNECTION_TEST_PROMPT = "connection_test"


class AiService:
    """AI 服务"""

    @staticmethod
    def get_client(db: Session) -> LLMClient:
        """
        按当前设置创建客户端

        Raises:
            ConfigurationError: 未配置 API Key
        """
        config = get_llm_config(SettingsService.get_api_config(db))
        return get_llm_client(config)

    @classmethod
    async def parse_questions(cls, db: Session, content: str) -> Dict[str, Any]:
        """
        AI 解析题目

        模型返回非 JSON 文本时不报错，按对话回复返回（questions 为空）。

        Returns:
            Dict: {"questions": [...], ...}

        Raises:
            ConfigurationError: 未配置 API Key
            ValidationError: 内容为空
            LLMError: 模型调用失败
        """
        client = cls.get_client(db)
        if not content or not content.strip():
            raise ValidationError("请输入要解析的题目内容")

        messages = prompt_loader.get_messages(PARSER_PROMPT, content=content)
        completion = await client.complete(messages, **prompt_loader.get_parameters(PARSER_PROMPT))

        result = AiParseResponseNormalizer.normalize_completion(completion.text)
        if completion.truncated:
            # JSON 被截断时通常解析失败，提示用户分批粘贴
            result["truncated"] = True
        if result["questions"]:
            OperationLogService.add(db, "AI解析", f"AI 解析了 {len(result['questions'])} 道题目")
        logger.info(f"AI 解析了 {len(result['questions'])} 道题目")
        return result

    @classmethod
    async def chat(
        cls,
        db: Session,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        prompt_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        AI 问答

        Args:
            messages: 对话历史 [{"role", "content"}]，不含系统提示词
            system_prompt: 直接指定的系统提示词，优先于 prompt_id
            prompt_id: 已保存的提示词ID；两者都没有时使用默认助手提示词

        Raises:
            ConfigurationError: 未配置 API Key
            ValidationError: 消息为空
            NotFoundError: prompt_id 对应的提示词不存在
            LLMError: 模型调用失败
        """
        client = cls.get_client(db)
        if not messages:
            raise ValidationError("请输入问题")

        system_content = system_prompt
        if not system_content and prompt_id:
            system_content = PromptService.require_prompt(db, prompt_id).content
        if not system_content:
            system_content = prompt_loader.render(CHAT_PROMPT)
        full_messages = [{"role": "system", "content": system_content}] + list(messages)
        completion = await client.complete(full_messages, **prompt_loader.get_parameters(CHAT_PROMPT))
        return {"success": True, "message": completion.text}

    @classmethod
    async def test_connection(cls, db: Session) -> Dict[str, Any]:
        """
        测试 API 连接

        Raises:
            ConfigurationError: 未配置 API Key
            LLMError: 连接失败
        """
        client = cls.get_client(db)
        messages = prompt_loader.get_messages(CONNECTION_TEST_PROMPT)
        await client.complete(messages, **prompt_loader.get_parameters(CONNECTION_TEST_PROMPT))
        return {"success": True, "message": "API 连接成功"}
