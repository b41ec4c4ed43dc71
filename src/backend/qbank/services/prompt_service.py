"""
问答提示词服务

默认提示词在第一次读取列表时写入，内容取自 chat_assistant 模板；
默认提示词可以修改，不能删除。
"""
import logging
import uuid
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from prompts import prompt_loader
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.models import AiPrompt
from qbank.services.operation_log_service import OperationLogService

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_NAME = "默认"
DEFAULT_PROMPT_TEMPLATE = "chat_assistant"
PROMPT_NAME_MAX_LENGTH = 50


def _check_fields(name: Any, content: Any):
    if not isinstance(name, str) or not name.strip() or not isinstance(content, str) or not content.strip():
        raise ValidationError("名称和内容不能为空")
    if len(name.strip()) > PROMPT_NAME_MAX_LENGTH:
        raise ValidationError(f"名称不能超过{PROMPT_NAME_MAX_LENGTH}个字符")


class PromptService:
    """问答提示词 CRUD"""

    @staticmethod
    def ensure_default(db: Session) -> AiPrompt:
        """没有默认提示词时创建"""
        prompt = db.query(AiPrompt).filter(AiPrompt.is_default.is_(True)).first()
        if prompt:
            return prompt

        prompt = AiPrompt(
            id=str(uuid.uuid4()),
            name=DEFAULT_PROMPT_NAME,
            content=prompt_loader.render(DEFAULT_PROMPT_TEMPLATE),
            is_default=True,
        )
        db.add(prompt)
        db.commit()
        db.refresh(prompt)
        logger.info("已创建默认问答提示词")
        return prompt

    @classmethod
    def get_all_prompts(cls, db: Session) -> List[AiPrompt]:
        """所有提示词：默认的排最前，其余按创建时间倒序"""
        cls.ensure_default(db)
        return (
            db.query(AiPrompt)
            .order_by(AiPrompt.is_default.desc(), AiPrompt.created_at.desc())
            .all()
        )

    @staticmethod
    def get_prompt(db: Session, prompt_id: str) -> Optional[AiPrompt]:
        return db.query(AiPrompt).filter(AiPrompt.id == prompt_id).first()

    @classmethod
    def require_prompt(cls, db: Session, prompt_id: str) -> AiPrompt:
        prompt = cls.get_prompt(db, prompt_id)
        if not prompt:
            raise NotFoundError("Prompt 不存在")
        return prompt

    @staticmethod
    def create_prompt(db: Session, name: str, content: str) -> AiPrompt:
        """
        创建提示词

        Raises:
            ValidationError: 名称或内容为空
        """
        _check_fields(name, content)
        prompt = AiPrompt(id=str(uuid.uuid4()), name=name.strip(), content=content.strip())
        db.add(prompt)
        OperationLogService.add(db, "创建 Prompt", f"创建 Prompt: {prompt.name}", commit=False)
        db.commit()
        db.refresh(prompt)
        return prompt

    @classmethod
    def update_prompt(cls, db: Session, prompt_id: str, name: str, content: str) -> AiPrompt:
        """
        更新提示词

        Raises:
            ValidationError: 名称或内容为空
            NotFoundError: 提示词不存在
        """
        _check_fields(name, content)
        prompt = cls.require_prompt(db, prompt_id)

        prompt.name = name.strip()
        prompt.content = content.strip()
        prompt.updated_at = datetime.utcnow()
        OperationLogService.add(db, "更新 Prompt", f"更新 Prompt: {prompt.name}", commit=False)
        db.commit()
        db.refresh(prompt)
        return prompt

    @classmethod
    def delete_prompt(cls, db: Session, prompt_id: str):
        """
        删除提示词

        Raises:
            NotFoundError: 提示词不存在
            ValidationError: 默认提示词不能删除
        """
        prompt = cls.require_prompt(db, prompt_id)
        if prompt.is_default:
            raise ValidationError("不能删除默认 Prompt")

        db.delete(prompt)
        OperationLogService.add(db, "删除 Prompt", f"删除 Prompt: {prompt.name}", commit=False)
        db.commit()
