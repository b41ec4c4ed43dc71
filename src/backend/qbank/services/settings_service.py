"""
设置服务

设置以字符串形式存放在 settings 表中，读取时做类型转换和兜底。
"""
import logging
import os
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from qbank.core.exceptions import ConfigurationError
from qbank.core.wrong_book import DEFAULT_REMOVAL_THRESHOLD, WrongBookAccounting
from qbank.llm.config import DEFAULT_BASE_URL, DEFAULT_MODEL
from qbank.models import Setting
from qbank.services.operation_log_service import OperationLogService

logger = logging.getLogger(__name__)

WRONG_BOOK_THRESHOLD_KEY = "wrong_book_threshold"

# 设置表键名 -> 对外字段名
API_CONFIG_KEYS = {
    "ai_api_key": "api_key",
    "ai_api_url": "api_url",
    "ai_model_id": "model_id",
    "ai_provider": "provider",
}


def _parse_threshold(value: Any) -> Optional[int]:
    """阈值转为整数；不是整数时返回 None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class SettingsService:
    """设置服务"""

    @staticmethod
    def get_setting(db: Session, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = db.query(Setting).filter(Setting.key == key).first()
        return setting.value if setting else default

    @staticmethod
    def set_setting(db: Session, key: str, value: str, commit: bool = True):
        setting = db.query(Setting).filter(Setting.key == key).first()
        if setting:
            setting.value = value
        else:
            db.add(Setting(key=key, value=value))
        if commit:
            db.commit()

    @classmethod
    def get_wrong_book_threshold(cls, db: Session) -> int:
        """错题本移除阈值；未设置或存储值非法时返回默认值 3"""
        threshold = _parse_threshold(cls.get_setting(db, WRONG_BOOK_THRESHOLD_KEY))
        if threshold is None or not WrongBookAccounting.is_valid_threshold(threshold):
            return DEFAULT_REMOVAL_THRESHOLD
        return threshold

    @classmethod
    def set_wrong_book_threshold(cls, db: Session, threshold: Any) -> int:
        """
        设置错题本移除阈值

        Raises:
            ConfigurationError: 不是 1-999 的整数
        """
        parsed = _parse_threshold(threshold)
        if parsed is None or not WrongBookAccounting.is_valid_threshold(parsed):
            raise ConfigurationError("阈值必须是 1-999 的数字")

        cls.set_setting(db, WRONG_BOOK_THRESHOLD_KEY, str(parsed), commit=False)
        OperationLogService.add(db, "更改设置", f"错题本移除阈值: {parsed}", commit=False)
        db.commit()
        logger.info(f"设置错题本移除阈值为: {parsed}")
        return parsed

    @classmethod
    def resolve_threshold(cls, db: Session, threshold: Any = None) -> int:
        """调用方显式传入的阈值优先（需校验），否则读取设置"""
        if threshold is None:
            return cls.get_wrong_book_threshold(db)
        parsed = _parse_threshold(threshold)
        if parsed is None or not WrongBookAccounting.is_valid_threshold(parsed):
            raise ConfigurationError("阈值必须是 1-999 的数字")
        return parsed

    @classmethod
    def get_api_config(cls, db: Session) -> Dict[str, str]:
        """
        AI 接口配置

        未设置的项回退到环境变量（LLM_API_KEY / LLM_BASE_URL / LLM_MODEL）和默认值。
        """
        defaults = {
            "ai_api_key": os.getenv("LLM_API_KEY", ""),
            "ai_api_url": os.getenv("LLM_BASE_URL", DEFAULT_BASE_URL),
            "ai_model_id": os.getenv("LLM_MODEL", DEFAULT_MODEL),
            "ai_provider": "custom",
        }
        return {
            field_name: cls.get_setting(db, key) or defaults[key]
            for key, field_name in API_CONFIG_KEYS.items()
        }

    @classmethod
    def set_api_config(cls, db: Session, config: Dict[str, Optional[str]]):
        """保存 AI 接口配置（空值写入默认值）"""
        defaults = {
            "api_key": "",
            "api_url": DEFAULT_BASE_URL,
            "model_id": DEFAULT_MODEL,
            "provider": "custom",
        }
        for key, field_name in API_CONFIG_KEYS.items():
            cls.set_setting(db, key, config.get(field_name) or defaults[field_name], commit=False)
        OperationLogService.add(db, "更改设置", "更新 AI API 配置", commit=False)
        db.commit()
        logger.info("更新 AI API 配置")
