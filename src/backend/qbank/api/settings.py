"""
设置API
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Any, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import ConfigurationError
from qbank.llm import LLMError
from qbank.services import AiService, SettingsService

router = APIRouter(prefix="/settings", tags=["设置"])


class ThresholdRequest(BaseModel):
    # 宽松接收，校验在服务层完成
    threshold: Any


class ApiConfigRequest(BaseModel):
    api_key: Optional[str] = ""
    api_url: Optional[str] = None
    model_id: Optional[str] = None
    provider: Optional[str] = None


@router.get("/wrong-book-threshold")
def get_wrong_book_threshold(db: Session = Depends(get_db)):
    """获取错题本移除阈值"""
    return {"threshold": SettingsService.get_wrong_book_threshold(db)}


@router.put("/wrong-book-threshold")
def set_wrong_book_threshold(request: ThresholdRequest, db: Session = Depends(get_db)):
    """设置错题本移除阈值（1-999）"""
    try:
        threshold = SettingsService.set_wrong_book_threshold(db, request.threshold)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {"success": True, "threshold": threshold}


@router.get("/api-config")
def get_api_config(db: Session = Depends(get_db)):
    """获取 AI 接口配置（API Key 只返回是否已配置）"""
    config = SettingsService.get_api_config(db)
    api_key = config.pop("api_key")
    return {**config, "has_api_key": bool(api_key)}


@router.put("/api-config")
def set_api_config(request: ApiConfigRequest, db: Session = Depends(get_db)):
    """保存 AI 接口配置"""
    SettingsService.set_api_config(db, request.model_dump())
    return {"success": True}


@router.post("/api-config/test")
async def test_api_connection(db: Session = Depends(get_db)):
    """测试 AI 接口连接"""
    try:
        return await AiService.test_connection(db)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except LLMError as e:
        raise HTTPException(status_code=502, detail=f"API 连接失败: {e.message}")
