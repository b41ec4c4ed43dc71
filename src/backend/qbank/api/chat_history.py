"""
AI 问答聊天记录API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.services import ChatHistoryService

router = APIRouter(prefix="/chat-history", tags=["AI"])


class SaveChatRequest(BaseModel):
    messages: List[Dict[str, str]]
    title: Optional[str] = None
    prompt_id: Optional[str] = None


class UpdateChatRequest(BaseModel):
    messages: List[Dict[str, str]]


@router.get("", response_model=List[dict])
def get_chat_histories(limit: int = Query(50, ge=1, le=200), db: Session = Depends(get_db)):
    """聊天记录列表（不含消息内容，按更新时间倒序）"""
    return [h.to_summary() for h in ChatHistoryService.get_all(db, limit)]


@router.get("/{history_id}", response_model=dict)
def get_chat_history(history_id: str, db: Session = Depends(get_db)):
    history = ChatHistoryService.get(db, history_id)
    if not history:
        raise HTTPException(status_code=404, detail="聊天记录不存在")
    return history.to_dict()


@router.post("", response_model=dict)
def save_chat_history(request: SaveChatRequest, db: Session = Depends(get_db)):
    """保存新对话"""
    try:
        return ChatHistoryService.save(db, request.messages, request.title, request.prompt_id).to_dict()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.put("/{history_id}", response_model=dict)
def update_chat_history(history_id: str, request: UpdateChatRequest, db: Session = Depends(get_db)):
    """用完整消息列表替换已保存的对话"""
    try:
        return ChatHistoryService.update(db, history_id, request.messages).to_dict()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{history_id}")
def delete_chat_history(history_id: str, db: Session = Depends(get_db)):
    try:
        ChatHistoryService.delete(db, history_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return {"success": True}
