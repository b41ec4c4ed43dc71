"""
AI 解析与问答API
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import ConfigurationError, NotFoundError, ValidationError
from qbank.llm import LLMError
from qbank.services import AiService

router = APIRouter(prefix="/ai", tags=["AI"])


class ParseQuestionsRequest(BaseModel):
    content: str


class ChatRequest(BaseModel):
    messages: List[Dict[str, str]]
    system_prompt: Optional[str] = None
    prompt_id: Optional[str] = None


@router.post("/parse", response_model=dict)
async def parse_questions(request: ParseQuestionsRequest, db: Session = Depends(get_db)):
    """
    AI 解析题目（只返回归一化后的候选题目，不入库）

    确认后通过 /banks/{bank_id}/questions/import 导入。
    """
    try:
        return await AiService.parse_questions(db, request.content)
    except (ConfigurationError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    except LLMError as e:
        raise HTTPException(status_code=502, detail=f"AI 解析失败: {e.message}")


@router.post("/chat", response_model=dict)
async def chat(request: ChatRequest, db: Session = Depends(get_db)):
    """AI 问答（prompt_id 选用已保存的提示词）"""
    try:
        return await AiService.chat(db, request.messages, request.system_prompt, request.prompt_id)
    except (ConfigurationError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except LLMError as e:
        raise HTTPException(status_code=502, detail=f"AI 问答失败: {e.message}")
