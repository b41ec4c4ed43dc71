"""
问答提示词API
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List

from qbank.core.database import get_db
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.services import PromptService

router = APIRouter(prefix="/prompts", tags=["AI"])


class PromptRequest(BaseModel):
    name: str
    content: str


@router.get("", response_model=List[dict])
def get_prompts(db: Session = Depends(get_db)):
    """所有提示词（默认提示词排最前）"""
    return [p.to_dict() for p in PromptService.get_all_prompts(db)]


@router.get("/{prompt_id}", response_model=dict)
def get_prompt(prompt_id: str, db: Session = Depends(get_db)):
    prompt = PromptService.get_prompt(db, prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt 不存在")
    return prompt.to_dict()


@router.post("", response_model=dict)
def create_prompt(request: PromptRequest, db: Session = Depends(get_db)):
    try:
        return PromptService.create_prompt(db, request.name, request.content).to_dict()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.put("/{prompt_id}", response_model=dict)
def update_prompt(prompt_id: str, request: PromptRequest, db: Session = Depends(get_db)):
    try:
        return PromptService.update_prompt(db, prompt_id, request.name, request.content).to_dict()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{prompt_id}")
def delete_prompt(prompt_id: str, db: Session = Depends(get_db)):
    """删除提示词（默认提示词不能删除）"""
    try:
        PromptService.delete_prompt(db, prompt_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return {"success": True}
