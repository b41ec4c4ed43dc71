"""
题目管理API
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from qbank.core.database import get_db
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.services import QuestionService

router = APIRouter(tags=["题目管理"])


class OptionModel(BaseModel):
    id: str
    text: str


class QuestionRequest(BaseModel):
    """手动录入/编辑题目请求（规范形式）"""
    type: str
    content: str
    options: Optional[List[OptionModel]] = None
    answer: str = ""
    analysis: Optional[str] = None


class DeleteQuestionsRequest(BaseModel):
    ids: List[str]


class ImportQuestionsRequest(BaseModel):
    """批量导入请求：题目结构宽松，导入时统一归一化和校验"""
    questions: List[Any] = Field(default_factory=list)


def _request_to_dict(request: QuestionRequest) -> Dict[str, Any]:
    data = request.model_dump()
    if request.options is not None:
        data["options"] = [opt.model_dump() for opt in request.options]
    return data


@router.get("/banks/{bank_id}/questions", response_model=dict)
def list_questions(
    bank_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    type: Optional[str] = None,
    keyword: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    分页查询题目

    Args:
        bank_id: 题库ID
        page: 页码
        page_size: 每页数量
        type: 题型筛选
        keyword: 题干关键字
    """
    return QuestionService.list_questions(db, bank_id, page, page_size, type, keyword)


@router.post("/banks/{bank_id}/questions", response_model=dict)
def create_question(bank_id: str, request: QuestionRequest, db: Session = Depends(get_db)):
    """手动录入题目"""
    try:
        question = QuestionService.create_question(db, bank_id, _request_to_dict(request))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return question.to_dict()


@router.post("/banks/{bank_id}/questions/import", response_model=dict)
def import_questions(bank_id: str, request: ImportQuestionsRequest, db: Session = Depends(get_db)):
    """
    批量导入题目（JSON 导入、AI 解析结果确认后导入）

    Returns:
        {"success": 成功数, "failed": 失败数, "errors": [{"index", "message"}]}
    """
    try:
        return QuestionService.import_questions(db, bank_id, request.questions)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/questions/stats", response_model=dict)
def get_question_stats(bank_id: Optional[str] = None, db: Session = Depends(get_db)):
    """题目统计"""
    return QuestionService.get_stats(db, bank_id)


@router.get("/questions/{question_id}", response_model=dict)
def get_question(question_id: str, db: Session = Depends(get_db)):
    """获取题目详情"""
    question = QuestionService.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail="题目不存在")
    return question.to_dict()


@router.put("/questions/{question_id}", response_model=dict)
def update_question(question_id: str, request: QuestionRequest, db: Session = Depends(get_db)):
    """编辑题目"""
    try:
        question = QuestionService.update_question(db, question_id, _request_to_dict(request))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return question.to_dict()


@router.post("/questions/delete")
def delete_questions(request: DeleteQuestionsRequest, db: Session = Depends(get_db)):
    """批量删除题目"""
    deleted = QuestionService.delete_questions(db, request.ids)
    return {"success": True, "deleted": deleted}
