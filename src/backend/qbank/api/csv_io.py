"""
CSV 导入导出API

上传内容以文本形式放在 JSON 请求体中（前端读取文件后提交）。
"""
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from qbank.core.database import get_db
from qbank.core.exceptions import NotFoundError, ValidationError
from qbank.services import BankService, CsvService

router = APIRouter(prefix="/csv", tags=["CSV导入导出"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


class CsvContentRequest(BaseModel):
    """CSV 文本（可带 BOM）"""
    content: str


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.get("/template")
def download_template():
    """下载 CSV 导入模板"""
    return _csv_response(CsvService.render_template(), "题目导入模板.csv")


@router.post("/parse", response_model=dict)
def parse_csv(request: CsvContentRequest):
    """
    解析 CSV（只校验不入库，用于导入前预览）

    Returns:
        {"valid": [...], "errors": [{"row", "field", "message"}], "totalRows": N}
    """
    return CsvService.parse_text(request.content).to_dict()


@router.post("/import/{bank_id}", response_model=dict)
def import_csv(bank_id: str, request: CsvContentRequest, db: Session = Depends(get_db)):
    """解析 CSV 并导入有效行"""
    try:
        return CsvService.import_text(db, bank_id, request.content)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail={"message": e.message, "errors": e.errors})
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/export/{bank_id}")
def export_csv(bank_id: str, db: Session = Depends(get_db)):
    """导出题库为 CSV"""
    try:
        content = CsvService.export_bank(db, bank_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    bank = BankService.get_bank(db, bank_id)
    return _csv_response(content, f"{bank.name}.csv")
