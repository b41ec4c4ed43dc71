"""
QBank 后端入口

    uvicorn qbank.main:app --reload
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# 仓库根目录的 .env 优先，其次是当前工作目录
_repo_env = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(_repo_env if _repo_env.exists() else None)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qbank import __version__
from qbank.api import ai, ai_prompts, banks, chat_history, csv_io, practice, questions, settings, stats, wrong_book
from qbank.models import init_db

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

LOCAL_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"
ROUTERS = (banks, questions, csv_io, wrong_book, practice, settings, ai, ai_prompts, chat_history, stats)


def cors_options() -> dict:
    """
    跨域设置

    ALLOWED_ORIGINS（逗号分隔）优先；DEV_MODE=true 时放行本机任意端口；
    两者都没有时不放行任何跨域请求。
    """
    origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
    if origins:
        return {"allow_origins": origins}
    if os.getenv("DEV_MODE", "false").lower() == "true":
        return {"allow_origin_regex": LOCAL_ORIGIN_REGEX}
    logger.warning("ALLOWED_ORIGINS 为空且未开启 DEV_MODE，跨域请求将被拒绝")
    return {"allow_origins": []}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()  # 已有的表保持不变
    yield


app = FastAPI(
    lifespan=lifespan,
    title="QBank API",
    description="题库管理：题目录入、CSV 导入导出、AI 解析、练习与错题本",
    version=__version__,
)

_cors = cors_options()
logger.info(f"跨域设置: {_cors}")
app.add_middleware(CORSMiddleware, allow_credentials=True, allow_methods=["*"], allow_headers=["*"], **_cors)

for module in ROUTERS:
    app.include_router(module.router, prefix="/api")


@app.get("/")
async def index():
    return {"name": "QBank API", "version": __version__, "docs": "/docs"}


@app.get("/health")
async def health():
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("qbank.main:app", host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
