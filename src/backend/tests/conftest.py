"""
Pytest 配置和通用 Fixtures

提供内存 SQLite 会话、测试题库、假 LLM 客户端和 API 测试客户端
"""
import os
import sys

# 必须在导入 qbank 之前设置，避免测试创建本地数据库文件
os.environ.setdefault("DATABASE_URL", "sqlite://")

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from typing import Dict, List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from qbank.llm import Completion, LLMClient, LLMError, reset_llm_client, set_llm_client
from qbank.models import Base


# ==================== 数据库 ====================

@pytest.fixture
def db_session():
    """每个测试独立的内存数据库"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def bank(db_session):
    """测试题库"""
    from qbank.services import BankService
    return BankService.create_bank(db_session, "Python 基础", "测试用题库")


# ==================== 测试数据 ====================

@pytest.fixture
def single_question() -> Dict:
    return {
        "type": "single",
        "content": "以下哪个是Python的不可变类型？",
        "options": [
            {"id": "A", "text": "tuple"},
            {"id": "B", "text": "list"},
            {"id": "C", "text": "dict"},
        ],
        "answer": "A",
        "analysis": "元组创建后不能修改",
    }


@pytest.fixture
def multiple_question() -> Dict:
    return {
        "type": "multiple",
        "content": "以下哪些是Python的Web框架？",
        "options": [
            {"id": "A", "text": "Django"},
            {"id": "B", "text": "Flask"},
            {"id": "C", "text": "NumPy"},
            {"id": "D", "text": "FastAPI"},
        ],
        "answer": "A|B|D",
    }


@pytest.fixture
def fill_question() -> Dict:
    return {
        "type": "fill",
        "content": "HTML的全称是___，CSS的全称是___。",
        "answer": "HyperText Markup Language|Cascading Style Sheets",
    }


# ==================== Mock LLM ====================

class MockLLMClient(LLMClient):
    """假 LLM 客户端：返回预设回复并记录每次请求"""

    def __init__(self, reply: str = "", error: Optional[Exception] = None, finish_reason: str = "stop"):
        self.reply = reply
        self.error = error
        self.finish_reason = finish_reason
        self.calls: List[Dict] = []

    async def complete(self, messages, *, temperature=None, max_tokens=None, **params) -> Completion:
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error:
            raise LLMError("请求模型失败", cause=self.error)
        return Completion(text=self.reply, model=self.model, finish_reason=self.finish_reason)

    @property
    def model(self) -> str:
        return "mock-model"


@pytest.fixture
def mock_llm():
    """注入假 LLM 客户端，测试结束后恢复"""
    client = MockLLMClient()
    set_llm_client(client)
    yield client
    reset_llm_client()


@pytest.fixture
def api_key(db_session, monkeypatch):
    """配置 API Key（写入设置表）"""
    from qbank.services import SettingsService
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    SettingsService.set_api_config(db_session, {"api_key": "sk-test", "model_id": "test-model"})
    return "sk-test"


# ==================== API 客户端 ====================

@pytest.fixture
def client(db_session):
    """API 测试客户端（共享测试数据库会话）"""
    from fastapi.testclient import TestClient
    from qbank.core.database import get_db
    from qbank.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
