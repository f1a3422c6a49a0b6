"""Shared fixtures for the Eunoia test suite."""

import os

# 必须在导入 eunoia 之前设置：settings 在导入时读取环境变量
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["OPENAI_API_KEY"] = ""

from typing import List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eunoia.data_persistence.models import Base
from eunoia.data_persistence.repositories import (
    CheckInRepository, ConversationRepository, ReflectionRepository, UserRepository
)
from eunoia.external_services.llm_service import GenerationError, LLMProvider, LLMService


class FakeProvider(LLMProvider):
    """Records every call and returns a canned reply (or raises)."""

    def __init__(self, reply: str = "I'm here with you.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[tuple] = []

    async def generate(self, system_prompt: str, user_message: str, history: Optional[List[str]] = None) -> str:
        self.calls.append((system_prompt, user_message, list(history or [])))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def engine():
    """An isolated in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_repo(db) -> UserRepository:
    return UserRepository(db)


@pytest.fixture
def conversation_repo(db) -> ConversationRepository:
    return ConversationRepository(db)


@pytest.fixture
def check_in_repo(db) -> CheckInRepository:
    return CheckInRepository(db)


@pytest.fixture
def reflection_repo(db) -> ReflectionRepository:
    return ReflectionRepository(db)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def llm_service(fake_provider) -> LLMService:
    return LLMService(providers={"fake": fake_provider})


@pytest.fixture
def failing_llm_service() -> LLMService:
    return LLMService(providers={"fake": FakeProvider(error=GenerationError("upstream unavailable"))})


@pytest.fixture
def client(engine, llm_service):
    """TestClient bound to the per-test database and fake LLM provider."""
    from fastapi.testclient import TestClient

    from eunoia.data_persistence.database import get_db
    from eunoia.user_interaction.app import app
    from eunoia.user_interaction.dependencies import get_llm_service

    SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = SessionTesting()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_service] = lambda: llm_service
    yield TestClient(app)
    app.dependency_overrides.clear()
