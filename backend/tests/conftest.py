"""
Test configuration and fixtures for FitCoach.

Provides shared fixtures for unit and integration tests: an in-memory
SQLite database, a scripted completion client and an app wired to both.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncGenerator, List, Optional
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import fitcoach.infrastructure.db.models  # noqa: F401  (registers tables)
from fitcoach.infrastructure.ai.completion_client import CompletionClient, SamplingParams
from fitcoach.infrastructure.auth.session_store import InMemorySessionStore
from fitcoach.infrastructure.db.database import build_engine, build_session_factory
from fitcoach.infrastructure.db.models import User


# =============================================================================
# Fakes
# =============================================================================

class FakeCompletionClient(CompletionClient):
    """
    Scripted completion client.

    Streams `fragments` in order, then optionally raises `error` or hangs
    until cancelled. Records every upstream message list it receives.
    """

    def __init__(
        self,
        fragments: Optional[List[str]] = None,
        error: Optional[Exception] = None,
        hang: bool = False,
        complete_response: str = "{}",
    ):
        super().__init__("fake-model")
        self.fragments = list(fragments) if fragments is not None else ["Hello", ", ", "champ!"]
        self.error = error
        self.hang = hang
        self.complete_response = complete_response
        self.stream_calls: List[list] = []
        self.complete_calls: List[dict] = []
        self.closed = False

    async def stream_chat(self, messages, params: SamplingParams):
        self.stream_calls.append(messages)
        try:
            for fragment in self.fragments:
                await asyncio.sleep(0)
                yield fragment
            if self.hang:
                await asyncio.sleep(3600)
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True

    async def complete(self, messages, params: SamplingParams, json_mode: bool = False) -> str:
        self.complete_calls.append(
            {"messages": messages, "params": params, "json_mode": json_mode}
        )
        return self.complete_response


async def never_disconnected() -> bool:
    return False


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session_scope(session_factory):
    """Committing session context, same contract as get_session_context()."""

    @asynccontextmanager
    async def scope():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return scope


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


async def create_user(session_scope, username: str) -> int:
    async with session_scope() as session:
        user = User(username=username, password_hash="not-a-real-hash")
        session.add(user)
        await session.flush()
        return user.id


@pytest.fixture
async def user_id(session_scope) -> int:
    return await create_user(session_scope, "alice")


@pytest.fixture
async def other_user_id(session_scope) -> int:
    return await create_user(session_scope, "mallory")


@pytest.fixture
def tick_clock():
    """
    Deterministic clock for the chat repository: every call is one
    second after the previous one.
    """
    start = datetime(2025, 1, 1, 12, 0, 0)
    counter = {"n": 0}

    def fake_utcnow() -> datetime:
        counter["n"] += 1
        return start + timedelta(seconds=counter["n"])

    with patch(
        "fitcoach.infrastructure.db.repositories.chat_repository.utcnow",
        side_effect=fake_utcnow,
    ):
        yield fake_utcnow


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=3600)


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app(session_factory, session_scope, session_store, fake_client):
    """FastAPI application wired to the test database and fakes."""
    from fitcoach.main import app
    from fitcoach.api.dependencies import get_session_store
    from fitcoach.api.routes.chats import get_chat_stream_relay
    from fitcoach.infrastructure.ai.completion_client import get_completion_client
    from fitcoach.infrastructure.db.database import get_session
    from fitcoach.infrastructure.services.chat_stream_service import ChatStreamRelay

    async def override_get_session():
        async with session_scope() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_completion_client] = lambda: fake_client
    app.dependency_overrides[get_chat_stream_relay] = lambda: ChatStreamRelay(
        fake_client, session_factory=session_scope
    )
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Synchronous test client for endpoints that need no database."""
    from fitcoach.main import app
    return TestClient(app)


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Get async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def logged_in_client(async_client) -> AsyncClient:
    """Async client carrying a session cookie for a freshly registered user."""
    response = await async_client.post(
        "/api/register",
        json={"username": "alice", "password": "secret123"},
    )
    assert response.status_code == 201
    return async_client


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_profile():
    return {
        "age": 30,
        "gender": "male",
        "height": 180,
        "weight": 80,
        "goal": "cut",
        "experience_level": "intermediate",
        "activity_level": "moderately_active",
        "days_per_week": 4,
        "session_length": 60,
        "equipment": "full_gym",
        "injuries": "Left shoulder impingement",
        "allergies": None,
    }
