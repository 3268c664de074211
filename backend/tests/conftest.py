"""Pytest configuration and fixtures."""

import os
import tempfile
from typing import AsyncGenerator

import pytest
from google.genai import types
from httpx import ASGITransport, AsyncClient

from athena.db.database import close_database, init_database
from athena.errors import ExternalServiceError
from athena.main import app


class FakeGeminiClient:
    """Stands in for GeminiClient and records every call."""

    configured = True

    def __init__(self, reply: str = "Hi! How can I help you study today?"):
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[dict] = []

    async def send_chat(
        self,
        model: str,
        history: list[types.Content],
        parts: list[types.Part],
    ) -> str:
        self.calls.append({"model": model, "history": history, "parts": parts})
        if self.error is not None:
            raise self.error
        return self.reply

    def fail_with(self, message: str = "quota exceeded") -> None:
        self.error = ExternalServiceError(message)

    @property
    def last_call(self) -> dict:
        return self.calls[-1]


@pytest.fixture(autouse=True)
async def setup_test_db():
    """Set up a test database for each test."""
    # Create a temporary database file
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    # Initialize the database
    await init_database(db_path)

    yield

    # Clean up
    await close_database()
    os.unlink(db_path)


@pytest.fixture
def auth_headers():
    """Build identity headers as set by the authenticating proxy."""

    def _headers(user_id: str = "user-1") -> dict[str, str]:
        return {"X-User-Id": user_id, "X-User-Email": f"{user_id}@example.com"}

    return _headers


@pytest.fixture
def fake_gemini() -> FakeGeminiClient:
    """A fake model client installed as the app's Gemini client."""
    fake = FakeGeminiClient()
    app.state.gemini_client = fake
    return fake


@pytest.fixture
async def client(fake_gemini: FakeGeminiClient) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
