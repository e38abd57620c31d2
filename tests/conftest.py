"""
pytest configuration and shared fixtures for the FAKEY.AI API tests.

Tests never need a Gemini API key:
  1. AI_MOCK_MODE=true is set before any fakey module is imported, so the
     GeminiClient singleton returns canned responses.
  2. Unit tests of the service layer pass a MagicMock(spec=GeminiClient)
     and script its replies.
  3. Rate-limit counters are reset before each test so route tests that
     share an IP never see a 429 they didn't ask for.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from fakey.core.rate_limit import limiter

    limiter.reset()
    yield


@pytest.fixture()
async def client():
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from fakey.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
