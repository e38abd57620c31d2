"""
Health check endpoint.

Used by container health checks, load balancers and the web client to check
API connectivity. Also reports whether Gemini calls are live or mocked, so a
deployment that silently fell back to mock mode (missing key) is visible.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from fakey.ai.gemini_client import gemini_client
from fakey.core.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    ai_mode: str  # "mock" | "real"
    environment: str


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        ai_mode="mock" if gemini_client.mock_mode else "real",
        environment=settings.environment,
    )
