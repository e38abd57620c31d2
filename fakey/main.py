"""
FAKEY.AI API — Application entry point.

Bootstraps FastAPI, wires up middleware and rate limiting, and registers
the route groups.

Run locally:
    uvicorn fakey.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fakey.core.config import settings
from fakey.core.rate_limit import limiter
from fakey.routes.analysis import router as analysis_router
from fakey.routes.chat import router as chat_router
from fakey.routes.generation import router as generation_router
from fakey.routes.health import router as health_router

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting FAKEY.AI API (env: %s)", settings.environment)
    yield
    logger.info("Shutting down FAKEY.AI API")


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="FAKEY.AI API",
    description=(
        "Media forensics, AI-text detection, fact checking and synthetic media "
        "generation backed by Gemini. All AI results are probabilistic, not guaranteed."
    ),
    version="0.1.0",
    lifespan=lifespan,
    # Disable docs in production to reduce attack surface
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(analysis_router)
app.include_router(generation_router)
app.include_router(chat_router)


@app.get("/", tags=["root"])
async def root():
    """API root: basic metadata."""
    return {
        "name": "FAKEY.AI API",
        "version": "0.1.0",
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
