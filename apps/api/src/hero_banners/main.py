"""
Hometown Hero Banners API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Redis connection (rate limiting)
- CORS middleware
- API routing
- Health check endpoints

Run with:
    uvicorn hero_banners.main:app --host 0.0.0.0 --port 8080
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hero_banners import __version__
from hero_banners.api import api_router
from hero_banners.core.config import settings
from hero_banners.core.redis import close_redis, init_redis

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Connects Redis on startup and closes it on shutdown. Without Redis the
    rate limiter falls back to per-process memory, which is only acceptable
    outside production.
    """
    print(f"Starting Hometown Hero Banners API in {settings.python_env} mode...")

    try:
        await init_redis()
        print("[OK] Redis connected")
    except Exception as e:
        print(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise

    if not settings.action_link_secret:
        print("[WARN] ACTION_LINK_SECRET not set - review links are disabled")
    if not settings.resend_api_key:
        print("[WARN] RESEND_API_KEY not set - emails will be logged, not sent")

    yield

    print("Shutting down Hometown Hero Banners API...")
    await close_redis()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="Hometown Hero Banners API",
    description="Hometown Hero Banner Program submission and review service",
    version=__version__,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the Hometown Hero Banners API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}
