"""
Personal Happiness Assistant FastAPI Application Entry Point.

Run with: uvicorn happiness.main:app --reload

The OpenAPI document is served at /openapi.json and the explorer at /docs.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from happiness.config import get_settings
from happiness.api.routes import auth, entries, profile

settings = get_settings()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    # Startup
    _setup_logging(settings.log_level)
    yield
    # Shutdown


app = FastAPI(
    title=settings.app_name,
    description="Journal entries with personalized well-being advice",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(entries.router)
app.include_router(profile.router)


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Service banner."""
    return settings.app_name


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
