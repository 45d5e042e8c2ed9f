"""
AgroStudy FastAPI Application Entry Point.

Run with: uvicorn agrostudy.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agrostudy.api.routes import (
    assistant,
    auth,
    events,
    grades,
    notes,
    pdfs,
    semesters,
    setup,
    subjects,
    visits,
)
from agrostudy.config import get_settings
from agrostudy.db.session import dispose_engine

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    logger.info(
        "Starting %s (gateway=%s, storage=%s, assistant=%s)",
        settings.app_name,
        settings.gateway_backend,
        settings.storage_backend,
        settings.suggestion_backend,
    )
    yield
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Student productivity API for agricultural sciences",
    version="0.1.0",
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
app.include_router(setup.router)
app.include_router(semesters.router)
app.include_router(subjects.router)
app.include_router(notes.router)
app.include_router(events.router)
app.include_router(visits.router)
app.include_router(pdfs.router)
app.include_router(grades.router)
app.include_router(assistant.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
