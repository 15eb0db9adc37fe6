"""
Exam Prep Companion API

FastAPI application wiring: logging, CORS, error handling, rate limiting,
database lifecycle and routers.

Run:
    uvicorn examprep.main:app --reload --app-dir backend
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examprep.config import settings, setup_logging
from examprep.db import close_db, init_db
from examprep.middleware import setup_error_handling, setup_rate_limiting
from examprep.routers import (
    health_router,
    notes_router,
    streak_router,
    study_router,
    tracking_router,
    users_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup, release the pool on shutdown."""
    await init_db()
    logger.info(f"{settings.APP_NAME} started")
    yield
    await close_db()
    logger.info(f"{settings.APP_NAME} stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    setup_logging(settings.DEBUG)

    app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_error_handling(app, debug=settings.DEBUG)
    setup_rate_limiting(app, enabled=settings.RATE_LIMIT_ENABLED)

    for module in (
        health_router,
        tracking_router,
        streak_router,
        notes_router,
        study_router,
        users_router,
    ):
        app.include_router(module.router)

    @app.get("/")
    async def root():
        return {"message": f"{settings.APP_NAME} API"}

    return app


app = create_app()
