"""TrialEngage API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TrialEngageError → {"success": false, "error": {...}}
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; main only wires things together
    - Logos mounted only when the directory exists (optional in dev/test)
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from trialengage.api.error_handlers import register_error_handlers
from trialengage.api.routes import (
    auth, backup, clinical_trials, companies, documents, enrollments, health,
    hospitals, news,
)
from trialengage.config import get_settings
from trialengage.infrastructure.database import get_db_manager, init_db
from trialengage.infrastructure.observability import (
    RequestLoggingMiddleware, setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(settings)
    logger.info("TrialEngage API started")
    yield
    manager = get_db_manager()
    if manager:
        await manager.dispose()
    logger.info("TrialEngage API shutting down")


app = FastAPI(
    title="TrialEngage API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware, slow_request_ms=settings.slow_request_ms)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(companies.router)
app.include_router(news.router)
app.include_router(hospitals.router)
app.include_router(clinical_trials.router)
app.include_router(enrollments.router)
app.include_router(documents.router)
app.include_router(backup.router)

if os.path.isdir(settings.logos_dir):
    app.mount("/logos", StaticFiles(directory=settings.logos_dir), name="logos")

register_error_handlers(app)
