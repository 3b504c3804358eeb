"""Ruby Tutor API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RubyError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py: one registration call here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ruby_tutor.api.error_handlers import register_error_handlers
from ruby_tutor.api.routes import (
    code_artifacts,
    conversations,
    generation,
    goal_setting,
    health,
    planning,
    projects,
    users,
    weekly_plans,
)
from ruby_tutor.config import get_settings
from ruby_tutor.infrastructure import database
from ruby_tutor.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Ruby Tutor API started")
    yield
    logger.info("Ruby Tutor API shutting down")
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="Ruby Tutor API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(users.router)
app.include_router(generation.router)
app.include_router(projects.router)
app.include_router(planning.router)
app.include_router(weekly_plans.router)
app.include_router(conversations.router)
app.include_router(code_artifacts.router)
app.include_router(goal_setting.router)

register_error_handlers(app)
