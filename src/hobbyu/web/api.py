"""FastAPI application factory.

Main entry point for the Hobby University Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hobbyu.config.app_config import AppConfig, load_app_config
from hobbyu.config.catalog import load_catalog
from hobbyu.db.database import init_db
from hobbyu.web.routes import (
    certificate_router,
    health_router,
    learners_router,
    lessons_router,
    progress_router,
)

logger = structlog.get_logger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application config. Loaded from the data directory if None.

    Returns:
        Configured FastAPI app instance
    """
    if config is None:
        config = load_app_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for startup/shutdown events."""
        logger.info(
            "api_startup",
            db_path=str(config.db_path.absolute()),
            trial_length_days=config.trial.length_days,
        )
        yield

    app = FastAPI(
        title="Hobby University API",
        description="Learner progress, daily lessons and certificates",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.db = init_db(config.db_path)
    app.state.catalog = load_catalog(config.catalog_path)

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(learners_router)
    app.include_router(progress_router)
    app.include_router(lessons_router)
    app.include_router(certificate_router)

    return app
