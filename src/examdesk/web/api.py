"""FastAPI application factory.

Main entry point for the examdesk Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examdesk import __version__
from examdesk.config.app_config import AppConfig, load_app_config
from examdesk.db.database import init_db
from examdesk.web.error_handlers import register_error_handlers
from examdesk.web.routes import (
    auth_router,
    banks_router,
    categories_router,
    health_router,
    questions_router,
    reports_router,
    results_router,
    subjects_router,
    tests_router,
    users_router,
)

logger = structlog.get_logger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use; loaded from file/environment when omitted

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for startup/shutdown events."""
        init_db(config.database.path)
        logger.info(
            "api_startup",
            db_path=str(config.database.path.absolute()),
            report_mode=config.reports.mode,
            cors_origins=config.server.cors_origins,
        )
        yield

    app = FastAPI(
        title="examdesk API",
        description="REST API for school tests: users, question banks, tests, results and reports",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config

    origins = config.server.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(categories_router)
    app.include_router(subjects_router)
    app.include_router(banks_router)
    app.include_router(questions_router)
    app.include_router(tests_router)
    app.include_router(results_router)
    app.include_router(reports_router)

    return app


# Default app instance for uvicorn
app = create_app()
