"""
Team Form Analytics - FastAPI Application

Main entry point for the backend API.
This module configures the FastAPI app, middleware, and routes.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.dependencies import Container
from src.api.errors import http_exception_handler
from src.api.routes import auth, me, teams
from src.application.dtos.dtos import HealthResponseDTO, ErrorResponseDTO
from src.core.config import Settings
from src.utils.time_utils import get_current_time


# Log timestamps in UTC regardless of the host timezone
class UTCFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        ct = get_current_time()
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            t = ct.strftime("%Y-%m-%d %H:%M:%S")
            s = "%s,%03d" % (t, record.msecs)
        return s


def configure_logging(level: str = "INFO") -> None:
    formatter = UTCFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


logger = logging.getLogger(__name__)


# Application metadata
APP_TITLE = "Team Form Analytics"
APP_DESCRIPTION = """
**Team form analytics API**

Form, rolling trends and upcoming-fixture difficulty computed on read from
stored match results.

## Features

* **Form** - W/D/L sequence, points per game, goals and a recent-vs-baseline rating
* **Trends** - Rolling per-match averages over a sliding window
* **Fixture difficulty** - Opponent strength of the next fixtures, adjusted for venue
* **Accounts** - Access tokens with rotating refresh sessions, favorite teams
"""
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    container: Container = app.state.container
    logger.info(f"Starting {APP_TITLE} v{APP_VERSION} ({container.settings.environment})")
    container.db_service.create_tables()

    yield

    logger.info("Shutting down...")
    container.db_service.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings; read from the environment when omitted
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.container = Container.build(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponseDTO(
                error="internal_server_error",
                message="An unexpected error occurred",
                details={"path": str(request.url)},
            ).model_dump(),
        )

    @app.get(
        "/api/health",
        response_model=HealthResponseDTO,
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and its database reachable.",
    )
    def health_check() -> HealthResponseDTO:
        database_ok = app.state.container.db_service.ping()
        return HealthResponseDTO(
            status="healthy" if database_ok else "degraded",
            version=APP_VERSION,
            database=database_ok,
            timestamp=get_current_time(),
        )

    @app.get(
        "/",
        tags=["Root"],
        summary="API Information",
        description="Get basic API information and links.",
    )
    async def root():
        """Root endpoint with API info."""
        return {
            "name": APP_TITLE,
            "version": APP_VERSION,
            "documentation": "/docs",
            "health": "/api/health",
            "endpoints": {
                "auth": "/api/auth",
                "teams": "/api/teams",
                "me": "/api/me",
            },
        }

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(teams.router, prefix="/api/teams", tags=["Teams"])
    app.include_router(me.router, prefix="/api/me", tags=["Me"])

    return app


if __name__ == "__main__":
    import uvicorn
    settings = Settings.from_env()
    uvicorn.run(
        "src.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
    )
