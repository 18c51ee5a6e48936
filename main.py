"""
DailyDiet FastAPI Application
Main entry point: application factory, lifespan, middleware and routers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import users, meals, health

from domain.models import create_db_engine, create_session_factory, init_database

from app.config import settings as default_settings, Settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    app_exception_handler,
    general_exception_handler,
)
from app.exceptions import AppError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper()),
    format=default_settings.log_format,
)
_logger = logging.getLogger("dailydiet.main")


def _make_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open the storage handle once at startup and dispose it on shutdown.
        Schema creation is retried while the database comes up.
        """
        _logger.info(f"Starting {settings.app_name} in {settings.environment.value} mode")

        engine = create_db_engine(settings.database_url, echo=settings.db_echo)

        for attempt in range(1, settings.db_init_attempts + 1):
            try:
                # Run blocking init in a thread to avoid blocking the event loop
                await anyio.to_thread.run_sync(init_database, engine)
                _logger.info("Database initialization succeeded")
                break
            except Exception as exc:
                _logger.warning(
                    "Database init attempt %d/%d failed: %s",
                    attempt,
                    settings.db_init_attempts,
                    exc,
                )
                if attempt < settings.db_init_attempts:
                    await anyio.sleep(settings.db_init_delay_sec)
                else:
                    _logger.error(
                        "Database initialization failed after %d attempts", attempt
                    )
                    engine.dispose()
                    raise

        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)

        try:
            yield
        finally:
            _logger.info(f"Shutting down {settings.app_name}")
            app.state.session_factory = None
            app.state.engine = None
            engine.dispose()
            _logger.info("Database engine disposed")

    return lifespan


def create_app(settings: Settings = default_settings) -> FastAPI:
    """Build the FastAPI application for ``settings``."""
    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=_make_lifespan(settings),
        debug=settings.debug,
        openapi_url=(
            f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
        ),
        docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
        redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(users.router, prefix=settings.api_prefix)
    app.include_router(meals.router, prefix=settings.api_prefix)
    app.include_router(health.router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.is_development(),
        log_level=default_settings.log_level.lower(),
    )
