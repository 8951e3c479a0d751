import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from conducky.application.api.v1.errors import map_error
from conducky.application.api.v1.routes import admin, events, health, organizations
from conducky.application.di import create_container
from conducky.config import Config, configure_logging
from conducky.domain.shared.authorization.policy_set import POLICY_SET
from conducky.domain.shared.error import ConduckyError
from conducky.infrastructure.persistence.migrate import run_migrations
from conducky.infrastructure.persistence.seed import ensure_role_catalog
from conducky.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container

    engine = await container.get(AsyncEngine)
    await ensure_role_catalog(engine)

    yield

    await container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application."""
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    configure_logging(config.logging)
    logger.info(
        "Starting %s v%s (%s)",
        config.server.name,
        config.server.version,
        config.server.environment,
    )

    # Every event action must map to roles (fail fast)
    POLICY_SET.validate_coverage()

    if config.database.auto_migrate and config.database.url.startswith("sqlite"):
        run_migrations(config.database.url)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_fastapi(app_instance)

    container = create_container(config)
    setup_dishka(container, app_instance)

    app_instance.include_router(health.router, prefix="/api/v1")
    app_instance.include_router(admin.router, prefix="/api/v1")
    app_instance.include_router(events.router, prefix="/api/v1")
    app_instance.include_router(organizations.router, prefix="/api/v1")

    # Maps domain and infrastructure errors to {"error": ..., "code": ...} responses
    @app_instance.exception_handler(ConduckyError)
    async def conducky_error_handler(request: Request, exc: ConduckyError):
        http_exc = map_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
            headers=http_exc.headers,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    return app_instance
