"""
FastAPI Application Entry Point.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notedesk.backend.api import health
from notedesk.backend.api.v1 import router as api_v1_router
from notedesk.backend.core.config import get_app_config
from notedesk.backend.core.exception_handlers import register_exception_handlers
from notedesk.backend.core.logging import get_logger, setup_logging
from notedesk.backend.core.middleware import RequestContextMiddleware
from notedesk.backend.core.rate_limit import FixedWindowRateLimiter, InMemoryCounterStore

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level, format_type=app_config.logging.format)

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
            "tags_atomic_upsert": app_config.features.tags_atomic_upsert,
        },
    )
    yield

    from notedesk.backend.core.database import dispose_engine
    await dispose_engine()
    logger.info("Application shutting down")


def create_rate_limiter() -> FixedWindowRateLimiter:
    """Build the per-owner API rate limiter from security.yaml."""
    limits = get_app_config().security.rate_limiting.api
    return FixedWindowRateLimiter(
        InMemoryCounterStore(),
        max_requests=limits.requests_per_window,
        window_seconds=limits.window_seconds,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )
    app.state.rate_limiter = create_rate_limiter()

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=app_config.features.api_request_logging,
    )

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn notedesk.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
