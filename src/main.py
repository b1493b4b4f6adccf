"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()

API_DESCRIPTION = (
    "## Member Directory\n\n"
    "Read-only API over the members collection.\n\n"
    "### Features\n"
    "- **Filtering**: by active flag and by case-insensitive name prefix\n"
    "- **Sorting**: by join date, last activity, first/last name or email\n"
    "- **Pagination**: limit/offset with total count and `hasMore`\n\n"
    "### Errors\n"
    "Every error uses the same envelope: "
    "`{success: false, error: {message, status, details}, timestamp}`.\n\n"
    "### Rate Limits\n"
    f"- {settings.rate_limit} per client IP"
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Release pooled store connections on shutdown."""
    logger.info(
        "app_starting",
        environment=settings.app_env,
        collection=settings.members_collection,
    )
    yield
    await engine.dispose()
    logger.info("app_stopped")


def _add_middleware(app: FastAPI) -> None:
    """Install the middleware stack.

    Starlette runs middleware in reverse order of registration, so CORS
    (added last) sees the request first and request IDs are assigned before
    logging and security headers run.
    """
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Only bodies over 1KB are worth compressing
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Read-only API: browsers may only GET, preflights are cached for a day
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=API_DESCRIPTION,
        version="1.0.0",
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Liveness and store connectivity"},
            {"name": "members", "description": "Member directory listing"},
        ],
    )

    _add_middleware(app)

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
