"""Exception handlers for the FastAPI application.

Every error leaves the API in the same envelope::

    {"success": false, "error": {"message", "status", "details"}, "timestamp"}
"""

import traceback
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1.schemas.common import validation_details
from core.config import settings
from core.exceptions import AppException, ErrorCode, ServiceUnavailableError
from core.timestamps import utc_now_z
from infrastructure.database.repositories.sqlalchemy_document_repo import STORE_ERRORS

logger = structlog.get_logger()


def error_response(status_code: int, message: str, details: Any | None = None) -> JSONResponse:
    """Build a response in the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "message": message,
                "status": status_code,
                "details": details,
            },
            "timestamp": utc_now_z(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        if isinstance(exc, ServiceUnavailableError):
            logger.error(
                "service_unavailable",
                error_code=exc.error_code.value,
                reason=exc.reason,
            )
        else:
            logger.warning(
                "app_exception",
                error_code=exc.error_code.value,
                message=exc.message,
            )
        return error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions from FastAPI/Starlette.

        Unknown routes and unsupported methods both answer 404.
        """
        if exc.status_code in (404, 405):
            logger.info(
                "route_not_found",
                error_code=ErrorCode.ROUTE_NOT_FOUND.value,
                method=request.method,
                path=request.url.path,
            )
            return error_response(404, f"Route {request.method} {request.url.path} not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.info("validation_error", errors=exc.errors())
        return error_response(400, "Invalid request parameters", validation_details(exc.errors()))

    async def database_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle driver and connection errors that escaped the repository layer."""
        unavailable = ServiceUnavailableError(reason=str(exc))
        logger.error(
            "service_unavailable",
            error_code=unavailable.error_code.value,
            reason=unavailable.reason,
        )
        return error_response(unavailable.status_code, unavailable.message, unavailable.details)

    for store_error in STORE_ERRORS:
        app.add_exception_handler(store_error, database_exception_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        message = str(exc) or "Internal server error"
        details: Any = "An unexpected error occurred"
        if not settings.is_production:
            details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        return error_response(500, message, details)
