"""
app/core/errors.py

Purpose: Map exceptions onto the ErrorResponse envelope

Domain errors keep their own code and status; framework errors become
HTTP_ERROR / VALIDATION_ERROR; anything else is a generic INTERNAL_ERROR.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import FleetLedgerError, UnauthenticatedError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


def error_response(
    status_code: int,
    error: str,
    code: str,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    body = ErrorResponse(error=error, code=code, details=jsonable_encoder(details))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(FleetLedgerError)
    async def fleetledger_exception_handler(request: Request, exc: FleetLedgerError):
        # 5xx domain errors come from upstream providers
        log = logger.warning if exc.status_code >= 500 else logger.info
        log(
            f"{exc.code}: {exc.message}",
            extra={"method": request.method, "path": request.url.path}
        )

        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        return error_response(exc.status_code, exc.message, exc.code, exc.details, headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            exc.status_code,
            str(exc.detail),
            "HTTP_ERROR",
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Request bodies and query parameters that fail schema validation."""
        return error_response(422, "Input validation failed", "VALIDATION_ERROR", exc.errors())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = INTERNAL_ERROR_MESSAGE if settings.is_production else str(exc)
        return error_response(500, message, "INTERNAL_ERROR")
