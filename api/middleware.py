"""
Consolidated middleware for the DailyDiet API
"""

import time
import logging
from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import AppError

logger = logging.getLogger("dailydiet.middleware")

# Request parts that are noise in a field message
_LOCATION_PREFIXES = {"body", "path", "query", "cookie", "header"}


# ============================================================================
# Helper Functions
# ============================================================================


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_body(code: str, message: str, details: List[str] = None) -> dict:
    """Envelope shared by every error response"""
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error, "timestamp": _timestamp()}


def _caller(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    return str(user_id) if user_id is not None else "-"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def format_validation_errors(errors) -> List[str]:
    """Turn pydantic error dicts into human-readable field messages"""
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES]
        msg = err.get("msg", "Invalid value")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request with its outcome and the caller it resolved to.

    The session gate stores the caller on ``request.state.user_id``; requests
    rejected before that point are logged as ``user_id=-``.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                f"request_failed request_id={request_id} method={request.method} "
                f"path={request.url.path} user_id={_caller(request)} "
                f"duration_ms={_elapsed_ms(started)}"
            )
            raise

        elapsed = _elapsed_ms(started)
        logger.info(
            f"request_completed request_id={request_id} method={request.method} "
            f"path={request.url.path} status={response.status_code} "
            f"user_id={_caller(request)} duration_ms={elapsed}"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed / 1000:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body / path validation errors"""
    details = format_validation_errors(exc.errors())
    logger.warning(f"Validation error on {request.url.path}: {details}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", "Validation error", details),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def app_exception_handler(request: Request, exc: AppError):
    """Handle domain errors (validation, duplicate user, unauthorized, not found)"""
    logger.warning(
        f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc}"
    )

    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(exc.code, exc.message, exc.details),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            "INTERNAL_SERVER_ERROR", "An error occurred while processing your request"
        ),
    )
