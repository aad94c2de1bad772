import uuid
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.utils.exceptions import (
    AppException,
    BusinessRuleViolationException,
    ConflictException,
    ExternalServiceException,
    NotFoundException,
    RateLimitException,
    UnauthorizedException,
)
from backend.utils.logger import get_logger

logger = get_logger("errors")

RATE_LIMIT = 100

# Order matters: the first matching class wins
STATUS_AND_TITLE = [
    (NotFoundException, 404, "Resource Not Found"),
    (UnauthorizedException, 401, "Unauthorized Access"),
    (ConflictException, 409, "Conflict"),
    (BusinessRuleViolationException, 400, "Business Rule Violation"),
    (RateLimitException, 429, "Rate Limit Exceeded"),
    (ExternalServiceException, 503, "Service Unavailable"),
]


def _trace_id(request: Request) -> str:
    return request.headers.get("x-request-id") or uuid.uuid4().hex


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _status_and_title(exc: AppException):
    for exc_class, status_code, title in STATUS_AND_TITLE:
        if isinstance(exc, exc_class):
            return status_code, title
    return 400, "Bad Request"


def app_exception_response(request: Request, exc: AppException) -> JSONResponse:
    status_code, title = _status_and_title(exc)
    body = {
        "type": exc.error_code.lower(),
        "title": title,
        "status": status_code,
        "detail": exc.user_message,
        "context": exc.context,
        "timestamp": _timestamp(),
        "traceId": _trace_id(request),
    }

    headers = None
    if isinstance(exc, RateLimitException):
        reset_at = datetime.now(timezone.utc) + timedelta(seconds=exc.retry_after_seconds)
        headers = {
            "Retry-After": str(exc.retry_after_seconds),
            "X-RateLimit-Limit": str(RATE_LIMIT),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(int(reset_at.timestamp())),
        }

    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def handle_app_exception(request: Request, exc: AppException):
    logger.warning(f"Business logic error occurred: {exc.error_code} - {exc.user_message} | {request.method} {request.url.path}")
    return app_exception_response(request, exc)


def _field_name(loc) -> str:
    # loc looks like ("body", "amount") or ("query", "pageSize")
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def handle_validation_exception(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(_field_name(error.get("loc", ())), []).append(message)

    logger.warning(f"Validation error occurred: {errors}")
    return JSONResponse(
        status_code=400,
        content={
            "type": "validation_error",
            "title": "Validation Error",
            "status": 400,
            "detail": "One or more validation errors occurred.",
            "errors": errors,
            "timestamp": _timestamp(),
            "traceId": _trace_id(request),
        },
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": "http_error",
            "title": "HTTP Error",
            "status": exc.status_code,
            "detail": exc.detail,
            "timestamp": _timestamp(),
            "traceId": _trace_id(request),
        },
        headers=getattr(exc, "headers", None),
    )


async def handle_timeout_exception(request: Request, exc: TimeoutError):
    logger.warning(f"Request timed out: {request.method} {request.url.path} | {exc}")
    return JSONResponse(
        status_code=408,
        content={
            "type": "request_timeout",
            "title": "Request Timeout",
            "status": 408,
            "detail": "The operation timed out. Please try again.",
            "timestamp": _timestamp(),
            "traceId": _trace_id(request),
        },
    )


async def handle_unexpected_exception(request: Request, exc: Exception):
    correlation_id = uuid.uuid4().hex
    logger.error(
        f"An unhandled exception occurred. CorrelationId: {correlation_id} | Path: {request.url.path} | Method: {request.method}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "type": "server_error",
            "title": "Internal Server Error",
            "status": 500,
            "detail": "An unexpected error occurred. Please try again later.",
            "correlationId": correlation_id,
            "timestamp": _timestamp(),
            "traceId": _trace_id(request),
        },
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppException, handle_app_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(TimeoutError, handle_timeout_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)
