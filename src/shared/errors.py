"""Translate domain and storage exceptions into HTTP responses.

Protean's FastAPI integration is installed first. The storefront then answers
the Protean exceptions it raises, request validation failures and storage
failures with its own body: an ``error`` summary plus ``details`` where there
is per-field detail. Nothing propagates far enough to take the worker down.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ProteanException, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers
from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    PriceMismatchError,
    WebhookVerificationError,
)

logger = structlog.get_logger(__name__)

# PostgreSQL serialization failure and deadlock
RETRYABLE_PGCODES = {"40001", "40P01"}
RETRYABLE_MESSAGES = ("deadlock detected", "could not serialize access", "database is locked")
RETRY_AFTER_SECONDS = 1

# Most specific first; PriceMismatchError must win over ValidationError
ERROR_RESPONSES: list[tuple[type[ProteanException], int, str]] = [
    (PriceMismatchError, 422, "Price mismatch"),
    (WebhookVerificationError, 400, "Invalid webhook"),
    (ValidationError, 400, "Invalid data"),
    (AuthenticationError, 401, "Unauthorized"),
    (AuthorizationError, 403, "Forbidden"),
    (ObjectNotFoundError, 404, "Not found"),
    (ConflictError, 409, "Conflict"),
    (InvalidOperationError, 422, "Invalid operation"),
]


def _pgcode(exc: BaseException) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_retryable(exc: BaseException) -> bool:
    """True if the failure is transient and the same request may succeed later."""
    if isinstance(exc, (OperationalError, DisconnectionError, PoolTimeoutError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if _pgcode(exc) in RETRYABLE_PGCODES:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in RETRYABLE_MESSAGES)


def _status_for(exc: ProteanException) -> tuple[int, str]:
    for exc_type, status_code, summary in ERROR_RESPONSES:
        if isinstance(exc, exc_type):
            return status_code, summary
    return 500, "Internal error"


async def domain_error_handler(request: Request, exc: ProteanException) -> JSONResponse:
    status_code, summary = _status_for(exc)
    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=status_code, content={"error": summary, "details": exc.messages})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid data", "details": jsonable_encoder(exc.errors())},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    retryable = is_retryable(exc)
    logger.error(
        "Storage failure",
        path=request.url.path,
        error_type=type(exc).__name__,
        retryable=retryable,
        exc_info=exc,
    )
    if retryable:
        return JSONResponse(
            status_code=503,
            content={"error": "Service temporarily unavailable", "retryable": True},
            headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        )
    return JSONResponse(status_code=500, content={"error": "Failed to process request", "retryable": False})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, error_type=type(exc).__name__, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "retryable": False})


def register_exception_handlers(app: FastAPI) -> None:
    """Protean's handlers first, then the storefront envelope for the errors the app raises."""
    register_protean_handlers(app)
    for exc_type, _, _ in ERROR_RESPONSES:
        app.add_exception_handler(exc_type, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
