"""
Domain errors of the content store and their HTTP mapping.

The services raise these; ``register_exception_handlers`` turns them into
JSON envelopes ``{code, message, details?}`` so endpoints stay free of
try/except plumbing.

    AuthenticationError     401  missing, invalid or expired bearer token
    PermissionDeniedError   403  authenticated but not an admin
    ValidationError         422  payload rejected before any write
    PayloadTooLargeError    413  value over MAX_VALUE_KB
    NotFoundError           404  expected outcome, not a failure
    ConflictError           409  expectedVersion mismatch
    InvalidTransitionError  409  named lifecycle action not allowed
    StorageError            503  persistence failed, nothing applied
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class ContentStoreError(Exception):
    """Base class for every content store error."""

    status_code: int = 500
    default_code: str = "CONTENT_ERROR"
    headers: Optional[Dict[str, str]] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}


class ValidationError(ContentStoreError):
    """Missing/empty required field, bad status or inconsistent flags."""

    status_code = 422
    default_code = "VALIDATION_ERROR"

    def __init__(self, errors: List[Dict[str, str]], message: str = "validation failed") -> None:
        super().__init__(message, details={"errors": errors})
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])


class NotFoundError(ContentStoreError):
    status_code = 404
    default_code = "NOT_FOUND"


class AuthenticationError(ContentStoreError):
    status_code = 401
    default_code = "UNAUTHORIZED"
    headers = {"WWW-Authenticate": "Bearer"}


class PermissionDeniedError(ContentStoreError):
    status_code = 403
    default_code = "FORBIDDEN"


class PayloadTooLargeError(ContentStoreError):
    status_code = 413
    default_code = "PAYLOAD_TOO_LARGE"


class ConflictError(ContentStoreError):
    status_code = 409
    default_code = "VERSION_CONFLICT"


class InvalidTransitionError(ContentStoreError):
    status_code = 409
    default_code = "INVALID_TRANSITION"


class StorageError(ContentStoreError):
    """The backing store rejected or could not complete the write."""

    status_code = 503
    default_code = "STORAGE_ERROR"


def _envelope(exc: ContentStoreError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": exc.code, "message": exc.message}
    if exc.details:
        body["details"] = exc.details
    return body


async def _content_error_handler(request: Request, exc: ContentStoreError) -> JSONResponse:
    if isinstance(exc, StorageError):
        log.error("storage failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_envelope(exc), headers=exc.headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # loc = ("body", "value") / ("query", "key")
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "invalid")})
    return JSONResponse(
        status_code=422,
        content=_envelope(ValidationError(errors)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContentStoreError, _content_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
