"""Error kinds raised by the core and their HTTP mapping."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for every error the core reports to its callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.detail, "code": self.code}


class ValidationError(ServiceError):
    """Malformed or missing input, with per-field messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_detail = "Validation failed"

    def __init__(
        self, detail: str | None = None, errors: list[dict[str, str]] | None = None
    ) -> None:
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(message, errors=[{"field": field, "message": message}])

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "errors": self.errors}


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_detail = "Record already exists"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Record not found"


class Unauthorized(ServiceError):
    """Missing, invalid or stale credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    reason = "unauthorized"
    default_detail = "Not authenticated"

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "reason": self.reason}


class MissingToken(Unauthorized):
    reason = "missing_token"
    default_detail = "Access token not provided"


class InvalidCredentials(Unauthorized):
    reason = "invalid_credentials"
    default_detail = "Invalid username or password"


class InvalidToken(Unauthorized):
    reason = "invalid_token"
    default_detail = "Invalid token"


class TokenExpired(InvalidToken):
    reason = "expired"
    default_detail = "Token expired"


class MalformedToken(InvalidToken):
    reason = "malformed"
    default_detail = "Malformed token"


class SignatureMismatch(InvalidToken):
    reason = "signature_mismatch"
    default_detail = "Token signature mismatch"


class UserNotFound(Unauthorized):
    reason = "user_not_found"
    default_detail = "User not found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Forbidden"


class StoreError(ServiceError):
    code = "store_error"
    default_detail = "Internal storage error"


def _service_error_response(exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    return _service_error_response(exc)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return _service_error_response(ValidationError(errors=errors))


async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "store failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return _service_error_response(StoreError())


def register_exception_handlers(app: FastAPI) -> None:
    """Map every error kind to its stable HTTP status and JSON body."""

    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)
