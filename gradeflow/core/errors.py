"""
Classified errors raised by the services.

Each subclass of ``DomainError`` carries a stable ``ErrorKind`` and the HTTP
status it is rendered with, so clients can branch on ``kind`` instead of
matching message strings.
"""
import enum
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INTERNAL = "INTERNAL"


class DomainError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(DomainError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(DomainError):
    kind = ErrorKind.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(DomainError):
    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_409_CONFLICT


class ValidationFailed(DomainError):
    kind = ErrorKind.VALIDATION_FAILED
    status_code = status.HTTP_400_BAD_REQUEST


class StorageFailure(DomainError):
    kind = ErrorKind.STORAGE_FAILURE
    status_code = status.HTTP_502_BAD_GATEWAY


class Internal(DomainError):
    pass


def _error_body(kind: ErrorKind, detail) -> dict:
    return {"detail": detail, "kind": kind.value}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.kind, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(ErrorKind.VALIDATION_FAILED, errors),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(ErrorKind.INTERNAL, "Internal server error"),
        )
