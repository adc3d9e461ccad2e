"""Error taxonomy — every failure the session core can report.

Learn: A closed catalogue. Each class carries exactly one HTTP status and
one machine-readable code, so the boundary never has to guess. Services
and the auth gate raise these and nothing else; anything unexpected is
wrapped in InternalError, whose cause is kept for server-side logs only.

    ValidationError    400  VALIDATION_ERROR
    BadRequestError    400  BAD_REQUEST
    UnauthorizedError  401  UNAUTHORIZED
    TokenExpiredError  401  TOKEN_EXPIRED
    ForbiddenError     403  FORBIDDEN
    NotFoundError      404  NOT_FOUND
    ConflictError      409  CONFLICT
    InternalError      500  INTERNAL_ERROR
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Optional


class ErrorCode(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL_ERROR"


@dataclass(frozen=True)
class FieldError:
    """A single validation failure on one request field."""
    field: str
    message: str


class AppError(Exception):
    """Base class for classified errors.

    Subclasses pin status_code and code. The message is user-facing;
    cause is never serialized.
    """

    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL
    default_message: str = "An unexpected error occurred. Please try again later."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[list[FieldError]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message or self.default_message
        self.details = list(details or [])
        self.cause = cause
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"[{self.code.value}] {self.message}: {self.cause!r}"
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict:
        """Public error body — message, code and field details, never the cause."""
        body: dict = {"code": self.code.value, "message": self.message}
        if self.details:
            body["details"] = [
                {"field": d.field, "message": d.message} for d in self.details
            ]
        return body


class ValidationError(AppError):
    status_code = 400
    code = ErrorCode.VALIDATION
    default_message = "Validation failed"


class BadRequestError(AppError):
    status_code = 400
    code = ErrorCode.BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status_code = 401
    code = ErrorCode.UNAUTHORIZED
    default_message = "Unauthorized"


class TokenExpiredError(AppError):
    """Access token is past its exp claim. Kept apart from UnauthorizedError
    so clients can tell the user to log in again."""

    status_code = 401
    code = ErrorCode.TOKEN_EXPIRED
    default_message = "Access token has expired"


class ForbiddenError(AppError):
    status_code = 403
    code = ErrorCode.FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    status_code = 404
    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"

    @classmethod
    def of(cls, resource: str) -> "NotFoundError":
        return cls(f"{resource} not found")


class ConflictError(AppError):
    status_code = 409
    code = ErrorCode.CONFLICT
    default_message = "Conflict"


class InternalError(AppError):
    """Wraps anything unexpected. The message is fixed; only logs see cause."""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(cause=cause)


@asynccontextmanager
async def classified(timeout: Optional[float] = None) -> AsyncIterator[None]:
    """Let AppError through untouched, wrap everything else as InternalError.

    Learn: Used around every service operation so no raw exception
    (driver errors, bugs) can reach the caller unclassified. The optional
    timeout bounds the whole operation; hitting it raises TimeoutError,
    which is wrapped like any other failure. CancelledError is a
    BaseException and passes through.
    """
    try:
        async with asyncio.timeout(timeout):
            yield
    except AppError:
        raise
    except Exception as exc:
        raise InternalError(cause=exc) from exc


__all__ = [
    "AppError",
    "BadRequestError",
    "ConflictError",
    "ErrorCode",
    "FieldError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "TokenExpiredError",
    "UnauthorizedError",
    "ValidationError",
    "classified",
]
