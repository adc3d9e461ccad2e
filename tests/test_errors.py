"""Error taxonomy tests — status/code mapping and classification."""

import asyncio

import pytest

from tokengate.errors import (
    AppError,
    BadRequestError,
    ConflictError,
    FieldError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    TokenExpiredError,
    UnauthorizedError,
    ValidationError,
    classified,
)


@pytest.mark.parametrize(
    "cls,status,code",
    [
        (ValidationError, 400, "VALIDATION_ERROR"),
        (BadRequestError, 400, "BAD_REQUEST"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (TokenExpiredError, 401, "TOKEN_EXPIRED"),
        (ForbiddenError, 403, "FORBIDDEN"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
        (InternalError, 500, "INTERNAL_ERROR"),
    ],
)
def test_each_kind_has_one_status_and_code(cls, status, code):
    err = cls()
    assert err.status_code == status
    assert err.code.value == code
    assert err.to_dict()["code"] == code
    assert err.message


def test_internal_error_hides_cause():
    cause = RuntimeError("connection refused to db-primary:5432")
    err = InternalError(cause=cause)
    body = err.to_dict()
    assert err.cause is cause
    assert "db-primary" not in body["message"]
    assert "cause" not in body
    # The cause is still available to server-side logs
    assert "db-primary" in str(err)


def test_validation_details_serialized():
    err = ValidationError(
        details=[FieldError("password", "too short"), FieldError("email", "invalid")]
    )
    assert err.to_dict()["details"] == [
        {"field": "password", "message": "too short"},
        {"field": "email", "message": "invalid"},
    ]


def test_details_omitted_when_empty():
    assert "details" not in ConflictError("taken").to_dict()


def test_not_found_of():
    assert NotFoundError.of("User").message == "User not found"


@pytest.mark.asyncio
async def test_classified_passes_app_errors_through():
    with pytest.raises(ConflictError):
        async with classified():
            raise ConflictError("taken")


@pytest.mark.asyncio
async def test_classified_wraps_unexpected_errors():
    with pytest.raises(InternalError) as exc_info:
        async with classified():
            raise KeyError("boom")
    assert isinstance(exc_info.value.cause, KeyError)


@pytest.mark.asyncio
async def test_classified_timeout_becomes_internal():
    with pytest.raises(InternalError) as exc_info:
        async with classified(timeout=0.01):
            await asyncio.sleep(1)
    assert isinstance(exc_info.value.cause, TimeoutError)


@pytest.mark.asyncio
async def test_classified_no_error():
    async with classified(timeout=1):
        value = 1
    assert value == 1


def test_app_error_is_exception():
    assert issubclass(TokenExpiredError, AppError)
    assert issubclass(TokenExpiredError, Exception)
