"""Settings and logging configuration tests."""

import logging
from datetime import timedelta

import pytest
import structlog
from pydantic import ValidationError

from tokengate.config import DEFAULT_JWT_SECRET, Settings
from tokengate.logging import _redact_secrets, configure_logging


def test_env_vars_override_defaults(monkeypatch):
    monkeypatch.setenv("TOKENGATE_ACCESS_TOKEN_EXPIRE_MINUTES", "5")
    monkeypatch.setenv("TOKENGATE_REFRESH_TOKEN_EXPIRE_DAYS", "30")
    monkeypatch.setenv("TOKENGATE_STORE_BACKEND", "memory")

    s = Settings()
    assert s.access_token_ttl == timedelta(minutes=5)
    assert s.refresh_token_ttl == timedelta(days=30)
    assert s.store_backend == "memory"


def test_default_secret_refused_outside_development():
    with pytest.raises(ValidationError):
        Settings(environment="production", jwt_secret=DEFAULT_JWT_SECRET)

    s = Settings(environment="production", jwt_secret="a-real-secret-" + "x" * 40)
    assert s.environment == "production"


def test_only_hmac_algorithms():
    assert Settings(jwt_algorithm="HS512").jwt_algorithm == "HS512"
    with pytest.raises(ValidationError):
        Settings(jwt_algorithm="RS256")


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_range(rounds):
    with pytest.raises(ValidationError):
        Settings(bcrypt_rounds=rounds)


def test_unknown_store_backend():
    with pytest.raises(ValidationError):
        Settings(store_backend="redis")


def test_log_redaction():
    event = _redact_secrets(
        None,
        "info",
        {"event": "auth.login", "user_id": "u1", "password": "hunter2", "refresh_token": "abc"},
    )
    assert event["password"] == "***"
    assert event["refresh_token"] == "***"
    assert event["user_id"] == "u1"
    assert event["event"] == "auth.login"


def test_configure_logging_prints_without_stdlib_handlers():
    root = logging.getLogger()
    before = list(root.handlers)

    configure_logging(level="INFO", json_output=True)

    assert root.handlers == before
    assert isinstance(structlog.get_config()["logger_factory"], structlog.PrintLoggerFactory)
