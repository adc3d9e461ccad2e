"""structlog configuration.

Learn: Every module does `logger = structlog.get_logger()` and logs dotted
event names with keyword context. This module decides how those events
are rendered: pretty console output in development, one JSON object per
line otherwise. Request IDs bound by the middleware are merged in from
contextvars.

Secrets never belong in log calls, but a redaction processor masks any
key that looks like one in case somebody slips.
"""

import logging
from typing import Any

import structlog

_SENSITIVE_KEYS = ("password", "secret", "token", "authorization")


def _redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    for key in list(event_dict):
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            event_dict[key] = "***"
    return event_dict


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog. Events are printed to stdout, filtered by level."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
