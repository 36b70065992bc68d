"""
Logging configuration for MiniFlix.

This module configures structlog for JSON logging across the application.
"""

import logging
import re
from typing import Any

import structlog

from .settings import settings


def redact_secrets(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive information from log events."""
    # List of keys that contain secrets
    secret_keys = [
        "password",
        "password_hash",
        "secret",
        "session_secret",
        "cookie",
        "token",
        "database_url",
    ]

    # Patterns to redact in string values
    secret_patterns = [
        r"://[^:/]+:[^@]+@",  # URLs with credentials
        r"password=[^&\s]+",  # Password parameters
        r"session=[^;\s]+",  # Session cookies
    ]

    def redact_value(value: Any) -> Any:
        if isinstance(value, str):
            for pattern in secret_patterns:
                value = re.sub(pattern, _mask, value)
            return value
        elif isinstance(value, dict):
            return {k: redact_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [redact_value(item) for item in value]
        return value

    # Redact based on key names
    for key in list(event_dict.keys()):
        if any(secret in key.lower() for secret in secret_keys):
            event_dict[key] = "***REDACTED***"
        else:
            event_dict[key] = redact_value(event_dict[key])

    return event_dict


def _mask(match: re.Match[str]) -> str:
    text = match.group(0)
    if text.startswith("://"):
        return "://***@"
    return text.split("=")[0] + "=***"


def add_service_context(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Stamp every event with the service name and environment."""
    event_dict.setdefault("service", "miniflix")
    event_dict.setdefault("env", settings.env)
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """Configure structlog for JSON logging."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(format="%(message)s", level=getattr(logging, level_name, logging.INFO))
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_service_context,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            redact_secrets,  # Redact secrets before rendering
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger for ``name``; configuration is resolved on first use."""
    return structlog.get_logger(name)
