"""Logging helpers for registry-auth.

Every module logs through ``get_logger`` so that a single call to
``configure_logging`` controls the whole package. Credentials pass through
these loggers, so context fields that name a secret are masked on output.
"""

import logging
import sys
from typing import Any

ROOT_LOGGER = "registry_auth"

PLAIN_FORMAT = "%(levelname)s: %(message)s"
STRUCTURED_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Context keys whose values must never reach a log line
SENSITIVE_FIELDS = frozenset({"password", "secret", "token", "identity_token", "auth"})


def redact(value: str | None, visible: int = 4) -> str:
    """Mask a secret, keeping only a short prefix for correlation.

    Values too short to spare a prefix are masked entirely.
    """
    if not value:
        return "<none>"
    if len(value) <= visible * 2:
        return "****"
    return f"{value[:visible]}****"


def _render_field(key: str, value: Any) -> str:
    if key in SENSITIVE_FIELDS:
        value = redact(None if value is None else str(value))
    return f"{key}={value}"


class StructuredFormatter(logging.Formatter):
    """Appends ``key=value`` context from ``get_logger_with_context``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = getattr(record, "context", None)
        if not fields:
            return message
        return message + " " + " ".join(_render_field(k, v) for k, v in fields.items())


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    structured: bool = False,
) -> None:
    """Send package logs to stderr at the given level.

    Replaces any handler installed by an earlier call and stops records
    from reaching the root logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Overrides the default line format
        structured: Include timestamps, logger names and context fields
    """
    fmt = format_string or (STRUCTURED_FORMAT if structured else PLAIN_FORMAT)
    formatter = StructuredFormatter(fmt) if structured else logging.Formatter(fmt)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    logger.handlers = [handler]
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the ``registry_auth`` logger."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Attaches fixed context fields to every record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), "context": dict(self.extra)}
        return msg, kwargs


def get_logger_with_context(name: str, **context: Any) -> LoggerAdapter:
    """Logger that tags each record with ``context``, e.g. the helper being run."""
    return LoggerAdapter(get_logger(name), context)
