"""Structured logging configuration for the jira_oauth2 logger hierarchy.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the jira_oauth2 namespace
- Environment variable control (JIRA_LOG_LEVEL, JIRA_LOG_FORMAT)

Nothing here runs on import: the client is silent by default and only logs
through stdlib logging when handed a StdlibLogger.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER_NAME = "jira_oauth2"

# Keys redacted from log context; bearer and refresh tokens must never reach log output
SENSITIVE_KEYS = {
    "password", "token", "access_token", "refresh_token", "secret",
    "client_secret", "authorization", "credential", "auth", "bearer",
}

_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs logs in JSON format with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (jira_oauth2 hierarchy)
    - message: Log message
    - context: Extras dict merged from LogRecord attributes

    Security: Sensitive keys (token, authorization, client_secret, etc.) are
    redacted to prevent credential leakage in logs.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }

        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter, selected with JIRA_LOG_FORMAT=text."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(
    level: Optional[str] = None, log_format: Optional[str] = None
) -> logging.Logger:
    """Configure the jira_oauth2 logger hierarchy.

    Args:
        level: Log level override. Defaults to JIRA_LOG_LEVEL (default: INFO).
        log_format: "json" or "text". Defaults to JIRA_LOG_FORMAT (default: json).

    Returns:
        The configured jira_oauth2 root logger.
    """
    if level is None:
        level = os.getenv("JIRA_LOG_LEVEL", "INFO")
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format is None:
        log_format = os.getenv("JIRA_LOG_FORMAT", "json")
    formatter = TextFormatter() if log_format.lower() == "text" else StructuredFormatter()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Idempotent: one handler only, repeated calls just swap the formatter
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    for handler in logger.handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
    return logger
