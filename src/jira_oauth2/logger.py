"""Pluggable diagnostic logger for the Jira client.

The client only ever calls ``info``, ``warn``, ``error`` and ``debug`` on its
logger, so anything providing those four methods can be passed in. The default
is NullLogger, which keeps the library silent unless the caller opts in.

Example:
    >>> from jira_oauth2 import JiraOAuth2Client, StdlibLogger
    >>> client = JiraOAuth2Client("cloud-id", "token", logger=StdlibLogger())
"""

import logging
from typing import Any, Protocol, runtime_checkable

DEFAULT_LOGGER_NAME = "jira_oauth2.client"


@runtime_checkable
class Logger(Protocol):
    """Capability set consumed by the client."""

    def info(self, message: str, *args: Any, **extra: Any) -> None: ...

    def warn(self, message: str, *args: Any, **extra: Any) -> None: ...

    def error(self, message: str, *args: Any, **extra: Any) -> None: ...

    def debug(self, message: str, *args: Any, **extra: Any) -> None: ...


class NullLogger:
    """Logger that discards everything."""

    def info(self, message: str, *args: Any, **extra: Any) -> None:
        pass

    def warn(self, message: str, *args: Any, **extra: Any) -> None:
        pass

    def error(self, message: str, *args: Any, **extra: Any) -> None:
        pass

    def debug(self, message: str, *args: Any, **extra: Any) -> None:
        pass


class StdlibLogger:
    """Adapts the Logger capability onto a stdlib ``logging.Logger``.

    Keyword arguments become the record's ``extra`` context, which
    StructuredFormatter renders under ``context``.

    Args:
        logger: Existing logger to wrap, or a logger name (default: jira_oauth2.client)
    """

    def __init__(self, logger: logging.Logger | str | None = None) -> None:
        if isinstance(logger, logging.Logger):
            self._logger = logger
        else:
            self._logger = logging.getLogger(logger or DEFAULT_LOGGER_NAME)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def info(self, message: str, *args: Any, **extra: Any) -> None:
        self._logger.info(message, *args, extra=extra or None)

    def warn(self, message: str, *args: Any, **extra: Any) -> None:
        self._logger.warning(message, *args, extra=extra or None)

    def error(self, message: str, *args: Any, **extra: Any) -> None:
        self._logger.error(message, *args, extra=extra or None)

    def debug(self, message: str, *args: Any, **extra: Any) -> None:
        self._logger.debug(message, *args, extra=extra or None)


silent_logger: Logger = NullLogger()
