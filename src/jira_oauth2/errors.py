"""Error taxonomy for the Jira OAuth2 client.

Three failure kinds reach callers:
- JiraValidationError: a request payload failed a pre-flight check (no network call made)
- JiraApiError: the transport or the remote API reported a failure
- TokenResponseError: the token endpoint answered without the expected tokens
"""

from typing import Any


class JiraClientError(Exception):
    """Base class for every error raised by this package."""

    pass


class JiraValidationError(JiraClientError, ValueError):
    """Raised when a request payload is missing a required field.

    Raised synchronously before any request is dispatched. The message names
    the first missing field, e.g. ``Missing required field: project.key``.
    """

    pass


class JiraApiError(JiraClientError):
    """Normalized error for a failed Jira API call.

    Wraps httpx transport errors and HTTP error responses so callers can branch
    on ``status`` (e.g. 404 vs 403) without touching httpx types.

    Attributes:
        message: Server-reported error text, transport error text, or a generic fallback
        status: HTTP status code, None for network-level failures
        status_text: HTTP reason phrase, None for network-level failures
        response_data: Decoded response body (JSON or raw text) if one was received
        original_error: The underlying httpx exception
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        status_text: str | None = None,
        response_data: Any = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._status = status
        self._status_text = status_text
        self._response_data = response_data
        self._original_error = original_error

    @property
    def message(self) -> str:
        return self._message

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def status_text(self) -> str | None:
        return self._status_text

    @property
    def response_data(self) -> Any:
        return self._response_data

    @property
    def original_error(self) -> BaseException | None:
        return self._original_error

    def __repr__(self) -> str:
        return (
            f"JiraApiError(message={self._message!r}, status={self._status!r}, "
            f"status_text={self._status_text!r})"
        )


class TokenResponseError(JiraClientError):
    """Raised when the OAuth token response lacks access_token or refresh_token."""

    def __init__(self, message: str, response_data: Any = None) -> None:
        super().__init__(message)
        self.response_data = response_data
