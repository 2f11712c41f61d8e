"""Single-request dispatch and error normalization.

Every Jira call goes through RequestDispatcher.request(): it builds one
httpx.Request (Authorization captured from the Session at build time), sends it
on the shared httpx.AsyncClient, and either returns the decoded body or raises
a JiraApiError. There are no retries and nothing is swallowed.
"""

from typing import Any, Mapping

import httpx

from .endpoints import ApiEndpoint
from .errors import JiraApiError
from .logger import Logger, silent_logger
from .session import Session

UNKNOWN_ERROR_MESSAGE = "An unknown Jira API error occurred"

JSON_CONTENT_TYPE = "application/json"


def _decode_error_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _server_message(data: Any) -> str | None:
    """Extract Jira's own error text from an error body.

    Jira reports failures as ``{"errorMessages": [...], "errors": {...}}``; the
    gateway and identity API use ``{"message": "..."}``.
    """
    if not isinstance(data, dict):
        return None
    messages = data.get("errorMessages")
    if isinstance(messages, list):
        joined = ", ".join(str(m) for m in messages)
        if joined:
            return joined
    message = data.get("message")
    if message:
        return str(message)
    return None


def normalize_error(exc: httpx.HTTPError) -> JiraApiError:
    """Convert an httpx failure into a JiraApiError.

    Message precedence: joined ``errorMessages``, then ``message``, then the
    transport error text, then a generic fallback.

    Args:
        exc: HTTPStatusError (server answered with an error status) or any
            other httpx.HTTPError (DNS, connect, timeout, protocol)

    Returns:
        JiraApiError carrying status, reason phrase, body and the original error
    """
    status: int | None = None
    status_text: str | None = None
    data: Any = None

    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        status = response.status_code
        status_text = response.reason_phrase or None
        data = _decode_error_body(response)

    message = _server_message(data) or str(exc) or UNKNOWN_ERROR_MESSAGE
    return JiraApiError(
        message,
        status=status,
        status_text=status_text,
        response_data=data,
        original_error=exc,
    )


def decode_body(response: httpx.Response) -> Any:
    """Decode a successful response: None for no content, JSON if possible, else text."""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestDispatcher:
    """Sends requests for every API family over one httpx.AsyncClient.

    Attributes:
        session: Shared token holder read at request build time
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        session: Session,
        logger: Logger | None = None,
    ) -> None:
        self._http = http_client
        self.session = session
        self._logger = logger or silent_logger

    def build_request(
        self,
        endpoint: ApiEndpoint,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        files: Any = None,
    ) -> httpx.Request:
        """Build (but do not send) a request with the session's current token.

        Query parameters whose value is None are dropped. Multipart requests
        (``files`` given) leave Content-Type to httpx so the boundary is set.
        """
        request_headers = {
            "Authorization": self.session.authorization,
            "Accept": JSON_CONTENT_TYPE,
        }
        if files is None:
            request_headers["Content-Type"] = JSON_CONTENT_TYPE
        if headers:
            request_headers.update(headers)

        query = {k: v for k, v in (params or {}).items() if v is not None}

        return self._http.build_request(
            method.upper(),
            endpoint.url(path),
            params=query or None,
            json=json,
            files=files,
            headers=request_headers,
        )

    async def send(self, request: httpx.Request, endpoint: ApiEndpoint) -> Any:
        """Send a built request and decode the response.

        Raises:
            JiraApiError: On any transport failure or non-2xx response
        """
        self._logger.info(
            "jira_request",
            api=endpoint.name,
            method=request.method,
            url=str(request.url),
        )
        try:
            response = await self._http.send(request)
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = normalize_error(e)
            self._logger.error(
                "jira_request_failed",
                api=endpoint.name,
                method=request.method,
                url=str(request.url),
                status_code=error.status,
                response_data=error.response_data,
            )
            raise error from e

        self._logger.info(
            "jira_response",
            api=endpoint.name,
            status_code=response.status_code,
            url=str(request.url),
        )
        return decode_body(response)

    async def request(
        self,
        endpoint: ApiEndpoint,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        files: Any = None,
    ) -> Any:
        """Build and send one request; see build_request() and send()."""
        request = self.build_request(
            endpoint,
            method,
            path,
            json=json,
            params=params,
            headers=headers,
            files=files,
        )
        return await self.send(request, endpoint)
