"""Unit tests for request dispatch and error normalization.

Tests:
- Header construction (bearer, JSON content type, multipart boundary)
- Query parameter handling (None dropped)
- Response decoding (204, empty, JSON, text)
- normalize_error message precedence and status/body capture
- Failures raise JiraApiError chained to the httpx error
"""

import json
from unittest.mock import Mock

import httpx
import pytest

from jira_oauth2.dispatcher import (
    UNKNOWN_ERROR_MESSAGE,
    RequestDispatcher,
    decode_body,
    normalize_error,
)
from jira_oauth2.endpoints import ApiEndpoint
from jira_oauth2.errors import JiraApiError
from jira_oauth2.session import Session
from jira_test_helpers import RecordingTransport, json_handler

ENDPOINT = ApiEndpoint("core", "https://jira.test/rest/api/3")


def _status_error(status_code: int, **response_kwargs) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://jira.test/rest/api/3/issue/NOPE-1")
    response = httpx.Response(status_code, request=request, **response_kwargs)
    return httpx.HTTPStatusError(
        f"Client error '{status_code}'", request=request, response=response
    )


@pytest.fixture
def make_dispatcher():
    def _make(handler=None, logger=None):
        transport = RecordingTransport(handler or json_handler({"ok": True}))
        http = httpx.AsyncClient(transport=transport)
        return RequestDispatcher(http, Session("tok-abc"), logger), transport

    return _make


# =============================================================================
# Request building
# =============================================================================


class TestBuildRequest:
    """Headers, URL and params of built requests."""

    def test_json_headers(self, make_dispatcher):
        dispatcher, _ = make_dispatcher()

        request = dispatcher.build_request(ENDPOINT, "get", "/myself")

        assert request.method == "GET"
        assert str(request.url) == "https://jira.test/rest/api/3/myself"
        assert request.headers["Authorization"] == "Bearer tok-abc"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"

    def test_none_params_dropped(self, make_dispatcher):
        dispatcher, _ = make_dispatcher()

        request = dispatcher.build_request(
            ENDPOINT, "GET", "/search", params={"jql": "project = X", "fields": None}
        )

        assert request.url.params["jql"] == "project = X"
        assert "fields" not in request.url.params

    def test_json_body(self, make_dispatcher):
        dispatcher, _ = make_dispatcher()

        request = dispatcher.build_request(ENDPOINT, "POST", "/issue", json={"a": 1})

        assert json.loads(request.content) == {"a": 1}

    def test_multipart_omits_json_content_type(self, make_dispatcher):
        dispatcher, _ = make_dispatcher()

        request = dispatcher.build_request(
            ENDPOINT,
            "POST",
            "/issue/PROJ-1/attachments",
            files={"file": ("notes.txt", b"hello")},
            headers={"X-Atlassian-Token": "no-check"},
        )

        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert request.headers["X-Atlassian-Token"] == "no-check"
        assert request.headers["Authorization"] == "Bearer tok-abc"

    def test_header_override(self, make_dispatcher):
        dispatcher, _ = make_dispatcher()

        request = dispatcher.build_request(
            ENDPOINT, "GET", "/x", headers={"Accept": "text/plain"}
        )

        assert request.headers["Accept"] == "text/plain"


# =============================================================================
# Response decoding
# =============================================================================


class TestDecodeBody:
    def test_no_content(self):
        assert decode_body(httpx.Response(204)) is None

    def test_empty_body(self):
        assert decode_body(httpx.Response(200)) is None

    def test_json(self):
        assert decode_body(httpx.Response(200, json={"key": "PROJ-1"})) == {"key": "PROJ-1"}

    def test_text(self):
        assert decode_body(httpx.Response(200, text="plain")) == "plain"


# =============================================================================
# Error normalization
# =============================================================================


class TestNormalizeError:
    """Message precedence and captured fields."""

    def test_error_messages_joined(self):
        error = normalize_error(
            _status_error(400, json={"errorMessages": ["First", "Second"], "errors": {}})
        )

        assert error.message == "First, Second"
        assert error.status == 400
        assert error.status_text == "Bad Request"

    def test_message_field_used_when_no_error_messages(self):
        error = normalize_error(_status_error(401, json={"message": "Unauthorized; scope does not match"}))

        assert error.message == "Unauthorized; scope does not match"

    def test_empty_error_messages_fall_through(self):
        error = normalize_error(
            _status_error(400, json={"errorMessages": [], "message": "fallback"})
        )

        assert error.message == "fallback"

    def test_transport_message_when_body_has_none(self):
        exc = _status_error(500, json={"errors": {"summary": "required"}})

        error = normalize_error(exc)

        assert error.message == str(exc)
        assert error.response_data == {"errors": {"summary": "required"}}

    def test_not_found(self):
        error = normalize_error(
            _status_error(404, json={"errorMessages": ["Issue does not exist or you do not have permission to see it."]})
        )

        assert error.status == 404
        assert error.status_text == "Not Found"
        assert "does not exist" in error.message

    def test_raw_text_body(self):
        error = normalize_error(_status_error(502, text="<html>Bad gateway</html>"))

        assert error.response_data == "<html>Bad gateway</html>"
        assert error.status == 502

    def test_network_error_has_no_status(self):
        exc = httpx.ConnectError("Name or service not known")

        error = normalize_error(exc)

        assert error.message == "Name or service not known"
        assert error.status is None
        assert error.status_text is None
        assert error.response_data is None
        assert error.original_error is exc

    def test_generic_fallback(self):
        error = normalize_error(httpx.ReadTimeout(""))

        assert error.message == UNKNOWN_ERROR_MESSAGE

    def test_attributes_read_only(self):
        error = normalize_error(_status_error(404))

        with pytest.raises(AttributeError):
            error.status = 500


# =============================================================================
# Dispatch
# =============================================================================


class TestRequest:
    """End-to-end dispatch through a mock transport."""

    @pytest.mark.asyncio
    async def test_success_returns_decoded_json(self, make_dispatcher):
        dispatcher, transport = make_dispatcher(json_handler({"key": "PROJ-1"}))

        result = await dispatcher.request(ENDPOINT, "GET", "/issue/PROJ-1")

        assert result == {"key": "PROJ-1"}
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_no_content_returns_none(self, make_dispatcher):
        dispatcher, _ = make_dispatcher(json_handler(None, status_code=204))

        assert await dispatcher.request(ENDPOINT, "DELETE", "/issue/PROJ-1") is None

    @pytest.mark.asyncio
    async def test_http_error_raises_normalized_error(self, make_dispatcher):
        dispatcher, _ = make_dispatcher(
            json_handler({"errorMessages": ["Nope"]}, status_code=403)
        )

        with pytest.raises(JiraApiError) as exc_info:
            await dispatcher.request(ENDPOINT, "GET", "/issue/PROJ-1")

        error = exc_info.value
        assert error.status == 403
        assert error.message == "Nope"
        assert isinstance(error.original_error, httpx.HTTPStatusError)
        assert error.__cause__ is error.original_error

    @pytest.mark.asyncio
    async def test_transport_error_raises_normalized_error(self, make_dispatcher):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        dispatcher, _ = make_dispatcher(handler)

        with pytest.raises(JiraApiError) as exc_info:
            await dispatcher.request(ENDPOINT, "GET", "/myself")

        assert exc_info.value.status is None
        assert exc_info.value.message == "timed out"

    @pytest.mark.asyncio
    async def test_no_retry(self, make_dispatcher):
        dispatcher, transport = make_dispatcher(json_handler({}, status_code=503))

        with pytest.raises(JiraApiError):
            await dispatcher.request(ENDPOINT, "GET", "/myself")

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_logs_request_and_response(self, make_dispatcher):
        logger = Mock()
        dispatcher, _ = make_dispatcher(json_handler({}), logger=logger)

        await dispatcher.request(ENDPOINT, "GET", "/myself")

        events = [c.args[0] for c in logger.info.call_args_list]
        assert events == ["jira_request", "jira_response"]
        logger.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_logs_failure(self, make_dispatcher):
        logger = Mock()
        dispatcher, _ = make_dispatcher(json_handler({}, status_code=500), logger=logger)

        with pytest.raises(JiraApiError):
            await dispatcher.request(ENDPOINT, "GET", "/myself")

        logger.error.assert_called_once()
        assert logger.error.call_args.args[0] == "jira_request_failed"
        assert logger.error.call_args.kwargs["status_code"] == 500
