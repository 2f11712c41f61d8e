"""Shared pytest fixtures for the Jira OAuth2 client tests.

Fixture Organization:
    - Client fixtures: JiraOAuth2Client wired to an httpx.MockTransport that
      records every dispatched request (see jira_test_helpers.py)
    - Settings isolation: JIRA_* variables from the shell never leak into tests
    - Integration option: live Jira Cloud tests only run with --run-integration

References:
    - pytest fixtures docs: https://docs.pytest.org/en/stable/how-to/fixtures.html
    - httpx MockTransport: https://www.python-httpx.org/advanced/transports/#mock-transports
"""

import os
import sys
from pathlib import Path

import pytest

# Add tests directory to sys.path so test modules can import jira_test_helpers
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from jira_oauth2.client import JiraOAuth2Client  # noqa: E402
from jira_oauth2.config import reset_settings  # noqa: E402
from jira_test_helpers import (  # noqa: E402
    ACCESS_TOKEN,
    CLOUD_ID,
    RecordingTransport,
    json_handler,
)

# =============================================================================
# Pytest CLI Options
# =============================================================================


def pytest_addoption(parser):
    """Add custom command line options for test selection."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against a live Jira Cloud site",
    )


def pytest_collection_modifyitems(session, config, items):
    """Skip integration tests unless --run-integration is provided."""
    if config.getoption("--run-integration", default=False):
        return

    skip_integration = pytest.mark.skip(
        reason="Need --run-integration option to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# =============================================================================
# Settings isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(request, monkeypatch, tmp_path):
    """Keep JIRA_* variables and the developer's .env out of unit tests.

    Unit tests run from an empty temporary directory, so the default
    ``.env`` lookup of JiraSettings finds nothing.
    """
    if "integration" not in request.keywords:
        for key in list(os.environ):
            if key.startswith("JIRA_"):
                monkeypatch.delenv(key, raising=False)
        monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Client fixtures
# =============================================================================


@pytest.fixture
def make_client():
    """Factory: JiraOAuth2Client plus the RecordingTransport it sends through."""

    def _make(handler=None, **kwargs) -> tuple[JiraOAuth2Client, RecordingTransport]:
        transport = RecordingTransport(handler or json_handler({}))
        client = JiraOAuth2Client(
            cloud_id=CLOUD_ID,
            access_token=ACCESS_TOKEN,
            transport=transport,
            **kwargs,
        )
        return client, transport

    return _make
