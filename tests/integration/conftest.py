"""Integration test fixtures: a live JiraOAuth2Client for a real Jira Cloud site.

Required environment (or .env):
    JIRA_CLOUD_ID, JIRA_TEST_PROJECT_KEY, and either JIRA_ACCESS_TOKEN or the
    JIRA_OAUTH_CLIENT_ID / JIRA_OAUTH_CLIENT_SECRET / JIRA_OAUTH_REFRESH_TOKEN trio.

When refresh credentials are present a fresh access token is fetched once per
test session. Atlassian rotates refresh tokens on every exchange, so the new
refresh token is written back to JIRA_OAUTH_REFRESH_TOKEN in ./.env and into
the process environment.
"""

import asyncio
import logging
import os
from pathlib import Path

import pytest
import pytest_asyncio

from jira_oauth2 import JiraOAuth2Client, StdlibLogger, get_settings, refresh_from_settings
from jira_oauth2.config import reset_settings
from jira_test_helpers import persist_env_value

logger = logging.getLogger("jira_oauth2.tests.integration")

REFRESH_TOKEN_ENV = "JIRA_OAUTH_REFRESH_TOKEN"


@pytest.fixture
def project_key() -> str:
    key = os.environ.get("JIRA_TEST_PROJECT_KEY")
    if not key:
        pytest.skip("JIRA_TEST_PROJECT_KEY not set")
    return key


@pytest.fixture(scope="session")
def live_access_token() -> str:
    """Access token for the whole run; refreshes (and rotates) at most once."""
    settings = get_settings()
    if not settings.cloud_id:
        pytest.skip("JIRA_CLOUD_ID not set")

    if not settings.has_refresh_credentials():
        access_token = settings.access_token.get_secret_value()
        if not access_token:
            pytest.skip("No JIRA_ACCESS_TOKEN or refresh credentials")
        return access_token

    tokens = asyncio.run(refresh_from_settings(settings, logger=StdlibLogger()))

    os.environ[REFRESH_TOKEN_ENV] = tokens.refresh_token
    reset_settings()
    env_path = Path.cwd() / ".env"
    if persist_env_value(env_path, REFRESH_TOKEN_ENV, tokens.refresh_token):
        logger.info("jira_refresh_token_persisted", extra={"env_file": str(env_path)})
    else:
        logger.warning(
            "jira_refresh_token_not_persisted: no .env file, store the new "
            "JIRA_OAUTH_REFRESH_TOKEN before the next run"
        )
    return tokens.access_token


@pytest_asyncio.fixture
async def live_client(live_access_token):
    settings = get_settings()
    client = JiraOAuth2Client(
        settings.cloud_id,
        live_access_token,
        settings.api_version,
        StdlibLogger(),
        api_root=settings.api_root,
        timeout=settings.timeout_seconds,
    )
    async with client:
        yield client
