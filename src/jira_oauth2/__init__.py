"""Async Jira Cloud client with OAuth 2.0 bearer-token support.

Provides:
- JiraOAuth2Client: issues, search, projects, boards and current-user operations
- refresh_access_token: refresh-token rotation against the Atlassian token endpoint
- Normalized errors (JiraApiError) and pre-flight validation (JiraValidationError)
- A pluggable logger (silent by default) and optional structured logging setup
"""

from .__version__ import __version__
from .client import JiraOAuth2Client
from .config import JiraSettings, get_settings, reset_settings
from .errors import (
    JiraApiError,
    JiraClientError,
    JiraValidationError,
    TokenResponseError,
)
from .logger import Logger, NullLogger, StdlibLogger
from .logging_config import StructuredFormatter, configure_logging
from .oauth import TokenPair, refresh_access_token, refresh_from_settings
from .pagination import SEARCH_PAGE_SIZE, collect_pages

__all__ = [
    "SEARCH_PAGE_SIZE",
    "JiraApiError",
    "JiraClientError",
    "JiraOAuth2Client",
    "JiraSettings",
    "JiraValidationError",
    "Logger",
    "NullLogger",
    "StdlibLogger",
    "StructuredFormatter",
    "TokenPair",
    "TokenResponseError",
    "__version__",
    "collect_pages",
    "configure_logging",
    "get_settings",
    "refresh_access_token",
    "refresh_from_settings",
    "reset_settings",
]
