"""Configuration management with pydantic-settings for the Jira OAuth2 client.

- Environment variables prefixed with JIRA_ (JIRA_CLOUD_ID, JIRA_ACCESS_TOKEN, ...)
- Automatic .env file loading
- SecretStr for tokens and client secrets
- Frozen config (immutable after load)

The client never reads settings on its own; build one explicitly with
``JiraOAuth2Client.from_settings()`` or pass values to the constructor.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DEFAULT_API_ROOT",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_TOKEN_URL",
    "SUPPORTED_API_VERSIONS",
    "JiraSettings",
    "get_settings",
    "reset_settings",
]

DEFAULT_API_ROOT = "https://api.atlassian.com"
DEFAULT_TOKEN_URL = "https://auth.atlassian.com/oauth/token"
DEFAULT_TIMEOUT_SECONDS = 30.0
SUPPORTED_API_VERSIONS = ("2", "3")


class JiraSettings(BaseSettings):
    """Settings for a Jira Cloud OAuth 2.0 (3LO) connection.

    Loads from (in order of precedence):
    1. Environment variables (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        cloud_id: Atlassian cloud (site) id used in the API gateway path
        access_token: Current OAuth bearer token
        api_version: Jira platform REST API version, "2" or "3"
        api_root: Atlassian API gateway root
        timeout_seconds: Per-request timeout applied to every API family
        oauth_client_id: OAuth app client id, used for token refresh
        oauth_client_secret: OAuth app client secret, used for token refresh
        oauth_refresh_token: Refresh token used for token rotation
        oauth_token_url: Token exchange endpoint
        log_level: Level for configure_logging()
        log_format: json (production) or text (development)
    """

    model_config = SettingsConfigDict(
        env_prefix="JIRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    cloud_id: str = Field(default="", description="Atlassian cloud id (site id)")

    access_token: SecretStr = Field(
        default=SecretStr(""), description="OAuth 2.0 bearer access token"
    )

    api_version: Literal["2", "3"] = Field(
        default="3", description="Jira platform REST API version"
    )

    api_root: str = Field(
        default=DEFAULT_API_ROOT,
        min_length=8,
        description="Atlassian API gateway root URL",
    )

    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="Request timeout in seconds",
    )

    oauth_client_id: str = Field(default="", description="OAuth app client id")

    oauth_client_secret: SecretStr = Field(
        default=SecretStr(""), description="OAuth app client secret"
    )

    oauth_refresh_token: SecretStr = Field(
        default=SecretStr(""), description="OAuth refresh token"
    )

    oauth_token_url: str = Field(
        default=DEFAULT_TOKEN_URL, description="OAuth token exchange endpoint"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    log_format: str = Field(
        default="json",
        pattern="^(json|text)$",
        description="Log format: json (production), text (development)",
    )

    @field_validator("api_root", "oauth_token_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    def has_refresh_credentials(self) -> bool:
        """True when client id, client secret and refresh token are all set."""
        return bool(
            self.oauth_client_id
            and self.oauth_client_secret.get_secret_value()
            and self.oauth_refresh_token.get_secret_value()
        )


@lru_cache(maxsize=1)
def get_settings() -> JiraSettings:
    """Get the global settings singleton.

    First call loads from environment + .env file, subsequent calls return the
    cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return JiraSettings()


def reset_settings() -> None:
    """Clear the cached settings so the next get_settings() reloads.

    Only intended for tests.
    """
    get_settings.cache_clear()
