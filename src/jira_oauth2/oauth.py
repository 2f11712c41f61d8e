"""OAuth 2.0 refresh-token rotation against the Atlassian token endpoint.

A single POST exchanges the current refresh token for a new access/refresh
token pair. Atlassian rotates refresh tokens, so callers must persist the
returned refresh_token; the old one stops working.

This module never touches a client's Session. Apply the new token explicitly:

    >>> tokens = await refresh_access_token(client_id, client_secret, refresh_token)
    >>> client.set_access_token(tokens.access_token)
"""

from dataclasses import dataclass, field

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_TOKEN_URL, JiraSettings, get_settings
from .dispatcher import decode_body, normalize_error
from .errors import JiraValidationError, TokenResponseError
from .logger import Logger, silent_logger


@dataclass(frozen=True)
class TokenPair:
    """Tokens returned by a successful refresh."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    expires_in: int | None = None
    scope: str | None = None
    token_type: str | None = None


async def refresh_access_token(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    *,
    token_url: str = DEFAULT_TOKEN_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: Logger | None = None,
) -> TokenPair:
    """Exchange a refresh token for a new token pair.

    Args:
        client_id: OAuth app client id
        client_secret: OAuth app client secret
        refresh_token: Current refresh token
        token_url: Token endpoint (default: https://auth.atlassian.com/oauth/token)
        timeout: Request timeout in seconds
        transport: Optional httpx transport override
        logger: Optional diagnostic logger

    Returns:
        TokenPair with the new access and refresh tokens

    Raises:
        JiraValidationError: If any credential is empty (no request is made)
        JiraApiError: If the request fails or the endpoint returns an error status
        TokenResponseError: If the response lacks access_token or refresh_token
    """
    for name, value in (
        ("client_id", client_id),
        ("client_secret", client_secret),
        ("refresh_token", refresh_token),
    ):
        if not value:
            raise JiraValidationError(f"Missing required field: {name}")

    log = logger or silent_logger
    payload = {
        "grant_type": "refresh_token",
        "client_id": client_id,
        "client_secret": client_secret,
        "refresh_token": refresh_token,
    }

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout), transport=transport
    ) as http:
        try:
            response = await http.post(
                token_url,
                json=payload,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = normalize_error(e)
            log.error(
                "jira_token_refresh_failed",
                status_code=error.status,
                error=error.message,
            )
            raise error from e

    data = decode_body(response)
    if (
        not isinstance(data, dict)
        or not data.get("access_token")
        or not data.get("refresh_token")
    ):
        log.error("jira_token_refresh_malformed", status_code=response.status_code)
        raise TokenResponseError(
            "Failed to retrieve access token or new refresh token from response.",
            response_data=data,
        )

    log.info("jira_token_refreshed", expires_in=data.get("expires_in"))
    return TokenPair(
        access_token=data["access_token"],
        refresh_token=data["refresh_token"],
        expires_in=data.get("expires_in"),
        scope=data.get("scope"),
        token_type=data.get("token_type"),
    )


async def refresh_from_settings(
    settings: JiraSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: Logger | None = None,
) -> TokenPair:
    """Run refresh_access_token() with the OAuth credentials from settings."""
    settings = settings or get_settings()
    return await refresh_access_token(
        settings.oauth_client_id,
        settings.oauth_client_secret.get_secret_value(),
        settings.oauth_refresh_token.get_secret_value(),
        token_url=settings.oauth_token_url,
        timeout=settings.timeout_seconds,
        transport=transport,
        logger=logger,
    )
