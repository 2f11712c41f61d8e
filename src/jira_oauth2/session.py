"""Shared bearer-token session.

One Session is owned by a JiraOAuth2Client and referenced by all three API
families, so a single update() is seen by every subsequent request. The token is
read when a request is built; requests built earlier keep the header they were
built with.
"""


class Session:
    """Holds the current OAuth bearer token.

    Attributes:
        token: Current access token (read-only; use update() to rotate)
    """

    __slots__ = ("_token",)

    def __init__(self, token: str) -> None:
        self._token = self._check(token)

    @staticmethod
    def _check(token: str) -> str:
        if not isinstance(token, str) or not token.strip():
            raise ValueError("Access token must be a non-empty string")
        return token

    @property
    def token(self) -> str:
        return self._token

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"Bearer {self._token}"

    def update(self, token: str) -> None:
        """Replace the token for every request built from now on."""
        self._token = self._check(token)

    def __repr__(self) -> str:
        return "Session(token='***')"
