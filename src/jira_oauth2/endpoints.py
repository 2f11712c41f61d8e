"""Base URLs of the three Jira Cloud API families reached through the Atlassian gateway.

- core: platform REST API, ``{root}/ex/jira/{cloud_id}/rest/api/{version}``
- agile: board/sprint API, ``{root}/ex/jira/{cloud_id}/rest/agile/1.0``
- identity: Atlassian account API, ``{root}`` (current user at ``/me``)
"""

from dataclasses import dataclass

from .config import DEFAULT_API_ROOT, SUPPORTED_API_VERSIONS

AGILE_API_VERSION = "1.0"


@dataclass(frozen=True)
class ApiEndpoint:
    """One API family: a name used in logs and a base URL without trailing slash."""

    name: str
    base_url: str

    def url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"


@dataclass(frozen=True)
class Endpoints:
    core: ApiEndpoint
    agile: ApiEndpoint
    identity: ApiEndpoint


def build_endpoints(
    cloud_id: str,
    api_version: str = "3",
    api_root: str = DEFAULT_API_ROOT,
) -> Endpoints:
    """Build the core, agile and identity endpoints for a cloud site.

    Args:
        cloud_id: Atlassian cloud id of the Jira site
        api_version: Platform REST API version, "2" or "3"
        api_root: Gateway root (default: https://api.atlassian.com)

    Raises:
        ValueError: If cloud_id is empty or api_version is unsupported
    """
    if not cloud_id or not cloud_id.strip():
        raise ValueError("cloud_id is required")
    if api_version not in SUPPORTED_API_VERSIONS:
        raise ValueError(
            f"Unsupported Jira API version {api_version!r}; "
            f"expected one of {', '.join(SUPPORTED_API_VERSIONS)}"
        )

    root = api_root.rstrip("/")
    site = f"{root}/ex/jira/{cloud_id.strip()}"
    return Endpoints(
        core=ApiEndpoint("core", f"{site}/rest/api/{api_version}"),
        agile=ApiEndpoint("agile", f"{site}/rest/agile/{AGILE_API_VERSION}"),
        identity=ApiEndpoint("identity", root),
    )
