"""Jira Cloud REST API client authenticated with OAuth 2.0 bearer tokens.

Provides an async httpx-based client covering three API families reached
through the Atlassian gateway:
- core: issues, search, projects, transitions, links, attachments
- agile: boards and board issues
- identity: the current user's Atlassian profile

Reference: https://developer.atlassian.com/cloud/jira/platform/oauth-2-3lo-apps/
"""

import asyncio
from pathlib import Path
from typing import Any, Mapping, Sequence

import httpx

from .config import DEFAULT_API_ROOT, DEFAULT_TIMEOUT_SECONDS, JiraSettings, get_settings
from .dispatcher import RequestDispatcher
from .endpoints import Endpoints, build_endpoints
from .logger import Logger, silent_logger
from .pagination import SEARCH_PAGE_SIZE, collect_pages
from .schema import (
    CreateIssueRequest,
    CreateIssueResponse,
    IssueLinkRequest,
    JiraIssue,
    JiraProject,
    JiraSearchResponse,
    JiraUser,
    PaginatedResponse,
    TransitionsResponse,
)
from .session import Session
from .validators import (
    validate_create_issue,
    validate_issue_key,
    validate_issue_link,
    validate_project_key,
    validate_transition_id,
)


def _join(values: Sequence[str] | None) -> str | None:
    """Comma-join a list query parameter (Jira does not accept repeated keys)."""
    if not values:
        return None
    if isinstance(values, str):
        return values
    return ",".join(values)


class JiraOAuth2Client:
    """Jira Cloud client using httpx with OAuth 2.0 bearer auth.

    One httpx.AsyncClient (connection pool) is shared by the core, agile and
    identity API families, and so is the bearer token: set_access_token()
    takes effect for every family at once.

    Attributes:
        endpoints: Base URLs of the core, agile and identity APIs
        session: Shared bearer token holder
        api_version: Platform REST API version in use ("2" or "3")

    Example:
        >>> async with JiraOAuth2Client("cloud-id", "access-token") as client:
        ...     issue = await client.get_issue("PROJ-1", fields=["summary", "status"])
        ...     epics = await client.get_epics("PROJ")
    """

    def __init__(
        self,
        cloud_id: str,
        access_token: str,
        api_version: str = "3",
        logger: Logger | None = None,
        *,
        api_root: str = DEFAULT_API_ROOT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            cloud_id: Atlassian cloud id of the Jira site
            access_token: OAuth 2.0 access token
            api_version: Platform REST API version, "2" or "3" (default: "3")
            logger: Diagnostic logger with info/warn/error/debug; silent by default
            api_root: Atlassian gateway root (default: https://api.atlassian.com)
            timeout: Per-request timeout in seconds (default: 30)
            transport: Optional httpx transport override

        Raises:
            ValueError: On empty cloud_id/access_token or an unsupported api_version
        """
        self.endpoints: Endpoints = build_endpoints(cloud_id, api_version, api_root)
        self.api_version = api_version
        self.session = Session(access_token)
        self._logger = logger or silent_logger

        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_keepalive_connections=20,
                max_connections=100,
                keepalive_expiry=10.0,
            ),
            transport=transport,
        )
        self._dispatcher = RequestDispatcher(self._http, self.session, self._logger)

    @classmethod
    def from_settings(
        cls,
        settings: JiraSettings | None = None,
        logger: Logger | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "JiraOAuth2Client":
        """Build a client from JiraSettings (environment / .env by default)."""
        settings = settings or get_settings()
        return cls(
            settings.cloud_id,
            settings.access_token.get_secret_value(),
            settings.api_version,
            logger,
            api_root=settings.api_root,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    # --- Session ---

    def set_access_token(self, new_access_token: str) -> None:
        """Use a new access token for all subsequent requests.

        Requests already built keep the token they were built with.

        Raises:
            ValueError: If the token is empty
        """
        self.session.update(new_access_token)
        self._logger.info("jira_token_updated")

    # --- Issues ---

    async def create_issue(self, issue_data: CreateIssueRequest) -> CreateIssueResponse:
        """Create an issue.

        Args:
            issue_data: ``{"fields": {...}, "update": {...}}``; fields must
                contain project.key, issuetype name or id, and summary

        Raises:
            JiraValidationError: If a required field is missing (no request is sent)
            JiraApiError: If the request fails
        """
        validate_create_issue(issue_data)
        return await self._dispatcher.request(
            self.endpoints.core, "POST", "/issue", json=issue_data
        )

    async def get_issue(
        self,
        issue_key: str,
        *,
        fields: Sequence[str] | None = None,
        expand: Sequence[str] | None = None,
    ) -> JiraIssue:
        """Get an issue by key or id.

        Args:
            issue_key: Issue key (e.g., 'PROJ-123') or numeric id
            fields: Fields to return, sent comma-joined
            expand: Entities to expand (e.g., ['renderedFields']), sent comma-joined
        """
        validate_issue_key(issue_key)
        return await self._dispatcher.request(
            self.endpoints.core,
            "GET",
            f"/issue/{issue_key}",
            params={"fields": _join(fields), "expand": _join(expand)},
        )

    async def update_issue(self, issue_key: str, update_data: Mapping[str, Any]) -> None:
        """Edit an issue with ``{"fields": {...}}`` and/or ``{"update": {...}}``."""
        validate_issue_key(issue_key)
        await self._dispatcher.request(
            self.endpoints.core, "PUT", f"/issue/{issue_key}", json=update_data
        )

    async def update_assignee(self, issue_key: str, account_id: str | None) -> None:
        """Assign an issue; pass None to unassign."""
        validate_issue_key(issue_key)
        await self._dispatcher.request(
            self.endpoints.core,
            "PUT",
            f"/issue/{issue_key}/assignee",
            json={"accountId": account_id},
        )

    async def delete_issue(self, issue_key: str, *, delete_subtasks: bool = False) -> None:
        """Delete an issue permanently.

        Jira refuses to delete an issue with subtasks unless delete_subtasks is set.
        """
        validate_issue_key(issue_key)
        await self._dispatcher.request(
            self.endpoints.core,
            "DELETE",
            f"/issue/{issue_key}",
            params={"deleteSubtasks": "true" if delete_subtasks else None},
        )

    async def add_attachment(self, issue_key: str, file_path: str | Path) -> list[dict[str, Any]]:
        """Upload a file as an attachment.

        Sent as multipart/form-data with ``X-Atlassian-Token: no-check``, which
        Jira requires to bypass its XSRF check. The file is read in a worker
        thread and held in memory for the upload.

        Returns:
            Attachment metadata list as returned by Jira
        """
        validate_issue_key(issue_key)
        path = Path(file_path)
        content = await asyncio.to_thread(path.read_bytes)
        return await self._dispatcher.request(
            self.endpoints.core,
            "POST",
            f"/issue/{issue_key}/attachments",
            files={"file": (path.name, content)},
            headers={"X-Atlassian-Token": "no-check"},
        )

    async def link_issues(self, link_request: IssueLinkRequest) -> None:
        """Create a link between two issues.

        Raises:
            JiraValidationError: If type.name, inwardIssue.key or outwardIssue.key is missing
        """
        validate_issue_link(link_request)
        await self._dispatcher.request(
            self.endpoints.core, "POST", "/issueLink", json=link_request
        )

    # --- Search ---

    async def search_issues(
        self,
        jql: str,
        *,
        fields: Sequence[str] | None = None,
        expand: Sequence[str] | None = None,
        max_results: int | None = None,
        start_at: int | None = None,
    ) -> JiraSearchResponse:
        """Run one JQL search request (a single page).

        Args:
            jql: JQL query
            fields: Fields to return, sent comma-joined
            expand: Entities to expand, sent comma-joined
            max_results: Page size (server default when None)
            start_at: Offset of the first issue (server default when None)
        """
        return await self._dispatcher.request(
            self.endpoints.core,
            "GET",
            "/search",
            params={
                "jql": jql,
                "fields": _join(fields),
                "expand": _join(expand),
                "maxResults": max_results,
                "startAt": start_at,
            },
        )

    async def search_all_issues(
        self,
        jql: str,
        *,
        fields: Sequence[str] | None = None,
        expand: Sequence[str] | None = None,
        max_results: int | None = None,
        start_at: int = 0,
    ) -> list[JiraIssue]:
        """Run a JQL search across pages and return the issues as one list.

        Args:
            jql: JQL query
            fields: Fields to return, sent comma-joined
            expand: Entities to expand, sent comma-joined
            max_results: Cap on the total number of issues, None for all
            start_at: Offset of the first issue

        Raises:
            JiraApiError: If any page request fails (no partial result is returned)
        """

        async def fetch(offset: int, page_size: int) -> list[JiraIssue]:
            page = await self.search_issues(
                jql,
                fields=fields,
                expand=expand,
                max_results=page_size,
                start_at=offset,
            )
            return (page or {}).get("issues", [])

        issues = await collect_pages(
            fetch,
            page_size=SEARCH_PAGE_SIZE,
            start_at=start_at,
            limit=max_results,
            logger=self._logger,
        )
        self._logger.info("jira_search_complete", jql=jql, total_issues=len(issues))
        return issues

    async def get_epics(self, project_key: str) -> list[JiraIssue]:
        """Get every Epic in a project."""
        validate_project_key(project_key)
        jql = f'project = "{project_key}" AND issuetype = Epic'
        return await self.search_all_issues(jql)

    async def get_all_issues_for_project(
        self,
        project_key: str,
        *,
        max_results: int | None = None,
        fields: Sequence[str] | None = None,
    ) -> list[JiraIssue]:
        """Get the issues of a project, optionally capped at max_results."""
        validate_project_key(project_key)
        jql = f'project = "{project_key}"'
        return await self.search_all_issues(jql, fields=fields, max_results=max_results)

    # --- Transitions ---

    async def get_transitions(self, issue_key: str) -> TransitionsResponse:
        """List the transitions currently available for an issue."""
        validate_issue_key(issue_key)
        return await self._dispatcher.request(
            self.endpoints.core, "GET", f"/issue/{issue_key}/transitions"
        )

    async def transition_issue(
        self,
        issue_key: str,
        transition_id: str,
        fields: Mapping[str, Any] | None = None,
        comment: str | None = None,
    ) -> None:
        """Move an issue through a workflow transition.

        Args:
            issue_key: Issue key
            transition_id: Id from get_transitions()
            fields: Screen fields to set during the transition
            comment: Comment to add with the transition
        """
        validate_issue_key(issue_key)
        validate_transition_id(transition_id)

        data: dict[str, Any] = {"transition": {"id": str(transition_id)}}
        if fields:
            data["fields"] = dict(fields)
        if comment:
            data["update"] = {"comment": [{"add": {"body": comment}}]}

        await self._dispatcher.request(
            self.endpoints.core, "POST", f"/issue/{issue_key}/transitions", json=data
        )

    # --- Projects and schemes ---

    async def get_projects(
        self, *, start_at: int = 0, max_results: int = 50
    ) -> PaginatedResponse:
        """Get one page of projects visible to the user."""
        return await self._dispatcher.request(
            self.endpoints.core,
            "GET",
            "/project/search",
            params={"startAt": start_at, "maxResults": max_results},
        )

    async def get_project(
        self, project_key: str, *, expand: Sequence[str] | None = None
    ) -> JiraProject:
        """Get project details by key or id."""
        validate_project_key(project_key)
        return await self._dispatcher.request(
            self.endpoints.core,
            "GET",
            f"/project/{project_key}",
            params={"expand": _join(expand)},
        )

    async def create_project(self, project_data: Mapping[str, Any]) -> JiraProject:
        """Create a project. Requires Jira admin permission."""
        return await self._dispatcher.request(
            self.endpoints.core, "POST", "/project", json=project_data
        )

    async def get_issue_type_scheme(self, project_key: str) -> Any:
        validate_project_key(project_key)
        return await self._dispatcher.request(
            self.endpoints.core, "GET", f"/project/{project_key}/issuetypescheme"
        )

    async def get_workflow_scheme(self, project_key: str) -> Any:
        """Get the workflow scheme of a project (None if the server omits it)."""
        project = await self.get_project(project_key, expand=["workflowScheme"])
        if not isinstance(project, Mapping):
            return None
        return project.get("workflowScheme")

    # --- Agile (boards) ---

    async def get_all_boards(
        self, start_at: int = 0, max_results: int = 50
    ) -> PaginatedResponse:
        """Get one page of boards."""
        return await self._dispatcher.request(
            self.endpoints.agile,
            "GET",
            "/board",
            params={"startAt": start_at, "maxResults": max_results},
        )

    async def get_issues_for_board(
        self,
        board_id: int,
        *,
        start_at: int | None = None,
        max_results: int | None = None,
        jql: str | None = None,
        fields: Sequence[str] | None = None,
    ) -> JiraSearchResponse:
        """Get one page of the issues on a board."""
        return await self._dispatcher.request(
            self.endpoints.agile,
            "GET",
            f"/board/{board_id}/issue",
            params={
                "startAt": start_at,
                "maxResults": max_results,
                "jql": jql,
                "fields": _join(fields),
            },
        )

    # --- Identity ---

    async def get_current_user(self) -> JiraUser:
        """Get the Atlassian profile of the token's user."""
        return await self._dispatcher.request(self.endpoints.identity, "GET", "/me")

    # --- Lifecycle ---

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        if getattr(self, "_http", None) is not None:
            await self._http.aclose()

    async def __aenter__(self) -> "JiraOAuth2Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
