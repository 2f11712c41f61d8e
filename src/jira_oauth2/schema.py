"""Typed shapes of Jira request and response bodies.

These are TypedDicts for static typing only. Responses are returned as decoded
JSON and never validated against them at runtime.
"""

from typing import Any, Literal, TypedDict

from typing_extensions import NotRequired

__all__ = [
    "CreateIssueRequest",
    "CreateIssueResponse",
    "IssueLinkRequest",
    "JiraBoard",
    "JiraIssue",
    "JiraIssueType",
    "JiraProject",
    "JiraSearchResponse",
    "JiraUser",
    "PaginatedResponse",
    "TransitionsResponse",
]


class JiraUser(TypedDict):
    """Profile returned by the identity API (/me)."""

    account_id: str
    email: NotRequired[str]
    name: str
    picture: str
    account_status: str
    last_updated: str
    locale: str
    account_type: str
    email_verified: NotRequired[bool]


class JiraProject(TypedDict):
    id: str
    key: str
    name: str


class JiraIssueType(TypedDict):
    id: str
    name: str
    description: str
    subtask: bool


class JiraIssue(TypedDict):
    id: str
    key: str
    self: str
    # summary, project, issuetype, status, plus custom fields
    fields: dict[str, Any]


class CreateIssueResponse(TypedDict):
    id: str
    key: str
    self: str


class JiraBoard(TypedDict):
    id: int
    self: str
    name: str
    type: Literal["scrum", "kanban", "simple"]


class CreateIssueRequest(TypedDict):
    fields: dict[str, Any]
    update: NotRequired[dict[str, Any]]


class IssueLinkRequest(TypedDict):
    type: dict[str, str]
    inwardIssue: dict[str, str]
    outwardIssue: dict[str, str]
    comment: NotRequired[dict[str, Any]]


class JiraSearchResponse(TypedDict):
    expand: NotRequired[str]
    startAt: int
    maxResults: int
    total: int
    issues: list[JiraIssue]


class PaginatedResponse(TypedDict):
    maxResults: int
    startAt: int
    total: NotRequired[int]
    isLast: bool
    values: list[Any]


class TransitionsResponse(TypedDict):
    expand: NotRequired[str]
    transitions: list[dict[str, Any]]
