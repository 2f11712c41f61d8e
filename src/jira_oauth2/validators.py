"""Pre-flight checks on request payloads.

Each validator checks its fields in a fixed order and raises on the first one
missing, so the reported field is deterministic when several are absent.
"""

from typing import Any, Mapping

from .errors import JiraValidationError


def _missing(field: str) -> JiraValidationError:
    return JiraValidationError(f"Missing required field: {field}")


def _section(data: Mapping[str, Any] | None, key: str) -> Mapping[str, Any]:
    value = data.get(key) if isinstance(data, Mapping) else None
    return value if isinstance(value, Mapping) else {}


def validate_create_issue(issue_data: Mapping[str, Any]) -> None:
    """Validate an issue creation payload.

    Order: project.key, then issuetype (name or id), then summary.

    Raises:
        JiraValidationError: Naming the first missing field
    """
    fields = _section(issue_data, "fields")

    if not _section(fields, "project").get("key"):
        raise _missing("project.key")

    issue_type = _section(fields, "issuetype")
    if not issue_type.get("name") and not issue_type.get("id"):
        raise _missing("issuetype (name or id)")

    if not fields.get("summary"):
        raise _missing("summary")


def validate_issue_link(link_request: Mapping[str, Any]) -> None:
    """Validate an issue link payload: type.name, inwardIssue.key, outwardIssue.key."""
    if not _section(link_request, "type").get("name"):
        raise _missing("type.name")
    if not _section(link_request, "inwardIssue").get("key"):
        raise _missing("inwardIssue.key")
    if not _section(link_request, "outwardIssue").get("key"):
        raise _missing("outwardIssue.key")


def validate_issue_key(issue_key: str) -> None:
    if not isinstance(issue_key, str) or not issue_key.strip():
        raise _missing("issueKey")


def validate_project_key(project_key: str) -> None:
    if not isinstance(project_key, str) or not project_key.strip():
        raise _missing("projectKey")


def validate_transition_id(transition_id: str | int) -> None:
    if transition_id is None or str(transition_id).strip() == "":
        raise _missing("transition.id")
