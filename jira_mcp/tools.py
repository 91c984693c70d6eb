"""Tool catalog and dispatcher: MCP tool calls -> JiraClient calls -> text content.

Every outcome of a known tool, including bad arguments and Jira failures, comes
back as text content so the calling model can read it. Only an unknown tool
name raises.
"""

import json
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any, Literal

from mcp.types import TextContent
from pydantic import BaseModel, ConfigDict

from jira_mcp.client import DEFAULT_ASSIGNEE, JiraClient
from jira_mcp.errors import (
    Failed,
    JiraUnreachableError,
    Ok,
    RemoteServiceError,
    ToolArgumentError,
    UnknownToolError,
    attempt,
)

logger = logging.getLogger(__name__)

ParamType = Literal["string", "integer", "object"]

NO_ISSUES_FOUND = "No issues found"


class ToolParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: ParamType
    description: str
    label: str  # how validation messages refer to the argument
    required: bool = False

    def property_schema(self) -> dict[str, Any]:
        prop: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.type == "object":
            prop["additionalProperties"] = True
        return prop


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    params: tuple[ToolParam, ...] = ()

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {p.name: p.property_schema() for p in self.params},
            "required": [p.name for p in self.params if p.required],
        }


TOOL_CATALOG: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="search_issues",
        description="Search JIRA issues using JQL",
        params=(
            ToolParam(
                name="searchString",
                type="string",
                description="JQL search string",
                label="Search string",
                required=True,
            ),
        ),
    ),
    ToolDefinition(
        name="get_issue",
        description="Get detailed information about a specific JIRA issue",
        params=(
            ToolParam(
                name="issueId",
                type="string",
                description="The ID or key of the JIRA issue",
                label="Issue ID",
                required=True,
            ),
        ),
    ),
    ToolDefinition(
        name="update_issue",
        description="Update an existing JIRA issue",
        params=(
            ToolParam(
                name="issueKey",
                type="string",
                description="The key of the issue to update",
                label="Issue key",
                required=True,
            ),
            ToolParam(
                name="fields",
                type="object",
                description="Fields to update on the issue",
                label="Fields",
                required=True,
            ),
        ),
    ),
    ToolDefinition(
        name="get_transitions",
        description="List the workflow transitions currently available for a JIRA issue",
        params=(
            ToolParam(
                name="issueKey",
                type="string",
                description="The key of the issue",
                label="Issue key",
                required=True,
            ),
        ),
    ),
    ToolDefinition(
        name="transition_issue",
        description="Move a JIRA issue to another status, optionally adding a comment",
        params=(
            ToolParam(
                name="issueKey",
                type="string",
                description="The key of the issue to transition",
                label="Issue key",
                required=True,
            ),
            ToolParam(
                name="transitionId",
                type="string",
                description="ID of the transition, as returned by get_transitions",
                label="Transition ID",
                required=True,
            ),
            ToolParam(
                name="comment",
                type="string",
                description="Comment added together with the transition",
                label="Comment",
            ),
        ),
    ),
    ToolDefinition(
        name="get_users",
        description="Search JIRA users by name or email",
        params=(
            ToolParam(
                name="query",
                type="string",
                description="Text matched against display name and email; empty lists all users",
                label="Query",
            ),
            ToolParam(
                name="maxResults",
                type="integer",
                description="Maximum number of users to return (default 50)",
                label="Max results",
            ),
        ),
    ),
    ToolDefinition(
        name="assign_issue",
        description="Assign a JIRA issue to a user",
        params=(
            ToolParam(
                name="issueKey",
                type="string",
                description="The key of the issue to assign",
                label="Issue key",
                required=True,
            ),
            ToolParam(
                name="accountId",
                type="string",
                description='Account ID of the assignee; omit or null to unassign, "-1" for the project default',
                label="Account ID",
            ),
        ),
    ),
)

TOOLS_BY_NAME: Mapping[str, ToolDefinition] = {tool.name: tool for tool in TOOL_CATALOG}


def _coerce(param: ToolParam, value: Any) -> Any:
    match param.type:
        case "string":
            if isinstance(value, str):
                return value
            if isinstance(value, bool | int | float):
                return json.dumps(value)
            raise ToolArgumentError(param.name, f"{param.label} must be a string")
        case "integer":
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value, re.ASCII):
                return int(value)
            raise ToolArgumentError(param.name, f"{param.label} must be an integer")
        case "object":
            if isinstance(value, dict):
                return value
            raise ToolArgumentError(param.name, f"{param.label} must be an object")
    raise ToolArgumentError(param.name, f"{param.label} has unsupported type {param.type}")


def extract_arguments(tool: ToolDefinition, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
    """Pull every declared parameter out of an untyped argument bag.

    Raises ToolArgumentError for a missing (or null) required parameter or a
    value that does not coerce to the declared type. Absent optional
    parameters map to None.
    """
    arguments = arguments or {}
    extracted: dict[str, Any] = {}
    for param in tool.params:
        value = arguments.get(param.name)
        if value is None:
            if param.required:
                raise ToolArgumentError(param.name, f"{param.label} is required")
            extracted[param.name] = None
            continue
        extracted[param.name] = _coerce(param, value)
    return extracted


def flatten_fields(fields: Mapping[str, Any]) -> dict[str, str]:
    """Strings pass through; anything else is sent as its compact JSON text."""
    return {
        name: value if isinstance(value, str) else json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        for name, value in fields.items()
    }


def _text(*texts: str) -> list[TextContent]:
    return [TextContent(type="text", text=t) for t in texts]


def _log_failure(tool: str, target: str | None, error: Exception) -> None:
    match error:
        case RemoteServiceError(status_code=status):
            logger.error("%s failed for %s: Jira returned HTTP %s", tool, target, status)
        case JiraUnreachableError():
            logger.error("%s failed for %s: Jira unreachable (%s)", tool, target, error)
        case _:
            logger.error("%s failed for %s", tool, target, exc_info=error)


class JiraTools:
    """Routes tool calls from the MCP server to a JiraClient."""

    def __init__(self, client: JiraClient) -> None:
        self._client = client
        self._handlers: dict[str, Callable[[dict[str, Any]], list[TextContent]]] = {
            "search_issues": self._search_issues,
            "get_issue": self._get_issue,
            "update_issue": self._update_issue,
            "get_transitions": self._get_transitions,
            "transition_issue": self._transition_issue,
            "get_users": self._get_users,
            "assign_issue": self._assign_issue,
        }

    @property
    def definitions(self) -> tuple[ToolDefinition, ...]:
        return TOOL_CATALOG

    def call(self, name: str, arguments: Mapping[str, Any] | None) -> list[TextContent]:
        tool = TOOLS_BY_NAME.get(name)
        if tool is None:
            raise UnknownToolError(name)
        try:
            args = extract_arguments(tool, arguments)
        except ToolArgumentError as exc:
            logger.info("Rejected %s call: %s", name, exc)
            return _text(str(exc))
        return self._handlers[name](args)

    def _search_issues(self, args: dict[str, Any]) -> list[TextContent]:
        jql = args["searchString"]
        match attempt(lambda: self._client.search_issues(jql)):
            case Ok(value=result) if result.issues:
                return _text(*(issue.to_json() for issue in result.issues))
            case Ok():
                return _text(NO_ISSUES_FOUND)
            case Failed(error=error):
                _log_failure("search_issues", jql, error)
                return _text("Failed to search issues")

    def _get_issue(self, args: dict[str, Any]) -> list[TextContent]:
        issue_id = args["issueId"]
        match attempt(lambda: self._client.get_issue(issue_id)):
            case Ok(value=issue):
                return _text(issue.to_json())
            case Failed(error=error):
                _log_failure("get_issue", issue_id, error)
                return _text("Cannot get issue details")

    def _update_issue(self, args: dict[str, Any]) -> list[TextContent]:
        key = args["issueKey"]
        fields = flatten_fields(args["fields"])
        match attempt(lambda: self._client.update_issue(key, fields)):
            case Ok():
                return _text(f"Issue {key} updated successfully.")
            case Failed(error=error):
                _log_failure("update_issue", key, error)
                return _text(f"Failed to update issue {key}.")

    def _get_transitions(self, args: dict[str, Any]) -> list[TextContent]:
        key = args["issueKey"]
        match attempt(lambda: self._client.get_transitions(key)):
            case Ok(value=transitions):
                return _text(json.dumps([t.model_dump(by_alias=True) for t in transitions]))
            case Failed(error=error):
                _log_failure("get_transitions", key, error)
                return _text(f"Cannot get transitions for issue {key}")

    def _transition_issue(self, args: dict[str, Any]) -> list[TextContent]:
        key = args["issueKey"]
        transition_id = args["transitionId"]
        comment = args["comment"]
        match attempt(lambda: self._client.transition_issue(key, transition_id, comment)):
            case Ok():
                return _text(f"Issue {key} transitioned successfully.")
            case Failed(error=error):
                _log_failure("transition_issue", key, error)
                return _text(f"Failed to transition issue {key}.")

    def _get_users(self, args: dict[str, Any]) -> list[TextContent]:
        query = args["query"] or ""
        max_results = args["maxResults"] if args["maxResults"] is not None else 50
        match attempt(lambda: self._client.search_users(query, max_results)):
            case Ok(value=users):
                return _text(json.dumps([u.model_dump(by_alias=True) for u in users]))
            case Failed(error=error):
                _log_failure("get_users", query, error)
                return _text("Cannot search users")

    def _assign_issue(self, args: dict[str, Any]) -> list[TextContent]:
        key = args["issueKey"]
        account_id = args["accountId"]
        match attempt(lambda: self._client.assign_issue(key, account_id)):
            case Ok() if account_id is None:
                return _text(f"Issue {key} unassigned.")
            case Ok() if account_id == DEFAULT_ASSIGNEE:
                return _text(f"Issue {key} assigned to the project default assignee.")
            case Ok():
                return _text(f"Issue {key} assigned to {account_id}.")
            case Failed(error=error):
                _log_failure("assign_issue", key, error)
                return _text(f"Failed to assign issue {key}.")
