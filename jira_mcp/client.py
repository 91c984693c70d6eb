"""Jira Cloud REST API v3 client."""

import logging
from typing import Any

import httpx

from jira_mcp.errors import JiraNotFoundError, JiraUnreachableError, RemoteServiceError
from jira_mcp.models import Issue, SearchResult, Transition, User
from jira_mcp.settings import JiraSettings

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_FIELDS = ["summary", "status", "assignee", "reporter", "description"]
DEFAULT_ISSUE_FIELDS = [
    *DEFAULT_SEARCH_FIELDS,
    "priority",
    "issuetype",
    "project",
    "created",
    "updated",
]

# Jira's assignee endpoint reads "-1" as "use the project's default assignee".
DEFAULT_ASSIGNEE = "-1"


def _log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, request.url)


def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug("HTTP %s %s -> %s", request.method, request.url, response.status_code)


class JiraClient:
    """Typed calls against one Jira site, sharing a single connection pool.

    The underlying ``httpx.Client`` is thread-safe, so one instance serves
    concurrent tool calls.
    """

    def __init__(self, settings: JiraSettings) -> None:
        if not (settings.url and settings.email and settings.pat):
            raise RuntimeError("url, email and pat are required")
        self.base_url = settings.url.rstrip("/") + settings.api_path
        self._http = httpx.Client(
            base_url=self.base_url,
            auth=httpx.BasicAuth(settings.email, settings.pat.get_secret_value()),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=settings.timeout,
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        target: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise JiraUnreachableError(operation, target, str(exc) or type(exc).__name__) from exc
        if response.status_code == 404:
            raise JiraNotFoundError(response.status_code, operation, target)
        if response.is_error:
            raise RemoteServiceError(response.status_code, operation, target)
        return response

    def search_issues(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = 50,
        fields: list[str] | None = None,
    ) -> SearchResult:
        logger.info("Searching issues with JQL: %s", jql)
        response = self._request(
            "POST",
            "/search",
            operation="search issues",
            json={
                "jql": jql,
                "startAt": start_at,
                "maxResults": max_results,
                "fields": fields or DEFAULT_SEARCH_FIELDS,
            },
        )
        return SearchResult.model_validate(response.json())

    def get_issue(self, issue_id_or_key: str, fields: list[str] | None = None) -> Issue:
        logger.info("Fetching issue %s", issue_id_or_key)
        response = self._request(
            "GET",
            f"/issue/{issue_id_or_key}",
            operation="get issue",
            target=issue_id_or_key,
            params={"fields": ",".join(fields or DEFAULT_ISSUE_FIELDS)},
        )
        return Issue.model_validate(response.json())

    def update_issue(self, issue_id_or_key: str, fields: dict[str, Any]) -> None:
        """Partial update: keys absent from ``fields`` are left untouched by Jira."""
        logger.info("Updating issue %s", issue_id_or_key)
        self._request(
            "PUT",
            f"/issue/{issue_id_or_key}",
            operation="update issue",
            target=issue_id_or_key,
            json={"fields": fields},
        )
        logger.info("Issue %s updated", issue_id_or_key)

    def get_transitions(self, issue_id_or_key: str) -> list[Transition]:
        logger.info("Fetching transitions for %s", issue_id_or_key)
        response = self._request(
            "GET",
            f"/issue/{issue_id_or_key}/transitions",
            operation="get transitions",
            target=issue_id_or_key,
        )
        return [Transition.model_validate(t) for t in response.json().get("transitions", [])]

    def transition_issue(self, issue_id_or_key: str, transition_id: str, comment: str | None = None) -> None:
        """Move an issue along its workflow; Jira applies the comment in the same call."""
        logger.info("Transitioning %s with transition %s", issue_id_or_key, transition_id)
        body: dict[str, Any] = {"transition": {"id": transition_id}}
        if comment:
            body["update"] = {"comment": [{"add": {"body": comment}}]}
        self._request(
            "POST",
            f"/issue/{issue_id_or_key}/transitions",
            operation="transition issue",
            target=issue_id_or_key,
            json=body,
        )

    def search_users(self, query: str = "", max_results: int = 50) -> list[User]:
        logger.info("Searching users matching %r", query)
        response = self._request(
            "GET",
            "/user/search",
            operation="search users",
            params={"query": query, "maxResults": max_results},
        )
        return [User.model_validate(u) for u in response.json()]

    def assign_issue(self, issue_id_or_key: str, account_id: str | None) -> None:
        """Assign an issue.

        ``None`` unassigns, ``DEFAULT_ASSIGNEE`` ("-1") hands the issue to the
        project default; both are sent to Jira as-is.
        """
        logger.info("Assigning %s to %s", issue_id_or_key, account_id)
        self._request(
            "PUT",
            f"/issue/{issue_id_or_key}/assignee",
            operation="assign issue",
            target=issue_id_or_key,
            json={"accountId": account_id},
        )
