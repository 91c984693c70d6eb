"""Shared test fixtures."""

from typing import Any

import pytest

import jira_mcp.settings as settings_module
from jira_mcp.client import JiraClient
from jira_mcp.models import Issue, SearchResult, Transition, User
from jira_mcp.settings import JiraSettings

SITE_URL = "https://example.atlassian.net"
BASE_URL = f"{SITE_URL}/rest/api/3"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Keep the user's config file, .env and JIRA_* env vars out of every test."""
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / "config.toml")
    monkeypatch.chdir(tmp_path)
    for var in ("JIRA_URL", "JIRA_EMAIL", "JIRA_PAT", "JIRA_TIMEOUT", "JIRA_LOG_LEVEL", "JIRA_HOST", "JIRA_PORT"):
        monkeypatch.delenv(var, raising=False)
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> JiraSettings:
    return JiraSettings(  # type: ignore[call-arg]
        url=SITE_URL,
        email="dev@example.com",
        pat="api-token",
    )


@pytest.fixture
def client(settings: JiraSettings):
    with JiraClient(settings) as jira:
        yield jira


@pytest.fixture
def issue_json() -> dict[str, Any]:
    return {
        "id": "10001",
        "key": "DEMO-123",
        "self": f"{BASE_URL}/issue/10001",
        "expand": "renderedFields,names,schema",
        "fields": {
            "summary": "Fix null check in auth middleware",
            "description": {
                "type": "doc",
                "version": 1,
                "content": [
                    {
                        "type": "paragraph",
                        "content": [{"type": "text", "text": "The middleware throws when session is None."}],
                    }
                ],
            },
            "status": {
                "id": "3",
                "name": "In Progress",
                "self": f"{BASE_URL}/status/3",
                "statusCategory": {"id": 4, "key": "indeterminate", "name": "In Progress"},
            },
            "assignee": {
                "accountId": "5b10ac8d82e05b22cc7d4ef5",
                "displayName": "Jane Doe",
                "emailAddress": "jane@example.com",
                "self": f"{BASE_URL}/user?accountId=5b10ac8d82e05b22cc7d4ef5",
                "active": True,
            },
            "reporter": None,
            "priority": {"id": "2", "name": "High", "self": f"{BASE_URL}/priority/2"},
            "issuetype": {"id": "10004", "name": "Bug", "self": f"{BASE_URL}/issuetype/10004"},
            "project": {"id": "10000", "key": "DEMO", "name": "Demo", "self": f"{BASE_URL}/project/10000"},
            "created": "2024-01-01T09:00:00.000+0000",
            "updated": "2024-01-02T10:30:00.000+0000",
        },
    }


@pytest.fixture
def issue(issue_json: dict[str, Any]) -> Issue:
    return Issue.model_validate(issue_json)


@pytest.fixture
def search_result(issue: Issue) -> SearchResult:
    return SearchResult(start_at=0, max_results=50, total=1, issues=[issue])


@pytest.fixture
def transitions_json() -> dict[str, Any]:
    return {
        "expand": "transitions",
        "transitions": [
            {"id": "11", "name": "To Do", "to": {"id": "10000", "name": "To Do"}, "hasScreen": False},
            {"id": "31", "name": "Done", "to": {"id": "10002", "name": "Done"}, "hasScreen": False},
        ],
    }


@pytest.fixture
def transitions(transitions_json: dict[str, Any]) -> list[Transition]:
    return [Transition.model_validate(t) for t in transitions_json["transitions"]]


@pytest.fixture
def users_json() -> list[dict[str, Any]]:
    return [
        {
            "accountId": "5b10ac8d82e05b22cc7d4ef5",
            "accountType": "atlassian",
            "displayName": "Jane Doe",
            "self": f"{BASE_URL}/user?accountId=5b10ac8d82e05b22cc7d4ef5",
        },
        {
            "accountId": "5b10a2844c20165700ede21g",
            "displayName": "Sam Roe",
            "emailAddress": "sam@example.com",
            "self": f"{BASE_URL}/user?accountId=5b10a2844c20165700ede21g",
        },
    ]


@pytest.fixture
def users(users_json: list[dict[str, Any]]) -> list[User]:
    return [User.model_validate(u) for u in users_json]
