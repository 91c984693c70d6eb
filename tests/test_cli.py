"""Smoke tests for the CLI commands using typer CliRunner."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from jira_mcp.main import app
from jira_mcp.server import run_stdio
from jira_mcp.tools import TOOL_CATALOG

runner = CliRunner()


@pytest.fixture
def credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JIRA_URL", "https://example.atlassian.net")
    monkeypatch.setenv("JIRA_EMAIL", "dev@example.com")
    monkeypatch.setenv("JIRA_PAT", "api-token")


class TestListTools:
    def test_renders_catalog_without_credentials(self) -> None:
        result = runner.invoke(app, ["list-tools"])
        assert result.exit_code == 0
        for tool in TOOL_CATALOG:
            assert tool.name in result.output
        assert "—" not in result.output


class TestStdio:
    def test_missing_credentials_exits(self) -> None:
        with patch("jira_mcp.main.anyio.run") as run:
            result = runner.invoke(app, ["stdio"])
        assert result.exit_code == 1
        run.assert_not_called()

    def test_runs_stdio_transport(self, credentials: None) -> None:
        with patch("jira_mcp.main.setup_logging") as setup, patch("jira_mcp.main.anyio.run") as run:
            result = runner.invoke(app, ["stdio", "--log-level", "debug"])
        assert result.exit_code == 0
        setup.assert_called_once_with("debug")
        assert run.call_args.args[0] is run_stdio


class TestServe:
    def test_uses_settings_bind(self, credentials: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JIRA_PORT", "4000")
        with patch("jira_mcp.main.setup_logging"), patch("jira_mcp.main.uvicorn.run") as run:
            result = runner.invoke(app, ["serve"])
        assert result.exit_code == 0
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 4000

    def test_flags_override_settings(self, credentials: None) -> None:
        with patch("jira_mcp.main.setup_logging") as setup, patch("jira_mcp.main.uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9000", "-l", "WARNING"])
        assert result.exit_code == 0
        setup.assert_called_once_with("WARNING")
        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 9000
        assert run.call_args.kwargs["log_level"] == "warning"
