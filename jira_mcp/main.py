"""jira-mcp CLI: run the MCP server over stdio or HTTP, inspect the tool catalog."""

import logging
from typing import Annotated

import anyio
import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from jira_mcp.client import JiraClient
from jira_mcp.server import build_server, create_http_app, run_stdio
from jira_mcp.settings import get_settings
from jira_mcp.tools import TOOL_CATALOG, JiraTools

app = typer.Typer(help="Jira Cloud exposed as Model Context Protocol tools", no_args_is_help=True)

LogLevelOpt = Annotated[
    str | None,
    typer.Option("--log-level", "-l", help="Logging level (default: JIRA_LOG_LEVEL or INFO)"),
]

# stdout belongs to the stdio transport; everything human-facing goes to stderr.
err_console = Console(stderr=True)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command("stdio")
def stdio(log_level: LogLevelOpt = None) -> None:
    """Serve MCP over stdin/stdout (for desktop and CLI clients)."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)
    with JiraClient(settings) as client:
        server = build_server(JiraTools(client))
        anyio.run(run_stdio, server)


@app.command("serve")
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address (default: JIRA_HOST or 0.0.0.0)")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port (default: JIRA_PORT or 3001)")] = None,
    log_level: LogLevelOpt = None,
) -> None:
    """Serve MCP over streamable HTTP at /mcp."""
    settings = get_settings()
    level = log_level or settings.log_level
    setup_logging(level)
    with JiraClient(settings) as client:
        http_app = create_http_app(build_server(JiraTools(client)))
        uvicorn.run(
            http_app,
            host=host or settings.host,
            port=port or settings.port,
            log_level=level.lower(),
            log_config=None,
        )


@app.command("list-tools")
def list_tools() -> None:
    """Show the tool catalog. Needs no Jira credentials."""
    table = Table(title="Jira MCP tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Required")
    table.add_column("Optional")
    table.add_column("Description")
    for tool in TOOL_CATALOG:
        required = ", ".join(p.name for p in tool.params if p.required)
        optional = ", ".join(p.name for p in tool.params if not p.required)
        table.add_row(tool.name, required or "-", optional or "-", tool.description)
    Console().print(table)
