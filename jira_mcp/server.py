"""MCP server over the tool dispatcher, with stdio and streamable-HTTP transports."""

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import anyio.to_thread
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from jira_mcp.tools import JiraTools

logger = logging.getLogger(__name__)

SERVER_NAME = "jira-mcp"
SERVER_VERSION = "0.1.0"


def build_tool_list(tools: JiraTools) -> list[Tool]:
    return [
        Tool(name=d.name, description=d.description, inputSchema=d.input_schema())
        for d in tools.definitions
    ]


def build_server(tools: JiraTools) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return build_tool_list(tools)

    # Arguments are checked by the dispatcher so that failures reach the model as text.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        return await anyio.to_thread.run_sync(tools.call, name, arguments)

    logger.info("MCP server %s ready with %d tools", SERVER_NAME, len(tools.definitions))
    return server


async def run_stdio(server: Server) -> None:
    logger.info("Running MCP server over stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdio session closed")


class _StreamableHTTPEndpoint:
    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self._session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._session_manager.handle_request(scope, receive, send)


def create_http_app(server: Server, path: str = "/mcp") -> Starlette:
    """Starlette app serving the MCP streamable-HTTP transport at ``path``."""
    session_manager = StreamableHTTPSessionManager(app=server, json_response=False, stateless=True)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("Streamable HTTP transport listening at %s", path)
            yield

    return Starlette(
        routes=[Route(path, endpoint=_StreamableHTTPEndpoint(session_manager), methods=["GET", "POST", "DELETE"])],
        lifespan=lifespan,
    )
