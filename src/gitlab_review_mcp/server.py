"""MCP server wiring for gitlab-review-mcp.

Binds the tool catalog and dispatcher to the MCP low-level server over stdio.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

try:
    from mcp.server import Server
    from mcp.types import TextContent, Tool
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from . import __version__
from .config import AppConfig
from .errors import GitLabReviewError
from .tools import Runtime, build_runtime, dispatch_tool, list_tool_descriptors

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

SERVER_NAME = "gitlab-review-mcp-server"


def build_tools() -> list[Tool]:
    return [
        Tool(name=d.name, description=d.description, inputSchema=d.input_schema)
        for d in list_tool_descriptors()
    ]


def create_server(runtime: Runtime) -> Server:
    """Create an MCP server bound to the given runtime."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available tools."""
        tools = build_tools()
        logger.info("Listed %s tools", len(tools))
        return tools

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Execute a tool; failures are raised for the SDK to report as tool errors."""
        logger.info("Tool called: %s", name)
        try:
            response = await dispatch_tool(runtime, name, arguments)
        except GitLabReviewError as exc:
            logger.warning("Tool %s failed (%s): %s", name, exc.code, exc.message)
            raise
        return [TextContent(type="text", text=item.text) for item in response.content]

    return server


async def run_server(config: AppConfig) -> None:
    """Run the server over stdio."""
    from mcp.server.stdio import stdio_server

    server = create_server(build_runtime(config))

    async with stdio_server() as (read_stream, write_stream):
        logger.info("GitLab Review MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test to ensure tool listing works without credentials."""
    tools = build_tools()
    logger.info("Self-test rendered %s tools: %s", len(tools), ", ".join(t.name for t in tools))
