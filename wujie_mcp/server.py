"""MCP protocol wiring: list_tools / call_tool handlers over stdio."""

import logging

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from wujie_mcp.config import WujieConfig
from wujie_mcp.tools import ImageTools, tool_definitions

logger = logging.getLogger(__name__)


def build_server(config: WujieConfig, tools: ImageTools) -> Server:
    """Low-level server exposing the image tools.

    tools/call is a raw request handler, so an McpError from the tools is sent
    to the client as a JSON-RPC error with its code.
    """
    server: Server = Server(config.server_name, version=config.server_version)

    @server.list_tools()
    async def _list_tools() -> list[Tool]:
        return tool_definitions()

    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        logger.info("call_tool %s", name)
        text = await tools.call(name, request.params.arguments)
        return types.ServerResult(
            types.CallToolResult(content=[TextContent(type="text", text=text)], isError=False)
        )

    server.request_handlers[types.CallToolRequest] = _call_tool
    return server


async def serve_stdio(server: Server) -> None:
    """Serve until the client closes stdin."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Wujie AI MCP server started")
        await server.run(read_stream, write_stream, server.create_initialization_options())
