"""
MCP server wiring for the analyst bridge

Builds the tool registry and resource proxy once, exposes them through an
``mcp`` low-level Server, and serves it over stdio.
"""

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from . import __version__
from .config import Settings
from .services.backend_client import BackendClient
from .services.dispatcher import ContentBlock, Dispatcher
from .services.resource_proxy import ResourceProxy
from .tools import build_tool_registry

logger = logging.getLogger(__name__)


def build_dispatcher(client: BackendClient, settings: Settings) -> Dispatcher:
    """Startup construction of the registry, proxy and dispatcher."""
    proxy = ResourceProxy(client)
    registry = build_tool_registry(client, proxy, settings)
    return Dispatcher(registry, proxy)


def create_server(dispatcher: Dispatcher, name: str = "cardinal-bq-analyst") -> Server:
    """Create an MCP server whose handlers delegate to the dispatcher.

    Tool failures raised by the dispatcher are reported by the SDK as
    ``isError`` tool results, leaving the session usable.
    """
    server: Server = Server(name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # Handlers check their own required arguments
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[ContentBlock]:
        return await dispatcher.call_tool(name, arguments)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return await dispatcher.list_resources()

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        return await dispatcher.read_resource(uri)

    return server


async def run_stdio(settings: Settings) -> None:
    """Run the bridge with stdio transport until the client disconnects"""
    async with BackendClient(settings.analyst_base) as client:
        dispatcher = build_dispatcher(client, settings)
        server = create_server(dispatcher, settings.server_name)

        logger.info(f"Starting {settings.server_name} (stdio transport), backend {settings.analyst_base}")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
