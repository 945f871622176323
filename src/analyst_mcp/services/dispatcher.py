"""Dispatcher mapping MCP requests onto tools and backend resources"""

import json
import logging
from typing import Any
from urllib.parse import quote, unquote

from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents

from .error_handler import ResourceNotFoundError, log_invocation_error
from .resource_proxy import ResourceProxy
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

RESOURCE_URI_PREFIX = "resource://"

ContentBlock = types.TextContent | types.EmbeddedResource


def resource_uri(identifier: str) -> str:
    """URI advertised for a backend resource identifier.

    Every identifier, URI-shaped or not, is percent-encoded whole into the
    host of a ``resource://`` URI so URL normalisation cannot alter it.
    """
    return RESOURCE_URI_PREFIX + quote(identifier, safe="")


def identifier_from_uri(uri: Any) -> str:
    """Inverse of resource_uri; plain identifiers pass through unchanged."""
    uri = str(uri)
    if uri.startswith(RESOURCE_URI_PREFIX):
        # URL parsing may append an empty path; encoded identifiers hold no raw '/'
        return unquote(uri[len(RESOURCE_URI_PREFIX):].rstrip("/"))
    return uri


class Dispatcher:
    """MCP-facing operations over a tool registry and a resource proxy"""

    def __init__(self, registry: ToolRegistry, resource_proxy: ResourceProxy):
        self.registry = registry
        self.resource_proxy = resource_proxy

    def list_tools(self) -> list[types.Tool]:
        return [definition.to_mcp() for definition in self.registry.list_all()]

    async def call_tool(self, name: str | None, arguments: dict[str, Any] | None = None) -> list[ContentBlock]:
        """Invoke a registered tool and wrap its result as MCP content

        Args:
            name: Registered tool name
            arguments: Tool arguments (empty when omitted)

        Returns:
            A text block with the JSON result, followed by any blocks the
            tool's secondary content extractor produces

        Raises:
            UnknownToolError: If no tool is registered under name
        """
        try:
            definition = self.registry.get(name)
            logger.info(f"Calling tool {name}")
            result = await definition.invoke(arguments or {})
        except Exception as e:
            log_invocation_error(f"Tool {name}", e)
            raise

        content: list[ContentBlock] = [types.TextContent(type="text", text=json.dumps(result))]
        if definition.secondary_content is not None:
            content.extend(definition.secondary_content(result))
        return content

    async def list_resources(self) -> list[types.Resource]:
        matches = await self.resource_proxy.list()
        return [
            types.Resource(
                uri=resource_uri(match.resource.id),
                name=match.resource.title or match.resource.id,
                description=f"Type: {match.resource.type}" if match.resource.type else "",
                mimeType=match.resource.mime_type,
            )
            for match in matches
        ]

    async def read_resource(self, uri: Any) -> list[ReadResourceContents]:
        identifier = identifier_from_uri(uri)
        try:
            descriptor = await self.resource_proxy.get(identifier)
            if descriptor is None:
                raise ResourceNotFoundError(identifier)
        except Exception as e:
            log_invocation_error(f"Resource read {identifier}", e)
            raise

        return [ReadResourceContents(content=descriptor.render(), mime_type=descriptor.mime_type)]
