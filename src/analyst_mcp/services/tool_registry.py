"""Ordered, immutable registry of tool definitions"""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator

from ..models.tool import ToolDefinition
from .error_handler import DuplicateToolError, UnknownToolError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Tool definitions keyed by name, enumerated in registration order.

    Built once through :class:`ToolRegistryBuilder` and never mutated afterwards.
    """

    def __init__(self, definitions: Iterable[ToolDefinition] = ()):
        index: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in index:
                raise DuplicateToolError(definition.name)
            index[definition.name] = definition
        self._tools = MappingProxyType(index)

    def list_all(self) -> Iterator[ToolDefinition]:
        """Fresh iterator over all tools in registration order."""
        return iter(self._tools.values())

    def get(self, name: str | None) -> ToolDefinition:
        if name is None or name not in self._tools:
            raise UnknownToolError(name)
        return self._tools[name]

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return self.list_all()

    def __len__(self) -> int:
        return len(self._tools)


class ToolRegistryBuilder:
    """Collects tool definitions during startup."""

    def __init__(self) -> None:
        self._definitions: dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> ToolDefinition:
        """Add a tool; a second tool with the same name aborts startup."""
        if definition.name in self._definitions:
            raise DuplicateToolError(definition.name)
        self._definitions[definition.name] = definition
        logger.debug(f"Registered tool: {definition.name}")
        return definition

    def register_all(self, definitions: Iterable[ToolDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    def build(self) -> ToolRegistry:
        registry = ToolRegistry(self._definitions.values())
        logger.info(f"Tool registry built with {len(registry)} tools")
        return registry
