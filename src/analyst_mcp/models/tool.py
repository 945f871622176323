# Tool domain models
# Core models for tool definitions exposed over MCP

from typing import Any, Awaitable, Callable

from mcp import types
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.error_handler import MissingFieldError

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]
ContentExtractor = Callable[[Any], list[types.EmbeddedResource]]


def is_missing(value: Any) -> bool:
    """Absent, null and empty-string arguments all count as missing."""
    return value is None or value == ""


def require_fields(
    arguments: dict[str, Any], required: list[str], tool_name: str | None = None
) -> None:
    """Raise MissingFieldError for the first required field not supplied."""
    for field in required:
        if is_missing(arguments.get(field)):
            raise MissingFieldError(field, tool_name)


class ToolDefinition(BaseModel):
    """A named, schema-described tool and the coroutine that serves it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Unique tool name")
    description: str = Field(default="", description="Description for LLM consumption")
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON Schema for tool inputs",
    )
    output_schema: dict[str, Any] | None = Field(
        default=None, description="JSON Schema describing the result (documentation only)"
    )
    handler: ToolHandler
    secondary_content: ContentExtractor | None = Field(
        default=None, description="Builds extra content blocks from a successful result"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is not blank."""
        if not v.strip():
            raise ValueError("Tool name cannot be empty")
        return v

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    async def invoke(self, arguments: dict[str, Any]) -> Any:
        """Check required arguments, then run the handler."""
        require_fields(arguments, self.required, self.name)
        return await self.handler(arguments)

    def to_mcp(self) -> types.Tool:
        """Tool definition in MCP protocol format."""
        return types.Tool(
            name=self.name,
            description=self.description or "",
            inputSchema=self.input_schema,
        )
