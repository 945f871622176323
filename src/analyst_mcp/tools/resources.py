"""Resource management tools backed by the resource proxy"""

from typing import Any

from ..models.resource import ResourceDescriptor
from ..models.tool import ToolDefinition
from ..services.resource_proxy import ResourceProxy
from .schemas import object_schema

RESOURCE_TYPES = "glossary, taxonomy, facts, reasoning, gen"

RESOURCE_MATCHES_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "resource": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "title": {"type": "string"},
                    "type": {"type": "string"},
                    "text": {"type": "string"},
                },
            },
            "similarity": {
                "type": "number",
                "description": "Similarity score (0-1) when using semantic search",
            },
        },
    },
}


def resource_tools(proxy: ResourceProxy) -> list[ToolDefinition]:
    """ListResources, UpsertResource and DeleteResource bound to a proxy."""

    async def list_resources(arguments: dict[str, Any]) -> Any:
        matches = await proxy.list(
            query=arguments.get("query"),
            type=arguments.get("type"),
            top_k=arguments.get("topK"),
        )
        return [match.to_payload() for match in matches]

    async def upsert_resource(arguments: dict[str, Any]) -> Any:
        descriptor = ResourceDescriptor(
            id=arguments["id"],
            title=arguments.get("title"),
            type=arguments.get("type"),
            text=arguments.get("text"),
        )
        return await proxy.upsert(descriptor)

    async def delete_resource(arguments: dict[str, Any]) -> Any:
        return await proxy.delete(arguments["id"])

    return [
        ToolDefinition(
            name="ListResources",
            description=(
                "PRIMARY TOOL for domain-specific terminology, glossary terms, business definitions, "
                "and customer-specific knowledge. ALWAYS call this FIRST when a question uses "
                "unfamiliar terms or business vocabulary (e.g. \"customers\", \"revenue\", "
                "\"conversions\") to learn their definition in this domain. Uses semantic similarity "
                "search over embeddings. Returns glossary definitions, taxonomies, business rules, "
                "metric definitions and other domain knowledge. Without a query, returns all resources."
            ),
            input_schema=object_schema({
                "query": {
                    "type": "string",
                    "description": (
                        "Natural language query for semantic search. "
                        "Example: \"What is a customer?\" or \"revenue calculation rules\""
                    ),
                },
                "topK": {
                    "type": "number",
                    "description": "Number of top similar resources to return (default: 10). Only used with query.",
                },
                "type": {"type": "string", "description": f"Only return resources of this type ({RESOURCE_TYPES})"},
            }),
            output_schema=RESOURCE_MATCHES_SCHEMA,
            handler=list_resources,
        ),
        ToolDefinition(
            name="UpsertResource",
            description=(
                "Create or update a resource (e.g. glossary/taxonomy) that persists across sessions. "
                "The resource text is embedded by the backend so ListResources can find it by meaning. "
                "Use this to store domain knowledge, business rules, definitions, or any context that "
                "should be searchable later."
            ),
            input_schema=object_schema(
                {
                    "id": {
                        "type": "string",
                        "description": 'Unique resource ID/URI (e.g. "glossary-customer", "rule-revenue-calc")',
                    },
                    "title": {"type": "string", "description": "Human-readable title"},
                    "type": {"type": "string", "description": f"Resource type: {RESOURCE_TYPES}"},
                    "text": {"type": "string", "description": "Resource content - embedded for semantic search"},
                },
                required=["id", "title", "type", "text"],
                additional_properties=False,
            ),
            output_schema={"type": "object"},
            handler=upsert_resource,
        ),
        ToolDefinition(
            name="DeleteResource",
            description="Delete a resource by ID from the persistent backend.",
            input_schema=object_schema({"id": {"type": "string"}}, required=["id"]),
            output_schema={"type": "object"},
            handler=delete_resource,
        ),
    ]
