# Resource domain models
# Documents persisted by the analytics backend (glossary, taxonomy, facts...)

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

TEXT_MIME_TYPE = "text/plain"
JSON_MIME_TYPE = "application/json"


class ResourceDescriptor(BaseModel):
    """A backend resource document.

    Exactly one of ``text`` and ``json`` is authoritative: textual content wins
    whenever it is present, structured content is used otherwise.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., min_length=1, description="Resource identifier (URI or opaque id)")
    title: str | None = Field(default=None, description="Human-readable title")
    type: str | None = Field(default=None, description="Kind tag, e.g. glossary, taxonomy, facts")
    text: str | None = Field(default=None, description="Textual body (embedded by the backend)")
    json_body: Any | None = Field(default=None, alias="json", description="Structured body")
    etag: str | None = None
    embedding: list[float] | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ensure ID is not empty."""
        if not v.strip():
            raise ValueError("Resource ID cannot be empty")
        return v

    @property
    def is_structured(self) -> bool:
        return self.text is None and self.json_body is not None

    @property
    def mime_type(self) -> str:
        return JSON_MIME_TYPE if self.is_structured else TEXT_MIME_TYPE

    def render(self) -> str:
        """Body as it should be returned by a resource read."""
        if self.is_structured:
            return json.dumps(self.json_body, indent=2)
        return self.text or ""

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ResourceMatch(BaseModel):
    """One row of a resource listing; similarity is set for semantic searches."""

    resource: ResourceDescriptor
    similarity: float | None = Field(
        default=None, description="Similarity score (0-1) when using semantic search"
    )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"resource": self.resource.to_payload()}
        if self.similarity is not None:
            payload["similarity"] = self.similarity
        return payload
