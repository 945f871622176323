# Backend response models
# Shapes checked at the HTTP boundary before results are handed to MCP callers

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ExecuteSQLResponse(BaseModel):
    """Response of POST /execute-sql.

    Only the object shape is checked; ``evidence`` is opaque and the diagram
    extractor decides what it can use.
    """

    model_config = ConfigDict(extra="allow")

    evidence: Any = Field(default=None, description="Validation evidence, may carry sql_flow_diagram")


class VizFields(BaseModel):
    """Auto-detected field roles of a chart."""

    model_config = ConfigDict(extra="allow")

    measures: list[str] | None = None
    dimensions: list[str] | None = None
    time: str | None = None
    aggregation: str | None = None


class VizSuggestion(BaseModel):
    """Response of POST /suggest-viz."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    format: Literal["vega-lite"]
    spec: dict[str, Any]
    title: str | None = None
    rationale: str | None = None
    detected_fields: VizFields | None = Field(default=None, alias="fields")


class QuestionBankEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    question: str
    sql: str
    sqlFlowDiagram: str | None = None  # noqa: N815


class QuestionMatch(BaseModel):
    """One row of GET /question-bank/{profileId}."""

    model_config = ConfigDict(extra="allow")

    entry: QuestionBankEntry
    similarity: float
