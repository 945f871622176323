"""Analytics tools: graph, SQL, question bank, visualization and health"""

import logging
import uuid
from typing import Any

from mcp import types

from ..config import Settings
from ..models.backend import ExecuteSQLResponse, QuestionMatch, VizSuggestion
from ..models.credentials import CredentialBundle, CredentialMode
from ..models.tool import ToolDefinition
from ..services.backend_client import BackendClient, build_query, check_response, encode_segment
from ..services.credentials import resolve_credentials
from .schemas import compact, object_schema, scoped_schema

logger = logging.getLogger(__name__)

CHART_KINDS = ["bar", "line", "area", "scatter", "table", "map", "pie", "hist"]

VIZ_OUTPUT_SCHEMA = {
    "type": "object",
    "required": ["format", "spec"],
    "properties": {
        "format": {"type": "string", "enum": ["vega-lite"]},
        "spec": {"type": "object"},
        "title": {"type": "string"},
        "rationale": {"type": "string"},
        "fields": {
            "type": "object",
            "properties": {
                "measures": {"type": "array", "items": {"type": "string"}},
                "dimensions": {"type": "array", "items": {"type": "string"}},
                "time": {"type": "string"},
                "aggregation": {"type": "string"},
            },
        },
    },
}

QUESTION_MATCHES_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["entry", "similarity"],
        "properties": {
            "entry": {
                "type": "object",
                "required": ["question", "sql"],
                "properties": {
                    "question": {"type": "string"},
                    "sql": {"type": "string"},
                    "sqlFlowDiagram": {"type": "string"},
                },
            },
            "similarity": {"type": "number"},
        },
    },
}

QUESTION_BANK_DESCRIPTION = (
    "Search the question bank for similar questions and their SQL queries. "
    "ALWAYS call this FIRST before writing any SQL query or calling ExecuteSQL. "
    "Use topK=1 or topK=3 to find the most similar question. If a match has high "
    "similarity (>0.8), reuse its SQL instead of writing a new query."
)

MERMAID_MIME_TYPE = "text/vnd.mermaid"
DIAGRAM_URI_PREFIX = "mermaid://sql-execution-diagram/"


def extract_sql_flow_diagram(result: Any) -> list[types.EmbeddedResource]:
    """Split result.evidence.sql_flow_diagram out as a Mermaid resource block."""
    if not isinstance(result, dict):
        return []
    evidence = result.get("evidence")
    if not isinstance(evidence, dict):
        return []
    diagram = evidence.get("sql_flow_diagram")
    if not isinstance(diagram, str) or not diagram:
        return []

    return [
        types.EmbeddedResource(
            type="resource",
            resource=types.TextResourceContents(
                uri=f"{DIAGRAM_URI_PREFIX}{uuid.uuid4()}",
                mimeType=MERMAID_MIME_TYPE,
                text=diagram,
            ),
        )
    ]


class AnalyticsTools:
    """Builds the analytics tool definitions for one credential mode.

    Handlers are bound methods; they only read their arguments and call the
    backend client.
    """

    DEFAULT_QUESTION_BANK_K = 5

    def __init__(self, client: BackendClient, mode: CredentialMode, settings: Settings):
        self.client = client
        self.mode = mode
        self.settings = settings

    @property
    def scoped(self) -> bool:
        return self.mode is not CredentialMode.LEGACY

    def definitions(self) -> list[ToolDefinition]:
        """Tool definitions in advertisement order for the active mode."""
        if self.scoped:
            return [
                self._suggest_visualization_tool(),
                self._table_graph_tool(),
                self._check_health_tool(),
                self._distinct_values_tool(),
                self._search_question_bank_tool(),
                self._execute_sql_tool(),
            ]
        return [
            self._list_datasets_tool(),
            self._suggest_visualization_tool(),
            self._table_graph_tool(),
            self._relevant_questions_tool(),
            self._check_health_tool(),
            self._distinct_values_tool(),
            self._validate_sql_tool(),
            self._execute_sql_tool(),
        ]

    def question_bank_maintenance(self) -> list[ToolDefinition]:
        """Question bank maintenance tools; only profile-scoped modes have a bank."""
        if not self.scoped:
            return []
        return [self._delete_question_tool()]

    def _resolve(self, arguments: dict[str, Any], tool_name: str) -> CredentialBundle | None:
        return resolve_credentials(arguments, self.mode, self.settings, tool_name)

    def _top_k(self, arguments: dict[str, Any]) -> Any:
        # An explicit 0 is forwarded as given
        top_k = arguments.get("topK")
        return self.DEFAULT_QUESTION_BANK_K if top_k is None else top_k

    # Definitions

    def _suggest_visualization_tool(self) -> ToolDefinition:
        properties: dict[str, Any] = {}
        if self.scoped:
            properties["profileId"] = {
                "type": "string",
                "description": "Profile ID (optional)",
            }
        properties.update({
            "rows": {
                "type": "array",
                "description": "Result rows to visualize (ideally <= 2k).",
                "items": {"type": "object", "additionalProperties": True},
            },
            "dataset": {"type": "string", "description": "Dataset for SQL execution if rows omitted"},
            "sql": {"type": "string", "description": "Query used to produce the answer if rows omitted"},
            "question": {"type": "string", "description": "Original user question to guide chart choice"},
            "prefer": {"type": "array", "items": {"type": "string", "enum": CHART_KINDS}},
            "maxSeries": {"type": "number", "description": "Cap number of series/categories (default 12)"},
            "maxRows": {"type": "number", "description": "Server-side sample limit when using SQL (default 2000)"},
        })
        return ToolDefinition(
            name="SuggestVisualization",
            description=(
                "Return a Vega-Lite chart spec that best explains the answer. "
                "Call this whenever a metric, trend, comparison, breakdown, or distribution "
                "would be clearer as a chart. Prefer bar/line/area for trends and comparisons, "
                "scatter for relationships, and a table when data is sparse. Pass the result rows "
                "(preferred) or dataset + SQL when the rows are large."
            ),
            input_schema=object_schema(properties, additional_properties=False),
            output_schema=VIZ_OUTPUT_SCHEMA,
            handler=self.suggest_visualization,
        )

    def _table_graph_tool(self) -> ToolDefinition:
        question = {
            "type": "string",
            "description": (
                "Optional question to filter the graph to only relevant tables. "
                "Highly recommended for better results."
            ),
        }
        if self.scoped:
            description = (
                "Returns the pre-built graph for this profile with tables, schemas, and connections "
                "based on attached datasets/tables. When a question is provided, the graph is filtered "
                "to the tables relevant to answering it. The graph always covers the scope attached to "
                "the profile."
            )
            schema = scoped_schema(self.mode, {"question": question})
        else:
            description = (
                "Returns tables, schemas, and connections for the given datasets. When a question is "
                "provided, the graph is filtered to the tables relevant to answering it."
            )
            schema = object_schema(
                {
                    "datasets": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Datasets to include in the graph",
                    },
                    "question": question,
                },
                required=["datasets"],
            )
        return ToolDefinition(
            name="GetTableGraph",
            description=description,
            input_schema=schema,
            output_schema={"type": "object"},
            handler=self.get_table_graph,
        )

    def _check_health_tool(self) -> ToolDefinition:
        properties: dict[str, Any] = {}
        description = "Check health status of the server."
        if self.scoped:
            properties = {
                "profileId": {"type": "string", "description": "Optional profile ID to check if graph is ready"},
                "datasourceId": {
                    "type": "string",
                    "description": "Optional datasource ID to check if datasource is ready",
                },
            }
            description += (
                " When profileId is provided, returns whether the profile graph is ready (ready: true/false)."
                " When datasourceId is provided, returns whether the datasource is ready (ready: true/false)."
            )
        return ToolDefinition(
            name="CheckHealth",
            description=description,
            input_schema=object_schema(properties),
            output_schema={"type": "object"},
            handler=self.check_health,
        )

    def _distinct_values_tool(self) -> ToolDefinition:
        column_properties = {
            "dataset": {"type": "string"},
            "table": {"type": "string"},
            "column": {"type": "string"},
            "limit": {"type": "number"},
        }
        return ToolDefinition(
            name="GetUptoNDistinctStringValues",
            description="Return up to limit distinct string values for a non-numeric column.",
            input_schema=scoped_schema(self.mode, column_properties, ["dataset", "table", "column"]),
            output_schema={"type": "array", "items": {"type": "string"}},
            handler=self.get_distinct_values,
        )

    def _search_question_bank_tool(self) -> ToolDefinition:
        properties = {
            "question": {"type": "string", "description": "Question to search for in the question bank"},
            "topK": {"type": "number", "description": "Number of top similar questions to return (default: 5)"},
        }
        return ToolDefinition(
            name="SearchQuestionBank",
            description=QUESTION_BANK_DESCRIPTION,
            input_schema=scoped_schema(self.mode, properties, ["question"], with_credentials=False),
            output_schema=QUESTION_MATCHES_SCHEMA,
            handler=self.search_question_bank,
        )

    def _delete_question_tool(self) -> ToolDefinition:
        properties = {"question": {"type": "string", "description": "The exact question text to delete"}}
        return ToolDefinition(
            name="DeleteQuestion",
            description=(
                "Delete a specific question from a profile's question bank. "
                "Use this to remove outdated or incorrect questions."
            ),
            input_schema=scoped_schema(self.mode, properties, ["question"], with_credentials=False),
            output_schema={"type": "object"},
            handler=self.delete_question,
        )

    def _execute_sql_tool(self) -> ToolDefinition:
        properties = {
            "dataset": {"type": "string"},
            "sql": {"type": "string"},
            "question": {
                "type": "string",
                "description": "Original question - required for LLM validation and diagram generation",
            },
        }
        required = ["dataset", "sql", "question"]
        description = (
            "Execute a SELECT/WITH query against a dataset with LLM validation and diagram generation. "
            "The question parameter triggers validation before execution. "
            "Returns rows + validation evidence + diagram."
        )
        if self.scoped:
            description += (
                " IMPORTANT: ALWAYS call SearchQuestionBank first to check whether a similar question "
                "already has a working SQL query you can reuse."
            )
        return ToolDefinition(
            name="ExecuteSQL",
            description=description,
            input_schema=scoped_schema(self.mode, properties, required),
            output_schema={"type": "object"},
            handler=self.execute_sql,
            secondary_content=extract_sql_flow_diagram,
        )

    def _list_datasets_tool(self) -> ToolDefinition:
        return ToolDefinition(
            name="ListDatasets",
            description="List the datasets available to the configured backend project.",
            input_schema=object_schema({}),
            output_schema={"type": "array"},
            handler=self.list_datasets,
        )

    def _relevant_questions_tool(self) -> ToolDefinition:
        return ToolDefinition(
            name="GetRelevantQuestions",
            description="Return previously answered questions relevant to a new question, with their SQL.",
            input_schema=object_schema(
                {
                    "question": {"type": "string"},
                    "datasets": {"type": "array", "items": {"type": "string"}},
                    "topK": {"type": "number", "description": "Number of questions to return (default: 5)"},
                },
                required=["question"],
            ),
            output_schema={"type": "array"},
            handler=self.get_relevant_questions,
        )

    def _validate_sql_tool(self) -> ToolDefinition:
        return ToolDefinition(
            name="ValidateSQL",
            description="Dry-run and validate a SELECT/WITH query against a dataset without executing it.",
            input_schema=object_schema(
                {
                    "dataset": {"type": "string"},
                    "sql": {"type": "string"},
                    "question": {"type": "string", "description": "Question the query should answer"},
                },
                required=["dataset", "sql"],
            ),
            output_schema={"type": "object"},
            handler=self.validate_sql,
        )

    # Handlers

    async def suggest_visualization(self, arguments: dict[str, Any]) -> Any:
        payload = compact({
            "profileId": arguments.get("profileId") if self.scoped else None,
            "rows": arguments.get("rows"),
            "dataset": arguments.get("dataset"),
            "sql": arguments.get("sql"),
            "question": arguments.get("question"),
            "prefer": arguments.get("prefer"),
            "maxSeries": arguments.get("maxSeries"),
            "maxRows": arguments.get("maxRows"),
        })
        data = await self.client.post("/suggest-viz", payload)
        return check_response(VizSuggestion, data, "/suggest-viz")

    async def get_table_graph(self, arguments: dict[str, Any]) -> Any:
        question = arguments.get("question")
        bundle = self._resolve(arguments, "GetTableGraph")
        if bundle is None:
            return await self.client.post(
                "/graph", compact({"datasets": arguments.get("datasets"), "question": question})
            )

        if arguments.get("datasets"):
            logger.debug("GetTableGraph: ignoring datasets argument, the profile scope decides the graph")
        return await self.client.post("/graph", compact({**bundle.as_payload(), "question": question}))

    async def check_health(self, arguments: dict[str, Any]) -> Any:
        query = ""
        if self.scoped:
            if arguments.get("datasourceId"):
                query = build_query(datasourceId=arguments["datasourceId"])
            elif arguments.get("profileId"):
                query = build_query(profileId=arguments["profileId"])
        return await self.client.get(f"/health{query}")

    async def get_distinct_values(self, arguments: dict[str, Any]) -> Any:
        column = {
            "dataset": arguments["dataset"],
            "table": arguments["table"],
            "column": arguments["column"],
            "limit": arguments.get("limit"),
        }
        bundle = self._resolve(arguments, "GetUptoNDistinctStringValues")
        if bundle is None:
            return await self.client.get("/distinct-values" + build_query(**column))
        # Credentials never travel in a query string
        return await self.client.post("/distinct-values", compact({**bundle.as_payload(), **column}))

    async def search_question_bank(self, arguments: dict[str, Any]) -> Any:
        path = f"/question-bank/{encode_segment(arguments['profileId'])}"
        path += build_query(
            question=arguments["question"],
            k=self._top_k(arguments),
            datasourceId=arguments.get("datasourceId") or None,
        )
        data = await self.client.get(path)
        return check_response(list[QuestionMatch], data, path)

    async def delete_question(self, arguments: dict[str, Any]) -> Any:
        path = f"/question-bank/{encode_segment(arguments['profileId'])}"
        path += build_query(
            question=arguments["question"],
            datasourceId=arguments.get("datasourceId") or None,
        )
        logger.info(f"Deleting question from question bank of profile {arguments['profileId']}")
        return await self.client.delete(path)

    async def execute_sql(self, arguments: dict[str, Any]) -> Any:
        query = {
            "dataset": arguments["dataset"],
            "sql": arguments["sql"],
            "question": arguments.get("question"),
        }
        bundle = self._resolve(arguments, "ExecuteSQL")
        payload = compact({**bundle.as_payload(), **query}) if bundle else compact(query)
        data = await self.client.post("/execute-sql", payload)
        return check_response(ExecuteSQLResponse, data, "/execute-sql")

    async def list_datasets(self, arguments: dict[str, Any]) -> Any:
        return await self.client.get("/datasets")

    async def get_relevant_questions(self, arguments: dict[str, Any]) -> Any:
        payload = compact({
            "question": arguments["question"],
            "datasets": arguments.get("datasets"),
            "k": self._top_k(arguments),
        })
        return await self.client.post("/relevant-questions", payload)

    async def validate_sql(self, arguments: dict[str, Any]) -> Any:
        payload = compact({
            "dataset": arguments["dataset"],
            "sql": arguments["sql"],
            "question": arguments.get("question"),
        })
        return await self.client.post("/validate-sql", payload)
