# Models package
# Domain models for tools, resources, credentials and backend responses

from .backend import ExecuteSQLResponse, QuestionMatch, VizSuggestion
from .credentials import CredentialBundle, CredentialMode
from .resource import ResourceDescriptor, ResourceMatch
from .tool import ToolDefinition

__all__ = [
    "CredentialBundle",
    "CredentialMode",
    "ExecuteSQLResponse",
    "QuestionMatch",
    "ResourceDescriptor",
    "ResourceMatch",
    "ToolDefinition",
    "VizSuggestion",
]
