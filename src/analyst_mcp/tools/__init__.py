# Tool catalog
# Assembles the tool registry advertised to MCP clients

import logging

from ..config import Settings
from ..models.credentials import CredentialMode
from ..services.backend_client import BackendClient
from ..services.resource_proxy import ResourceProxy
from ..services.tool_registry import ToolRegistry, ToolRegistryBuilder
from .analytics import AnalyticsTools
from .resources import resource_tools

logger = logging.getLogger(__name__)


def build_tool_registry(
    client: BackendClient,
    proxy: ResourceProxy,
    settings: Settings,
    mode: CredentialMode | None = None,
) -> ToolRegistry:
    """Build the immutable tool registry for a credential mode.

    The mode defaults to the one configured in settings.
    """
    mode = mode or settings.analyst_credential_mode
    analytics = AnalyticsTools(client, mode, settings)

    builder = ToolRegistryBuilder()
    builder.register_all(analytics.definitions())
    builder.register_all(resource_tools(proxy))
    builder.register_all(analytics.question_bank_maintenance())

    logger.info(f"Credential mode: {mode.value}")
    return builder.build()


__all__ = ["AnalyticsTools", "build_tool_registry", "resource_tools"]
