"""
Test configuration and shared fixtures for the analyst MCP bridge tests.

The backend client is replaced by an AsyncMock so tests can assert on the
exact backend paths and bodies each tool produces.
"""

import pytest
from unittest.mock import AsyncMock

from analyst_mcp.config import Settings
from analyst_mcp.models.credentials import CredentialMode
from analyst_mcp.services.backend_client import BackendClient
from analyst_mcp.services.dispatcher import Dispatcher
from analyst_mcp.services.resource_proxy import ResourceProxy
from analyst_mcp.tools import build_tool_registry

SERVICE_ACCOUNT_JSON = '{"type": "service_account", "project_id": "demo"}'


def make_settings(**overrides) -> Settings:
    """Settings isolated from the process environment and any .env file"""
    values = {
        "analyst_base": "http://backend.test",
        "analyst_credential_mode": CredentialMode.ENVIRONMENT,
        "google_credentials_json": SERVICE_ACCOUNT_JSON,
        "google_application_credentials": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    """Build isolated settings with selected overrides"""
    return make_settings


@pytest.fixture
def settings():
    """Environment-sourced settings with an inline credential blob"""
    return make_settings()


@pytest.fixture
def mock_backend():
    """Mock backend client"""
    return AsyncMock(spec=BackendClient)


@pytest.fixture
def resource_proxy(mock_backend):
    """Resource proxy over the mock backend"""
    return ResourceProxy(mock_backend)


@pytest.fixture
def registry_for(mock_backend, resource_proxy, settings):
    """Factory building the tool registry for a given credential mode"""
    def build(mode: CredentialMode):
        return build_tool_registry(mock_backend, resource_proxy, settings, mode)
    return build


@pytest.fixture
def registry(registry_for):
    """Tool registry in environment-sourced mode"""
    return registry_for(CredentialMode.ENVIRONMENT)


@pytest.fixture
def dispatcher(registry, resource_proxy):
    """Dispatcher over the environment-mode registry"""
    return Dispatcher(registry, resource_proxy)


@pytest.fixture
def sample_resources():
    """Backend resource listing with one text and one structured document"""
    return [
        {
            "id": "glossary-customer",
            "title": "Customer",
            "type": "glossary",
            "text": "A customer is an account with at least one paid order.",
            "etag": "v1",
        },
        {
            "id": "taxonomy-regions",
            "type": "taxonomy",
            "json": {"EMEA": ["DE", "FR"], "AMER": ["US"]},
        },
    ]


@pytest.fixture
def execute_sql_arguments():
    """Complete ExecuteSQL arguments for environment-sourced mode"""
    return {
        "profileId": "p1",
        "datasourceId": "ds1",
        "dataset": "sales",
        "sql": "SELECT COUNT(*) FROM orders",
        "question": "How many orders?",
    }
