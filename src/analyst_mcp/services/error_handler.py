"""Error taxonomy and error logging for the analyst MCP bridge."""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class AnalystMCPError(Exception):
    """Base exception class for bridge errors."""
    def __init__(self, message: str, error_code: str = "ANALYST_MCP_ERROR", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# Caller-input errors

class MissingFieldError(AnalystMCPError):
    """A required argument was not supplied by the caller."""
    def __init__(self, field: str, tool_name: Optional[str] = None):
        message = f"Missing required argument '{field}'"
        if tool_name:
            message += f" for tool {tool_name}"
        super().__init__(message, "MISSING_FIELD", {"field": field, "tool": tool_name})
        self.field = field


class UnknownToolError(AnalystMCPError):
    """The requested tool is not registered."""
    def __init__(self, name: Optional[str]):
        super().__init__(f"Unknown tool: {name}", "UNKNOWN_TOOL", {"tool": name})
        self.name = name


class ResourceNotFoundError(AnalystMCPError):
    """No backend resource carries the requested identifier."""
    def __init__(self, identifier: str):
        super().__init__(f"Resource not found: {identifier}", "RESOURCE_NOT_FOUND", {"id": identifier})
        self.identifier = identifier


# Configuration errors

class ConfigurationError(AnalystMCPError):
    """Exception for server-side configuration errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Server misconfigured: {message}", "CONFIG_ERROR", details)


class CredentialConfigurationError(ConfigurationError):
    """Credential environment sources are missing or unreadable."""


class DuplicateToolError(ConfigurationError):
    """Two tool definitions share a name."""
    def __init__(self, name: str):
        super().__init__(f"tool {name} is registered more than once", {"tool": name})
        self.name = name


# Backend errors

class BackendError(AnalystMCPError):
    """The analytics backend answered with a non-success HTTP status."""
    def __init__(self, path: str, status_code: int, body: str):
        super().__init__(f"{path} {status_code}: {body}", "BACKEND_ERROR", {"path": path, "status_code": status_code})
        self.path = path
        self.status_code = status_code
        self.body = body


class BackendDecodeError(AnalystMCPError):
    """The analytics backend answered with a payload we cannot decode."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: unexpected backend response: {reason}", "BACKEND_DECODE_ERROR", {"path": path})
        self.path = path
        self.reason = reason


CALLER_ERRORS = (MissingFieldError, UnknownToolError, ResourceNotFoundError)


def log_invocation_error(operation: str, error: Exception) -> Dict[str, Any]:
    """Log a failed invocation at a level matching its category and return its summary."""
    error_info = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error_code": getattr(error, "error_code", None),
        "error_message": str(error),
    }

    if isinstance(error, CALLER_ERRORS):
        logger.info(f"{operation} rejected - {error_info['error_type']}: {error_info['error_message']}")
    elif isinstance(error, ConfigurationError):
        logger.error(f"{operation} failed - {error_info['error_type']}: {error_info['error_message']}")
    elif isinstance(error, (BackendError, BackendDecodeError)):
        logger.warning(f"{operation} failed - {error_info['error_type']}: {error_info['error_message']}")
    else:
        logger.exception(f"{operation} - Unexpected error: {error_info['error_message']}")

    return error_info
