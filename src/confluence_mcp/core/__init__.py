"""Core domain surface for confluence-mcp (transport-agnostic)."""

from .client import ConfluenceClient, build_query_params
from .config import ConfluenceSettings
from .context import (
    apply_request_context,
    client_from_context,
    ensure_request_id,
    get_credentials,
    reset_context,
)
from .credentials import (
    REQUIRED_HEADERS,
    TenantCredentials,
    credentials_from_env,
    resolve_credentials,
    validate_credentials,
)
from .errors import (
    ConfigurationError,
    ConfluenceAPIError,
    ConfluenceClientError,
    ConfluenceParseError,
    ErrorKind,
    ErrorRecord,
    classify_response,
)
from .formatters import EntityFamily, format_error, format_response, render
from .links import get_link, next_link, parse_cursor
from .models import PaginatedResult, next_version
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
    tool,
)

__all__ = [
    # Client
    "ConfluenceClient",
    "build_query_params",
    "ConfluenceSettings",
    # Credentials
    "TenantCredentials",
    "REQUIRED_HEADERS",
    "resolve_credentials",
    "validate_credentials",
    "credentials_from_env",
    # Exceptions
    "ErrorKind",
    "ErrorRecord",
    "classify_response",
    "ConfluenceClientError",
    "ConfluenceAPIError",
    "ConfluenceParseError",
    "ConfigurationError",
    # Rendering
    "EntityFamily",
    "render",
    "format_response",
    "format_error",
    # Links / models
    "get_link",
    "next_link",
    "parse_cursor",
    "PaginatedResult",
    "next_version",
    # Registry helpers
    "tool",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    # Context
    "apply_request_context",
    "reset_context",
    "ensure_request_id",
    "get_credentials",
    "client_from_context",
]
