"""confluence_mcp package exports."""

__version__ = "0.1.0"
SERVER_NAME = "confluence-mcp"

from .core import (  # noqa: E402
    ConfluenceAPIError,
    ConfluenceClient,
    ConfluenceClientError,
    ErrorKind,
    TenantCredentials,
    register_discovered_tools,
    resolve_credentials,
)

__all__ = [
    "__version__",
    "SERVER_NAME",
    "ConfluenceClient",
    "ConfluenceClientError",
    "ConfluenceAPIError",
    "ErrorKind",
    "TenantCredentials",
    "resolve_credentials",
    "register_discovered_tools",
]
