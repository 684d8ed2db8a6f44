from __future__ import annotations

import os
from dataclasses import dataclass

# Error code strings used across middlewares/tests
ERROR_TIMEOUT = "timeout"
ERROR_UNAUTHORIZED = "Unauthorized"


def _get_bool_env(name: str, default: bool) -> bool:
    """Parse a boolean environment variable with a safe default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


@dataclass(frozen=True)
class HttpConfig:
    """Configuration for the streamable-HTTP transport."""

    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/mcp"
    json_response: bool = True
    stateless_http: bool = True
    request_timeout_s: float = 60.0
    timeout_status: int = 504

    @classmethod
    def from_env(cls) -> "HttpConfig":
        request_timeout_s = float(os.getenv("MCP_REQUEST_TIMEOUT_S", "60") or 60)
        timeout_status = int(os.getenv("MCP_TIMEOUT_STATUS", "504") or 504)

        if timeout_status not in {408, 503, 504}:
            raise ValueError("MCP_TIMEOUT_STATUS must be one of 408, 503, 504")
        if request_timeout_s < 0:
            raise ValueError("MCP_REQUEST_TIMEOUT_S must not be negative")

        path = os.getenv("FASTMCP_STREAMABLE_HTTP_PATH", cls.path)
        if not path.startswith("/"):
            raise ValueError("FASTMCP_STREAMABLE_HTTP_PATH must start with '/'")

        return cls(
            host=os.getenv("FASTMCP_HOST", cls.host),
            port=int(os.getenv("FASTMCP_PORT", cls.port)),
            path=path,
            json_response=_get_bool_env("FASTMCP_JSON_RESPONSE", cls.json_response),
            stateless_http=_get_bool_env("FASTMCP_STATELESS_HTTP", cls.stateless_http),
            request_timeout_s=request_timeout_s,
            timeout_status=timeout_status,
        )


__all__ = ["HttpConfig", "ERROR_TIMEOUT", "ERROR_UNAUTHORIZED"]
