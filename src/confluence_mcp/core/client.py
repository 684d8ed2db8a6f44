import logging
import time
from typing import Any, Dict, Optional

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_UPSTREAM_HOST
from .credentials import TenantCredentials, validate_credentials
from .errors import (
    ConfluenceAPIError,
    ConfluenceClientError,
    ConfluenceParseError,
    classify_response,
)

# Operation-level names that differ from the wire name.
_PARAM_RENAMES = {"bodyFormat": "body-format"}


def build_query_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """
    Flatten caller params into the query string Confluence expects.
    - None values are dropped
    - booleans become "true"/"false"
    - lists are comma-joined
    """
    out: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        wire_key = _PARAM_RENAMES.get(key, key)
        if isinstance(value, bool):
            out[wire_key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            if not value:
                continue
            out[wire_key] = ",".join(str(v) for v in value)
        else:
            out[wire_key] = str(value)
    return out


class ConfluenceClient:
    """
    HTTP client bound to one tenant.
    - Basic auth with email + API token on every request
    - One attempt per call: no retries, callers decide based on `retryable`
    - Returns parsed JSON ({} for empty bodies); non-2xx raises ConfluenceAPIError
    """

    def __init__(
        self,
        credentials: TenantCredentials,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        upstream_host: str = DEFAULT_UPSTREAM_HOST,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        validate_credentials(credentials)

        self.credentials = credentials
        self.timeout_seconds = timeout_seconds
        self.base_url = credentials.api_base_url(upstream_host)
        self.search_base_url = credentials.search_base_url(upstream_host)
        self.log = logger or logging.getLogger("confluence_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            auth=httpx.BasicAuth(credentials.email, credentials.api_token),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "ConfluenceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def url_for(self, path: str, *, legacy: bool = False) -> str:
        base = self.search_base_url if legacy else self.base_url
        return f"{base}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        legacy: bool = False,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Perform exactly one HTTP call.
        - `legacy=True` targets the v1 REST base (CQL search lives there)
        - Raises ConfluenceAPIError carrying the classified ErrorRecord on non-2xx
        - Raises ConfluenceClientError on network/timeout errors
        - Raises ConfluenceParseError if a non-empty body isn't JSON
        """
        method = method.upper()
        url = self.url_for(path, legacy=legacy)
        start = time.perf_counter()

        try:
            resp = await self.http.request(
                method, url, params=build_query_params(params), json=json
            )
        except httpx.TimeoutException as exc:
            self._log_failure(tool, method, path, None, start, "timeout")
            raise ConfluenceClientError(
                f"Timed out after {self.timeout_seconds}s calling {method} {path}"
            ) from exc
        except httpx.HTTPError as exc:
            self._log_failure(tool, method, path, None, start, type(exc).__name__)
            raise ConfluenceClientError(
                f"Network error calling {method} {path}: {exc}"
            ) from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            record = classify_response(resp.status_code, resp.headers, resp.text, path)
            self._log_failure(tool, method, path, resp.status_code, start, record.kind.value)
            raise ConfluenceAPIError(record)

        self.log.debug(
            "op.request",
            extra={
                "tool": tool,
                "method": method,
                "path": path,
                "status": resp.status_code,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return self._safe_json(resp)

    def _log_failure(
        self,
        tool: Optional[str],
        method: str,
        path: str,
        status: Optional[int],
        start: float,
        reason: str,
    ) -> None:
        # path and tenant only; credentials never reach the log
        self.log.warning(
            "op.request_failed",
            extra={
                "tool": tool,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": int((time.perf_counter() - start) * 1000),
                "reason": reason,
                "tenant": self.credentials.domain or self.credentials.instance_id,
            },
        )

    def _safe_json(self, resp: httpx.Response) -> Any:
        # 204 No Content and friends
        if resp.status_code == 204 or not resp.content:
            return {}

        try:
            return resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise ConfluenceParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url.path}, got non-JSON body snippet: {snippet!r}"
            ) from exc

    async def get(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        legacy: bool = False,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.request("GET", path, params=params, legacy=legacy, tool=tool)

    async def post(
        self,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.request("POST", path, params=params, json=json, tool=tool)

    async def put(
        self,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.request("PUT", path, params=params, json=json, tool=tool)

    async def delete(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.request("DELETE", path, params=params, json=json, tool=tool)


__all__ = ["ConfluenceClient", "build_query_params"]
