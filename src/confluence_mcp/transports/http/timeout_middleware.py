from __future__ import annotations

import json
from typing import Callable

import anyio
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from confluence_mcp.core.observability import log_event
from confluence_mcp.transports.http.config import ERROR_TIMEOUT, HttpConfig
from confluence_mcp.transports.http.request_id_middleware import REQUEST_ID_HEADER


class TimeoutMiddleware(BaseHTTPMiddleware):
    """
    Caps how long a POST to the MCP endpoint may run, upstream Confluence
    calls included. `request_timeout_s=0` turns the cap off.
    """

    def __init__(self, app, cfg: HttpConfig):
        super().__init__(app)
        self.cfg = cfg

    @property
    def enabled(self) -> bool:
        return self.cfg.request_timeout_s > 0

    def _applies(self, request: Request) -> bool:
        return request.method.upper() == "POST" and request.url.path == self.cfg.path

    async def dispatch(self, request: Request, call_next: Callable):
        if not self.enabled or not self._applies(request):
            return await call_next(request)

        try:
            with anyio.fail_after(self.cfg.request_timeout_s):
                return await call_next(request)
        except TimeoutError:
            return self._timed_out(request)

    def _timed_out(self, request: Request) -> Response:
        rid = getattr(request.state, "request_id", "") or ""
        log_event(
            "http.timeout",
            request_id=rid,
            path=request.url.path,
            status=self.cfg.timeout_status,
            reason=f"exceeded {self.cfg.request_timeout_s}s",
        )
        body = {"error": ERROR_TIMEOUT, "message": "Request timed out", "request_id": rid}
        return Response(
            json.dumps(body),
            status_code=self.cfg.timeout_status,
            media_type="application/json",
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


__all__ = ["TimeoutMiddleware"]
