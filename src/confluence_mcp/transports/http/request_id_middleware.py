from __future__ import annotations

import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from confluence_mcp.core.credentials import CLOUD_ID_HEADER, DOMAIN_HEADER
from confluence_mcp.core.observability import log_event

REQUEST_ID_HEADER = "X-Request-Id"
CORRELATION_ID_HEADER = "X-Correlation-Id"
DURATION_HEADER = "X-Request-Duration-Ms"


def incoming_request_id(request: Request) -> str:
    """Caller-supplied X-Request-Id / X-Correlation-Id, else a fresh uuid4 hex."""
    for header in (REQUEST_ID_HEADER, CORRELATION_ID_HEADER):
        value = (request.headers.get(header) or "").strip()
        if value:
            return value
    return uuid.uuid4().hex


def _tenant_of(request: Request) -> Optional[str]:
    # the site name is safe to log; the token and email are not
    return request.headers.get(DOMAIN_HEADER) or request.headers.get(CLOUD_ID_HEADER)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Outermost middleware: tags the request with an id (request.state.request_id),
    echoes it back as X-Request-Id and writes one `http_request` access line,
    also when the downstream app raises.
    """

    async def dispatch(self, request: Request, call_next):
        rid = incoming_request_id(request)
        request.state.request_id = rid

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            if response is not None:
                response.headers.setdefault(REQUEST_ID_HEADER, rid)
                response.headers.setdefault(DURATION_HEADER, str(duration_ms))

            log_event(
                "http_request",
                request_id=rid,
                tenant=_tenant_of(request),
                method=request.method.upper(),
                path=request.url.path,
                status=response.status_code if response is not None else "exception",
                duration_ms=duration_ms,
            )


__all__ = [
    "RequestIdMiddleware",
    "incoming_request_id",
    "REQUEST_ID_HEADER",
    "CORRELATION_ID_HEADER",
]
