from __future__ import annotations

import json
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from confluence_mcp.core.config import ConfluenceSettings
from confluence_mcp.core.context import apply_request_context, reset_context
from confluence_mcp.core.credentials import (
    REQUIRED_HEADERS,
    resolve_credentials,
    validate_credentials,
)
from confluence_mcp.core.errors import ConfigurationError
from confluence_mcp.core.observability import log_event
from confluence_mcp.transports.http.config import ERROR_UNAUTHORIZED
from confluence_mcp.transports.http.request_id_middleware import REQUEST_ID_HEADER


class CredentialsMiddleware(BaseHTTPMiddleware):
    """
    Resolve tenant credentials from the X-Confluence-* headers and bind them
    to ContextVars for the rest of the request. Requests without a complete
    set are rejected with 401 before any tool runs.
    """

    def __init__(self, app, settings: Optional[ConfluenceSettings] = None):
        super().__init__(app)
        self.settings = settings or ConfluenceSettings()

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = getattr(request.state, "request_id", "") or ""
        credentials = resolve_credentials(request.headers)

        try:
            validate_credentials(credentials)
        except ConfigurationError as exc:
            log_event(
                "auth.missing_credentials",
                request_id=request_id,
                method=request.method.upper(),
                path=request.url.path,
                status=401,
            )
            return self._unauthorized(str(exc), request_id)

        tokens = apply_request_context(
            credentials, request_id=request_id or None, settings=self.settings
        )
        try:
            return await call_next(request)
        finally:
            reset_context(tokens)

    @staticmethod
    def _unauthorized(message: str, request_id: str) -> Response:
        body = {
            "error": ERROR_UNAUTHORIZED,
            "message": message,
            "required_headers": REQUIRED_HEADERS,
            "request_id": request_id,
        }
        return Response(
            json.dumps(body),
            status_code=401,
            media_type="application/json",
            headers={REQUEST_ID_HEADER: request_id} if request_id else None,
        )


__all__ = ["CredentialsMiddleware"]
