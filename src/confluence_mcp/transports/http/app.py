from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.responses import JSONResponse

from confluence_mcp import SERVER_NAME, __version__
from confluence_mcp.core.config import ConfluenceSettings
from confluence_mcp.core.context import client_from_context
from confluence_mcp.core.registry import register_discovered_tools
from confluence_mcp.transports.http.config import HttpConfig
from confluence_mcp.transports.http.middleware import CredentialsMiddleware
from confluence_mcp.transports.http.ops import (
    HEALTH_PATH,
    build_readiness_status,
    is_ops_path,
)
from confluence_mcp.transports.http.request_id_middleware import RequestIdMiddleware
from confluence_mcp.transports.http.timeout_middleware import TimeoutMiddleware

log = logging.getLogger(__name__)


def build_fastmcp(cfg: HttpConfig | None = None) -> FastMCP:
    """Create a FastMCP instance with every Confluence tool registered."""
    return _build_fastmcp(cfg or HttpConfig.from_env())[0]


def _build_fastmcp(cfg: HttpConfig) -> Tuple[FastMCP, List[str]]:
    allowed_hosts = [cfg.host, f"{cfg.host}:*", "testserver"]
    for h in ("localhost", "localhost:*", "127.0.0.1", "127.0.0.1:*"):
        if h not in allowed_hosts:
            allowed_hosts.append(h)

    transport_security = TransportSecuritySettings(
        enable_dns_rebinding_protection=True,
        allowed_hosts=allowed_hosts,
    )

    fastmcp = FastMCP(
        SERVER_NAME,
        json_response=cfg.json_response,
        stateless_http=cfg.stateless_http,
        streamable_http_path=cfg.path,
        host=cfg.host,
        port=cfg.port,
        transport_security=transport_security,
    )

    names = register_discovered_tools(fastmcp, client_from_context)

    log.info(
        "Built FastMCP (json_response=%s, stateless_http=%s, path=%s, host=%s, port=%s)",  # noqa: E501
        cfg.json_response,
        cfg.stateless_http,
        cfg.path,
        cfg.host,
        cfg.port,
    )
    return fastmcp, names


def _build_ops_app(readiness_state: Dict[str, bool]) -> Starlette:
    no_store = {"Cache-Control": "no-store"}

    async def healthz(_request):
        return JSONResponse({"status": "ok"}, headers=no_store)

    async def health(_request):
        return JSONResponse(
            {"status": "ok", "server": SERVER_NAME, "version": __version__},
            headers=no_store,
        )

    async def readyz(_request):
        payload = build_readiness_status(readiness_state)
        status_code = 200 if payload["status"] == "ok" else 503
        return JSONResponse(payload, status_code=status_code, headers=no_store)

    ops_app = Starlette()
    ops_app.add_route("/healthz", healthz, methods=["GET"])
    ops_app.add_route("/readyz", readyz, methods=["GET"])
    ops_app.add_route(HEALTH_PATH, health, methods=["GET"])
    return ops_app


class OpsDispatcher:
    """
    ASGI wrapper that routes ops endpoints to a minimal app (no credentials
    required) and everything else to the MCP app.
    Exposes router/state so callers can drive the MCP app's lifespan.
    """

    def __init__(self, ops_app, main_app):
        self.ops_app = ops_app
        self.main_app = main_app
        self.router = main_app.router
        self.state = main_app.state

    async def __call__(self, scope, receive, send):
        if scope.get("type") == "http" and is_ops_path(scope.get("path", "")):
            await self.ops_app(scope, receive, send)
            return
        await self.main_app(scope, receive, send)


def build_http_app(
    cfg: HttpConfig | None = None, settings: Optional[ConfluenceSettings] = None
):
    """Return an ASGI app that serves ops endpoints ahead of the MCP endpoint."""
    cfg = cfg or HttpConfig.from_env()
    settings = settings or ConfluenceSettings.from_env()

    fastmcp, names = _build_fastmcp(cfg)
    main_app = fastmcp.streamable_http_app()
    # Starlette inserts at the front; execution order is RequestId -> Timeout -> Credentials -> app  # noqa: E501
    main_app.add_middleware(CredentialsMiddleware, settings=settings)
    main_app.add_middleware(TimeoutMiddleware, cfg=cfg)
    main_app.add_middleware(RequestIdMiddleware)

    readiness_state = {
        "config_loaded": True,
        "tools_registered": bool(names),
    }
    main_app.state.readiness = readiness_state

    return OpsDispatcher(_build_ops_app(readiness_state), main_app)


__all__ = ["HttpConfig", "build_http_app", "build_fastmcp", "OpsDispatcher"]
