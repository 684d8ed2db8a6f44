from __future__ import annotations

import asyncio

from mcp.server.fastmcp import FastMCP

from confluence_mcp import SERVER_NAME
from confluence_mcp.core.config import ConfluenceSettings
from confluence_mcp.core.context import (
    apply_request_context,
    client_from_context,
    reset_context,
)
from confluence_mcp.core.credentials import credentials_from_env
from confluence_mcp.core.logging import setup_logging
from confluence_mcp.core.registry import register_discovered_tools


async def main() -> None:
    # single tenant for the life of the process, taken from CONFLUENCE_* env
    settings = ConfluenceSettings.from_env(use_dotenv=True)
    setup_logging(settings.log_level)
    credentials = credentials_from_env(use_dotenv=False)
    tokens = apply_request_context(credentials, settings=settings)

    app = FastMCP(SERVER_NAME)
    register_discovered_tools(app, client_from_context)

    try:
        await app.run_stdio_async()
    finally:
        reset_context(tokens)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
