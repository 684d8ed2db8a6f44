"""
Read-only smoke test against a real Confluence Cloud site.

Needs CONFLUENCE_DOMAIN (or CONFLUENCE_CLOUD_ID), CONFLUENCE_EMAIL and
CONFLUENCE_API_TOKEN. Optional: TEST_SPACE_KEY to scope the search step.
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Optional

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.credentials import credentials_from_env
from confluence_mcp.core.errors import ConfigurationError, ConfluenceAPIError
from confluence_mcp.core.formatters import EntityFamily, render
from confluence_mcp.core.tools import pages, search, spaces, system


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    return val if val else default


def _print_step(title: str) -> None:
    print(f"\n== {title}")


def _fail(msg: str) -> int:
    print(f"FAILED: {msg}")
    return 1


async def run_smoke_test() -> int:
    try:
        credentials = credentials_from_env()
    except ConfigurationError as exc:
        return _fail(str(exc))

    space_key = _env("TEST_SPACE_KEY")
    print("Config:")
    print(f"  site: {credentials.site_url()}")
    print(f"  email: {credentials.email}")
    print(f"  space_key: {space_key}")

    async with ConfluenceClient(credentials) as client:
        _print_step("Test connection")
        status = await system.test_connection(client)
        if not status["connected"]:
            return _fail(status["message"])
        print(status["message"])

        _print_step("List spaces")
        listed = await spaces.list_spaces(client, limit=5)
        print(render(listed, "markdown", EntityFamily.SPACES))
        if not listed.results:
            return _fail("No spaces visible to this account.")

        _print_step("List pages in first space")
        space_id = listed.results[0]["id"]
        in_space = await pages.get_pages_in_space(client, space_id, limit=5)
        print(render(in_space, "markdown", EntityFamily.PAGES))

        _print_step("Recent content")
        try:
            recent = await search.search_recent(client, days=7, space_key=space_key, limit=5)
        except ConfluenceAPIError as exc:
            return _fail(f"Search failed: {exc}")
        print(render(recent, "markdown", EntityFamily.SEARCH))

    print("\nPASSED smoke test.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run_smoke_test()))
