"""
CQL search. These calls go to the v1 REST API (`/wiki/rest/api/search`);
v2 has no search endpoint. The query builders below are pure so they can be
tested without HTTP.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Optional

from pydantic import Field

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import ContentType, PaginatedResult
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import DEFAULT_LIMIT, Cursor, Limit, paginated

Days = Annotated[int, Field(ge=1, le=365, description="Days to look back")]


def quote_cql(value: str) -> str:
    """Wrap a user-supplied value in double quotes, escaping embedded quotes."""
    return '"' + value.replace('"', '\\"') + '"'


def _space_clause(space_key: Optional[str]) -> str:
    return f" AND space.key={quote_cql(space_key)}" if space_key else ""


def build_text_query(query: str, space_key: Optional[str] = None) -> str:
    return f"type=page AND text ~ {quote_cql(query)}" + _space_clause(space_key)


def build_label_query(
    label: str,
    content_type: Optional[ContentType] = None,
    space_key: Optional[str] = None,
) -> str:
    cql = f"label={quote_cql(label)}"
    if content_type:
        cql += f" AND type={content_type}"
    return cql + _space_clause(space_key)


def build_recent_query(
    days: int = 7,
    content_type: Optional[ContentType] = None,
    space_key: Optional[str] = None,
    *,
    today: Optional[date] = None,
) -> str:
    """
    Content modified in the last `days` days, newest first.
    The cutoff is a calendar date (UTC), e.g. days=7 on 2024-06-15 gives 2024-06-08.
    """
    today = today or datetime.now(timezone.utc).date()
    cutoff = (today - timedelta(days=days)).isoformat()

    cql = f'lastModified >= "{cutoff}"'
    if content_type:
        cql += f" AND type={content_type}"
    else:
        cql += " AND (type=page OR type=blogpost)"
    cql += _space_clause(space_key)
    return cql + " ORDER BY lastModified DESC"


async def _run(
    client: ConfluenceClient,
    cql: str,
    *,
    limit: int,
    cursor: Optional[str] = None,
    excerpt: bool = True,
    tool_name: str,
) -> PaginatedResult:
    params = {"cql": cql, "limit": limit, "cursor": cursor, "excerpt": excerpt}
    payload = await client.get("/search", params=params, legacy=True, tool=tool_name)
    return paginated(payload)


@tool(EntityFamily.SEARCH)
async def search(
    client: ConfluenceClient,
    cql: Annotated[str, Field(min_length=1, description="CQL query string")],
    excerpt: bool = True,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """
    Search Confluence with CQL (Confluence Query Language).

    Examples:
      - type=page AND space=DEV
      - text ~ "project documentation"
      - label="important" AND type=page
      - creator=currentUser() AND created > "2024-01-01"
    """
    return await _run(
        client, cql, limit=limit, cursor=cursor, excerpt=excerpt, tool_name="search"
    )


@tool(EntityFamily.SEARCH)
async def search_pages(
    client: ConfluenceClient,
    query: Annotated[str, Field(min_length=1)],
    space_key: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
) -> PaginatedResult:
    """Full-text search restricted to pages."""
    return await _run(
        client,
        build_text_query(query, space_key),
        limit=limit,
        tool_name="search_pages",
    )


@tool(EntityFamily.SEARCH)
async def search_by_label(
    client: ConfluenceClient,
    label: Annotated[str, Field(min_length=1)],
    content_type: Optional[ContentType] = None,
    space_key: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
) -> PaginatedResult:
    """Content carrying a label, optionally limited to pages or blog posts."""
    return await _run(
        client,
        build_label_query(label, content_type, space_key),
        limit=limit,
        tool_name="search_by_label",
    )


@tool(EntityFamily.SEARCH)
async def search_recent(
    client: ConfluenceClient,
    days: Days = 7,
    content_type: Optional[ContentType] = None,
    space_key: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
) -> PaginatedResult:
    """Pages and blog posts modified in the last `days` days, newest first."""
    return await _run(
        client,
        build_recent_query(days, content_type, space_key),
        limit=limit,
        tool_name="search_recent",
    )
