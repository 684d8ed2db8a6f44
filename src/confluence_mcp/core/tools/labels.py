from __future__ import annotations

from typing import Any, Dict, Optional

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import BodyFormat, LabelPrefix, PaginatedResult
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    page_params,
    paginated,
)


@tool(EntityFamily.LABELS)
async def list_labels(
    client: ConfluenceClient,
    prefix: Optional[LabelPrefix] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """All labels on the site, optionally restricted to one prefix."""
    payload = await client.get(
        "/labels", params=page_params(limit, cursor, prefix=prefix), tool="list_labels"
    )
    return paginated(payload)


@tool(EntityFamily.LABELS)
async def get_label(client: ConfluenceClient, label_id: str) -> Dict[str, Any]:
    return await client.get(f"/labels/{label_id}", tool="get_label")


@tool(EntityFamily.PAGES)
async def get_label_pages(
    client: ConfluenceClient,
    label_id: str,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Pages carrying the given label."""
    payload = await client.get(
        f"/labels/{label_id}/pages",
        params=page_params(limit, cursor, bodyFormat=body_format),
        tool="get_label_pages",
    )
    return paginated(payload)


@tool(EntityFamily.BLOGPOSTS)
async def get_label_blogposts(
    client: ConfluenceClient,
    label_id: str,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Blog posts carrying the given label."""
    payload = await client.get(
        f"/labels/{label_id}/blogposts",
        params=page_params(limit, cursor, bodyFormat=body_format),
        tool="get_label_blogposts",
    )
    return paginated(payload)
