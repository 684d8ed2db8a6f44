from __future__ import annotations

from typing import Any, Dict

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import PaginatedResult
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    page_params,
    paginated,
)


@tool(EntityFamily.USERS)
async def list_users(
    client: ConfluenceClient,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        "/users", params=page_params(limit, cursor), tool="list_users"
    )
    return paginated(payload)


@tool(EntityFamily.USERS)
async def get_user(client: ConfluenceClient, account_id: str) -> Dict[str, Any]:
    """Look up a user by Atlassian account id."""
    return await client.get(f"/users/{account_id}", tool="get_user")
