from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import PaginatedResult
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    Purge,
    delete_message,
    mutation,
    page_params,
    paginated,
    purge_params,
)


@tool(EntityFamily.ATTACHMENTS)
async def list_attachments(
    client: ConfluenceClient,
    status: Optional[Literal["current", "trashed", "archived"]] = None,
    media_type: Optional[str] = None,
    filename: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """List attachments, optionally filtered by status, MIME type or filename."""
    params = page_params(
        limit, cursor, status=status, mediaType=media_type, filename=filename
    )
    return paginated(
        await client.get("/attachments", params=params, tool="list_attachments")
    )


@tool(EntityFamily.ATTACHMENTS)
async def get_attachment(client: ConfluenceClient, attachment_id: str) -> Dict[str, Any]:
    """Attachment metadata, including its download link."""
    return await client.get(f"/attachments/{attachment_id}", tool="get_attachment")


@tool(formats=False)
async def delete_attachment(
    client: ConfluenceClient, attachment_id: str, purge: Purge = False
) -> Dict[str, Any]:
    await client.delete(
        f"/attachments/{attachment_id}",
        params=purge_params(purge),
        tool="delete_attachment",
    )
    return mutation(delete_message("Attachment", attachment_id, purge))


@tool(EntityFamily.LABELS)
async def get_attachment_labels(
    client: ConfluenceClient,
    attachment_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/attachments/{attachment_id}/labels",
        params=page_params(limit, cursor),
        tool="get_attachment_labels",
    )
    return paginated(payload)
