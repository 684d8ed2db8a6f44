"""Custom content plus the newer content types: databases, folders, whiteboards."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import Field

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import (
    BodyFormat,
    BodyRepresentation,
    CustomContentCreateInput,
    CustomContentUpdateInput,
    PaginatedResult,
    WriteStatus,
    next_version,
)
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    NonEmpty,
    Purge,
    body_input,
    delete_message,
    mutation,
    page_params,
    paginated,
    purge_params,
)


@tool(EntityFamily.CUSTOM_CONTENT)
async def list_custom_content(
    client: ConfluenceClient,
    type: Optional[str] = None,
    space_id: Optional[str] = None,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """
    List custom content items (app-defined content types).
    `type` is the fully-qualified type key registered by the app.
    """
    params = page_params(
        limit, cursor, type=type, spaceId=space_id, bodyFormat=body_format
    )
    return paginated(
        await client.get("/custom-content", params=params, tool="list_custom_content")
    )


@tool(EntityFamily.CUSTOM_CONTENT)
async def get_custom_content(
    client: ConfluenceClient,
    custom_content_id: str,
    body_format: Optional[BodyFormat] = None,
) -> Dict[str, Any]:
    return await client.get(
        f"/custom-content/{custom_content_id}",
        params={"bodyFormat": body_format},
        tool="get_custom_content",
    )


@tool(formats=False)
async def create_custom_content(
    client: ConfluenceClient,
    type: NonEmpty,
    space_id: Optional[str] = None,
    page_id: Optional[str] = None,
    blog_post_id: Optional[str] = None,
    title: Optional[str] = None,
    body: Optional[str] = None,
    body_representation: BodyRepresentation = "storage",
    status: WriteStatus = "current",
) -> Dict[str, Any]:
    """
    Create a custom content item. Which container id is needed (space, page
    or blog post) depends on how the app registered the type.
    """
    payload = CustomContentCreateInput(
        type=type,
        status=status,
        title=title,
        space_id=space_id,
        page_id=page_id,
        blog_post_id=blog_post_id,
        body=body_input(body, body_representation),
    ).to_payload()
    item = await client.post("/custom-content", json=payload, tool="create_custom_content")
    return mutation("Custom content created", customContent=item)


@tool(formats=False)
async def update_custom_content(
    client: ConfluenceClient,
    custom_content_id: str,
    version: Annotated[int, Field(ge=1, description="Current version number")],
    title: Optional[str] = None,
    body: Optional[str] = None,
    body_representation: BodyRepresentation = "storage",
    status: WriteStatus = "current",
    version_message: Optional[str] = None,
) -> Dict[str, Any]:
    payload = CustomContentUpdateInput(
        id=custom_content_id,
        status=status,
        title=title,
        body=body_input(body, body_representation),
        version=next_version(version, version_message),
    ).to_payload()
    item = await client.put(
        f"/custom-content/{custom_content_id}",
        json=payload,
        tool="update_custom_content",
    )
    return mutation("Custom content updated", customContent=item)


@tool(formats=False)
async def delete_custom_content(
    client: ConfluenceClient, custom_content_id: str, purge: Purge = False
) -> Dict[str, Any]:
    await client.delete(
        f"/custom-content/{custom_content_id}",
        params=purge_params(purge),
        tool="delete_custom_content",
    )
    return mutation(delete_message("Custom content", custom_content_id, purge))


# --- Databases, folders, whiteboards -------------------------------------- #


@tool(EntityFamily.DATABASES)
async def list_databases(
    client: ConfluenceClient,
    space_id: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        "/databases",
        params=page_params(limit, cursor, spaceId=space_id),
        tool="list_databases",
    )
    return paginated(payload)


@tool(EntityFamily.DATABASES)
async def get_database(client: ConfluenceClient, database_id: str) -> Dict[str, Any]:
    return await client.get(f"/databases/{database_id}", tool="get_database")


@tool(EntityFamily.FOLDERS)
async def list_folders(
    client: ConfluenceClient,
    space_id: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        "/folders",
        params=page_params(limit, cursor, spaceId=space_id),
        tool="list_folders",
    )
    return paginated(payload)


@tool(EntityFamily.FOLDERS)
async def get_folder(client: ConfluenceClient, folder_id: str) -> Dict[str, Any]:
    return await client.get(f"/folders/{folder_id}", tool="get_folder")


@tool(EntityFamily.WHITEBOARDS)
async def list_whiteboards(
    client: ConfluenceClient,
    space_id: Optional[str] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        "/whiteboards",
        params=page_params(limit, cursor, spaceId=space_id),
        tool="list_whiteboards",
    )
    return paginated(payload)


@tool(EntityFamily.WHITEBOARDS)
async def get_whiteboard(client: ConfluenceClient, whiteboard_id: str) -> Dict[str, Any]:
    return await client.get(f"/whiteboards/{whiteboard_id}", tool="get_whiteboard")
