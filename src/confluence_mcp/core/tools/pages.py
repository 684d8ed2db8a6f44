from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import (
    BodyFormat,
    BodyRepresentation,
    ContentStatus,
    LabelInput,
    LabelPrefix,
    PageCreateInput,
    PageUpdateInput,
    PaginatedResult,
    PropertyCreateInput,
    PropertyUpdateInput,
    WritableLabelPrefix,
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

Version = Annotated[int, Field(ge=1, description="Current version number")]


@tool(EntityFamily.PAGES)
async def list_pages(
    client: ConfluenceClient,
    space_id: Optional[str] = None,
    status: Optional[ContentStatus] = None,
    title: Optional[str] = None,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """
    List pages across the site, optionally filtered by space, status or exact title.
    Check `_links.next` for further pages.
    """
    params = page_params(
        limit,
        cursor,
        spaceId=space_id,
        status=status,
        title=title,
        bodyFormat=body_format,
    )
    return paginated(await client.get("/pages", params=params, tool="list_pages"))


@tool(EntityFamily.PAGES)
async def get_pages_in_space(
    client: ConfluenceClient,
    space_id: str,
    status: Optional[ContentStatus] = None,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """List the pages of one space."""
    params = page_params(limit, cursor, status=status, bodyFormat=body_format)
    payload = await client.get(
        f"/spaces/{space_id}/pages", params=params, tool="get_pages_in_space"
    )
    return paginated(payload)


@tool(EntityFamily.PAGES)
async def get_page(
    client: ConfluenceClient,
    page_id: str,
    body_format: Optional[BodyFormat] = None,
) -> Dict[str, Any]:
    """
    Fetch a page by id, including its version.
    Pass `body_format` to include the body (storage, atlas_doc_format, view, editor).
    """
    return await client.get(
        f"/pages/{page_id}", params={"bodyFormat": body_format}, tool="get_page"
    )


@tool(formats=False)
async def create_page(
    client: ConfluenceClient,
    space_id: str,
    title: NonEmpty,
    body: str,
    body_representation: BodyRepresentation = "storage",
    parent_id: Optional[str] = None,
    status: WriteStatus = "current",
) -> Dict[str, Any]:
    """
    Create a page in a space. Use `parent_id` to nest it under another page
    and `status="draft"` to leave it unpublished.
    """
    payload = PageCreateInput(
        space_id=space_id,
        title=title,
        body=body_input(body, body_representation),
        parent_id=parent_id,
        status=status,
    ).to_payload()
    page = await client.post("/pages", json=payload, tool="create_page")
    return mutation("Page created", page=page)


@tool(formats=False)
async def update_page(
    client: ConfluenceClient,
    page_id: str,
    title: NonEmpty,
    body: str,
    version: Version,
    body_representation: BodyRepresentation = "storage",
    version_message: Optional[str] = None,
    status: WriteStatus = "current",
) -> Dict[str, Any]:
    """
    Replace a page's title and body.

    `version` is the version you last read; the update is sent as version + 1
    and Confluence rejects it if someone else saved in between.
    """
    payload = PageUpdateInput(
        id=page_id,
        status=status,
        title=title,
        body=body_input(body, body_representation),
        version=next_version(version, version_message),
    ).to_payload()
    page = await client.put(f"/pages/{page_id}", json=payload, tool="update_page")
    return mutation("Page updated", page=page)


@tool(formats=False)
async def delete_page(
    client: ConfluenceClient, page_id: str, purge: Purge = False
) -> Dict[str, Any]:
    """Move a page to the trash, or purge it permanently with `purge=true`."""
    await client.delete(
        f"/pages/{page_id}", params=purge_params(purge), tool="delete_page"
    )
    return mutation(delete_message("Page", page_id, purge))


# --- Hierarchy ------------------------------------------------------------- #


@tool(EntityFamily.PAGES)
async def get_page_children(
    client: ConfluenceClient,
    page_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Direct children of a page."""
    payload = await client.get(
        f"/pages/{page_id}/children",
        params=page_params(limit, cursor),
        tool="get_page_children",
    )
    return paginated(payload)


@tool(EntityFamily.PAGES)
async def get_page_ancestors(client: ConfluenceClient, page_id: str) -> List[Dict[str, Any]]:
    """All ancestors of a page, returned as a plain list."""
    payload = await client.get(f"/pages/{page_id}/ancestors", tool="get_page_ancestors")
    return list(payload.get("results") or [])


@tool(EntityFamily.PAGES)
async def get_page_descendants(
    client: ConfluenceClient,
    page_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/pages/{page_id}/descendants",
        params=page_params(limit, cursor),
        tool="get_page_descendants",
    )
    return paginated(payload)


# --- Versions -------------------------------------------------------------- #


@tool(EntityFamily.VERSIONS)
async def get_page_versions(
    client: ConfluenceClient,
    page_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Version history of a page, newest first."""
    payload = await client.get(
        f"/pages/{page_id}/versions",
        params=page_params(limit, cursor),
        tool="get_page_versions",
    )
    return paginated(payload)


@tool(EntityFamily.VERSIONS)
async def get_page_version(
    client: ConfluenceClient,
    page_id: str,
    version_number: Annotated[int, Field(ge=1)],
) -> Dict[str, Any]:
    return await client.get(
        f"/pages/{page_id}/versions/{version_number}", tool="get_page_version"
    )


# --- Properties ------------------------------------------------------------ #


@tool(EntityFamily.PROPERTIES)
async def get_page_properties(
    client: ConfluenceClient,
    page_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Content properties (key/value metadata) stored on a page."""
    payload = await client.get(
        f"/pages/{page_id}/properties",
        params=page_params(limit, cursor),
        tool="get_page_properties",
    )
    return paginated(payload)


@tool(EntityFamily.PROPERTIES)
async def get_page_property(
    client: ConfluenceClient, page_id: str, property_key: str
) -> Dict[str, Any]:
    return await client.get(
        f"/pages/{page_id}/properties/{property_key}", tool="get_page_property"
    )


@tool(formats=False)
async def create_page_property(
    client: ConfluenceClient, page_id: str, key: NonEmpty, value: Any
) -> Dict[str, Any]:
    """Store a JSON value under `key` on a page."""
    payload = PropertyCreateInput(key=key, value=value).to_payload()
    prop = await client.post(
        f"/pages/{page_id}/properties", json=payload, tool="create_page_property"
    )
    return mutation("Property created", property=prop)


@tool(formats=False)
async def update_page_property(
    client: ConfluenceClient,
    page_id: str,
    property_key: str,
    value: Any,
    version: Version,
) -> Dict[str, Any]:
    """Replace a page property's value. `version` is the property's current version."""
    payload = PropertyUpdateInput(
        key=property_key, value=value, version=next_version(version)
    ).to_payload()
    prop = await client.put(
        f"/pages/{page_id}/properties/{property_key}",
        json=payload,
        tool="update_page_property",
    )
    return mutation("Property updated", property=prop)


@tool(formats=False)
async def delete_page_property(
    client: ConfluenceClient, page_id: str, property_key: str
) -> Dict[str, Any]:
    await client.delete(
        f"/pages/{page_id}/properties/{property_key}", tool="delete_page_property"
    )
    return mutation("Property deleted")


# --- Attachments, comments, operations ------------------------------------ #


@tool(EntityFamily.ATTACHMENTS)
async def get_page_attachments(
    client: ConfluenceClient,
    page_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/pages/{page_id}/attachments",
        params=page_params(limit, cursor),
        tool="get_page_attachments",
    )
    return paginated(payload)


@tool(EntityFamily.COMMENTS)
async def get_page_comments(
    client: ConfluenceClient,
    page_id: str,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Comments on a page."""
    payload = await client.get(
        f"/pages/{page_id}/comments",
        params=page_params(limit, cursor, bodyFormat=body_format),
        tool="get_page_comments",
    )
    return paginated(payload)


@tool(EntityFamily.OPERATIONS)
async def get_page_operations(
    client: ConfluenceClient, page_id: str
) -> List[Dict[str, Any]]:
    """Operations the authenticated user may perform on a page."""
    payload = await client.get(f"/pages/{page_id}/operations", tool="get_page_operations")
    return list(payload.get("results") or [])


# --- Labels ---------------------------------------------------------------- #


@tool(EntityFamily.LABELS)
async def get_page_labels(
    client: ConfluenceClient,
    page_id: str,
    prefix: Optional[LabelPrefix] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/pages/{page_id}/labels",
        params=page_params(limit, cursor, prefix=prefix),
        tool="get_page_labels",
    )
    return paginated(payload)


@tool(formats=False)
async def add_page_labels(
    client: ConfluenceClient,
    page_id: str,
    labels: Annotated[List[str], Field(min_length=1)],
    prefix: WritableLabelPrefix = "global",
) -> Dict[str, Any]:
    """Attach one or more labels to a page, all with the same prefix."""
    payload = [LabelInput(name=name, prefix=prefix).to_payload() for name in labels]
    created = await client.post(
        f"/pages/{page_id}/labels", json=payload, tool="add_page_labels"
    )
    return mutation("Labels added", labels=list(created.get("results") or []))


@tool(formats=False)
async def remove_page_label(
    client: ConfluenceClient, page_id: str, label_id: str
) -> Dict[str, Any]:
    await client.delete(f"/pages/{page_id}/labels/{label_id}", tool="remove_page_label")
    return mutation("Label removed")


# --- Likes ----------------------------------------------------------------- #


@tool(EntityFamily.LIKES)
async def get_page_likes(
    client: ConfluenceClient,
    page_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Accounts that liked a page."""
    payload = await client.get(
        f"/pages/{page_id}/likes",
        params=page_params(limit, cursor),
        tool="get_page_likes",
    )
    return paginated(payload)


@tool(formats=False)
async def like_page(client: ConfluenceClient, page_id: str) -> Dict[str, Any]:
    await client.post(f"/pages/{page_id}/likes", tool="like_page")
    return mutation("Page liked")


@tool(formats=False)
async def unlike_page(client: ConfluenceClient, page_id: str) -> Dict[str, Any]:
    await client.delete(f"/pages/{page_id}/likes", tool="unlike_page")
    return mutation("Page unliked")
