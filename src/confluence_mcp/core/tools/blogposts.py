from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import (
    BlogPostCreateInput,
    BlogPostUpdateInput,
    BodyFormat,
    BodyRepresentation,
    ContentStatus,
    LabelInput,
    LabelPrefix,
    PaginatedResult,
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


@tool(EntityFamily.BLOGPOSTS)
async def list_blogposts(
    client: ConfluenceClient,
    space_id: Optional[str] = None,
    status: Optional[ContentStatus] = None,
    title: Optional[str] = None,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """List blog posts, optionally filtered by space, status or title."""
    params = page_params(
        limit,
        cursor,
        spaceId=space_id,
        status=status,
        title=title,
        bodyFormat=body_format,
    )
    return paginated(await client.get("/blogposts", params=params, tool="list_blogposts"))


@tool(EntityFamily.BLOGPOSTS)
async def get_blogposts_in_space(
    client: ConfluenceClient,
    space_id: str,
    status: Optional[ContentStatus] = None,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/spaces/{space_id}/blogposts",
        params=page_params(limit, cursor, status=status, bodyFormat=body_format),
        tool="get_blogposts_in_space",
    )
    return paginated(payload)


@tool(EntityFamily.BLOGPOSTS)
async def get_blogpost(
    client: ConfluenceClient,
    blog_post_id: str,
    body_format: Optional[BodyFormat] = None,
) -> Dict[str, Any]:
    return await client.get(
        f"/blogposts/{blog_post_id}",
        params={"bodyFormat": body_format},
        tool="get_blogpost",
    )


@tool(formats=False)
async def create_blogpost(
    client: ConfluenceClient,
    space_id: str,
    title: NonEmpty,
    body: str,
    body_representation: BodyRepresentation = "storage",
    status: WriteStatus = "current",
) -> Dict[str, Any]:
    """Publish (or draft) a blog post in a space."""
    payload = BlogPostCreateInput(
        space_id=space_id,
        title=title,
        body=body_input(body, body_representation),
        status=status,
    ).to_payload()
    post = await client.post("/blogposts", json=payload, tool="create_blogpost")
    return mutation("Blog post created", blogPost=post)


@tool(formats=False)
async def update_blogpost(
    client: ConfluenceClient,
    blog_post_id: str,
    title: NonEmpty,
    body: str,
    version: Annotated[int, Field(ge=1, description="Current version number")],
    body_representation: BodyRepresentation = "storage",
    version_message: Optional[str] = None,
    status: WriteStatus = "current",
) -> Dict[str, Any]:
    """Replace a blog post's title and body; sent as `version` + 1."""
    payload = BlogPostUpdateInput(
        id=blog_post_id,
        status=status,
        title=title,
        body=body_input(body, body_representation),
        version=next_version(version, version_message),
    ).to_payload()
    post = await client.put(
        f"/blogposts/{blog_post_id}", json=payload, tool="update_blogpost"
    )
    return mutation("Blog post updated", blogPost=post)


@tool(formats=False)
async def delete_blogpost(
    client: ConfluenceClient, blog_post_id: str, purge: Purge = False
) -> Dict[str, Any]:
    await client.delete(
        f"/blogposts/{blog_post_id}",
        params=purge_params(purge),
        tool="delete_blogpost",
    )
    return mutation(delete_message("Blog post", blog_post_id, purge))


@tool(EntityFamily.VERSIONS)
async def get_blogpost_versions(
    client: ConfluenceClient,
    blog_post_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/blogposts/{blog_post_id}/versions",
        params=page_params(limit, cursor),
        tool="get_blogpost_versions",
    )
    return paginated(payload)


@tool(EntityFamily.ATTACHMENTS)
async def get_blogpost_attachments(
    client: ConfluenceClient,
    blog_post_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/blogposts/{blog_post_id}/attachments",
        params=page_params(limit, cursor),
        tool="get_blogpost_attachments",
    )
    return paginated(payload)


@tool(EntityFamily.COMMENTS)
async def get_blogpost_comments(
    client: ConfluenceClient,
    blog_post_id: str,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/blogposts/{blog_post_id}/comments",
        params=page_params(limit, cursor, bodyFormat=body_format),
        tool="get_blogpost_comments",
    )
    return paginated(payload)


@tool(EntityFamily.LABELS)
async def get_blogpost_labels(
    client: ConfluenceClient,
    blog_post_id: str,
    prefix: Optional[LabelPrefix] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/blogposts/{blog_post_id}/labels",
        params=page_params(limit, cursor, prefix=prefix),
        tool="get_blogpost_labels",
    )
    return paginated(payload)


@tool(formats=False)
async def add_blogpost_labels(
    client: ConfluenceClient,
    blog_post_id: str,
    labels: Annotated[List[str], Field(min_length=1)],
    prefix: WritableLabelPrefix = "global",
) -> Dict[str, Any]:
    payload = [LabelInput(name=name, prefix=prefix).to_payload() for name in labels]
    created = await client.post(
        f"/blogposts/{blog_post_id}/labels", json=payload, tool="add_blogpost_labels"
    )
    return mutation("Labels added", labels=list(created.get("results") or []))


@tool(formats=False)
async def remove_blogpost_label(
    client: ConfluenceClient, blog_post_id: str, label_id: str
) -> Dict[str, Any]:
    await client.delete(
        f"/blogposts/{blog_post_id}/labels/{label_id}", tool="remove_blogpost_label"
    )
    return mutation("Label removed")
