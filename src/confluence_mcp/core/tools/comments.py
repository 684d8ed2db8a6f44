from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import Field

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import (
    BodyFormat,
    BodyRepresentation,
    CommentCreateInput,
    CommentUpdateInput,
    ContentBodyInput,
    PaginatedResult,
    next_version,
)
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    mutation,
    page_params,
    paginated,
)


@tool(EntityFamily.COMMENTS)
async def list_comments(
    client: ConfluenceClient,
    body_format: Optional[BodyFormat] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        "/comments",
        params=page_params(limit, cursor, bodyFormat=body_format),
        tool="list_comments",
    )
    return paginated(payload)


@tool(EntityFamily.COMMENTS)
async def get_comment(
    client: ConfluenceClient,
    comment_id: str,
    body_format: Optional[BodyFormat] = None,
) -> Dict[str, Any]:
    return await client.get(
        f"/comments/{comment_id}",
        params={"bodyFormat": body_format},
        tool="get_comment",
    )


@tool(formats=False)
async def create_comment(
    client: ConfluenceClient,
    body: str,
    page_id: Optional[str] = None,
    blog_post_id: Optional[str] = None,
    custom_content_id: Optional[str] = None,
    parent_comment_id: Optional[str] = None,
    body_representation: BodyRepresentation = "storage",
) -> Dict[str, Any]:
    """
    Comment on a page, blog post or custom content item.

    Exactly one of `page_id`, `blog_post_id` or `custom_content_id` must be
    given. Set `parent_comment_id` to reply to an existing comment.
    """
    targets = [t for t in (page_id, blog_post_id, custom_content_id) if t]
    if len(targets) != 1:
        raise ValueError(
            "Exactly one of page_id, blog_post_id or custom_content_id is required"
        )

    payload = CommentCreateInput(
        page_id=page_id,
        blog_post_id=blog_post_id,
        custom_content_id=custom_content_id,
        parent_comment_id=parent_comment_id,
        body=ContentBodyInput(representation=body_representation, value=body),
    ).to_payload()
    comment = await client.post("/comments", json=payload, tool="create_comment")
    return mutation("Comment created", comment=comment)


@tool(formats=False)
async def update_comment(
    client: ConfluenceClient,
    comment_id: str,
    body: str,
    version: Annotated[int, Field(ge=1, description="Current version number")],
    body_representation: BodyRepresentation = "storage",
    version_message: Optional[str] = None,
) -> Dict[str, Any]:
    payload = CommentUpdateInput(
        body=ContentBodyInput(representation=body_representation, value=body),
        version=next_version(version, version_message),
    ).to_payload()
    comment = await client.put(
        f"/comments/{comment_id}", json=payload, tool="update_comment"
    )
    return mutation("Comment updated", comment=comment)


@tool(formats=False)
async def delete_comment(client: ConfluenceClient, comment_id: str) -> Dict[str, Any]:
    await client.delete(f"/comments/{comment_id}", tool="delete_comment")
    return mutation(f"Comment {comment_id} deleted")
