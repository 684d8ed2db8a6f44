from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import Field

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import (
    PaginatedResult,
    PermissionOperation,
    Principal,
    PropertyCreateInput,
    PropertyUpdateInput,
    SpaceCreateInput,
    SpaceDescriptionInput,
    SpaceDescriptionValue,
    SpacePermissionCreateInput,
    next_version,
)
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    NonEmpty,
    mutation,
    page_params,
    paginated,
)

SpaceType = Literal["global", "personal"]


@tool(EntityFamily.SPACES)
async def list_spaces(
    client: ConfluenceClient,
    type: Optional[SpaceType] = None,
    status: Optional[Literal["current", "archived"]] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """
    List spaces visible to the caller.
    Space ids returned here are what the page and blog post tools expect.
    """
    payload = await client.get(
        "/spaces",
        params=page_params(limit, cursor, type=type, status=status),
        tool="list_spaces",
    )
    return paginated(payload)


@tool(EntityFamily.SPACES)
async def get_space(client: ConfluenceClient, space_id: str) -> Dict[str, Any]:
    return await client.get(f"/spaces/{space_id}", tool="get_space")


@tool(formats=False)
async def create_space(
    client: ConfluenceClient,
    key: Annotated[str, Field(min_length=1, max_length=255)],
    name: Annotated[str, Field(min_length=1, max_length=200)],
    description: Optional[str] = None,
    type: SpaceType = "global",
) -> Dict[str, Any]:
    """Create a space. `description` is plain text."""
    desc = None
    if description:
        desc = SpaceDescriptionInput(plain=SpaceDescriptionValue(value=description))
    payload = SpaceCreateInput(
        key=key, name=name, description=desc, type=type
    ).to_payload()
    space = await client.post("/spaces", json=payload, tool="create_space")
    return mutation("Space created", space=space)


@tool(formats=False)
async def delete_space(client: ConfluenceClient, space_id: str) -> Dict[str, Any]:
    await client.delete(f"/spaces/{space_id}", tool="delete_space")
    return mutation(f"Space {space_id} deleted")


# --- Permissions ----------------------------------------------------------- #


@tool(EntityFamily.PERMISSIONS)
async def get_space_permissions(
    client: ConfluenceClient,
    space_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/spaces/{space_id}/permissions",
        params=page_params(limit, cursor),
        tool="get_space_permissions",
    )
    return paginated(payload)


@tool(formats=False)
async def create_space_permission(
    client: ConfluenceClient,
    space_id: str,
    principal_type: Literal["user", "group"],
    principal_id: str,
    operation_key: str,
    operation_target: str,
) -> Dict[str, Any]:
    """
    Grant a user or group an operation in a space,
    e.g. operation_key="read", operation_target="space".
    """
    payload = SpacePermissionCreateInput(
        principal=Principal(type=principal_type, id=principal_id),
        operation=PermissionOperation(key=operation_key, target=operation_target),
    ).to_payload()
    permission = await client.post(
        f"/spaces/{space_id}/permissions",
        json=payload,
        tool="create_space_permission",
    )
    return mutation("Permission created", permission=permission)


@tool(formats=False)
async def delete_space_permission(
    client: ConfluenceClient, space_id: str, permission_id: str
) -> Dict[str, Any]:
    await client.delete(
        f"/spaces/{space_id}/permissions/{permission_id}",
        tool="delete_space_permission",
    )
    return mutation("Permission deleted")


# --- Properties ------------------------------------------------------------ #


@tool(EntityFamily.PROPERTIES)
async def get_space_properties(
    client: ConfluenceClient,
    space_id: str,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    payload = await client.get(
        f"/spaces/{space_id}/properties",
        params=page_params(limit, cursor),
        tool="get_space_properties",
    )
    return paginated(payload)


@tool(EntityFamily.PROPERTIES)
async def get_space_property(
    client: ConfluenceClient, space_id: str, property_key: str
) -> Dict[str, Any]:
    return await client.get(
        f"/spaces/{space_id}/properties/{property_key}", tool="get_space_property"
    )


@tool(formats=False)
async def create_space_property(
    client: ConfluenceClient, space_id: str, key: NonEmpty, value: Any
) -> Dict[str, Any]:
    payload = PropertyCreateInput(key=key, value=value).to_payload()
    prop = await client.post(
        f"/spaces/{space_id}/properties", json=payload, tool="create_space_property"
    )
    return mutation("Property created", property=prop)


@tool(formats=False)
async def update_space_property(
    client: ConfluenceClient,
    space_id: str,
    property_key: str,
    value: Any,
    version: Annotated[int, Field(ge=1, description="Current version number")],
) -> Dict[str, Any]:
    """Replace a space property's value; sent as `version` + 1."""
    payload = PropertyUpdateInput(
        key=property_key, value=value, version=next_version(version)
    ).to_payload()
    prop = await client.put(
        f"/spaces/{space_id}/properties/{property_key}",
        json=payload,
        tool="update_space_property",
    )
    return mutation("Property updated", property=prop)


@tool(formats=False)
async def delete_space_property(
    client: ConfluenceClient, space_id: str, property_key: str
) -> Dict[str, Any]:
    await client.delete(
        f"/spaces/{space_id}/properties/{property_key}", tool="delete_space_property"
    )
    return mutation("Property deleted")
