from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import Field

from confluence_mcp.core.models import ContentBodyInput, PaginatedResult

DEFAULT_LIMIT = 25
MAX_LIMIT = 250

Limit = Annotated[
    int, Field(ge=1, le=MAX_LIMIT, description="Number of items to return (1-250)")
]
Cursor = Annotated[
    Optional[str], Field(description="Opaque cursor from a previous page's next link")
]
Purge = Annotated[
    bool, Field(description="Permanently delete instead of moving to trash")
]
NonEmpty = Annotated[str, Field(min_length=1)]


def page_params(limit: int, cursor: Optional[str], **filters: Any) -> Dict[str, Any]:
    return {**filters, "limit": limit, "cursor": cursor}


def paginated(payload: Any) -> PaginatedResult:
    return PaginatedResult.model_validate(payload or {})


def body_input(value: Optional[str], representation: str) -> Optional[ContentBodyInput]:
    if value is None:
        return None
    return ContentBodyInput(representation=representation, value=value)


def mutation(message: str, **entity: Any) -> Dict[str, Any]:
    """Shape of every create/update/delete result."""
    return {"success": True, "message": message, **entity}


def delete_message(noun: str, entity_id: str, purge: bool) -> str:
    if purge:
        return f"{noun} {entity_id} permanently deleted"
    return f"{noun} {entity_id} moved to trash"


def purge_params(purge: bool) -> Optional[Dict[str, Any]]:
    # the flag is only sent when set
    return {"purge": True} if purge else None
