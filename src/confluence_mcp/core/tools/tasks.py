from __future__ import annotations

from typing import Any, Dict, Optional

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.formatters import EntityFamily
from confluence_mcp.core.models import PaginatedResult, TaskStatus, TaskUpdateInput
from confluence_mcp.core.registry import tool
from confluence_mcp.core.tools._common import (
    DEFAULT_LIMIT,
    Cursor,
    Limit,
    mutation,
    page_params,
    paginated,
)


@tool(EntityFamily.TASKS)
async def list_tasks(
    client: ConfluenceClient,
    space_id: Optional[str] = None,
    page_id: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    limit: Limit = DEFAULT_LIMIT,
    cursor: Cursor = None,
) -> PaginatedResult:
    """Inline tasks, filterable by space, page and completion status."""
    params = page_params(limit, cursor, spaceId=space_id, pageId=page_id, status=status)
    return paginated(await client.get("/tasks", params=params, tool="list_tasks"))


@tool(EntityFamily.TASKS)
async def get_task(client: ConfluenceClient, task_id: str) -> Dict[str, Any]:
    return await client.get(f"/tasks/{task_id}", tool="get_task")


@tool(formats=False)
async def update_task(
    client: ConfluenceClient, task_id: str, status: TaskStatus
) -> Dict[str, Any]:
    """Mark a task complete or incomplete."""
    payload = TaskUpdateInput(status=status).to_payload()
    task = await client.put(f"/tasks/{task_id}", json=payload, tool="update_task")
    return mutation("Task updated", task=task)
