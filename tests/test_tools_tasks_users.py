import json

import pytest
import respx
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.credentials import TenantCredentials
from confluence_mcp.core.tools import tasks, users
from httpx import Response

BASE = "https://acme.atlassian.net/wiki/api/v2"


@pytest.fixture
def client():
    return ConfluenceClient(
        TenantCredentials(domain="acme", email="ada@acme.com", api_token="tok")
    )


@pytest.mark.asyncio
@respx.mock
async def test_list_tasks_filters(client):
    route = respx.get(f"{BASE}/tasks").mock(
        return_value=Response(200, json={"results": [{"id": "t1", "status": "incomplete"}]})
    )

    async with client:
        result = await tasks.list_tasks(client, page_id="9", status="incomplete")

    params = route.calls[0].request.url.params
    assert params["pageId"] == "9"
    assert params["status"] == "incomplete"
    assert "spaceId" not in params
    assert result.results[0]["id"] == "t1"


@pytest.mark.asyncio
@respx.mock
async def test_get_and_update_task(client):
    respx.get(f"{BASE}/tasks/t1").mock(
        return_value=Response(200, json={"id": "t1", "status": "incomplete"})
    )
    update = respx.put(f"{BASE}/tasks/t1").mock(
        return_value=Response(200, json={"id": "t1", "status": "complete"})
    )

    async with client:
        task = await tasks.get_task(client, "t1")
        result = await tasks.update_task(client, "t1", "complete")

    assert task["status"] == "incomplete"
    assert json.loads(update.calls[0].request.content) == {"status": "complete"}
    assert result == {
        "success": True,
        "message": "Task updated",
        "task": {"id": "t1", "status": "complete"},
    }


@pytest.mark.asyncio
@respx.mock
async def test_users(client):
    listed = respx.get(f"{BASE}/users").mock(
        return_value=Response(200, json={"results": [{"accountId": "u1"}]})
    )
    respx.get(f"{BASE}/users/u1").mock(
        return_value=Response(200, json={"accountId": "u1", "displayName": "Ada"})
    )

    async with client:
        people = await users.list_users(client, limit=3)
        ada = await users.get_user(client, "u1")

    assert listed.calls[0].request.url.params["limit"] == "3"
    assert people.results[0]["accountId"] == "u1"
    assert ada["displayName"] == "Ada"
