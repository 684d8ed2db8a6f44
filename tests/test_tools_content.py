import json

import pytest
import respx
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.credentials import TenantCredentials
from confluence_mcp.core.tools import content
from httpx import Response

BASE = "https://acme.atlassian.net/wiki/api/v2"
TYPE_KEY = "forge:app:env:recipe"


@pytest.fixture
def client():
    return ConfluenceClient(
        TenantCredentials(domain="acme", email="ada@acme.com", api_token="tok")
    )


@pytest.mark.asyncio
@respx.mock
async def test_list_custom_content_filters(client):
    route = respx.get(f"{BASE}/custom-content").mock(
        return_value=Response(200, json={"results": [{"id": "cc1"}]})
    )

    async with client:
        result = await content.list_custom_content(client, type=TYPE_KEY, space_id="42")

    params = route.calls[0].request.url.params
    assert params["type"] == TYPE_KEY
    assert params["spaceId"] == "42"
    assert result.results[0]["id"] == "cc1"


@pytest.mark.asyncio
@respx.mock
async def test_custom_content_crud(client):
    respx.get(f"{BASE}/custom-content/cc1").mock(
        return_value=Response(200, json={"id": "cc1"})
    )
    create = respx.post(f"{BASE}/custom-content").mock(
        return_value=Response(200, json={"id": "cc1"})
    )
    update = respx.put(f"{BASE}/custom-content/cc1").mock(
        return_value=Response(200, json={"id": "cc1"})
    )
    delete = respx.delete(f"{BASE}/custom-content/cc1").mock(return_value=Response(204))

    async with client:
        fetched = await content.get_custom_content(client, "cc1")
        created = await content.create_custom_content(
            client, type=TYPE_KEY, space_id="42", title="Soup", body="{}"
        )
        updated = await content.update_custom_content(client, "cc1", version=1, title="Stew")
        deleted = await content.delete_custom_content(client, "cc1", purge=True)

    assert fetched == {"id": "cc1"}
    assert json.loads(create.calls[0].request.content) == {
        "type": TYPE_KEY,
        "status": "current",
        "title": "Soup",
        "spaceId": "42",
        "body": {"representation": "storage", "value": "{}"},
    }
    sent = json.loads(update.calls[0].request.content)
    assert sent["version"] == {"number": 2}
    assert "body" not in sent
    assert created["customContent"] == {"id": "cc1"}
    assert updated["message"] == "Custom content updated"
    assert delete.calls[0].request.url.params["purge"] == "true"
    assert deleted["message"] == "Custom content cc1 permanently deleted"


@pytest.mark.asyncio
@respx.mock
async def test_databases_folders_whiteboards(client):
    for kind in ("databases", "folders", "whiteboards"):
        respx.get(f"{BASE}/{kind}").mock(
            return_value=Response(200, json={"results": [{"id": kind}]})
        )
        respx.get(f"{BASE}/{kind}/x1").mock(
            return_value=Response(200, json={"id": "x1", "type": kind})
        )

    async with client:
        dbs = await content.list_databases(client, space_id="42")
        db = await content.get_database(client, "x1")
        folders = await content.list_folders(client)
        folder = await content.get_folder(client, "x1")
        boards = await content.list_whiteboards(client)
        board = await content.get_whiteboard(client, "x1")

    assert dbs.results[0]["id"] == "databases"
    assert folders.results[0]["id"] == "folders"
    assert boards.results[0]["id"] == "whiteboards"
    assert (db["type"], folder["type"], board["type"]) == (
        "databases",
        "folders",
        "whiteboards",
    )
