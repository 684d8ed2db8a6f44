import pytest
import respx
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.credentials import TenantCredentials
from confluence_mcp.core.tools import attachments, labels
from httpx import Response

BASE = "https://acme.atlassian.net/wiki/api/v2"


@pytest.fixture
def client():
    return ConfluenceClient(
        TenantCredentials(domain="acme", email="ada@acme.com", api_token="tok")
    )


@pytest.mark.asyncio
@respx.mock
async def test_list_labels_with_prefix(client):
    route = respx.get(f"{BASE}/labels").mock(
        return_value=Response(200, json={"results": [{"id": "l1", "name": "ops"}]})
    )

    async with client:
        result = await labels.list_labels(client, prefix="system")

    assert route.calls[0].request.url.params["prefix"] == "system"
    assert result.results[0]["name"] == "ops"


@pytest.mark.asyncio
@respx.mock
async def test_label_lookups(client):
    respx.get(f"{BASE}/labels/l1").mock(
        return_value=Response(200, json={"id": "l1", "name": "ops"})
    )
    respx.get(f"{BASE}/labels/l1/pages").mock(
        return_value=Response(200, json={"results": [{"id": "p1"}]})
    )
    respx.get(f"{BASE}/labels/l1/blogposts").mock(
        return_value=Response(200, json={"results": []})
    )

    async with client:
        label = await labels.get_label(client, "l1")
        tagged_pages = await labels.get_label_pages(client, "l1")
        tagged_posts = await labels.get_label_blogposts(client, "l1")

    assert label["name"] == "ops"
    assert tagged_pages.results == [{"id": "p1"}]
    assert tagged_posts.results == []


@pytest.mark.asyncio
@respx.mock
async def test_list_attachments_filters(client):
    route = respx.get(f"{BASE}/attachments").mock(
        return_value=Response(200, json={"results": [{"id": "att1"}]})
    )

    async with client:
        await attachments.list_attachments(
            client, media_type="image/png", filename="diagram.png"
        )

    params = route.calls[0].request.url.params
    assert params["mediaType"] == "image/png"
    assert params["filename"] == "diagram.png"


@pytest.mark.asyncio
@respx.mock
async def test_attachment_get_delete_labels(client):
    respx.get(f"{BASE}/attachments/att1").mock(
        return_value=Response(200, json={"id": "att1", "title": "diagram.png"})
    )
    delete = respx.delete(f"{BASE}/attachments/att1").mock(return_value=Response(204))
    respx.get(f"{BASE}/attachments/att1/labels").mock(
        return_value=Response(200, json={"results": [{"id": "l1"}]})
    )

    async with client:
        meta = await attachments.get_attachment(client, "att1")
        deleted = await attachments.delete_attachment(client, "att1")
        att_labels = await attachments.get_attachment_labels(client, "att1")

    assert meta["title"] == "diagram.png"
    assert "purge" not in delete.calls[0].request.url.params
    assert deleted["message"] == "Attachment att1 moved to trash"
    assert att_labels.results[0]["id"] == "l1"
