import pytest
import respx
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.credentials import TenantCredentials
from confluence_mcp.core.tools import system
from httpx import Response

BASE = "https://acme.atlassian.net/wiki/api/v2"


@pytest.fixture
def client():
    return ConfluenceClient(
        TenantCredentials(domain="acme", email="ada@acme.com", api_token="tok")
    )


@pytest.mark.asyncio
@respx.mock
async def test_connection_ok(client):
    route = respx.get(f"{BASE}/spaces").mock(
        return_value=Response(200, json={"results": []})
    )

    async with client:
        result = await system.test_connection(client)

    assert route.calls[0].request.url.params["limit"] == "1"
    assert result["connected"] is True
    assert result["message"] == "Successfully connected to Confluence"
    assert result["site_url"] == BASE
    assert result["latency_ms"] >= 0


@pytest.mark.asyncio
@respx.mock
async def test_connection_reports_auth_failure(client):
    respx.get(f"{BASE}/spaces").mock(return_value=Response(401))

    async with client:
        result = await system.test_connection(client)

    assert result == {
        "connected": False,
        "message": "Authentication failed. Check your credentials.",
    }
