import time
from typing import Any, Dict

from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.errors import ConfluenceClientError
from confluence_mcp.core.registry import tool


@tool(formats=False)
async def test_connection(client: ConfluenceClient) -> Dict[str, Any]:
    """
    Check that the supplied credentials can reach the Confluence site.
    Lists a single space; never raises for upstream failures.
    """
    start = time.perf_counter()
    try:
        await client.get("/spaces", params={"limit": 1}, tool="test_connection")
    except ConfluenceClientError as exc:
        return {"connected": False, "message": str(exc)}

    latency_ms = (time.perf_counter() - start) * 1000
    return {
        "connected": True,
        "message": "Successfully connected to Confluence",
        "latency_ms": round(latency_ms, 2),
        "site_url": client.base_url,
    }
