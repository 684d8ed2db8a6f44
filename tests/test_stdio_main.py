import pytest
from confluence_mcp.core.context import get_credentials
from confluence_mcp.core.errors import ConfigurationError
from confluence_mcp.transports.stdio import main as stdio_main
from mcp.server.fastmcp import FastMCP


@pytest.fixture
def tenant_env(monkeypatch):
    monkeypatch.setattr("confluence_mcp.core.config.load_dotenv", lambda *a, **k: None)
    monkeypatch.setattr(stdio_main, "setup_logging", lambda level: None)
    monkeypatch.setenv("CONFLUENCE_DOMAIN", "acme")
    monkeypatch.setenv("CONFLUENCE_EMAIL", "ada@acme.com")
    monkeypatch.setenv("CONFLUENCE_API_TOKEN", "tok")


@pytest.mark.asyncio
async def test_stdio_binds_env_tenant_for_the_session(tenant_env, monkeypatch):
    seen = {}

    async def fake_run(self):
        seen["domain"] = get_credentials().domain
        seen["tools"] = [t.name for t in await self.list_tools()]

    monkeypatch.setattr(FastMCP, "run_stdio_async", fake_run)

    await stdio_main.main()

    assert seen["domain"] == "acme"
    assert "confluence_get_page" in seen["tools"]
    # context is released once the session ends
    with pytest.raises(ConfigurationError):
        get_credentials()


@pytest.mark.asyncio
async def test_stdio_refuses_to_start_without_credentials(tenant_env, monkeypatch):
    monkeypatch.delenv("CONFLUENCE_API_TOKEN")

    with pytest.raises(ConfigurationError):
        await stdio_main.main()
