import pytest
from confluence_mcp.core.config import ConfluenceSettings
from confluence_mcp.core.context import (
    apply_request_context,
    client_from_context,
    get_credentials,
    get_request_id,
    get_settings,
    reset_context,
)
from confluence_mcp.core.credentials import TenantCredentials
from confluence_mcp.core.errors import ConfigurationError

ACME = TenantCredentials(domain="acme", email="ada@acme.com", api_token="k1")
GLOBEX = TenantCredentials(domain="globex", email="hank@globex.com", api_token="k2")


def test_apply_and_reset_context():
    tokens = apply_request_context(ACME, request_id="r1")
    try:
        assert get_credentials() is ACME
        assert get_request_id() == "r1"
        assert get_settings() == ConfluenceSettings()
    finally:
        reset_context(tokens)

    with pytest.raises(ConfigurationError):
        get_credentials()
    assert get_request_id() is None


def test_nested_contexts_unwind():
    outer = apply_request_context(ACME, request_id="outer")
    inner = apply_request_context(GLOBEX, request_id="inner")
    assert get_credentials().domain == "globex"

    reset_context(inner)
    assert get_credentials().domain == "acme"
    assert get_request_id() == "outer"
    reset_context(outer)


def test_request_id_generated_when_missing():
    tokens = apply_request_context(ACME)
    try:
        assert len(get_request_id()) == 32
    finally:
        reset_context(tokens)


def test_apply_rejects_incomplete_credentials():
    with pytest.raises(ConfigurationError):
        apply_request_context(TenantCredentials(domain="acme", email="", api_token="x"))


@pytest.mark.asyncio
async def test_client_from_context_uses_tenant_and_settings():
    settings = ConfluenceSettings(upstream_host="jira-dev.com", timeout_seconds=5.0)
    tokens = apply_request_context(GLOBEX, settings=settings)
    try:
        client = client_from_context()
    finally:
        reset_context(tokens)

    async with client:
        assert client.base_url == "https://globex.jira-dev.com/wiki/api/v2"
        assert client.timeout_seconds == 5.0
        assert client.http.auth is not None


def test_client_from_context_without_tenant():
    with pytest.raises(ConfigurationError):
        client_from_context()


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("CONFLUENCE_UPSTREAM_HOST", "example.net")
    monkeypatch.setenv("CONFLUENCE_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("CONFLUENCE_LOG_LEVEL", "debug")

    settings = ConfluenceSettings.from_env()

    assert settings.upstream_host == "example.net"
    assert settings.timeout_seconds == 12.5
    assert settings.log_level == "debug"


def test_settings_reject_non_positive_timeout(monkeypatch):
    monkeypatch.setenv("CONFLUENCE_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValueError):
        ConfluenceSettings.from_env()
