from datetime import date

import pytest
import respx
from confluence_mcp.core.client import ConfluenceClient
from confluence_mcp.core.credentials import TenantCredentials
from confluence_mcp.core.tools import search
from httpx import Response

SEARCH = "https://acme.atlassian.net/wiki/rest/api/search"


@pytest.fixture
def client():
    return ConfluenceClient(
        TenantCredentials(domain="acme", email="ada@acme.com", api_token="tok")
    )


def test_quote_cql_escapes_quotes():
    assert search.quote_cql('say "hi"') == '"say \\"hi\\""'


def test_build_text_query():
    assert search.build_text_query("deploy guide") == 'type=page AND text ~ "deploy guide"'
    assert search.build_text_query("x", "ENG") == (
        'type=page AND text ~ "x" AND space.key="ENG"'
    )


def test_build_label_query():
    assert search.build_label_query("runbook") == 'label="runbook"'
    assert search.build_label_query("runbook", "page", "OPS") == (
        'label="runbook" AND type=page AND space.key="OPS"'
    )


def test_build_recent_query_defaults_to_pages_and_blogposts():
    cql = search.build_recent_query(7, today=date(2024, 6, 15))

    assert cql == (
        'lastModified >= "2024-06-08" AND (type=page OR type=blogpost) '
        "ORDER BY lastModified DESC"
    )


def test_build_recent_query_with_type_and_space():
    cql = search.build_recent_query(30, "blogpost", 'we"ird', today=date(2024, 3, 1))

    assert cql == (
        'lastModified >= "2024-01-31" AND type=blogpost '
        'AND space.key="we\\"ird" ORDER BY lastModified DESC'
    )


@pytest.mark.asyncio
@respx.mock
async def test_search_uses_legacy_endpoint(client):
    route = respx.get(SEARCH).mock(
        return_value=Response(
            200,
            json={
                "results": [{"content": {"id": "1", "title": "Home"}}],
                "_links": {"next": "/wiki/rest/api/search?cursor=n2"},
            },
        )
    )

    async with client:
        result = await search.search(client, "type=page AND space=DEV", limit=10)

    params = route.calls[0].request.url.params
    assert params["cql"] == "type=page AND space=DEV"
    assert params["limit"] == "10"
    assert params["excerpt"] == "true"
    assert "cursor" not in params
    assert result.next_cursor == "n2"


@pytest.mark.asyncio
@respx.mock
async def test_search_helpers_build_cql(client):
    route = respx.get(SEARCH).mock(return_value=Response(200, json={"results": []}))

    async with client:
        await search.search_pages(client, "onboarding", space_key="HR")
        await search.search_by_label(client, "faq", content_type="page")
        await search.search_recent(client, days=3)

    sent = [c.request.url.params["cql"] for c in route.calls]
    assert sent[0] == 'type=page AND text ~ "onboarding" AND space.key="HR"'
    assert sent[1] == 'label="faq" AND type=page'
    assert sent[2].startswith('lastModified >= "')
    assert sent[2].endswith("ORDER BY lastModified DESC")
