import pytest
from confluence_mcp.core.credentials import (
    REQUIRED_HEADERS,
    TenantCredentials,
    credentials_from_env,
    resolve_credentials,
    validate_credentials,
)
from confluence_mcp.core.errors import ConfigurationError

FULL_HEADERS = {
    "X-Confluence-Domain": "acme",
    "X-Confluence-Email": "ada@acme.com",
    "X-Confluence-API-Token": "tok-123",
}


def test_resolve_credentials_from_headers():
    creds = resolve_credentials(FULL_HEADERS)

    assert creds.domain == "acme"
    assert creds.email == "ada@acme.com"
    assert creds.api_token == "tok-123"
    assert creds.instance_id is None
    validate_credentials(creds)


def test_header_lookup_is_case_insensitive():
    creds = resolve_credentials(
        {
            "x-confluence-domain": "acme",
            "X-CONFLUENCE-EMAIL": "ada@acme.com",
            "x-confluence-api-token": "tok-123",
            "x-confluence-cloud-id": "abc-uuid",
        }
    )

    assert creds.domain == "acme"
    assert creds.email == "ada@acme.com"
    assert creds.instance_id == "abc-uuid"


def test_base_urls_from_domain():
    creds = resolve_credentials(FULL_HEADERS)

    assert creds.api_base_url() == "https://acme.atlassian.net/wiki/api/v2"
    assert creds.search_base_url() == "https://acme.atlassian.net/wiki/rest/api"


def test_instance_id_only_uses_gateway():
    creds = TenantCredentials(
        domain="", email="ada@acme.com", api_token="t", instance_id="cloud-1"
    )
    validate_credentials(creds)

    assert creds.api_base_url() == (
        "https://api.atlassian.com/ex/confluence/cloud-1/wiki/api/v2"
    )


@pytest.mark.parametrize(
    "missing, header_named",
    [
        ("X-Confluence-Domain", "X-Confluence-Domain"),
        ("X-Confluence-Email", "X-Confluence-Email"),
        ("X-Confluence-API-Token", "X-Confluence-API-Token"),
    ],
)
def test_missing_header_names_the_header(missing, header_named):
    headers = {k: v for k, v in FULL_HEADERS.items() if k != missing}

    with pytest.raises(ConfigurationError) as exc:
        validate_credentials(resolve_credentials(headers))

    assert header_named in str(exc.value)


def test_blank_header_counts_as_missing():
    headers = {**FULL_HEADERS, "X-Confluence-API-Token": "   "}

    with pytest.raises(ConfigurationError):
        validate_credentials(resolve_credentials(headers))


def test_repr_hides_token():
    creds = resolve_credentials(FULL_HEADERS)

    assert "tok-123" not in repr(creds)
    assert "acme" in repr(creds)


def test_required_headers_listed():
    assert "X-Confluence-Email" in REQUIRED_HEADERS
    assert "X-Confluence-API-Token" in REQUIRED_HEADERS


def test_credentials_from_env(monkeypatch):
    monkeypatch.setenv("CONFLUENCE_DOMAIN", "acme")
    monkeypatch.setenv("CONFLUENCE_EMAIL", "ada@acme.com")
    monkeypatch.setenv("CONFLUENCE_API_TOKEN", "tok")
    monkeypatch.delenv("CONFLUENCE_CLOUD_ID", raising=False)

    creds = credentials_from_env(use_dotenv=False)
    assert creds.domain == "acme"


def test_credentials_from_env_missing(monkeypatch):
    for name in (
        "CONFLUENCE_DOMAIN",
        "CONFLUENCE_EMAIL",
        "CONFLUENCE_API_TOKEN",
        "CONFLUENCE_CLOUD_ID",
    ):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ConfigurationError):
        credentials_from_env(use_dotenv=False)
