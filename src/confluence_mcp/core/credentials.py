"""Per-request tenant credentials, resolved from inbound headers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from .config import DEFAULT_UPSTREAM_HOST
from .errors import ConfigurationError

DOMAIN_HEADER = "X-Confluence-Domain"
EMAIL_HEADER = "X-Confluence-Email"
API_TOKEN_HEADER = "X-Confluence-API-Token"
CLOUD_ID_HEADER = "X-Confluence-Cloud-ID"

REQUIRED_HEADERS: List[str] = [
    f"{DOMAIN_HEADER} (or {CLOUD_ID_HEADER})",
    EMAIL_HEADER,
    API_TOKEN_HEADER,
]

GATEWAY_BASE = "https://api.atlassian.com/ex/confluence"


@dataclass(frozen=True)
class TenantCredentials:
    domain: str
    email: str
    api_token: str
    instance_id: Optional[str] = None

    def site_url(self, upstream_host: str = DEFAULT_UPSTREAM_HOST) -> str:
        if self.domain:
            return f"https://{self.domain}.{upstream_host}"
        return f"{GATEWAY_BASE}/{self.instance_id}"

    def api_base_url(self, upstream_host: str = DEFAULT_UPSTREAM_HOST) -> str:
        return f"{self.site_url(upstream_host)}/wiki/api/v2"

    def search_base_url(self, upstream_host: str = DEFAULT_UPSTREAM_HOST) -> str:
        return f"{self.site_url(upstream_host)}/wiki/rest/api"

    def __repr__(self) -> str:
        # never include api_token
        return (
            f"TenantCredentials(domain={self.domain!r}, email={self.email!r}, "
            f"instance_id={self.instance_id!r})"
        )


def resolve_credentials(headers: Mapping[str, str]) -> TenantCredentials:
    """Map request headers onto credential fields; absent headers stay empty."""
    lowered = {str(k).lower(): v for k, v in headers.items()}

    def _get(name: str) -> str:
        return (lowered.get(name.lower()) or "").strip()

    return TenantCredentials(
        domain=_get(DOMAIN_HEADER),
        email=_get(EMAIL_HEADER),
        api_token=_get(API_TOKEN_HEADER),
        instance_id=_get(CLOUD_ID_HEADER) or None,
    )


def validate_credentials(credentials: TenantCredentials) -> None:
    if not credentials.domain and not credentials.instance_id:
        raise ConfigurationError(
            f"Missing credentials. Provide {DOMAIN_HEADER} or {CLOUD_ID_HEADER} header."
        )
    if not credentials.email:
        raise ConfigurationError(f"Missing credentials. Provide {EMAIL_HEADER} header.")
    if not credentials.api_token:
        raise ConfigurationError(
            f"Missing credentials. Provide {API_TOKEN_HEADER} header."
        )


def credentials_from_env(*, use_dotenv: bool = True) -> TenantCredentials:
    """Load a single tenant from CONFLUENCE_* variables (stdio bootstrap)."""
    if use_dotenv:
        load_dotenv()
    credentials = TenantCredentials(
        domain=os.getenv("CONFLUENCE_DOMAIN", "").strip(),
        email=os.getenv("CONFLUENCE_EMAIL", "").strip(),
        api_token=os.getenv("CONFLUENCE_API_TOKEN", "").strip(),
        instance_id=os.getenv("CONFLUENCE_CLOUD_ID", "").strip() or None,
    )
    validate_credentials(credentials)
    return credentials


__all__ = [
    "TenantCredentials",
    "resolve_credentials",
    "validate_credentials",
    "credentials_from_env",
    "REQUIRED_HEADERS",
    "DOMAIN_HEADER",
    "EMAIL_HEADER",
    "API_TOKEN_HEADER",
    "CLOUD_ID_HEADER",
]
