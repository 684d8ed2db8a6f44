from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlsplit


def get_link(payload: Dict[str, Any], relation: str) -> Optional[str]:
    """
    Safely retrieves a link from the _links dictionary.
    Confluence v2 links are plain strings, e.g. _links.next -> '/wiki/api/v2/pages?cursor=..'
    """
    if not isinstance(payload, dict):
        return None
    links = payload.get("_links")
    if not isinstance(links, dict):
        return None
    value = links.get(relation)
    return value if isinstance(value, str) and value else None


def next_link(payload: Dict[str, Any]) -> Optional[str]:
    return get_link(payload, "next")


def parse_cursor(href: Optional[str]) -> Optional[str]:
    """
    Extracts the cursor query parameter from a next-page link.
    Example: '/wiki/api/v2/pages?limit=25&cursor=abc' -> 'abc'
    """
    if not href:
        return None
    values = parse_qs(urlsplit(href).query).get("cursor")
    return values[0] if values else None


__all__ = ["get_link", "next_link", "parse_cursor"]
