from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_UPSTREAM_HOST = "atlassian.net"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ConfluenceSettings:
    """Process-wide knobs. Tenant credentials never live here."""

    upstream_host: str = DEFAULT_UPSTREAM_HOST
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, use_dotenv: bool = False) -> "ConfluenceSettings":
        if use_dotenv:
            load_dotenv()

        upstream_host = (
            os.getenv("CONFLUENCE_UPSTREAM_HOST", "").strip() or DEFAULT_UPSTREAM_HOST
        )
        raw_timeout = os.getenv("CONFLUENCE_TIMEOUT_SECONDS", "").strip()
        timeout_seconds = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
        if timeout_seconds <= 0:
            raise ValueError("CONFLUENCE_TIMEOUT_SECONDS must be greater than zero")

        log_level = os.getenv("CONFLUENCE_LOG_LEVEL", "").strip() or "INFO"

        return cls(
            upstream_host=upstream_host.strip("."),
            timeout_seconds=timeout_seconds,
            log_level=log_level,
        )


__all__ = ["ConfluenceSettings", "DEFAULT_UPSTREAM_HOST", "DEFAULT_TIMEOUT_SECONDS"]
