"""Error taxonomy for Confluence API failures."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

DEFAULT_RETRY_AFTER_SECONDS = 60


class ErrorKind(str, Enum):
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"


@dataclass(frozen=True)
class ErrorRecord:
    """
    A classified upstream failure.

    Built once by classify_response() and never mutated; downstream code
    switches on `kind` instead of on exception subclasses.
    """

    kind: ErrorKind
    status: int
    message: str
    path: str = ""
    retry_after_seconds: Optional[int] = None
    retryable: bool = False

    def to_details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {
            "kind": self.kind.value,
            "status": self.status,
            "message": self.message,
            "path": self.path,
            "retryable": self.retryable,
        }
        if self.kind is ErrorKind.RATE_LIMIT:
            details["retry_after_seconds"] = self.retry_after_seconds
        return details


class ConfluenceClientError(Exception):
    """Base error for client failures."""


class ConfluenceAPIError(ConfluenceClientError):
    """Raised for any non-2xx response; carries the classified record."""

    def __init__(self, record: ErrorRecord):
        super().__init__(record.message)
        self.record = record

    @property
    def kind(self) -> ErrorKind:
        return self.record.kind

    @property
    def status_code(self) -> int:
        return self.record.status

    @property
    def retryable(self) -> bool:
        return self.record.retryable


class ConfluenceParseError(ConfluenceClientError):
    pass


class ConfigurationError(ValueError):
    """Raised when tenant credentials are missing or invalid."""


def _parse_retry_after(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return int(raw.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


def _extract_message(body_text: Optional[str]) -> Optional[str]:
    if not body_text:
        return None
    try:
        parsed = json.loads(body_text)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None

    for key in ("message", "error"):
        value = parsed.get(key)
        if isinstance(value, str) and value:
            return value

    errors = parsed.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        value = errors[0].get("message")
        if isinstance(value, str) and value:
            return value
    return None


def classify_response(
    status: int,
    headers: Mapping[str, str],
    body_text: Optional[str],
    path: str,
) -> ErrorRecord:
    """
    Translate a failed HTTP response into an ErrorRecord.

    Checked in order, first match wins: 429, 401, 403, 404, anything else.
    The body is only consulted for the generic case, so a malformed body
    can never change the kind of a well-known status.
    """
    if status == 429:
        return ErrorRecord(
            kind=ErrorKind.RATE_LIMIT,
            status=status,
            message="Rate limit exceeded",
            path=path,
            retry_after_seconds=_parse_retry_after(headers.get("Retry-After")),
            retryable=True,
        )
    if status == 401:
        return ErrorRecord(
            kind=ErrorKind.AUTHENTICATION,
            status=status,
            message="Authentication failed. Check your credentials.",
            path=path,
        )
    if status == 403:
        return ErrorRecord(
            kind=ErrorKind.FORBIDDEN,
            status=status,
            message="Access denied. Check your permissions.",
            path=path,
        )
    if status == 404:
        return ErrorRecord(
            kind=ErrorKind.NOT_FOUND,
            status=status,
            message=f"Resource not found: {path}",
            path=path,
        )

    message = _extract_message(body_text) or f"API error: {status}"
    return ErrorRecord(
        kind=ErrorKind.GENERIC,
        status=status,
        message=message,
        path=path,
        retryable=status >= 500,
    )


__all__ = [
    "DEFAULT_RETRY_AFTER_SECONDS",
    "ErrorKind",
    "ErrorRecord",
    "ConfluenceClientError",
    "ConfluenceAPIError",
    "ConfluenceParseError",
    "ConfigurationError",
    "classify_response",
]
