"""Request context and DI contract using ContextVars."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import Iterable, List, Optional

from .client import ConfluenceClient
from .config import ConfluenceSettings
from .credentials import TenantCredentials, validate_credentials
from .errors import ConfigurationError

_credentials_var: ContextVar[Optional[TenantCredentials]] = ContextVar(
    "credentials", default=None
)
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_settings_var: ContextVar[Optional[ConfluenceSettings]] = ContextVar(
    "settings", default=None
)


def ensure_request_id(candidate: Optional[str] = None) -> str:
    return candidate or uuid.uuid4().hex


def apply_request_context(
    credentials: TenantCredentials,
    request_id: Optional[str] = None,
    settings: Optional[ConfluenceSettings] = None,
) -> List[Token]:
    """Set ContextVars for the duration of a request; returns tokens for reset()."""
    validate_credentials(credentials)
    return [
        _credentials_var.set(credentials),
        _request_id_var.set(ensure_request_id(request_id)),
        _settings_var.set(settings),
    ]


def reset_context(tokens: Iterable[Token]) -> None:
    # reverse order so nested applies unwind cleanly
    for token in reversed(list(tokens)):
        token.var.reset(token)


def get_credentials() -> TenantCredentials:
    credentials = _credentials_var.get()
    if credentials is None:
        raise ConfigurationError("No tenant credentials bound to the current request.")
    return credentials


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def get_settings() -> ConfluenceSettings:
    return _settings_var.get() or ConfluenceSettings()


def client_from_context() -> ConfluenceClient:
    """A fresh client for the tenant bound to this request. Caller closes it."""
    settings = get_settings()
    return ConfluenceClient(
        get_credentials(),
        timeout_seconds=settings.timeout_seconds,
        upstream_host=settings.upstream_host,
    )


__all__ = [
    "ensure_request_id",
    "apply_request_context",
    "reset_context",
    "get_credentials",
    "get_request_id",
    "get_settings",
    "client_from_context",
]
