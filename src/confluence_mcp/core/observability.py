from __future__ import annotations

import logging
from typing import Any, Dict

RESERVED_LOG_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
}

# Never allowed into a log line, whatever the caller passes.
SECRET_LOG_KEYS = {"api_token", "token", "authorization", "password"}


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: v
        for k, v in fields.items()
        if k not in RESERVED_LOG_KEYS and k.lower() not in SECRET_LOG_KEYS
    }


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Structured logging helper.
    - Passes fields through `extra` so LogfmtFormatter can render them.
    - Drops reserved LogRecord attributes and secret-looking keys.
    """
    log = logger or logging.getLogger("confluence_mcp.observability")
    log.log(level, event, extra=_clean_fields(fields))


__all__ = ["log_event", "SECRET_LOG_KEYS"]
