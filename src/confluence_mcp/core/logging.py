import logging
import sys
from typing import Any, Iterator, Optional, TextIO, Tuple

# Order in which `extra` fields appear on a line.
LOG_EXTRA_FIELDS = (
    "request_id",
    "tenant",
    "tool",
    "method",
    "path",
    "status",
    "duration_ms",
    "reason",
    "error_kind",
)

_QUOTE_TRIGGERS = (" ", "=", '"')


def _quote(val: Any) -> str:
    if isinstance(val, (bool, int, float)):
        return str(val)
    text = str(val)
    if any(ch in text for ch in _QUOTE_TRIGGERS):
        return '"' + text.replace('"', '\\"') + '"'
    return text


class LogfmtFormatter(logging.Formatter):
    """
    One logfmt line per record:

        level=warning logger=confluence_mcp.client event=op.request_failed path=/pages/1 status=404

    Extras that are absent or None are skipped.
    """

    def _pairs(self, record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
        yield "level", record.levelname.lower()
        yield "logger", record.name

        event = record.getMessage()
        if event:
            yield "event", event

        for key in LOG_EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                yield key, value

        if record.exc_info and record.exc_info[0] is not None:
            yield "exc_type", record.exc_info[0].__name__

    def format(self, record: logging.LogRecord) -> str:
        return " ".join(f"{k}={_quote(v)}" for k, v in self._pairs(record))


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Replace root handlers with a single logfmt handler on stderr."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    # stdout belongs to the stdio transport
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS"]
