"""Render tool results as indented JSON or as human-readable Markdown."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfluenceAPIError
from .links import next_link
from .models import PaginatedResult

ResponseFormat = Literal["json", "markdown"]

GENERIC_MAX_COLUMNS = 5


class EntityFamily(str, Enum):
    SPACES = "spaces"
    PAGES = "pages"
    BLOGPOSTS = "blogposts"
    COMMENTS = "comments"
    ATTACHMENTS = "attachments"
    LABELS = "labels"
    TASKS = "tasks"
    USERS = "users"
    SEARCH = "search"
    PERMISSIONS = "permissions"
    PROPERTIES = "properties"
    VERSIONS = "versions"
    LIKES = "likes"
    OPERATIONS = "operations"
    CUSTOM_CONTENT = "custom content"
    DATABASES = "databases"
    FOLDERS = "folders"
    WHITEBOARDS = "whiteboards"
    RESULTS = "results"


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    content: List[TextContent]
    is_error: Optional[bool] = Field(default=None, alias="isError")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def text(self) -> str:
        return self.content[0].text if self.content else ""


# --- Cell helpers ---------------------------------------------------------- #


def _cell(value: Any) -> str:
    if value is None or value == "":
        return "-"
    return str(value).replace("|", "\\|").replace("\n", " ")


def _dig(item: Dict[str, Any], *path: str) -> Any:
    current: Any = item
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _date(raw: Any) -> str:
    if not raw:
        return "-"
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return str(raw)


def _version_number(item: Dict[str, Any]) -> Any:
    return _dig(item, "version", "number") or "-"


def _size_kb(item: Dict[str, Any]) -> str:
    size = item.get("fileSize")
    if not size:
        return "-"
    return f"{int(size / 1024 + 0.5)} KB"


@dataclass(frozen=True)
class TableLayout:
    headers: Sequence[str]
    row: Callable[[Dict[str, Any]], Sequence[Any]]


LAYOUTS: Dict[EntityFamily, TableLayout] = {
    EntityFamily.SPACES: TableLayout(
        ("ID", "Key", "Name", "Type", "Status"),
        lambda s: (s.get("id"), s.get("key"), s.get("name"), s.get("type"), s.get("status")),
    ),
    EntityFamily.PAGES: TableLayout(
        ("ID", "Title", "Space ID", "Status", "Version"),
        lambda p: (
            p.get("id"),
            p.get("title"),
            p.get("spaceId"),
            p.get("status"),
            _version_number(p),
        ),
    ),
    EntityFamily.BLOGPOSTS: TableLayout(
        ("ID", "Title", "Space ID", "Status", "Created"),
        lambda b: (
            b.get("id"),
            b.get("title"),
            b.get("spaceId"),
            b.get("status"),
            _date(b.get("createdAt")),
        ),
    ),
    EntityFamily.COMMENTS: TableLayout(
        ("ID", "Status", "Created", "Version"),
        lambda c: (
            c.get("id"),
            c.get("status"),
            _date(c.get("createdAt")),
            _version_number(c),
        ),
    ),
    EntityFamily.ATTACHMENTS: TableLayout(
        ("ID", "Title", "Media Type", "Size"),
        lambda a: (a.get("id"), a.get("title"), a.get("mediaType"), _size_kb(a)),
    ),
    EntityFamily.LABELS: TableLayout(
        ("ID", "Name", "Prefix"),
        lambda lbl: (lbl.get("id"), lbl.get("name"), lbl.get("prefix")),
    ),
    EntityFamily.TASKS: TableLayout(
        ("ID", "Status", "Assigned To", "Due Date"),
        lambda t: (t.get("id"), t.get("status"), t.get("assignedTo"), _date(t.get("dueAt"))),
    ),
    EntityFamily.USERS: TableLayout(
        ("Account ID", "Name", "Type"),
        lambda u: (
            u.get("accountId"),
            u.get("displayName") or u.get("publicName"),
            u.get("accountType"),
        ),
    ),
    EntityFamily.SEARCH: TableLayout(
        ("Title", "Type", "Space", "Last Modified"),
        lambda r: (
            _dig(r, "content", "title") or r.get("title"),
            _dig(r, "content", "type"),
            _dig(r, "content", "space", "name")
            or _dig(r, "resultGlobalContainer", "title"),
            r.get("friendlyLastModified"),
        ),
    ),
}


# --- Markdown -------------------------------------------------------------- #


def _table(headers: Sequence[str], rows: List[Sequence[Any]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(v) for v in row) + " |")
    return "\n".join(lines)


def _generic_table(items: List[Any]) -> str:
    if not items:
        return "_No items_"

    first = items[0] if isinstance(items[0], dict) else {"value": items[0]}
    keys = list(first.keys())[:GENERIC_MAX_COLUMNS]

    rows = []
    for item in items:
        record = item if isinstance(item, dict) else {"value": item}
        rows.append([record.get(k) for k in keys])
    return _table(keys, rows)


def _title(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_key(key: str) -> str:
    """camelCase -> Title Case, e.g. 'spaceId' -> 'Space Id'."""
    return _title(re.sub(r"([A-Z])", r" \1", key)).strip()


def _paginated_markdown(data: Dict[str, Any], family: EntityFamily) -> str:
    results = data.get("results") or []
    lines = [f"## {_title(family.value)}", "", f"**Showing:** {len(results)}"]
    if next_link(data):
        lines.append("**More available:** Yes")
    lines.append("")

    if not results:
        lines.append("_No items found._")
        return "\n".join(lines)

    layout = LAYOUTS.get(family)
    if layout is None:
        lines.append(_generic_table(results))
    else:
        lines.append(_table(layout.headers, [layout.row(r) for r in results]))
    return "\n".join(lines)


def _record_markdown(data: Dict[str, Any], family: EntityFamily) -> str:
    singular = re.sub(r"s$", "", family.value)
    lines = [f"## {_title(singular)}", ""]
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            lines.append(f"**{format_key(key)}:**")
            lines.append("```json")
            lines.append(json.dumps(value, indent=2))
            lines.append("```")
        else:
            lines.append(f"**{format_key(key)}:** {value}")
    return "\n".join(lines)


def to_markdown(data: Any, family: EntityFamily = EntityFamily.RESULTS) -> str:
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return _paginated_markdown(data, family)
    if isinstance(data, list):
        return _generic_table(data)
    if isinstance(data, dict):
        return _record_markdown(data, family)
    return str(data)


# --- Public API ------------------------------------------------------------ #


def _plain(data: Any) -> Any:
    if isinstance(data, PaginatedResult):
        return data.to_payload()
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, exclude_none=True)
    return data


def render(
    data: Any,
    fmt: ResponseFormat = "json",
    family: EntityFamily = EntityFamily.RESULTS,
) -> str:
    data = _plain(data)
    if fmt == "markdown":
        return to_markdown(data, family)
    return json.dumps(data, indent=2, default=str)


def format_response(
    data: Any,
    fmt: ResponseFormat = "json",
    family: EntityFamily = EntityFamily.RESULTS,
) -> ToolResponse:
    return ToolResponse(content=[TextContent(text=render(data, fmt, family))])


def format_error(exc: BaseException) -> ToolResponse:
    """
    Build the error payload returned to the MCP caller.

    Taxonomy errors carry their classified details and a "(retryable)"
    suffix when the failure is transient; anything else is reported with
    its type name.
    """
    if isinstance(exc, ConfluenceAPIError):
        message = f"Error: {exc.record.message}"
        if exc.retryable:
            message += " (retryable)"
        details: Dict[str, Any] = exc.record.to_details()
    else:
        message = f"Error: {exc}"
        details = {"type": type(exc).__name__, "message": str(exc)}

    text = json.dumps({"error": message, "details": details}, indent=2)
    return ToolResponse(content=[TextContent(text=text)], is_error=True)


__all__ = [
    "ResponseFormat",
    "EntityFamily",
    "TableLayout",
    "LAYOUTS",
    "TextContent",
    "ToolResponse",
    "format_key",
    "to_markdown",
    "render",
    "format_response",
    "format_error",
]
