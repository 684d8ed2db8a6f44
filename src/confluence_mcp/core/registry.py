from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from contextlib import asynccontextmanager
from dataclasses import dataclass
from types import ModuleType
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Iterable,
    List,
    Literal,
    Optional,
    Set,
    get_type_hints,
)

from mcp.types import CallToolResult, TextContent

from .client import ConfluenceClient
from .errors import ConfluenceAPIError
from .formatters import EntityFamily, ToolResponse, format_error, format_response

log = logging.getLogger("confluence_mcp.core.registry")

TOOL_PREFIX = "confluence_"
FORMAT_PARAM = "format"


@dataclass(frozen=True)
class ToolSpec:
    family: EntityFamily = EntityFamily.RESULTS
    formats: bool = True


def tool(
    family: Optional[EntityFamily] = None, *, formats: bool = True
) -> Callable[[Callable], Callable]:
    """
    Mark a coroutine as an MCP tool.

    `family` picks the Markdown table layout; `formats=False` hides the
    `format` parameter for tools whose output is always JSON.
    """

    def decorator(func: Callable) -> Callable:
        func.__tool_spec__ = ToolSpec(  # type: ignore[attr-defined]
            family=family or EntityFamily.RESULTS, formats=formats
        )
        return func

    return decorator


def get_tool_spec(func: Callable) -> Optional[ToolSpec]:
    return getattr(func, "__tool_spec__", None)


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "confluence_mcp.core.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        if name.rsplit(".", 1)[-1].startswith("_"):
            continue
        try:
            modules.append(importlib.import_module(name))
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield marked coroutines defined in `module` whose first parameter is `client`."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_") or func.__module__ != module.__name__:
            continue
        if get_tool_spec(func) is None:
            continue

        params = list(inspect.signature(func).parameters.values())
        if not params or params[0].name != "client":
            log.debug(
                "Skipping %s.%s: first parameter must be 'client'",
                module.__name__,
                func.__name__,
            )
            continue

        yield func


# --- Wrapping / registration ---------------------------------------------- #


ClientProvider = Callable[[], ConfluenceClient]


@asynccontextmanager
async def _borrowed(client: ConfluenceClient) -> AsyncIterator[ConfluenceClient]:
    # caller owns the client; do not close it per call
    yield client


def to_call_result(response: ToolResponse) -> CallToolResult:
    """FastMCP passes a CallToolResult through as-is, so error text stays bare JSON."""
    return CallToolResult(
        content=[TextContent(type="text", text=item.text) for item in response.content],
        isError=bool(response.is_error),
    )


def _wrap_tool(func: Callable, client_provider: ClientProvider, *, shared: bool) -> Callable:
    """Return a wrapper that injects a client, renders output and hides `client`."""
    spec = get_tool_spec(func) or ToolSpec()
    name = TOOL_PREFIX + func.__name__
    original_sig = inspect.signature(func)
    type_hints = get_type_hints(func, include_extras=True)

    new_params = []
    for i, (pname, param) in enumerate(original_sig.parameters.items()):
        if i == 0 and pname == "client":
            continue
        new_params.append(param.replace(annotation=type_hints.get(pname, param.annotation)))

    if spec.formats:
        new_params.append(
            inspect.Parameter(
                FORMAT_PARAM,
                inspect.Parameter.KEYWORD_ONLY,
                default="json",
                annotation=Literal["json", "markdown"],
            )
        )

    new_sig = inspect.Signature(parameters=new_params, return_annotation=CallToolResult)

    async def wrapped(**kwargs: Any) -> CallToolResult:
        fmt = kwargs.pop(FORMAT_PARAM, "json") if spec.formats else "json"
        try:
            client = client_provider()
            ctx = _borrowed(client) if shared else client
            async with ctx as bound:
                result = await func(bound, **kwargs)
        except Exception as exc:
            log.warning(
                "tool.failed",
                extra={
                    "tool": name,
                    "error_kind": exc.kind.value
                    if isinstance(exc, ConfluenceAPIError)
                    else type(exc).__name__,
                },
            )
            return to_call_result(format_error(exc))
        return to_call_result(format_response(result, fmt, spec.family))

    wrapped.__name__ = name
    wrapped.__qualname__ = name
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: ClientProvider | ConfluenceClient,
    modules: List[ModuleType] | None = None,
) -> List[str]:
    """Register discovered tools on an app that exposes a .tool decorator."""
    shared = isinstance(client_provider, ConfluenceClient)
    if shared:
        _client = client_provider

        def client_provider() -> ConfluenceClient:
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    modules = modules or discover_tool_modules()
    seen_names: Set[str] = set()

    for module in modules:
        for func in iter_tool_functions(module):
            name = TOOL_PREFIX + func.__name__
            if name in seen_names:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, client_provider, shared=shared)
            app.tool(name=name, description=inspect.cleandoc(func.__doc__ or ""))(wrapped)
            seen_names.add(name)
            log.debug("Registered tool: %s (%s)", name, module.__name__)

    log.info("Registered %d tools", len(seen_names))
    return sorted(seen_names)


__all__ = [
    "ToolSpec",
    "tool",
    "get_tool_spec",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    "to_call_result",
    "TOOL_PREFIX",
]
