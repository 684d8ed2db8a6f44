#!/usr/bin/env python3
"""
Keep confluence_mcp.core transport-agnostic.

Core may use mcp.types but nothing that serves requests: no Starlette,
no uvicorn, no mcp.server and no confluence_mcp.transports. Tenant data
arrives through the request context, so only config.py and credentials.py
may touch os.environ / os.getenv.

Usage: check_core_imports.py [FILE ...]   (defaults to the whole core tree)
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

CORE_DIR = Path(__file__).resolve().parents[1] / "src" / "confluence_mcp" / "core"

SERVING_PACKAGES = ("starlette", "uvicorn", "mcp.server", "confluence_mcp.transports")
ENV_READERS = frozenset({"config.py", "credentials.py"})


def is_forbidden(module: str) -> bool:
    head = module.split(".")
    for package in SERVING_PACKAGES:
        parts = package.split(".")
        if head[: len(parts)] == parts:
            return True
    return False


class _CoreVisitor(ast.NodeVisitor):
    def __init__(self, path: Path, may_read_env: bool):
        self.path = path
        self.may_read_env = may_read_env
        self.problems: list[str] = []

    def _flag(self, node: ast.AST, message: str) -> None:
        self.problems.append(f"{self.path}:{getattr(node, 'lineno', 0)}: {message}")

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if is_forbidden(alias.name):
                self._flag(node, f"forbidden import '{alias.name}'")

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        # relative imports stay inside core
        if node.level == 0 and node.module and is_forbidden(node.module):
            self._flag(node, f"forbidden import '{node.module}'")

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if (
            not self.may_read_env
            and node.attr in ("environ", "getenv")
            and isinstance(node.value, ast.Name)
            and node.value.id == "os"
        ):
            self._flag(node, f"environment access (os.{node.attr}) outside config")
        self.generic_visit(node)


def scan_file(path: Path) -> list[str]:
    may_read_env = path.parent == CORE_DIR and path.name in ENV_READERS
    visitor = _CoreVisitor(path, may_read_env)
    visitor.visit(ast.parse(path.read_text(), filename=str(path)))
    return visitor.problems


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    files = [Path(a) for a in args] or sorted(CORE_DIR.rglob("*.py"))

    problems = [p for f in files for p in scan_file(f)]
    for problem in problems:
        print(problem, file=sys.stderr)
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
