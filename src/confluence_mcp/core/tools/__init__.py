"""Confluence operations exposed as MCP tools (one module per resource family)."""
