# Coda MCP Server
# File: tools/__init__.py
# Version: v1

"""Helpers for registering MCP tools."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP  # type: ignore[import]

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions
from . import (
    automations,
    controls,
    docs,
    formulas,
    pages,
    permissions,
    publishing,
    rows,
    tables,
    utilities,
)

TOOL_MODULES = (
    docs,
    pages,
    tables,
    rows,
    formulas,
    controls,
    automations,
    permissions,
    publishing,
    utilities,
)


def register_all_tools(
    mcp: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register all MCP tools exposed by this server, bound to ``client``."""
    for module in TOOL_MODULES:
        module.register_tools(mcp, client, options)
