# Coda MCP Server
# File: tools/formulas.py
# Version: v1

"""Named formula tools (read-only)."""

from __future__ import annotations

from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response
from .common import DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard


@tool_guard("coda_list_formulas")
async def list_formulas(
    client: CodaClient,
    doc_id: str,
    *,
    limit: int = 50,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_formulas(doc_id, limit=limit, page_token=page_token)
    return format_response(result, fmt, "formulas", options)


@tool_guard("coda_get_formula")
async def get_formula(
    client: CodaClient,
    doc_id: str,
    formula_id_or_name: str,
    *,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    formula = await client.get_formula(doc_id, formula_id_or_name)
    return format_response(formula, fmt, "formula", options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register formula tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_formulas",
        description="List named formulas in a Coda document with their current values.",
    )
    async def mcp_list_formulas(
        docId: DocIdArg,
        limit: Limit100 = 50,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_formulas(
            client, docId, limit=limit, page_token=pageToken, fmt=format, options=options
        )

    @server.tool(
        name="coda_get_formula",
        description="Get a named formula and its computed value.",
    )
    async def mcp_get_formula(
        docId: DocIdArg,
        formulaIdOrName: Annotated[str, Field(description="Formula ID or name")],
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await get_formula(client, docId, formulaIdOrName, fmt=format, options=options)
