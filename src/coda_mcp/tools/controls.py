# Coda MCP Server
# File: tools/controls.py
# Version: v1

"""Control tools (buttons, sliders, pickers and other canvas controls)."""

from __future__ import annotations

from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response
from .common import DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard


@tool_guard("coda_list_controls")
async def list_controls(
    client: CodaClient,
    doc_id: str,
    *,
    limit: int = 50,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_controls(doc_id, limit=limit, page_token=page_token)
    return format_response(result, fmt, "controls", options)


@tool_guard("coda_get_control")
async def get_control(
    client: CodaClient,
    doc_id: str,
    control_id_or_name: str,
    *,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    control = await client.get_control(doc_id, control_id_or_name)
    return format_response(control, fmt, "control", options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register control tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_controls",
        description="List controls in a Coda document with their type and current value.",
    )
    async def mcp_list_controls(
        docId: DocIdArg,
        limit: Limit100 = 50,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_controls(
            client, docId, limit=limit, page_token=pageToken, fmt=format, options=options
        )

    @server.tool(name="coda_get_control", description="Get a control and its current value.")
    async def mcp_get_control(
        docId: DocIdArg,
        controlIdOrName: Annotated[str, Field(description="Control ID or name")],
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await get_control(client, docId, controlIdOrName, fmt=format, options=options)
