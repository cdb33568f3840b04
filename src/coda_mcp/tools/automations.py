# Coda MCP Server
# File: tools/automations.py
# Version: v1

"""Automation rule tools: list rules and trigger webhook-invoked ones."""

from __future__ import annotations

from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response, format_success
from .common import DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard


@tool_guard("coda_list_automations")
async def list_automations(
    client: CodaClient,
    doc_id: str,
    *,
    limit: int = 50,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_automations(doc_id, limit=limit, page_token=page_token)
    return format_response(result, fmt, "automations", options)


@tool_guard("coda_trigger_automation")
async def trigger_automation(
    client: CodaClient,
    doc_id: str,
    rule_id: str,
    *,
    message: Optional[str] = None,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    payload = {"message": message} if message else None
    ack = await client.trigger_automation(doc_id, rule_id, payload)
    return format_success("Automation triggered", ack, options=options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register automation tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_automations",
        description="List automation rules in a Coda document.",
    )
    async def mcp_list_automations(
        docId: DocIdArg,
        limit: Limit100 = 50,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_automations(
            client, docId, limit=limit, page_token=pageToken, fmt=format, options=options
        )

    @server.tool(
        name="coda_trigger_automation",
        description=(
            "Trigger a webhook-invoked automation rule. The optional message is "
            "passed to the rule as its payload. Returns the requestId."
        ),
    )
    async def mcp_trigger_automation(
        docId: DocIdArg,
        ruleId: Annotated[str, Field(description="Automation rule ID")],
        message: Annotated[Optional[str], Field(description="Message payload")] = None,
    ) -> CallToolResult:
        return await trigger_automation(
            client, docId, ruleId, message=message, options=options
        )
