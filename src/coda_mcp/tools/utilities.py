# Coda MCP Server
# File: tools/utilities.py
# Version: v1

"""Account and utility tools: whoami, link resolution, mutation status, connection test."""

from __future__ import annotations

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response
from .common import tool_guard

logger = logging.getLogger(__name__)

CodaUrlArg = Annotated[
    str,
    Field(
        pattern=r"^https?://\S+$",
        description="Coda URL to resolve, e.g. https://coda.io/d/...",
    ),
]


@tool_guard("coda_whoami")
async def whoami(
    client: CodaClient, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    user = await client.whoami()
    return format_response(user, "json", "user", options)


@tool_guard("coda_resolve_browser_link")
async def resolve_browser_link(
    client: CodaClient,
    url: str,
    *,
    degrade_gracefully: bool = False,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    resource = await client.resolve_browser_link(url, degrade_gracefully=degrade_gracefully)
    return format_response(resource, "json", "resource", options)


@tool_guard("coda_get_mutation_status")
async def get_mutation_status(
    client: CodaClient, request_id: str, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    status = await client.get_mutation_status(request_id)
    return format_response(status, "json", "status", options)


async def check_connection(
    client: CodaClient, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    """Report connectivity as data; the only tool that never surfaces an exception."""
    result = await client.test_connection()
    if not result["connected"]:
        logger.info("Connection test failed: %s", result["message"])
    return format_response(result, "json", "connection", options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register utility tools on the given FastMCP instance."""

    @server.tool(
        name="coda_whoami",
        description="Get the authenticated user: name, login ID and workspace details.",
    )
    async def mcp_whoami() -> CallToolResult:
        return await whoami(client, options=options)

    @server.tool(
        name="coda_resolve_browser_link",
        description=(
            "Resolve a Coda browser URL to the API resource it refers to (type, ID, href). "
            "With degradeGracefully, a deleted object resolves to its nearest parent."
        ),
    )
    async def mcp_resolve_browser_link(
        url: CodaUrlArg,
        degradeGracefully: Annotated[
            bool, Field(description="Fall back to the nearest existing parent")
        ] = False,
    ) -> CallToolResult:
        return await resolve_browser_link(
            client, url, degrade_gracefully=degradeGracefully, options=options
        )

    @server.tool(
        name="coda_get_mutation_status",
        description=(
            "Check whether an asynchronous write has finished. Pass the requestId "
            "returned by a mutation; the result reports completed and any warning."
        ),
    )
    async def mcp_get_mutation_status(
        requestId: Annotated[str, Field(description="Request ID from a mutation")],
    ) -> CallToolResult:
        return await get_mutation_status(client, requestId, options=options)
