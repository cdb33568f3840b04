# Coda MCP Server
# File: server.py
# Version: v1

"""Per-tenant MCP server factory.

``create_server`` is called once per inbound request (HTTP) or once per
process (stdio). The returned FastMCP instance holds a client bound to the
given credentials only and must not be shared with another tenant.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult

from . import SERVER_NAME
from .auth import TenantCredentials
from .client import CodaClient
from .config import ServerConfig
from .formatters import RenderOptions
from .tools import register_all_tools
from .tools.utilities import check_connection

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Tools for the Coda API: docs, pages, tables, columns, rows, formulas, "
    "controls, automations, sharing and publishing. Writes are asynchronous; "
    "use coda_get_mutation_status with the returned requestId to check completion."
)


def create_server(
    credentials: TenantCredentials,
    config: Optional[ServerConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """Build a FastMCP server whose tools all act with ``credentials``."""
    cfg = config or ServerConfig()
    client = CodaClient(
        credentials,
        transport=transport,
        timeout=float(cfg.http_timeout_seconds),
    )
    options = RenderOptions.from_config(cfg)

    server = FastMCP(SERVER_NAME, instructions=INSTRUCTIONS)
    register_all_tools(server, client, options)

    @server.tool(
        name="coda_test_connection",
        description="Check that the supplied Coda API key works. Reports the connected user.",
    )
    async def mcp_test_connection() -> CallToolResult:
        return await check_connection(client, options=options)

    logger.debug("Created MCP server for %r", credentials)
    return server
