# Coda MCP Server
# File: transports/http_server.py
# Version: v1

"""Multi-tenant HTTP entrypoint (``coda-mcp`` console command).

Routes:

- ``POST /mcp``  MCP streamable HTTP (stateless, JSON responses)
- ``GET /health`` liveness probe
- ``GET /``      server info document
- ``/sse``       legacy SSE transport, answered with 501

Every POST to ``/mcp`` resolves the tenant from its headers, builds a fresh
client and FastMCP server for that tenant, dispatches the single MCP
message and drops both. No credential, client or session outlives the
request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import uvicorn
from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .. import SERVER_NAME, __version__
from ..auth import (
    API_KEY_HEADER,
    BASE_URL_HEADER,
    TenantCredentials,
    parse_tenant_credentials,
    validate_credentials,
)
from ..config import ServerConfig
from ..errors import AuthenticationError
from ..server import create_server

logger = logging.getLogger(__name__)

DESCRIPTION = "Multi-tenant MCP server for the Coda API"


async def _dispatch(server: FastMCP, scope: Scope, receive: Receive, send: Send) -> None:
    """Run one MCP exchange against ``server``.

    A session manager can only be started once, so each request gets its
    own, in stateless mode.
    """
    manager = StreamableHTTPSessionManager(
        app=server._mcp_server,
        event_store=None,
        json_response=True,
        stateless=True,
    )
    async with manager.run():
        await manager.handle_request(scope, receive, send)


def unauthorized_body(message: str) -> Dict[str, Any]:
    return {
        "error": "Unauthorized",
        "message": message,
        "required_headers": [API_KEY_HEADER],
    }


class MCPEndpoint:
    """ASGI endpoint behind ``/mcp``."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)

        if request.method != "POST":
            response: Response = JSONResponse(
                {
                    "error": "Method Not Allowed",
                    "message": "This server is stateless. Send MCP messages with POST.",
                },
                status_code=405,
                headers={"Allow": "POST"},
            )
            await response(scope, receive, send)
            return

        credentials = parse_tenant_credentials(request.headers)
        try:
            validate_credentials(credentials)
        except AuthenticationError as exc:
            logger.info("Rejected MCP request without credentials")
            response = JSONResponse(unauthorized_body(exc.message), status_code=401)
            await response(scope, receive, send)
            return

        server = create_server(credentials, self.config)
        await _dispatch(server, scope, receive, send)


async def tool_names() -> List[str]:
    """Names of every tool a tenant server exposes."""
    server = create_server(TenantCredentials())
    tools = await server.list_tools()
    return sorted(tool.name for tool in tools)


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "server": SERVER_NAME})


async def info(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "name": SERVER_NAME,
            "version": __version__,
            "description": DESCRIPTION,
            "endpoints": {
                "mcp": "POST /mcp",
                "health": "GET /health",
                "info": "GET /",
            },
            "authentication": {
                "required_headers": [API_KEY_HEADER],
                "optional_headers": [BASE_URL_HEADER],
            },
            "tools": await tool_names(),
        }
    )


async def sse_not_supported(request: Request) -> PlainTextResponse:
    return PlainTextResponse(
        "SSE transport is not supported in multi-tenant mode. "
        "Use streamable HTTP: POST /mcp with the X-Coda-API-Key header.",
        status_code=501,
    )


def create_app(config: Optional[ServerConfig] = None) -> Starlette:
    """Build the Starlette application."""
    cfg = config or ServerConfig()
    return Starlette(
        debug=False,
        routes=[
            Route("/mcp", MCPEndpoint(cfg)),
            Route("/health", health, methods=["GET"]),
            Route("/", info, methods=["GET"]),
            Route("/sse", sse_not_supported, methods=["GET", "POST"]),
        ],
    )


async def serve(config: ServerConfig) -> None:
    app = create_app(config)
    logger.info("Starting %s %s on %s:%s", SERVER_NAME, __version__, config.host, config.port)
    uv_config = uvicorn.Config(
        app, host=config.host, port=config.port, log_level=config.log_level.lower()
    )
    await uvicorn.Server(uv_config).serve()


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
