# Coda MCP Server
# File: transports/stdio_server.py
# Version: v1

"""STDIO entrypoint for the Coda MCP server.

This is the script behind the ``coda-mcp-stdio`` console command. It serves
a single local user whose API key comes from ``CODA_API_KEY`` (and an
optional ``CODA_BASE_URL``), then lets FastMCP run the stdio transport.
"""

from __future__ import annotations

import logging
import sys

from ..auth import credentials_from_env, validate_credentials
from ..config import ServerConfig
from ..errors import AuthenticationError
from ..server import create_server

logger = logging.getLogger(__name__)


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    config = ServerConfig.from_env()
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    credentials = credentials_from_env()
    try:
        validate_credentials(credentials)
    except AuthenticationError:
        logger.error("CODA_API_KEY is not set; refusing to start the stdio server")
        raise SystemExit(1)

    mcp = create_server(credentials, config)

    # Let FastMCP handle stdio + event loop setup.
    mcp.run()


if __name__ == "__main__":
    main()
