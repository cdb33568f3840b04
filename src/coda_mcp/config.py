# Coda MCP Server
# File: config.py
# Version: v1

"""Process-level configuration for the Coda MCP Server.

Only server settings live here (bind address, timeouts, output limits).
Tenant credentials are never part of this configuration: in HTTP mode they
arrive with each request, see ``auth.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
import os


DEFAULT_BASE_URL = "https://coda.io/apis/v1"


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable with clamping and safe fallback."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = int(default)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = int(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


@dataclass
class ServerConfig:
    """Server-wide settings shared by every tenant request."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Outbound calls to the Coda API
    http_timeout_seconds: int = 30

    # Tool output guardrail (characters of rendered text)
    character_limit: int = 50000

    # Pretty-print JSON envelopes for human readers / agents
    pretty_json: bool = True

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create configuration from environment variables."""
        host = os.getenv("CODA_MCP_HOST") or "0.0.0.0"
        log_level = (os.getenv("CODA_MCP_LOG_LEVEL") or "INFO").strip().upper()

        port = _parse_int_env("CODA_MCP_PORT", default=8000, min_value=1, max_value=65535)
        http_timeout_seconds = _parse_int_env(
            "CODA_MCP_HTTP_TIMEOUT", default=30, min_value=1, max_value=600
        )
        character_limit = _parse_int_env(
            "CODA_MCP_CHARACTER_LIMIT", default=50000, min_value=1000, max_value=5000000
        )
        pretty_json = _parse_bool_env("CODA_MCP_PRETTY_JSON", default=True)

        return cls(
            host=host,
            port=port,
            log_level=log_level,
            http_timeout_seconds=http_timeout_seconds,
            character_limit=character_limit,
            pretty_json=pretty_json,
        )
