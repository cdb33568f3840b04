# Coda MCP Server
# File: auth.py
# Version: v1

"""Per-request tenant credentials.

A single deployment serves many tenants. Each inbound request carries its
own Coda API key in a header; the resolver turns those headers into a
:class:`TenantCredentials` value that is handed to exactly one client and
dropped with the request. Nothing here keeps state between calls.

Headers:

- ``X-Coda-API-Key``: API token for Coda (required)
- ``X-Coda-Base-URL``: override of the Coda API base URL (optional)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import os

from .errors import AuthenticationError

API_KEY_HEADER = "X-Coda-API-Key"
BASE_URL_HEADER = "X-Coda-Base-URL"


@dataclass(frozen=True)
class TenantCredentials:
    """Credentials for one tenant, valid for one request."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None

    def __repr__(self) -> str:
        # Keep keys out of logs and tracebacks.
        key = "***" if self.api_key else None
        return f"TenantCredentials(api_key={key!r}, base_url={self.base_url!r})"


def _header(headers: Mapping[str, Any], name: str) -> Optional[str]:
    """Case-insensitive header lookup; blank values count as absent."""
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if str(key).lower() == lowered:
                value = candidate
                break

    if value is None:
        return None

    value = str(value).strip()
    return value or None


def parse_tenant_credentials(headers: Mapping[str, Any]) -> TenantCredentials:
    """Read tenant credentials from request headers."""
    return TenantCredentials(
        api_key=_header(headers, API_KEY_HEADER),
        base_url=_header(headers, BASE_URL_HEADER),
    )


def validate_credentials(credentials: TenantCredentials) -> None:
    """Fail closed when the required API key is missing."""
    if not credentials.api_key:
        raise AuthenticationError(
            f"Missing credentials. Provide {API_KEY_HEADER} header."
        )


def credentials_from_env() -> TenantCredentials:
    """Credentials for the single local user of the stdio transport."""
    api_key = (os.getenv("CODA_API_KEY") or "").strip() or None
    base_url = (os.getenv("CODA_BASE_URL") or "").strip() or None
    return TenantCredentials(api_key=api_key, base_url=base_url)
