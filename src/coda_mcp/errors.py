# Coda MCP Server
# File: errors.py
# Version: v1

"""Error taxonomy for calls against the Coda API.

Every failure raised by :class:`coda_mcp.client.CodaClient` is one of the
classes below, so callers can pick a retry policy by type (or by
``exc.kind``) instead of matching message strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


DEFAULT_RETRY_AFTER_SECONDS = 60


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the client."""

    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    API = "api"
    CONNECTION = "connection"


class CodaError(Exception):
    """Base class for all classified client failures."""

    kind: ErrorKind = ErrorKind.API
    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(CodaError):
    """Credentials are missing or were rejected (HTTP 401/403).

    Never retried automatically: the tenant has to supply a new key.
    """

    kind = ErrorKind.AUTHENTICATION
    retryable = False


class RateLimitError(CodaError):
    """The API answered HTTP 429.

    Attributes:
        retry_after: Seconds the caller should wait before retrying.
    """

    kind = ErrorKind.RATE_LIMIT
    retryable = True

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int = DEFAULT_RETRY_AFTER_SECONDS,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class CodaApiError(CodaError):
    """The API rejected the request.

    Attributes:
        status: HTTP status code (None when no response was parsed).
        retryable: True for 5xx responses, False for 4xx.
    """

    kind = ErrorKind.API

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        self.retryable = status is not None and status >= 500
        super().__init__(message)


class CodaConnectionError(CodaError):
    """The request never produced a response (DNS, TLS, timeout, reset)."""

    kind = ErrorKind.CONNECTION
    retryable = True


def error_details(exc: BaseException) -> Dict[str, Any]:
    """Return a JSON-safe description of an exception for envelopes and logs."""
    if not isinstance(exc, CodaError):
        return {"name": type(exc).__name__, "message": str(exc)}

    details: Dict[str, Any] = {
        "name": type(exc).__name__,
        "kind": exc.kind.value,
        "message": exc.message,
        "retryable": exc.retryable,
    }
    if isinstance(exc, CodaApiError) and exc.status is not None:
        details["status"] = exc.status
    if isinstance(exc, RateLimitError):
        details["retryAfter"] = exc.retry_after
    return details
