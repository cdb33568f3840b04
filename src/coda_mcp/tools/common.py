# Coda MCP Server
# File: tools/common.py
# Version: v1

"""Shared pieces of the tool modules: argument types and error guard."""

from __future__ import annotations

import functools
import logging
from typing import Annotated, Any, Awaitable, Callable, Literal, Optional, TypeVar

from mcp.types import CallToolResult
from pydantic import Field

from ..errors import CodaError
from ..formatters import DEFAULT_OPTIONS, format_error

logger = logging.getLogger(__name__)

ResponseFormat = Literal["json", "markdown"]
ContentFormat = Literal["markdown", "html"]

FormatArg = Annotated[
    ResponseFormat, Field(description="Response format: 'json' or 'markdown'")
]
DocIdArg = Annotated[str, Field(description="Document ID")]
PageTokenArg = Annotated[
    Optional[str], Field(description="Pagination token from a previous response")
]


Limit100 = Annotated[int, Field(ge=1, le=100, description="Number of items to return")]
Limit500 = Annotated[int, Field(ge=1, le=500, description="Number of items to return")]


F = TypeVar("F", bound=Callable[..., Awaitable[CallToolResult]])


def tool_guard(tool_name: str) -> Callable[[F], F]:
    """Turn any exception raised by a tool function into an error envelope.

    The wrapped function must accept an ``options`` keyword; it is used to
    render the error the same way a success would have been rendered.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> CallToolResult:
            options = kwargs.get("options") or DEFAULT_OPTIONS
            try:
                return await func(*args, **kwargs)
            except CodaError as exc:
                logger.warning(
                    "Tool %s failed (%s): %s", tool_name, exc.kind.value, exc.message
                )
                return format_error(exc, options)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Tool %s failed with an unexpected error", tool_name)
                return format_error(exc, options)

        return wrapper  # type: ignore[return-value]

    return decorator
