# Coda MCP Server
# File: formatters.py
# Version: v1

"""Render tool results as MCP ``CallToolResult`` values.

Read tools choose between JSON and a compact markdown view; write tools
return a ``{"success": true, "message": ...}`` JSON object; failures become
an ``isError`` result carrying a retry hint and diagnostic details.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mcp.types import CallToolResult, TextContent

from .config import ServerConfig
from .errors import CodaError, error_details
from .models import (
    Currency,
    DateValue,
    ImageAttachment,
    LinkedRow,
    PaginatedResponse,
    Person,
    UnknownCellValue,
    parse_cell_value,
)

TRUNCATION_NOTICE = (
    "\n\n[Response truncated at {limit} characters. "
    "Use pagination or filters to narrow the result.]"
)

MAX_ROW_COLUMNS = 5


@dataclass(frozen=True)
class RenderOptions:
    """Output settings shared by every tool of a server instance."""

    character_limit: int = 50000
    pretty_json: bool = True

    @classmethod
    def from_config(cls, config: ServerConfig) -> "RenderOptions":
        return cls(
            character_limit=config.character_limit,
            pretty_json=config.pretty_json,
        )


DEFAULT_OPTIONS = RenderOptions()


# ---------------------------------------------------------------------------
# Result builders
# ---------------------------------------------------------------------------


def _dumps(data: Any, options: RenderOptions) -> str:
    indent = 2 if options.pretty_json else None
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def _truncate(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_NOTICE.format(limit=limit)


def text_result(
    text: str, options: RenderOptions = DEFAULT_OPTIONS, is_error: bool = False
) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=_truncate(text, options.character_limit))],
        isError=is_error,
    )


def format_response(
    data: Any,
    fmt: str = "json",
    entity_type: str = "items",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    """Render a read result as JSON (default) or markdown."""
    if isinstance(data, PaginatedResponse):
        data = data.to_dict()

    if fmt == "markdown":
        return text_result(format_markdown(data, entity_type), options)
    return text_result(_dumps(data, options), options)


def format_success(
    message: str,
    data: Optional[Mapping[str, Any]] = None,
    key: Optional[str] = None,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    """Envelope for write tools.

    With ``key`` the upstream object is nested under that name, otherwise
    its fields (an async mutation acknowledgment) are spread alongside
    ``success`` and ``message``.
    """
    payload: Dict[str, Any] = {"success": True, "message": message}
    if key:
        if data is not None:
            payload[key] = dict(data)
    elif data:
        payload.update(data)
    return text_result(_dumps(payload, options), options)


def format_error(
    exc: BaseException, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    """Envelope for any failure raised while running a tool."""
    retryable = bool(getattr(exc, "retryable", False)) if isinstance(exc, CodaError) else False
    message = exc.message if isinstance(exc, CodaError) else (str(exc) or type(exc).__name__)

    text = f"Error: {message}"
    if retryable:
        text += " (retryable)"

    payload = {"error": text, "retryable": retryable, "details": error_details(exc)}
    return text_result(_dumps(payload, options), options, is_error=True)


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def format_markdown(data: Any, entity_type: str) -> str:
    if isinstance(data, PaginatedResponse):
        data = data.to_dict()

    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return _paginated_markdown(data, entity_type)
    if isinstance(data, list):
        return _generic_table(data)
    if isinstance(data, dict):
        return _object_markdown(data, entity_type)
    return str(data)


def _paginated_markdown(data: Dict[str, Any], entity_type: str) -> str:
    items: List[Any] = data["items"]
    lines = [f"## {_capitalize(entity_type)}", ""]

    if data.get("total") is not None:
        lines.append(f"**Total:** {data['total']} | **Showing:** {len(items)}")
    else:
        lines.append(f"**Showing:** {len(items)}")

    if data.get("hasMore"):
        lines.append(f"**More available:** Yes (pageToken: `{data.get('nextPageToken')}`)")
    lines.append("")

    if not items:
        lines.append("_No items found._")
        return "\n".join(lines)

    renderer = _TABLE_RENDERERS.get(entity_type, _generic_table)
    lines.append(renderer(items))
    return "\n".join(lines)


def _escape(value: Any) -> str:
    text = "-" if value is None or value == "" else str(value)
    return text.replace("|", "\\|").replace("\r\n", " ").replace("\n", " ")


def _table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("---" for _ in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_escape(v) for v in row) + " |")
    return "\n".join(lines)


def _docs_table(docs: List[Dict[str, Any]]) -> str:
    return _table(
        ["ID", "Name", "Owner", "Updated"],
        [
            [
                d.get("id"),
                d.get("name"),
                d.get("ownerName") or d.get("owner"),
                str(d.get("updatedAt") or "").split("T")[0],
            ]
            for d in docs
        ],
    )


def _pages_table(pages: List[Dict[str, Any]]) -> str:
    return _table(
        ["ID", "Name", "Subtitle", "Type"],
        [
            [p.get("id"), p.get("name"), p.get("subtitle"), p.get("contentType") or "canvas"]
            for p in pages
        ],
    )


def _tables_table(tables: List[Dict[str, Any]]) -> str:
    return _table(
        ["ID", "Name", "Type", "Rows", "Layout"],
        [
            [t.get("id"), t.get("name"), t.get("tableType"), t.get("rowCount"), t.get("layout")]
            for t in tables
        ],
    )


def _columns_table(columns: List[Dict[str, Any]]) -> str:
    rows = []
    for c in columns:
        fmt = c.get("format") if isinstance(c.get("format"), dict) else {}
        rows.append(
            [c.get("id"), c.get("name"), fmt.get("type"), "Yes" if c.get("calculated") else "No"]
        )
    return _table(["ID", "Name", "Type", "Calculated"], rows)


def _rows_table(rows: List[Dict[str, Any]]) -> str:
    first_values = rows[0].get("values") or {}
    keys = list(first_values.keys())[:MAX_ROW_COLUMNS]
    body = []
    for row in rows:
        values = row.get("values") or {}
        body.append([row.get("id")] + [format_cell_value(values.get(k)) for k in keys])
    return _table(["ID", *keys], body)


def _formulas_table(formulas: List[Dict[str, Any]]) -> str:
    return _table(
        ["ID", "Name", "Value"],
        [[f.get("id"), f.get("name"), format_cell_value(f.get("value"))] for f in formulas],
    )


def _controls_table(controls: List[Dict[str, Any]]) -> str:
    return _table(
        ["ID", "Name", "Type", "Value"],
        [
            [c.get("id"), c.get("name"), c.get("controlType"), format_cell_value(c.get("value"))]
            for c in controls
        ],
    )


def _generic_table(items: List[Any]) -> str:
    if not items:
        return "_No items found._"
    if not isinstance(items[0], dict):
        return "\n".join(f"- {_escape(item)}" for item in items)

    keys = list(items[0].keys())[:MAX_ROW_COLUMNS]
    rows = []
    for item in items:
        record = item if isinstance(item, dict) else {}
        rows.append([_plain(record.get(k)) for k in keys])
    return _table(keys, rows)


def _plain(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


_TABLE_RENDERERS = {
    "docs": _docs_table,
    "pages": _pages_table,
    "tables": _tables_table,
    "columns": _columns_table,
    "rows": _rows_table,
    "formulas": _formulas_table,
    "controls": _controls_table,
}


def _object_markdown(data: Dict[str, Any], entity_type: str) -> str:
    lines = [f"## {_capitalize(re.sub(r's$', '', entity_type))}", ""]
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            lines.append(f"**{_title_key(key)}:**")
            lines.append("```json")
            lines.append(json.dumps(value, indent=2, ensure_ascii=False))
            lines.append("```")
        else:
            lines.append(f"**{_title_key(key)}:** {value}")
    return "\n".join(lines)


def format_cell_value(raw: Any) -> str:
    """Short display text for a cell value."""
    value = parse_cell_value(raw)
    return _cell_text(value)


def _cell_text(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, list):
        return ", ".join(_cell_text(v) for v in value)
    if isinstance(value, LinkedRow):
        return value.name or "-"
    if isinstance(value, Person):
        return value.email or value.name or "-"
    if isinstance(value, Currency):
        if value.currency_code in ("", "USD"):
            return f"${value.amount}"
        return f"{value.amount} {value.currency_code}"
    if isinstance(value, ImageAttachment):
        return value.name or value.url or "-"
    if isinstance(value, DateValue):
        return value.date or "-"
    if isinstance(value, UnknownCellValue):
        return json.dumps(value.raw, ensure_ascii=False)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _title_key(key: str) -> str:
    """camelCase -> Title Case."""
    spaced = re.sub(r"([A-Z])", r" \1", key).strip()
    return _capitalize(spaced)
