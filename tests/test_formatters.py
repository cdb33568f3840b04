# Coda MCP Server
# File: tests/test_formatters.py
# Version: v1

import json

from coda_mcp.errors import CodaApiError, RateLimitError
from coda_mcp.formatters import (
    RenderOptions,
    format_cell_value,
    format_error,
    format_markdown,
    format_response,
    format_success,
)
from coda_mcp.models import PaginatedResponse


def _text(result) -> str:
    return result.content[0].text


def test_json_response_renders_paginated_shape() -> None:
    page = PaginatedResponse(items=[{"id": "d1"}], next_page_token="t2")
    result = format_response(page, "json", "docs")

    assert result.isError is False
    assert json.loads(_text(result)) == {"items": [{"id": "d1"}], "nextPageToken": "t2", "hasMore": True}


def test_markdown_docs_table() -> None:
    page = PaginatedResponse(
        items=[{"id": "d1", "name": "Plan | Q3", "ownerName": "Ada", "updatedAt": "2024-05-01T10:00:00Z"}],
        next_page_token="t2",
    )
    text = format_markdown(page, "docs")

    assert text.startswith("## Docs")
    assert "**Showing:** 1" in text
    assert "**More available:** Yes (pageToken: `t2`)" in text
    assert "| ID | Name | Owner | Updated |" in text
    assert "| d1 | Plan \\| Q3 | Ada | 2024-05-01 |" in text


def test_markdown_empty_listing() -> None:
    text = format_markdown({"items": [], "hasMore": False, "total": 0}, "tables")
    assert "**Total:** 0 | **Showing:** 0" in text
    assert text.endswith("_No items found._")


def test_markdown_rows_limits_columns_and_renders_cells() -> None:
    values = {f"c{i}": i for i in range(7)}
    values["c0"] = {"@type": "Person", "email": "ada@example.com", "name": "Ada"}
    text = format_markdown({"items": [{"id": "i-1", "values": values}]}, "rows")

    header = text.splitlines()[4]
    assert header == "| ID | c0 | c1 | c2 | c3 | c4 |"
    assert "| i-1 | ada@example.com | 1 | 2 | 3 | 4 |" in text


def test_markdown_single_object() -> None:
    text = format_markdown({"id": "t1", "rowCount": 3, "parent": {"id": "p1"}, "gone": None}, "table")

    assert text.startswith("## Table")
    assert "**Row Count:** 3" in text
    assert "**Parent:**" in text
    assert "```json" in text
    assert "Gone" not in text


def test_cell_values_by_kind() -> None:
    assert format_cell_value(None) == "-"
    assert format_cell_value({"@type": "LinkedRow", "name": "Other", "rowId": "i", "tableId": "t"}) == "Other"
    assert format_cell_value({"@type": "Currency", "amount": 5, "currencyCode": "USD"}) == "$5"
    assert format_cell_value({"@type": "Currency", "amount": 5, "currencyCode": "EUR"}) == "5 EUR"
    assert format_cell_value({"@type": "ImageAttachment", "url": "https://img"}) == "https://img"
    assert format_cell_value({"@type": "Date", "date": "2024-01-01"}) == "2024-01-01"
    assert format_cell_value(["a", {"@type": "LinkedRow", "name": "b", "rowId": "i", "tableId": "t"}]) == "a, b"


def test_success_spreads_ack_or_nests_entity() -> None:
    spread = json.loads(_text(format_success("Button pushed", {"requestId": "r1", "rowId": "i-1"})))
    assert spread == {"success": True, "message": "Button pushed", "requestId": "r1", "rowId": "i-1"}

    nested = json.loads(_text(format_success("Document created", {"id": "d1"}, key="doc")))
    assert nested == {"success": True, "message": "Document created", "doc": {"id": "d1"}}


def test_success_envelope_keeps_empty_nested_object() -> None:
    payload = json.loads(_text(format_success("Document created", {}, key="doc")))
    assert payload == {"success": True, "message": "Document created", "doc": {}}

    bare = json.loads(_text(format_success("Document d1 deleted", None, key="doc")))
    assert bare == {"success": True, "message": "Document d1 deleted"}


def test_error_envelope_marks_retryable() -> None:
    result = format_error(RateLimitError(retry_after=30))
    payload = json.loads(_text(result))

    assert result.isError is True
    assert payload["error"] == "Error: Rate limit exceeded (retryable)"
    assert payload["retryable"] is True
    assert payload["details"]["retryAfter"] == 30


def test_error_envelope_for_client_error_and_unknown_exception() -> None:
    payload = json.loads(_text(format_error(CodaApiError("Doc not found", 404))))
    assert payload["error"] == "Error: Doc not found"
    assert payload["retryable"] is False
    assert payload["details"]["status"] == 404

    payload = json.loads(_text(format_error(ValueError("bad input"))))
    assert payload["error"] == "Error: bad input"
    assert payload["retryable"] is False
    assert payload["details"] == {"name": "ValueError", "message": "bad input"}


def test_long_output_is_truncated() -> None:
    options = RenderOptions(character_limit=100, pretty_json=False)
    result = format_response({"items": ["x" * 500]}, "json", "items", options)

    text = _text(result)
    assert text.startswith('{"items": ["xxx')
    assert "Response truncated at 100 characters" in text
    assert len(text) < 300
