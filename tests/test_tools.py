# Coda MCP Server
# File: tests/test_tools.py
# Version: v1

import json

import httpx
import pytest

from coda_mcp.auth import TenantCredentials
from coda_mcp.client import CodaClient
from coda_mcp.errors import AuthenticationError, CodaApiError, RateLimitError
from coda_mcp.models import PaginatedResponse
from coda_mcp.tools import automations, docs, pages, permissions, publishing, rows, utilities


class _FakeCodaClient:
    """Records calls and returns canned values; raises ``fail`` when set."""

    def __init__(self, fail: Exception | None = None) -> None:
        self.fail = fail
        self.calls = []

    def __getattr__(self, name):
        async def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            if self.fail is not None:
                raise self.fail
            return self.responses.get(name)

        return method

    responses = {
        "list_docs": PaginatedResponse(items=[{"id": "d1", "name": "Plan"}], next_page_token="t2"),
        "create_doc": {"id": "d9", "name": "New"},
        "delete_doc": None,
        "create_page": {"id": "canvas-1"},
        "upsert_rows": {"requestId": "r1", "addedRowIds": ["i-1", "i-2"]},
        "update_row": {"requestId": "r2", "id": "i-1"},
        "delete_rows": {"requestId": "r3", "rowIds": ["i-1", "i-2", "i-3"]},
        "trigger_automation": {"requestId": "r4"},
        "add_permission": {"id": "perm-1", "access": "readonly"},
        "publish_doc": None,
        "get_mutation_status": {"completed": False, "warning": "still running"},
        "test_connection": {"connected": False, "message": "Authentication failed."},
    }


def _json(result):
    return json.loads(result.content[0].text)


@pytest.mark.asyncio
async def test_list_docs_json_and_markdown() -> None:
    client = _FakeCodaClient()

    payload = _json(await docs.list_docs(client, is_owner=True, limit=5))
    assert payload["hasMore"] is True
    assert payload["items"][0]["id"] == "d1"
    assert client.calls[0][2]["is_owner"] is True
    assert client.calls[0][2]["limit"] == 5

    result = await docs.list_docs(client, fmt="markdown")
    assert result.content[0].text.startswith("## Docs")


@pytest.mark.asyncio
async def test_create_and_delete_doc_envelopes() -> None:
    client = _FakeCodaClient()

    created = _json(await docs.create_doc(client, "New"))
    assert created == {"success": True, "message": "Document created", "doc": {"id": "d9", "name": "New"}}

    deleted = _json(await docs.delete_doc(client, "d9"))
    assert deleted == {"success": True, "message": "Document d9 deleted"}


@pytest.mark.asyncio
async def test_create_page_wraps_content_in_canvas() -> None:
    client = _FakeCodaClient()
    await pages.create_page(client, "d1", "Notes", page_content="# Hi", content_format="markdown")

    _, args, _ = client.calls[0]
    payload = args[1]
    assert payload["name"] == "Notes"
    assert payload["pageContent"] == {
        "type": "canvas",
        "canvasContent": {"format": "markdown", "content": "# Hi"},
    }


@pytest.mark.asyncio
async def test_update_page_without_content_sends_no_content_update() -> None:
    client = _FakeCodaClient()
    client.responses = dict(client.responses, update_page={"id": "canvas-1"})
    await pages.update_page(client, "d1", "canvas-1", name="Renamed")

    payload = client.calls[0][1][2]
    assert "contentUpdate" not in payload
    assert payload["name"] == "Renamed"


@pytest.mark.asyncio
async def test_row_mutations_report_counts_and_pass_ack_through() -> None:
    client = _FakeCodaClient()

    upserted = _json(
        await rows.upsert_rows(client, "d1", "t1", [rows.RowEdit(cells=[rows.CellEdit(column="Name", value="Ada")])])
    )
    assert upserted == {
        "success": True,
        "message": "Upserted 2 rows",
        "requestId": "r1",
        "addedRowIds": ["i-1", "i-2"],
    }
    assert client.calls[0][1][2] == [{"cells": [{"column": "Name", "value": "Ada"}]}]
    assert client.calls[0][2]["key_columns"] is None

    updated = _json(await rows.update_row(client, "d1", "t1", "i-1", [{"column": "c", "value": 1}]))
    assert updated["message"] == "Row i-1 updated"

    deleted = _json(await rows.delete_rows(client, "d1", "t1", ["i-1", "i-2", "i-3"]))
    assert deleted["message"] == "Deleted 3 rows"


@pytest.mark.asyncio
async def test_trigger_automation_payload() -> None:
    client = _FakeCodaClient()

    await automations.trigger_automation(client, "d1", "rule-1")
    await automations.trigger_automation(client, "d1", "rule-1", message="hello")

    assert client.calls[0][1][2] is None
    assert client.calls[1][1][2] == {"message": "hello"}


@pytest.mark.asyncio
async def test_add_permission_builds_principal() -> None:
    client = _FakeCodaClient()
    payload = _json(
        await permissions.add_permission(client, "d1", "readonly", "email", email="ada@example.com")
    )

    assert payload["permission"]["id"] == "perm-1"
    assert client.calls[0][1][2] == {"type": "email", "email": "ada@example.com"}


@pytest.mark.asyncio
async def test_add_permission_requires_email_for_email_principal() -> None:
    client = _FakeCodaClient()
    result = await permissions.add_permission(client, "d1", "readonly", "email")

    assert result.isError is True
    assert "email is required" in _json(result)["error"]
    assert client.calls == []


@pytest.mark.asyncio
async def test_publish_doc_sends_camel_case_payload() -> None:
    client = _FakeCodaClient()
    payload = _json(await publishing.publish_doc(client, "d1", earn_credit=True, category_names=["Fun"]))

    assert payload == {"success": True, "message": "Document d1 published"}
    sent = client.calls[0][1][1]
    assert sent["earnCredit"] is True
    assert sent["categoryNames"] == ["Fun"]
    assert sent["mode"] == "view"


@pytest.mark.asyncio
async def test_mutation_status_warning_is_passed_through() -> None:
    payload = _json(await utilities.get_mutation_status(_FakeCodaClient(), "r1"))
    assert payload == {"completed": False, "warning": "still running"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc, retryable",
    [
        (AuthenticationError("Authentication failed. Check your API credentials."), False),
        (RateLimitError(retry_after=30), True),
        (CodaApiError("API error: 503", 503), True),
        (CodaApiError("Row not found", 404), False),
        (RuntimeError("boom"), False),
    ],
)
async def test_failures_become_error_envelopes(exc, retryable) -> None:
    result = await rows.get_row(_FakeCodaClient(fail=exc), "d1", "t1", "i-1")

    payload = _json(result)
    assert result.isError is True
    assert payload["retryable"] is retryable
    assert payload["error"].startswith("Error: ")


@pytest.mark.asyncio
async def test_check_connection_failure_is_data() -> None:
    result = await utilities.check_connection(_FakeCodaClient())

    assert not result.isError
    assert _json(result) == {"connected": False, "message": "Authentication failed."}


@pytest.mark.asyncio
async def test_check_connection_success_is_data() -> None:
    client = CodaClient(
        TenantCredentials(api_key="key-1"),
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"name": "Ada"})),
    )

    result = await utilities.check_connection(client)

    assert not result.isError
    payload = _json(result)
    assert payload["connected"] is True
    assert "Ada" in payload["message"]
