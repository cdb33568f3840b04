# Coda MCP Server
# File: tests/test_tool_schemas.py
# Version: v1

import json

import httpx
import pytest
from mcp.types import CallToolResult

from coda_mcp.auth import TenantCredentials
from coda_mcp.server import create_server

EXPECTED_TOOLS = {
    "coda_list_docs",
    "coda_get_doc",
    "coda_create_doc",
    "coda_delete_doc",
    "coda_list_pages",
    "coda_get_page",
    "coda_create_page",
    "coda_update_page",
    "coda_list_tables",
    "coda_get_table",
    "coda_list_columns",
    "coda_get_column",
    "coda_list_rows",
    "coda_get_row",
    "coda_upsert_rows",
    "coda_update_row",
    "coda_delete_row",
    "coda_delete_rows",
    "coda_push_button",
    "coda_list_formulas",
    "coda_get_formula",
    "coda_list_controls",
    "coda_get_control",
    "coda_list_automations",
    "coda_trigger_automation",
    "coda_get_sharing_metadata",
    "coda_list_permissions",
    "coda_add_permission",
    "coda_delete_permission",
    "coda_get_acl_settings",
    "coda_update_acl_settings",
    "coda_list_categories",
    "coda_publish_doc",
    "coda_unpublish_doc",
    "coda_whoami",
    "coda_resolve_browser_link",
    "coda_get_mutation_status",
    "coda_test_connection",
}


async def _schemas():
    server = create_server(TenantCredentials(api_key="k1"))
    tools = await server.list_tools()
    return {tool.name: tool.inputSchema for tool in tools}


@pytest.mark.asyncio
async def test_every_tool_is_registered() -> None:
    schemas = await _schemas()
    assert set(schemas) == EXPECTED_TOOLS


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tool, maximum, default",
    [
        ("coda_list_docs", 100, 20),
        ("coda_list_pages", 100, 20),
        ("coda_list_tables", 100, 20),
        ("coda_list_columns", 100, 50),
        ("coda_list_rows", 500, 100),
        ("coda_list_formulas", 100, 50),
        ("coda_list_controls", 100, 50),
        ("coda_list_automations", 100, 50),
        ("coda_list_permissions", 100, 50),
    ],
)
async def test_limit_bounds_and_defaults(tool, maximum, default) -> None:
    limit = (await _schemas())[tool]["properties"]["limit"]
    assert limit["minimum"] == 1
    assert limit["maximum"] == maximum
    assert limit["default"] == default


@pytest.mark.asyncio
async def test_enums_and_required_arguments() -> None:
    schemas = await _schemas()

    fmt = schemas["coda_get_doc"]["properties"]["format"]
    assert fmt["enum"] == ["json", "markdown"]
    assert fmt["default"] == "json"
    assert schemas["coda_get_doc"]["required"] == ["docId"]

    mode = schemas["coda_update_page"]["properties"]["insertionMode"]
    assert mode["enum"] == ["append", "replace"]
    assert mode["default"] == "append"

    access = schemas["coda_add_permission"]["properties"]["access"]
    assert access["enum"] == ["readonly", "write", "comment", "none"]

    publish_mode = schemas["coda_publish_doc"]["properties"]["mode"]
    assert publish_mode["enum"] == ["view", "play", "edit"]
    assert publish_mode["default"] == "view"

    assert schemas["coda_list_rows"]["properties"]["useColumnNames"]["default"] is True
    assert '"format": "email"' in json.dumps(schemas["coda_add_permission"])
    assert set(schemas["coda_upsert_rows"]["required"]) == {"docId", "tableIdOrName", "rows"}


@pytest.mark.asyncio
async def test_tool_call_goes_through_tenant_client() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["path"] = request.url.path
        return httpx.Response(200, json={"id": "d1", "name": "Plan"})

    server = create_server(
        TenantCredentials(api_key="tenant-key"), transport=httpx.MockTransport(handler)
    )
    result = await server.call_tool("coda_get_doc", {"docId": "d1"})

    assert isinstance(result, CallToolResult)
    assert json.loads(result.content[0].text) == {"id": "d1", "name": "Plan"}
    assert seen == {"auth": "Bearer tenant-key", "path": "/apis/v1/docs/d1"}
