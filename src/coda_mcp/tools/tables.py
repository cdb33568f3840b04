# Coda MCP Server
# File: tools/tables.py
# Version: v1

"""Table and column tools."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response
from .common import DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard

TableType = Literal["table", "view"]
TableSortBy = Literal["name", "createdAt", "updatedAt"]

TableArg = Annotated[str, Field(description="Table ID or name")]


@tool_guard("coda_list_tables")
async def list_tables(
    client: CodaClient,
    doc_id: str,
    *,
    table_types: Optional[List[str]] = None,
    sort_by: Optional[str] = None,
    limit: int = 20,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_tables(
        doc_id,
        table_types=table_types,
        sort_by=sort_by,
        limit=limit,
        page_token=page_token,
    )
    return format_response(result, fmt, "tables", options)


@tool_guard("coda_get_table")
async def get_table(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    *,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    table = await client.get_table(doc_id, table_id_or_name)
    return format_response(table, fmt, "table", options)


@tool_guard("coda_list_columns")
async def list_columns(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    *,
    limit: int = 50,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_columns(
        doc_id, table_id_or_name, limit=limit, page_token=page_token
    )
    return format_response(result, fmt, "columns", options)


@tool_guard("coda_get_column")
async def get_column(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    column_id_or_name: str,
    *,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    column = await client.get_column(doc_id, table_id_or_name, column_id_or_name)
    return format_response(column, fmt, "column", options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register table and column tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_tables",
        description=(
            "List tables and views in a Coda document with row counts and layout. "
            "Filter with tableTypes ('table', 'view'), order with sortBy."
        ),
    )
    async def mcp_list_tables(
        docId: DocIdArg,
        tableTypes: Annotated[
            Optional[List[TableType]], Field(description="Only these table types")
        ] = None,
        sortBy: Annotated[Optional[TableSortBy], Field(description="Sort order")] = None,
        limit: Limit100 = 20,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_tables(
            client,
            docId,
            table_types=list(tableTypes) if tableTypes else None,
            sort_by=sortBy,
            limit=limit,
            page_token=pageToken,
            fmt=format,
            options=options,
        )

    @server.tool(
        name="coda_get_table",
        description="Get table details: name, type, row count, layout, display column and parent page.",
    )
    async def mcp_get_table(
        docId: DocIdArg, tableIdOrName: TableArg, format: FormatArg = "json"
    ) -> CallToolResult:
        return await get_table(client, docId, tableIdOrName, fmt=format, options=options)

    @server.tool(
        name="coda_list_columns",
        description="List the columns of a table with their type and whether they are calculated.",
    )
    async def mcp_list_columns(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        limit: Limit100 = 50,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_columns(
            client,
            docId,
            tableIdOrName,
            limit=limit,
            page_token=pageToken,
            fmt=format,
            options=options,
        )

    @server.tool(
        name="coda_get_column",
        description="Get column details including its format and formula (if calculated).",
    )
    async def mcp_get_column(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        columnIdOrName: Annotated[str, Field(description="Column ID or name")],
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await get_column(
            client, docId, tableIdOrName, columnIdOrName, fmt=format, options=options
        )
