# Coda MCP Server
# File: tools/rows.py
# Version: v1

"""Row tools: read, upsert, update, delete and push buttons.

All writes are asynchronous upstream. They return the mutation
acknowledgment (``requestId`` plus affected IDs); completion can be checked
with ``coda_get_mutation_status``.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import BaseModel, Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response, format_success
from .common import DocIdArg, FormatArg, Limit500, PageTokenArg, tool_guard

ValueFormat = Literal["simple", "simpleWithArrays", "rich"]

TableArg = Annotated[str, Field(description="Table ID or name")]
RowArg = Annotated[str, Field(description="Row ID or name")]
DisableParsingArg = Annotated[
    bool, Field(description="Store values as given instead of parsing them")
]


class CellEdit(BaseModel):
    """One cell to write: column ID or name and the new value."""

    column: str = Field(description="Column ID or name")
    value: Any = Field(description="New cell value")


class RowEdit(BaseModel):
    cells: List[CellEdit] = Field(description="Cells to write for this row")


def _cells(cells: List[Any]) -> List[Dict[str, Any]]:
    return [c.model_dump() if isinstance(c, BaseModel) else dict(c) for c in cells]


def _rows(rows: List[Any]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for row in rows:
        cells = row.cells if isinstance(row, RowEdit) else row.get("cells", [])
        out.append({"cells": _cells(cells)})
    return out


@tool_guard("coda_list_rows")
async def list_rows(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    *,
    query: Optional[str] = None,
    sort_by: Optional[str] = None,
    use_column_names: bool = True,
    value_format: Optional[str] = None,
    visible_only: Optional[bool] = None,
    limit: int = 100,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_rows(
        doc_id,
        table_id_or_name,
        query=query,
        sort_by=sort_by,
        use_column_names=use_column_names,
        value_format=value_format,
        visible_only=visible_only,
        limit=limit,
        page_token=page_token,
    )
    return format_response(result, fmt, "rows", options)


@tool_guard("coda_get_row")
async def get_row(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    row_id_or_name: str,
    *,
    use_column_names: bool = True,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    row = await client.get_row(
        doc_id, table_id_or_name, row_id_or_name, use_column_names=use_column_names
    )
    return format_response(row, fmt, "row", options)


@tool_guard("coda_upsert_rows")
async def upsert_rows(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    rows: List[Any],
    *,
    key_columns: Optional[List[str]] = None,
    disable_parsing: bool = False,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    ack = await client.upsert_rows(
        doc_id,
        table_id_or_name,
        _rows(rows),
        key_columns=key_columns,
        disable_parsing=disable_parsing,
    )
    added = (ack.get("addedRowIds") or []) if isinstance(ack, dict) else []
    return format_success(f"Upserted {len(added)} rows", ack, options=options)


@tool_guard("coda_update_row")
async def update_row(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    row_id_or_name: str,
    cells: List[Any],
    *,
    disable_parsing: bool = False,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    ack = await client.update_row(
        doc_id,
        table_id_or_name,
        row_id_or_name,
        _cells(cells),
        disable_parsing=disable_parsing,
    )
    row_id = ack.get("id", row_id_or_name) if isinstance(ack, dict) else row_id_or_name
    return format_success(f"Row {row_id} updated", ack, options=options)


@tool_guard("coda_delete_row")
async def delete_row(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    row_id_or_name: str,
    *,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    ack = await client.delete_row(doc_id, table_id_or_name, row_id_or_name)
    row_id = ack.get("id", row_id_or_name) if isinstance(ack, dict) else row_id_or_name
    return format_success(f"Row {row_id} deleted", ack, options=options)


@tool_guard("coda_delete_rows")
async def delete_rows(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    row_ids: List[str],
    *,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    ack = await client.delete_rows(doc_id, table_id_or_name, list(row_ids))
    deleted = (ack.get("rowIds") or []) if isinstance(ack, dict) else []
    return format_success(f"Deleted {len(deleted)} rows", ack, options=options)


@tool_guard("coda_push_button")
async def push_button(
    client: CodaClient,
    doc_id: str,
    table_id_or_name: str,
    row_id_or_name: str,
    column_id_or_name: str,
    *,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    ack = await client.push_button(
        doc_id, table_id_or_name, row_id_or_name, column_id_or_name
    )
    return format_success("Button pushed", ack, options=options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register row tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_rows",
        description=(
            "List rows in a table. query filters rows (e.g. 'Status:\"Done\"'), "
            "valueFormat picks 'simple', 'simpleWithArrays' or 'rich' values, "
            "useColumnNames keys values by column name instead of ID."
        ),
    )
    async def mcp_list_rows(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        query: Annotated[Optional[str], Field(description="Row filter query")] = None,
        sortBy: Annotated[Optional[str], Field(description="Sort order")] = None,
        useColumnNames: Annotated[
            bool, Field(description="Key values by column name")
        ] = True,
        valueFormat: Annotated[
            Optional[ValueFormat], Field(description="Cell value format")
        ] = None,
        visibleOnly: Annotated[
            Optional[bool], Field(description="Only rows visible in the table")
        ] = None,
        limit: Limit500 = 100,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_rows(
            client,
            docId,
            tableIdOrName,
            query=query,
            sort_by=sortBy,
            use_column_names=useColumnNames,
            value_format=valueFormat,
            visible_only=visibleOnly,
            limit=limit,
            page_token=pageToken,
            fmt=format,
            options=options,
        )

    @server.tool(name="coda_get_row", description="Get a single row with all of its values.")
    async def mcp_get_row(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        rowIdOrName: RowArg,
        useColumnNames: Annotated[
            bool, Field(description="Key values by column name")
        ] = True,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await get_row(
            client,
            docId,
            tableIdOrName,
            rowIdOrName,
            use_column_names=useColumnNames,
            fmt=format,
            options=options,
        )

    @server.tool(
        name="coda_upsert_rows",
        description=(
            "Insert rows into a table, or update existing rows when keyColumns "
            "are given (rows matching on those columns are updated). "
            "Returns the requestId and affected row IDs."
        ),
    )
    async def mcp_upsert_rows(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        rows: Annotated[List[RowEdit], Field(description="Rows to insert or upsert")],
        keyColumns: Annotated[
            Optional[List[str]], Field(description="Columns used to match existing rows")
        ] = None,
        disableParsing: DisableParsingArg = False,
    ) -> CallToolResult:
        return await upsert_rows(
            client,
            docId,
            tableIdOrName,
            rows,
            key_columns=keyColumns,
            disable_parsing=disableParsing,
            options=options,
        )

    @server.tool(name="coda_update_row", description="Update cells of an existing row.")
    async def mcp_update_row(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        rowIdOrName: RowArg,
        cells: Annotated[List[CellEdit], Field(description="Cells to update")],
        disableParsing: DisableParsingArg = False,
    ) -> CallToolResult:
        return await update_row(
            client,
            docId,
            tableIdOrName,
            rowIdOrName,
            cells,
            disable_parsing=disableParsing,
            options=options,
        )

    @server.tool(name="coda_delete_row", description="Delete a single row.")
    async def mcp_delete_row(
        docId: DocIdArg, tableIdOrName: TableArg, rowIdOrName: RowArg
    ) -> CallToolResult:
        return await delete_row(client, docId, tableIdOrName, rowIdOrName, options=options)

    @server.tool(name="coda_delete_rows", description="Delete several rows by ID.")
    async def mcp_delete_rows(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        rowIds: Annotated[List[str], Field(description="IDs of the rows to delete")],
    ) -> CallToolResult:
        return await delete_rows(client, docId, tableIdOrName, rowIds, options=options)

    @server.tool(
        name="coda_push_button",
        description="Push a button column on a row, running the button's action.",
    )
    async def mcp_push_button(
        docId: DocIdArg,
        tableIdOrName: TableArg,
        rowIdOrName: RowArg,
        columnIdOrName: Annotated[str, Field(description="Button column ID or name")],
    ) -> CallToolResult:
        return await push_button(
            client, docId, tableIdOrName, rowIdOrName, columnIdOrName, options=options
        )
