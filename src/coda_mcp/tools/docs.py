# Coda MCP Server
# File: tools/docs.py
# Version: v1

"""Document tools: list, inspect, create and delete Coda docs."""

from __future__ import annotations

from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response, format_success
from .common import DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard


# ---------------------------------------------------------------------------
# Tool functions
# ---------------------------------------------------------------------------


@tool_guard("coda_list_docs")
async def list_docs(
    client: CodaClient,
    *,
    is_owner: Optional[bool] = None,
    query: Optional[str] = None,
    is_published: Optional[bool] = None,
    is_starred: Optional[bool] = None,
    workspace_id: Optional[str] = None,
    folder_id: Optional[str] = None,
    limit: int = 20,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_docs(
        is_owner=is_owner,
        is_published=is_published,
        query=query,
        is_starred=is_starred,
        workspace_id=workspace_id,
        folder_id=folder_id,
        limit=limit,
        page_token=page_token,
    )
    return format_response(result, fmt, "docs", options)


@tool_guard("coda_get_doc")
async def get_doc(
    client: CodaClient,
    doc_id: str,
    *,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    doc = await client.get_doc(doc_id)
    return format_response(doc, fmt, "doc", options)


@tool_guard("coda_create_doc")
async def create_doc(
    client: CodaClient,
    title: str,
    *,
    source_doc: Optional[str] = None,
    timezone: Optional[str] = None,
    folder_id: Optional[str] = None,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    doc = await client.create_doc(
        title, source_doc=source_doc, timezone=timezone, folder_id=folder_id
    )
    return format_success("Document created", doc, key="doc", options=options)


@tool_guard("coda_delete_doc")
async def delete_doc(
    client: CodaClient,
    doc_id: str,
    *,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    await client.delete_doc(doc_id)
    return format_success(f"Document {doc_id} deleted", options=options)


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register document tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_docs",
        description=(
            "List Coda documents accessible to the user. Filters: isOwner, query, "
            "isPublished, isStarred, workspaceId, folderId. Returns a paginated list "
            "with ID, name, owner, workspace and timestamps."
        ),
    )
    async def mcp_list_docs(
        isOwner: Annotated[Optional[bool], Field(description="Only docs owned by the user")] = None,
        query: Annotated[Optional[str], Field(description="Search query string")] = None,
        isPublished: Annotated[Optional[bool], Field(description="Only published docs")] = None,
        isStarred: Annotated[Optional[bool], Field(description="Only starred docs")] = None,
        workspaceId: Annotated[Optional[str], Field(description="Filter by workspace ID")] = None,
        folderId: Annotated[Optional[str], Field(description="Filter by folder ID")] = None,
        limit: Limit100 = 20,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_docs(
            client,
            is_owner=isOwner,
            query=query,
            is_published=isPublished,
            is_starred=isStarred,
            workspace_id=workspaceId,
            folder_id=folderId,
            limit=limit,
            page_token=pageToken,
            fmt=format,
            options=options,
        )

    @server.tool(
        name="coda_get_doc",
        description="Get details for a Coda document: name, owner, workspace, folder, size and timestamps.",
    )
    async def mcp_get_doc(docId: DocIdArg, format: FormatArg = "json") -> CallToolResult:
        return await get_doc(client, docId, fmt=format, options=options)

    @server.tool(
        name="coda_create_doc",
        description="Create a new Coda document, optionally copied from sourceDoc.",
    )
    async def mcp_create_doc(
        title: Annotated[str, Field(description="Document title")],
        sourceDoc: Annotated[Optional[str], Field(description="ID of a doc to copy from")] = None,
        timezone: Annotated[
            Optional[str], Field(description="Timezone, e.g. 'America/Los_Angeles'")
        ] = None,
        folderId: Annotated[Optional[str], Field(description="Folder to create the doc in")] = None,
    ) -> CallToolResult:
        return await create_doc(
            client,
            title,
            source_doc=sourceDoc,
            timezone=timezone,
            folder_id=folderId,
            options=options,
        )

    @server.tool(name="coda_delete_doc", description="Delete a Coda document.")
    async def mcp_delete_doc(
        docId: Annotated[str, Field(description="Document ID to delete")],
    ) -> CallToolResult:
        return await delete_doc(client, docId, options=options)
