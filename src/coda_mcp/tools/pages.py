# Coda MCP Server
# File: tools/pages.py
# Version: v1

"""Page tools.

Page content is sent as a canvas payload: the text plus its format
(markdown or html). Updates either append to or replace the existing canvas.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response, format_success
from .common import ContentFormat, DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard

InsertionMode = Literal["append", "replace"]

PageArg = Annotated[str, Field(description="Page ID or name")]


def _canvas(content: str, content_format: str) -> Dict[str, Any]:
    return {"format": content_format or "markdown", "content": content}


@tool_guard("coda_list_pages")
async def list_pages(
    client: CodaClient,
    doc_id: str,
    *,
    limit: int = 20,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_pages(doc_id, limit=limit, page_token=page_token)
    return format_response(result, fmt, "pages", options)


@tool_guard("coda_get_page")
async def get_page(
    client: CodaClient,
    doc_id: str,
    page_id_or_name: str,
    *,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    page = await client.get_page(doc_id, page_id_or_name)
    return format_response(page, fmt, "page", options)


@tool_guard("coda_create_page")
async def create_page(
    client: CodaClient,
    doc_id: str,
    name: str,
    *,
    subtitle: Optional[str] = None,
    icon_name: Optional[str] = None,
    image_url: Optional[str] = None,
    parent_page_id_or_name: Optional[str] = None,
    page_content: Optional[str] = None,
    content_format: str = "markdown",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    payload: Dict[str, Any] = {
        "name": name,
        "subtitle": subtitle,
        "iconName": icon_name,
        "imageUrl": image_url,
        "parentPageIdOrName": parent_page_id_or_name,
    }
    if page_content:
        payload["pageContent"] = {
            "type": "canvas",
            "canvasContent": _canvas(page_content, content_format),
        }

    page = await client.create_page(doc_id, payload)
    return format_success("Page created", page, key="page", options=options)


@tool_guard("coda_update_page")
async def update_page(
    client: CodaClient,
    doc_id: str,
    page_id_or_name: str,
    *,
    name: Optional[str] = None,
    subtitle: Optional[str] = None,
    icon_name: Optional[str] = None,
    image_url: Optional[str] = None,
    is_hidden: Optional[bool] = None,
    content_update: Optional[str] = None,
    content_format: str = "markdown",
    insertion_mode: str = "append",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    payload: Dict[str, Any] = {
        "name": name,
        "subtitle": subtitle,
        "iconName": icon_name,
        "imageUrl": image_url,
        "isHidden": is_hidden,
    }
    if content_update:
        payload["contentUpdate"] = {
            "insertionMode": insertion_mode or "append",
            "canvasContent": _canvas(content_update, content_format),
        }

    page = await client.update_page(doc_id, page_id_or_name, payload)
    return format_success("Page updated", page, key="page", options=options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register page tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_pages",
        description="List pages in a Coda document with their hierarchy, names and subtitles.",
    )
    async def mcp_list_pages(
        docId: DocIdArg,
        limit: Limit100 = 20,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_pages(
            client, docId, limit=limit, page_token=pageToken, fmt=format, options=options
        )

    @server.tool(
        name="coda_get_page",
        description="Get page details: name, subtitle, icon, parent and children.",
    )
    async def mcp_get_page(
        docId: DocIdArg, pageIdOrName: PageArg, format: FormatArg = "json"
    ) -> CallToolResult:
        return await get_page(client, docId, pageIdOrName, fmt=format, options=options)

    @server.tool(
        name="coda_create_page",
        description=(
            "Create a page in a Coda document. pageContent is optional initial "
            "content in contentFormat ('markdown' or 'html')."
        ),
    )
    async def mcp_create_page(
        docId: DocIdArg,
        name: Annotated[str, Field(description="Page name")],
        subtitle: Annotated[Optional[str], Field(description="Page subtitle")] = None,
        iconName: Annotated[Optional[str], Field(description="Icon name")] = None,
        imageUrl: Annotated[Optional[str], Field(description="Cover image URL")] = None,
        parentPageIdOrName: Annotated[
            Optional[str], Field(description="Parent page ID or name")
        ] = None,
        pageContent: Annotated[Optional[str], Field(description="Initial page content")] = None,
        contentFormat: ContentFormat = "markdown",
    ) -> CallToolResult:
        return await create_page(
            client,
            docId,
            name,
            subtitle=subtitle,
            icon_name=iconName,
            image_url=imageUrl,
            parent_page_id_or_name=parentPageIdOrName,
            page_content=pageContent,
            content_format=contentFormat,
            options=options,
        )

    @server.tool(
        name="coda_update_page",
        description=(
            "Update a page's name, subtitle, icon, cover image or visibility. "
            "contentUpdate is appended to or replaces the page content "
            "depending on insertionMode."
        ),
    )
    async def mcp_update_page(
        docId: DocIdArg,
        pageIdOrName: Annotated[str, Field(description="Page ID or name to update")],
        name: Annotated[Optional[str], Field(description="New page name")] = None,
        subtitle: Annotated[Optional[str], Field(description="New subtitle")] = None,
        iconName: Annotated[Optional[str], Field(description="New icon name")] = None,
        imageUrl: Annotated[Optional[str], Field(description="New cover image URL")] = None,
        isHidden: Annotated[Optional[bool], Field(description="Hide the page")] = None,
        contentUpdate: Annotated[Optional[str], Field(description="Content to insert")] = None,
        contentFormat: ContentFormat = "markdown",
        insertionMode: InsertionMode = "append",
    ) -> CallToolResult:
        return await update_page(
            client,
            docId,
            pageIdOrName,
            name=name,
            subtitle=subtitle,
            icon_name=iconName,
            image_url=imageUrl,
            is_hidden=isHidden,
            content_update=contentUpdate,
            content_format=contentFormat,
            insertion_mode=insertionMode,
            options=options,
        )
