# Coda MCP Server
# File: tools/publishing.py
# Version: v1

"""Publishing tools: gallery categories, publish and unpublish."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response, format_success
from .common import DocIdArg, tool_guard

PublishMode = Literal["view", "play", "edit"]


@tool_guard("coda_list_categories")
async def list_categories(
    client: CodaClient, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    categories = await client.list_categories()
    return format_response(categories, "json", "categories", options)


@tool_guard("coda_publish_doc")
async def publish_doc(
    client: CodaClient,
    doc_id: str,
    *,
    slug: Optional[str] = None,
    discoverable: bool = False,
    earn_credit: bool = False,
    category_names: Optional[List[str]] = None,
    mode: str = "view",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    payload = {
        "slug": slug,
        "discoverable": discoverable,
        "earnCredit": earn_credit,
        "categoryNames": category_names,
        "mode": mode,
    }
    ack = await client.publish_doc(doc_id, payload)
    return format_success(
        f"Document {doc_id} published",
        ack if isinstance(ack, dict) else None,
        options=options,
    )


@tool_guard("coda_unpublish_doc")
async def unpublish_doc(
    client: CodaClient, doc_id: str, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    await client.unpublish_doc(doc_id)
    return format_success(f"Document {doc_id} unpublished", options=options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register publishing tools on the given FastMCP instance."""

    @server.tool(
        name="coda_list_categories",
        description="List the gallery categories a published doc can be filed under.",
    )
    async def mcp_list_categories() -> CallToolResult:
        return await list_categories(client, options=options)

    @server.tool(
        name="coda_publish_doc",
        description=(
            "Publish a doc. mode is 'view', 'play' or 'edit'; discoverable lists it "
            "in the gallery under categoryNames."
        ),
    )
    async def mcp_publish_doc(
        docId: DocIdArg,
        slug: Annotated[Optional[str], Field(description="URL slug")] = None,
        discoverable: Annotated[
            bool, Field(description="List the doc in the gallery")
        ] = False,
        earnCredit: Annotated[
            bool, Field(description="Earn credit when others sign up through the doc")
        ] = False,
        categoryNames: Annotated[
            Optional[List[str]], Field(description="Gallery category names")
        ] = None,
        mode: Annotated[PublishMode, Field(description="Publishing mode")] = "view",
    ) -> CallToolResult:
        return await publish_doc(
            client,
            docId,
            slug=slug,
            discoverable=discoverable,
            earn_credit=earnCredit,
            category_names=categoryNames,
            mode=mode,
            options=options,
        )

    @server.tool(name="coda_unpublish_doc", description="Unpublish a doc.")
    async def mcp_unpublish_doc(docId: DocIdArg) -> CallToolResult:
        return await unpublish_doc(client, docId, options=options)
