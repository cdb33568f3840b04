# Coda MCP Server
# File: tools/permissions.py
# Version: v1

"""Sharing tools: ACL metadata, permissions and doc-level ACL settings."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import]
from mcp.types import CallToolResult
from pydantic import EmailStr, Field

from ..client import CodaClient
from ..formatters import DEFAULT_OPTIONS, RenderOptions, format_response, format_success
from .common import DocIdArg, FormatArg, Limit100, PageTokenArg, tool_guard

AccessLevel = Literal["readonly", "write", "comment", "none"]
PrincipalType = Literal["email", "domain", "anyone"]


def build_principal(
    principal_type: str, email: Optional[str] = None, domain: Optional[str] = None
) -> Dict[str, Any]:
    """Principal object for a new permission.

    Raises:
        ValueError: when the field required by ``principal_type`` is missing.
    """
    principal: Dict[str, Any] = {"type": principal_type}
    if principal_type == "email":
        if not email:
            raise ValueError("email is required when principalType is 'email'")
        principal["email"] = str(email)
    elif principal_type == "domain":
        if not domain:
            raise ValueError("domain is required when principalType is 'domain'")
        principal["domain"] = domain
    return principal


@tool_guard("coda_get_sharing_metadata")
async def get_sharing_metadata(
    client: CodaClient, doc_id: str, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    metadata = await client.get_acl_metadata(doc_id)
    return format_response(metadata, "json", "metadata", options)


@tool_guard("coda_list_permissions")
async def list_permissions(
    client: CodaClient,
    doc_id: str,
    *,
    limit: int = 50,
    page_token: Optional[str] = None,
    fmt: str = "json",
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    result = await client.list_permissions(doc_id, limit=limit, page_token=page_token)
    return format_response(result, fmt, "permissions", options)


@tool_guard("coda_add_permission")
async def add_permission(
    client: CodaClient,
    doc_id: str,
    access: str,
    principal_type: str,
    *,
    email: Optional[str] = None,
    domain: Optional[str] = None,
    suppress_email: bool = False,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    principal = build_principal(principal_type, email=email, domain=domain)
    permission = await client.add_permission(
        doc_id, access, principal, suppress_email=suppress_email
    )
    return format_success("Permission added", permission, key="permission", options=options)


@tool_guard("coda_delete_permission")
async def delete_permission(
    client: CodaClient,
    doc_id: str,
    permission_id: str,
    *,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    await client.delete_permission(doc_id, permission_id)
    return format_success(f"Permission {permission_id} removed", options=options)


@tool_guard("coda_get_acl_settings")
async def get_acl_settings(
    client: CodaClient, doc_id: str, *, options: RenderOptions = DEFAULT_OPTIONS
) -> CallToolResult:
    settings = await client.get_acl_settings(doc_id)
    return format_response(settings, "json", "settings", options)


@tool_guard("coda_update_acl_settings")
async def update_acl_settings(
    client: CodaClient,
    doc_id: str,
    *,
    allow_editors_to_change_permissions: Optional[bool] = None,
    allow_copying: Optional[bool] = None,
    allow_viewers_to_request_editing: Optional[bool] = None,
    options: RenderOptions = DEFAULT_OPTIONS,
) -> CallToolResult:
    settings = await client.update_acl_settings(
        doc_id,
        allow_editors_to_change_permissions=allow_editors_to_change_permissions,
        allow_copying=allow_copying,
        allow_viewers_to_request_editing=allow_viewers_to_request_editing,
    )
    return format_success("ACL settings updated", settings, key="settings", options=options)


def register_tools(
    server: FastMCP, client: CodaClient, options: RenderOptions = DEFAULT_OPTIONS
) -> None:
    """Register sharing and permission tools on the given FastMCP instance."""

    @server.tool(
        name="coda_get_sharing_metadata",
        description="Get sharing metadata for a doc: whether the caller can share and with whom.",
    )
    async def mcp_get_sharing_metadata(docId: DocIdArg) -> CallToolResult:
        return await get_sharing_metadata(client, docId, options=options)

    @server.tool(
        name="coda_list_permissions",
        description="List the permissions on a doc with their principals and access levels.",
    )
    async def mcp_list_permissions(
        docId: DocIdArg,
        limit: Limit100 = 50,
        pageToken: PageTokenArg = None,
        format: FormatArg = "json",
    ) -> CallToolResult:
        return await list_permissions(
            client, docId, limit=limit, page_token=pageToken, fmt=format, options=options
        )

    @server.tool(
        name="coda_add_permission",
        description=(
            "Share a doc. principalType 'email' needs email, 'domain' needs domain, "
            "'anyone' needs neither. access is 'readonly', 'write', 'comment' or 'none'."
        ),
    )
    async def mcp_add_permission(
        docId: DocIdArg,
        access: Annotated[AccessLevel, Field(description="Access level to grant")],
        principalType: Annotated[PrincipalType, Field(description="Who receives access")],
        email: Annotated[Optional[EmailStr], Field(description="Email address")] = None,
        domain: Annotated[Optional[str], Field(description="Domain name")] = None,
        suppressEmail: Annotated[
            bool, Field(description="Do not send a notification email")
        ] = False,
    ) -> CallToolResult:
        return await add_permission(
            client,
            docId,
            access,
            principalType,
            email=email,
            domain=domain,
            suppress_email=suppressEmail,
            options=options,
        )

    @server.tool(name="coda_delete_permission", description="Remove a permission from a doc.")
    async def mcp_delete_permission(
        docId: DocIdArg,
        permissionId: Annotated[str, Field(description="Permission ID")],
    ) -> CallToolResult:
        return await delete_permission(client, docId, permissionId, options=options)

    @server.tool(
        name="coda_get_acl_settings",
        description="Get doc-level sharing settings (editor permissions, copying, edit requests).",
    )
    async def mcp_get_acl_settings(docId: DocIdArg) -> CallToolResult:
        return await get_acl_settings(client, docId, options=options)

    @server.tool(
        name="coda_update_acl_settings",
        description="Update doc-level sharing settings. Only the settings given are changed.",
    )
    async def mcp_update_acl_settings(
        docId: DocIdArg,
        allowEditorsToChangePermissions: Annotated[
            Optional[bool], Field(description="Let editors manage permissions")
        ] = None,
        allowCopying: Annotated[
            Optional[bool], Field(description="Let users copy the doc")
        ] = None,
        allowViewersToRequestEditing: Annotated[
            Optional[bool], Field(description="Let viewers request edit access")
        ] = None,
    ) -> CallToolResult:
        return await update_acl_settings(
            client,
            docId,
            allow_editors_to_change_permissions=allowEditorsToChangePermissions,
            allow_copying=allowCopying,
            allow_viewers_to_request_editing=allowViewersToRequestEditing,
            options=options,
        )
