# Coda MCP Server
# File: client.py
# Version: v1
"""High-level client for the Coda REST API (v1).

One client is built per inbound request from that request's
:class:`~coda_mcp.auth.TenantCredentials` and discarded afterwards. Every
operation funnels through :meth:`CodaClient._request`, which owns the
authorization header, status classification and JSON decoding:

- 429 -> RateLimitError (Retry-After seconds, default 60)
- 401 / 403 -> AuthenticationError
- other non-2xx -> CodaApiError (message taken from the JSON body if any)
- 202 -> async mutation acknowledgment (body returned as-is)
- 204 -> None
- otherwise -> decoded JSON

Listing endpoints return :class:`~coda_mcp.models.PaginatedResponse`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import quote, urlencode

import httpx
from httpx import RequestError

from .auth import API_KEY_HEADER, TenantCredentials
from .config import DEFAULT_BASE_URL
from .errors import (
    DEFAULT_RETRY_AFTER_SECONDS,
    AuthenticationError,
    CodaApiError,
    CodaConnectionError,
    CodaError,
    RateLimitError,
)
from .models import PaginatedResponse

logger = logging.getLogger(__name__)


def encode_path_segment(value: Any) -> str:
    """Percent-encode one path segment (``/``, ``?``, spaces included)."""
    return quote(str(value), safe="")


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """Build ``?k=v&...`` from a mapping.

    ``None`` values are dropped, list/tuple values become repeated keys and
    booleans are spelled ``true`` / ``false``. Returns ``""`` when nothing
    is left.
    """
    if not params:
        return ""

    pairs: List[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for v in value:
                pairs.append((key, _query_value(v)))
        else:
            pairs.append((key, _query_value(value)))

    if not pairs:
        return ""
    return "?" + urlencode(pairs)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_retry_after(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        # Fractional seconds keep their whole part ("30.5" -> 30).
        return int(float(str(raw).strip()))
    except (ValueError, OverflowError):
        return DEFAULT_RETRY_AFTER_SECONDS


def _error_message(response: httpx.Response) -> str:
    """Best-effort error text from an error response body."""
    default = f"API error: {response.status_code}"
    try:
        body = json.loads(response.text)
    except ValueError:
        return default

    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return default


@dataclass(frozen=True)
class CodaClient:
    """Wrapper around the Coda API bound to a single tenant's credentials."""

    credentials: TenantCredentials
    transport: Optional[httpx.AsyncBaseTransport] = None
    timeout: float = 30.0
    base_url: str = field(init=False)

    def __post_init__(self) -> None:
        base_url = (self.credentials.base_url or DEFAULT_BASE_URL).rstrip("/")
        object.__setattr__(self, "base_url", base_url)

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _auth_headers(self) -> Dict[str, str]:
        if not self.credentials.api_key:
            raise AuthenticationError(
                f"No credentials provided. Include {API_KEY_HEADER} header."
            )
        return {
            "Authorization": f"Bearer {self.credentials.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Issue one call against ``base_url + path`` and classify the result."""
        request_headers = self._auth_headers()
        if headers:
            request_headers.update(headers)

        url = f"{self.base_url}{path}{build_query_string(params)}"
        content = json.dumps(json_body) if json_body is not None else None

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as http_client:
            try:
                response = await http_client.request(
                    method, url, headers=request_headers, content=content
                )
            except RequestError as exc:
                raise CodaConnectionError(
                    f"Error calling Coda API {method} {path}: {exc}"
                ) from exc

        status = response.status_code
        logger.debug("Coda API %s %s -> HTTP %s", method, path, status)

        if status == 429:
            raise RateLimitError(
                "Rate limit exceeded",
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )

        if status in (401, 403):
            raise AuthenticationError(
                "Authentication failed. Check your API credentials."
            )

        if not response.is_success:
            raise CodaApiError(_error_message(response), status)

        if status == 204:
            return None

        # 202 (async mutation acknowledgment) and plain 2xx both carry JSON.
        try:
            return response.json()
        except ValueError as exc:
            raise CodaApiError(
                f"Invalid JSON in API response (HTTP {status})", status
            ) from exc

    async def _list(
        self, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> PaginatedResponse[Dict[str, Any]]:
        payload = await self._request("GET", path, params=params)
        return PaginatedResponse.from_payload(payload)

    @staticmethod
    def _page_params(limit: Optional[int], page_token: Optional[str]) -> Dict[str, Any]:
        return {"limit": limit, "pageToken": page_token}

    @staticmethod
    def _doc_path(doc_id: str, *parts: str) -> str:
        segments = ["docs", encode_path_segment(doc_id), *parts]
        return "/" + "/".join(segments)

    # ------------------------------------------------------------------
    # Connection / account
    # ------------------------------------------------------------------

    async def test_connection(self) -> Dict[str, Any]:
        """Call ``whoami`` and report connectivity instead of raising."""
        try:
            user = await self.whoami()
        except CodaError as exc:
            return {"connected": False, "message": exc.message}
        except Exception as exc:  # noqa: BLE001
            return {"connected": False, "message": str(exc) or "Connection failed"}

        name = user.get("name") if isinstance(user, dict) else None
        return {"connected": True, "message": f"Successfully connected as {name}"}

    async def whoami(self) -> Dict[str, Any]:
        return await self._request("GET", "/whoami")

    # ------------------------------------------------------------------
    # Docs
    # ------------------------------------------------------------------

    async def list_docs(
        self,
        is_owner: Optional[bool] = None,
        is_published: Optional[bool] = None,
        query: Optional[str] = None,
        is_starred: Optional[bool] = None,
        workspace_id: Optional[str] = None,
        folder_id: Optional[str] = None,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        params = {
            "isOwner": is_owner,
            "isPublished": is_published,
            "query": query,
            "isStarred": is_starred,
            "workspaceId": workspace_id,
            "folderId": folder_id,
            **self._page_params(limit, page_token),
        }
        return await self._list("/docs", params)

    async def get_doc(self, doc_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._doc_path(doc_id))

    async def create_doc(
        self,
        title: str,
        source_doc: Optional[str] = None,
        timezone: Optional[str] = None,
        folder_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = _drop_none(
            {
                "title": title,
                "sourceDoc": source_doc,
                "timezone": timezone,
                "folderId": folder_id,
            }
        )
        return await self._request("POST", "/docs", json_body=body)

    async def delete_doc(self, doc_id: str) -> None:
        await self._request("DELETE", self._doc_path(doc_id))

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    async def list_pages(
        self,
        doc_id: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        return await self._list(
            self._doc_path(doc_id, "pages"), self._page_params(limit, page_token)
        )

    async def get_page(self, doc_id: str, page_id_or_name: str) -> Dict[str, Any]:
        return await self._request(
            "GET", self._doc_path(doc_id, "pages", encode_path_segment(page_id_or_name))
        )

    async def create_page(self, doc_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a page.

        ``payload`` follows the API's page-create shape: ``name``,
        ``subtitle``, ``iconName``, ``imageUrl``, ``parentPageIdOrName`` and
        optionally ``pageContent = {type: canvas, canvasContent: {...}}``.
        """
        return await self._request(
            "POST", self._doc_path(doc_id, "pages"), json_body=_drop_none(payload)
        )

    async def update_page(
        self, doc_id: str, page_id_or_name: str, payload: Mapping[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "PUT",
            self._doc_path(doc_id, "pages", encode_path_segment(page_id_or_name)),
            json_body=_drop_none(payload),
        )

    # ------------------------------------------------------------------
    # Tables & columns
    # ------------------------------------------------------------------

    async def list_tables(
        self,
        doc_id: str,
        table_types: Optional[Iterable[str]] = None,
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        params = {
            "tableTypes": list(table_types) if table_types else None,
            "sortBy": sort_by,
            **self._page_params(limit, page_token),
        }
        return await self._list(self._doc_path(doc_id, "tables"), params)

    async def get_table(self, doc_id: str, table_id_or_name: str) -> Dict[str, Any]:
        return await self._request(
            "GET", self._doc_path(doc_id, "tables", encode_path_segment(table_id_or_name))
        )

    async def list_columns(
        self,
        doc_id: str,
        table_id_or_name: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        path = self._doc_path(
            doc_id, "tables", encode_path_segment(table_id_or_name), "columns"
        )
        return await self._list(path, self._page_params(limit, page_token))

    async def get_column(
        self, doc_id: str, table_id_or_name: str, column_id_or_name: str
    ) -> Dict[str, Any]:
        path = self._doc_path(
            doc_id,
            "tables",
            encode_path_segment(table_id_or_name),
            "columns",
            encode_path_segment(column_id_or_name),
        )
        return await self._request("GET", path)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def _rows_path(self, doc_id: str, table_id_or_name: str, *parts: str) -> str:
        return self._doc_path(
            doc_id, "tables", encode_path_segment(table_id_or_name), "rows", *parts
        )

    async def list_rows(
        self,
        doc_id: str,
        table_id_or_name: str,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        use_column_names: Optional[bool] = None,
        value_format: Optional[str] = None,
        visible_only: Optional[bool] = None,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        params = {
            "query": query,
            "sortBy": sort_by,
            "useColumnNames": use_column_names,
            "valueFormat": value_format,
            "visibleOnly": visible_only,
            **self._page_params(limit, page_token),
        }
        return await self._list(self._rows_path(doc_id, table_id_or_name), params)

    async def get_row(
        self,
        doc_id: str,
        table_id_or_name: str,
        row_id_or_name: str,
        use_column_names: bool = False,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            self._rows_path(doc_id, table_id_or_name, encode_path_segment(row_id_or_name)),
            params={"useColumnNames": True} if use_column_names else None,
        )

    async def upsert_rows(
        self,
        doc_id: str,
        table_id_or_name: str,
        rows: List[Dict[str, Any]],
        key_columns: Optional[List[str]] = None,
        disable_parsing: bool = False,
    ) -> Dict[str, Any]:
        """Insert rows, or update matches on ``key_columns``.

        Matching happens upstream; the acknowledgment (``requestId``,
        ``addedRowIds`` and, for upserts, ``updatedRowIds``) is returned
        unmodified.
        """
        body: Dict[str, Any] = {"rows": rows}
        if key_columns is not None:
            body["keyColumns"] = key_columns

        return await self._request(
            "POST",
            self._rows_path(doc_id, table_id_or_name),
            params={"disableParsing": True} if disable_parsing else None,
            json_body=body,
        )

    async def update_row(
        self,
        doc_id: str,
        table_id_or_name: str,
        row_id_or_name: str,
        cells: List[Dict[str, Any]],
        disable_parsing: bool = False,
    ) -> Dict[str, Any]:
        return await self._request(
            "PUT",
            self._rows_path(doc_id, table_id_or_name, encode_path_segment(row_id_or_name)),
            params={"disableParsing": True} if disable_parsing else None,
            json_body={"row": {"cells": cells}},
        )

    async def delete_row(
        self, doc_id: str, table_id_or_name: str, row_id_or_name: str
    ) -> Dict[str, Any]:
        return await self._request(
            "DELETE",
            self._rows_path(doc_id, table_id_or_name, encode_path_segment(row_id_or_name)),
        )

    async def delete_rows(
        self, doc_id: str, table_id_or_name: str, row_ids: List[str]
    ) -> Dict[str, Any]:
        return await self._request(
            "DELETE",
            self._rows_path(doc_id, table_id_or_name),
            json_body={"rowIds": row_ids},
        )

    async def push_button(
        self,
        doc_id: str,
        table_id_or_name: str,
        row_id_or_name: str,
        column_id_or_name: str,
    ) -> Dict[str, Any]:
        path = self._rows_path(
            doc_id,
            table_id_or_name,
            encode_path_segment(row_id_or_name),
            "buttons",
            encode_path_segment(column_id_or_name),
        )
        return await self._request("POST", path)

    # ------------------------------------------------------------------
    # Formulas & controls
    # ------------------------------------------------------------------

    async def list_formulas(
        self,
        doc_id: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        return await self._list(
            self._doc_path(doc_id, "formulas"), self._page_params(limit, page_token)
        )

    async def get_formula(self, doc_id: str, formula_id_or_name: str) -> Dict[str, Any]:
        return await self._request(
            "GET", self._doc_path(doc_id, "formulas", encode_path_segment(formula_id_or_name))
        )

    async def list_controls(
        self,
        doc_id: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        return await self._list(
            self._doc_path(doc_id, "controls"), self._page_params(limit, page_token)
        )

    async def get_control(self, doc_id: str, control_id_or_name: str) -> Dict[str, Any]:
        return await self._request(
            "GET", self._doc_path(doc_id, "controls", encode_path_segment(control_id_or_name))
        )

    # ------------------------------------------------------------------
    # Automations
    # ------------------------------------------------------------------

    async def list_automations(
        self,
        doc_id: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        return await self._list(
            self._doc_path(doc_id, "hooks", "automation", "rules"),
            self._page_params(limit, page_token),
        )

    async def trigger_automation(
        self,
        doc_id: str,
        rule_id: str,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            self._doc_path(doc_id, "hooks", "automation", encode_path_segment(rule_id)),
            json_body=dict(payload or {}),
        )

    # ------------------------------------------------------------------
    # Permissions / ACL
    # ------------------------------------------------------------------

    async def get_acl_metadata(self, doc_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._doc_path(doc_id, "acl", "metadata"))

    async def list_permissions(
        self,
        doc_id: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> PaginatedResponse[Dict[str, Any]]:
        return await self._list(
            self._doc_path(doc_id, "acl", "permissions"),
            self._page_params(limit, page_token),
        )

    async def add_permission(
        self,
        doc_id: str,
        access: str,
        principal: Mapping[str, Any],
        suppress_email: bool = False,
    ) -> Dict[str, Any]:
        body = {
            "access": access,
            "principal": _drop_none(principal),
            "suppressEmail": suppress_email,
        }
        return await self._request(
            "POST", self._doc_path(doc_id, "acl", "permissions"), json_body=body
        )

    async def delete_permission(self, doc_id: str, permission_id: str) -> None:
        await self._request(
            "DELETE",
            self._doc_path(doc_id, "acl", "permissions", encode_path_segment(permission_id)),
        )

    async def get_acl_settings(self, doc_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._doc_path(doc_id, "acl", "settings"))

    async def update_acl_settings(
        self,
        doc_id: str,
        allow_editors_to_change_permissions: Optional[bool] = None,
        allow_copying: Optional[bool] = None,
        allow_viewers_to_request_editing: Optional[bool] = None,
    ) -> Dict[str, Any]:
        body = _drop_none(
            {
                "allowEditorsToChangePermissions": allow_editors_to_change_permissions,
                "allowCopying": allow_copying,
                "allowViewersToRequestEditing": allow_viewers_to_request_editing,
            }
        )
        return await self._request(
            "PATCH", self._doc_path(doc_id, "acl", "settings"), json_body=body
        )

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    async def list_categories(self) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/categories")
        items = payload.get("items") if isinstance(payload, dict) else None
        return list(items) if isinstance(items, list) else []

    async def publish_doc(self, doc_id: str, payload: Mapping[str, Any]) -> Any:
        return await self._request(
            "PUT", self._doc_path(doc_id, "publish"), json_body=_drop_none(payload)
        )

    async def unpublish_doc(self, doc_id: str) -> None:
        await self._request("DELETE", self._doc_path(doc_id, "publish"))

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    async def resolve_browser_link(
        self, url: str, degrade_gracefully: bool = False
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/resolveBrowserLink",
            params={"url": url, "degradeGracefully": degrade_gracefully},
        )

    async def get_mutation_status(self, request_id: str) -> Dict[str, Any]:
        """Poll an async mutation by ``requestId`` ({completed, warning?})."""
        return await self._request(
            "GET", f"/mutationStatus/{encode_path_segment(request_id)}"
        )


def _drop_none(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}
