# Coda MCP Server
# File: models.py
# Version: v1

"""Domain models used by the Coda MCP server.

Resource entities (docs, pages, tables, rows, ...) are passed through as the
JSON objects the API returns. The models here cover the shapes this server
derives or interprets itself: paginated listings and cell values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass
class PaginatedResponse(Generic[T]):
    """One page of a listing endpoint.

    ``items`` keeps the order returned by the API.
    """

    items: List[T]
    next_page_token: Optional[str] = None
    next_page_link: Optional[str] = None
    total: Optional[int] = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_page_token)

    @classmethod
    def from_payload(cls, payload: Any) -> "PaginatedResponse[Any]":
        """Build from the API envelope ``{items, nextPageToken?, nextPageLink?}``."""
        if not isinstance(payload, dict):
            payload = {}

        items = payload.get("items")
        total = payload.get("total")
        return cls(
            items=list(items) if isinstance(items, list) else [],
            next_page_token=payload.get("nextPageToken") or None,
            next_page_link=payload.get("nextPageLink") or None,
            total=total if isinstance(total, int) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape exposed to tool callers (camelCase, absent keys omitted)."""
        out: Dict[str, Any] = {"items": self.items}
        if self.next_page_token is not None:
            out["nextPageToken"] = self.next_page_token
        if self.next_page_link is not None:
            out["nextPageLink"] = self.next_page_link
        if self.total is not None:
            out["total"] = self.total
        out["hasMore"] = self.has_more
        return out


# ---------------------------------------------------------------------------
# Cell values
# ---------------------------------------------------------------------------


class CellValueKind(str, Enum):
    """Tags of the structured cell value variants (``@type`` in the API)."""

    LINKED_ROW = "LinkedRow"
    PERSON = "Person"
    CURRENCY = "Currency"
    IMAGE = "ImageAttachment"
    DATE = "Date"


@dataclass(frozen=True)
class LinkedRow:
    row_id: str
    table_id: str
    name: str
    kind: CellValueKind = field(default=CellValueKind.LINKED_ROW, init=False)


@dataclass(frozen=True)
class Person:
    email: str
    name: Optional[str] = None
    kind: CellValueKind = field(default=CellValueKind.PERSON, init=False)


@dataclass(frozen=True)
class Currency:
    amount: float
    currency_code: str
    kind: CellValueKind = field(default=CellValueKind.CURRENCY, init=False)


@dataclass(frozen=True)
class ImageAttachment:
    url: str
    name: Optional[str] = None
    mime_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    kind: CellValueKind = field(default=CellValueKind.IMAGE, init=False)


@dataclass(frozen=True)
class DateValue:
    date: str
    kind: CellValueKind = field(default=CellValueKind.DATE, init=False)


@dataclass(frozen=True)
class UnknownCellValue:
    """A tagged object whose ``@type`` this server does not know."""

    raw: Dict[str, Any]


Scalar = Union[str, int, float, bool, None]
TaggedCellValue = Union[LinkedRow, Person, Currency, ImageAttachment, DateValue]
CellValue = Union[Scalar, TaggedCellValue, UnknownCellValue, List[Any]]


def parse_cell_value(raw: Any) -> CellValue:
    """Map a JSON cell value onto the tagged variants.

    Scalars and ``None`` pass through, lists are parsed element-wise and
    untagged objects are kept as ``UnknownCellValue``.
    """
    if isinstance(raw, list):
        return [parse_cell_value(v) for v in raw]

    if not isinstance(raw, dict):
        return raw

    tag = raw.get("@type")
    if tag == CellValueKind.LINKED_ROW.value:
        return LinkedRow(
            row_id=str(raw.get("rowId") or ""),
            table_id=str(raw.get("tableId") or ""),
            name=str(raw.get("name") or ""),
        )
    if tag == CellValueKind.PERSON.value:
        return Person(email=str(raw.get("email") or ""), name=raw.get("name"))
    if tag == CellValueKind.CURRENCY.value:
        amount = raw.get("amount")
        return Currency(
            amount=amount if isinstance(amount, (int, float)) else 0,
            currency_code=str(raw.get("currencyCode") or ""),
        )
    if tag == CellValueKind.IMAGE.value:
        return ImageAttachment(
            url=str(raw.get("url") or ""),
            name=raw.get("name"),
            mime_type=raw.get("mimeType"),
            width=raw.get("width"),
            height=raw.get("height"),
        )
    if tag == CellValueKind.DATE.value:
        return DateValue(date=str(raw.get("date") or ""))

    return UnknownCellValue(raw=raw)
