# Coda MCP Server
# File: tests/test_models.py
# Version: v1

from coda_mcp.models import (
    CellValueKind,
    Currency,
    DateValue,
    ImageAttachment,
    LinkedRow,
    PaginatedResponse,
    Person,
    UnknownCellValue,
    parse_cell_value,
)


def test_has_more_follows_next_page_token() -> None:
    assert PaginatedResponse.from_payload({"items": [], "nextPageToken": "t"}).has_more is True
    assert PaginatedResponse.from_payload({"items": [], "nextPageToken": ""}).has_more is False
    assert PaginatedResponse.from_payload({"items": []}).has_more is False


def test_from_payload_keeps_item_order() -> None:
    page = PaginatedResponse.from_payload({"items": [{"id": "b"}, {"id": "a"}, {"id": "c"}]})
    assert [i["id"] for i in page.items] == ["b", "a", "c"]


def test_from_payload_tolerates_missing_items() -> None:
    page = PaginatedResponse.from_payload(None)
    assert page.items == []
    assert page.has_more is False


def test_to_dict_omits_absent_optional_keys() -> None:
    page = PaginatedResponse(items=[1, 2])
    assert page.to_dict() == {"items": [1, 2], "hasMore": False}

    page = PaginatedResponse(items=[], next_page_token="t", next_page_link="l", total=9)
    assert page.to_dict() == {
        "items": [],
        "nextPageToken": "t",
        "nextPageLink": "l",
        "total": 9,
        "hasMore": True,
    }


def test_parse_cell_value_variants() -> None:
    assert parse_cell_value("plain") == "plain"
    assert parse_cell_value(3.5) == 3.5
    assert parse_cell_value(None) is None

    linked = parse_cell_value({"@type": "LinkedRow", "rowId": "i-1", "tableId": "t-1", "name": "Row 1"})
    assert linked == LinkedRow(row_id="i-1", table_id="t-1", name="Row 1")
    assert linked.kind is CellValueKind.LINKED_ROW

    assert parse_cell_value({"@type": "Person", "email": "a@example.com"}) == Person(email="a@example.com")
    assert parse_cell_value({"@type": "Currency", "amount": 12.5, "currencyCode": "EUR"}) == Currency(
        amount=12.5, currency_code="EUR"
    )
    assert parse_cell_value({"@type": "Date", "date": "2024-01-31"}) == DateValue(date="2024-01-31")

    image = parse_cell_value({"@type": "ImageAttachment", "url": "https://img", "width": 10})
    assert isinstance(image, ImageAttachment)
    assert image.width == 10


def test_parse_cell_value_lists_and_unknown_tags() -> None:
    value = parse_cell_value([1, {"@type": "Date", "date": "2024-02-01"}, {"@type": "Hologram"}])
    assert value[0] == 1
    assert value[1] == DateValue(date="2024-02-01")
    assert value[2] == UnknownCellValue(raw={"@type": "Hologram"})
