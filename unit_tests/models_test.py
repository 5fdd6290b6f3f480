"""Unit tests for the models module"""

from datetime import datetime, timezone

import pytest

from models import Console, ListQuery, PageMeta, PageResult, SortOrder


def test_list_query_defaults():
    """
    Test the default list parameters
    """
    query = ListQuery()

    assert query.page == 1
    assert query.limit == 10
    assert query.is_active is None
    assert query.include_inactive is False
    assert query.sort_order is None


def test_list_query_normalizes_sort_order():
    """
    Test that sort orders given as text become SortOrder members
    """
    assert ListQuery(sort_order="DESC").sort_order is SortOrder.DESC
    assert ListQuery(sort_order=SortOrder.ASC).sort_order is SortOrder.ASC


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page": 0},
        {"limit": 0},
        {"page": "2"},
        {"limit": True},
        {"sort_order": "sideways"},
    ],
)
def test_list_query_rejects_invalid_values(kwargs):
    """
    Test that invalid list parameters are refused at construction
    """
    with pytest.raises(ValueError):
        ListQuery(**kwargs)


def test_console_timestamps():
    """
    Test that ISO timestamps are kept as text and parsed on demand
    """
    console = Console(
        id="1", created_at="2026-10-19T09:00:00.000Z", updated_at=""
    )

    assert console.created_at == "2026-10-19T09:00:00.000Z"
    assert console.created_datetime == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    assert console.updated_datetime is None


def test_console_json_round_trip():
    """
    Test to_json and from_json on domain field names
    """
    console = Console(
        id="7", name="GameBox", manufacturer="Acme", serial_number="SN1", active=True
    )
    data = console.to_json()

    assert data == {
        "id": "7",
        "name": "GameBox",
        "created_at": "",
        "updated_at": "",
        "manufacturer": "Acme",
        "serial_number": "SN1",
        "active": True,
    }

    copy = Console()
    copy.from_json(data)
    assert copy == console


def test_console_from_json_rejects_unknown_attribute():
    """
    Test that unknown attributes are refused
    """
    with pytest.raises(ValueError):
        Console().from_json({"colour": "black"})


def test_page_meta_keeps_unknown_keys():
    """
    Test that backend metadata is passed through as is, unknown keys included
    """
    meta = PageMeta.from_json(
        {"total": 12, "per_page": 5, "current_page": 3, "last_page": 3,
         "next_page_url": None, "prev_page_url": "/?page=2", "extra": True}
    )

    assert meta.total == 12
    assert meta.current_page == 3
    assert meta.next_page_url is None
    assert meta.prev_page_url == "/?page=2"
    assert meta.extra == {"extra": True}
    assert PageMeta.from_json(None).extra == {}


def test_page_result_is_iterable():
    """
    Test len() and iteration over a page
    """
    consoles = [Console(id="1"), Console(id="2")]
    page = PageResult(items=consoles, meta=PageMeta())

    assert len(page) == 2
    assert list(page) == consoles
