"""End to end scenarios of the ConsoleController against an in-memory backend"""

import pytest
import responses

from console_controller import ConsoleController
from fake_backend import FakeConsoleBackend
from models import ListQuery
from service_error import ServiceError

API_URL = "https://api.example.com/api"

NAMES = [
    "Lynx", "Atari", "Jaguar", "Dreamcast", "Famicom", "Genesis",
    "Intellivision", "Colecovision", "Kinect", "Bandai", "Entex", "Halcyon",
]


@pytest.fixture(name="backend")
def fixture_backend():
    """Fake backend holding twelve consoles, Kinect being inactive"""
    backend = FakeConsoleBackend(API_URL)
    backend.seed(NAMES, inactive=["Kinect"])
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        backend.register(rsps)
        yield backend


@pytest.fixture(name="controller")
def fixture_controller(backend):  # pylint: disable=unused-argument
    """Controller talking to the fake backend"""
    return ConsoleController(API_URL)


def test_second_page_sorted_by_name(controller: ConsoleController):
    """
    Test paging through twelve consoles sorted by name
    """
    page = controller.list(
        ListQuery(
            page=2,
            limit=5,
            sort_by="name",
            sort_order="asc",
            include_inactive=True,
        )
    )

    assert [c.name for c in page] == [
        "Famicom", "Genesis", "Halcyon", "Intellivision", "Jaguar",
    ]
    assert page.meta.current_page == 2
    assert page.meta.last_page == 3
    assert page.meta.total == 12
    assert page.meta.next_page_url is not None
    assert page.meta.prev_page_url is not None


def test_status_filters(controller: ConsoleController):
    """
    Test the three states of the status filter
    """
    assert controller.list(limit=50).meta.total == 11
    assert controller.list(limit=50, include_inactive=True).meta.total == 12

    inactive = controller.list(limit=50, is_active=False)
    assert [c.name for c in inactive] == ["Kinect"]
    assert inactive.items[0].active is False

    assert all(c.active for c in controller.list(limit=50, is_active=True))


def test_search(controller: ConsoleController):
    """
    Test the free text search
    """
    page = controller.list(search="vision", sort_by="name", sort_order="desc")

    assert [c.name for c in page] == ["Intellivision", "Colecovision"]
    assert page.meta.last_page == 1
    assert page.meta.next_page_url is None
    assert page.meta.prev_page_url is None


def test_create_then_get(controller: ConsoleController):
    """
    Test that a created console reads back with the same fields
    """
    created = controller.create(
        {"name": "GameBox", "manufacturer": "Acme", "serial_number": "SN1"}
    )
    fetched = controller.get(created.id)

    assert fetched == created
    assert fetched.id == "13"
    assert (fetched.name, fetched.manufacturer, fetched.serial_number) == (
        "GameBox", "Acme", "SN1",
    )
    assert fetched.active is True
    assert fetched.created_at and fetched.updated_at
    assert fetched.created_datetime is not None


def test_create_duplicate_serial(controller: ConsoleController):
    """
    Test the classified error of a rejected creation
    """
    with pytest.raises(ServiceError) as excinfo:
        controller.create(
            {"name": "Copy", "manufacturer": "Acme", "serial_number": "SN-000"}
        )

    assert excinfo.value.status_code == 422
    assert excinfo.value.message == "Validation failed\nserialNumber: unique"


def test_deactivate_then_activate(controller: ConsoleController):
    """
    Test the two lifecycle transitions, each applied twice
    """
    console = controller.list(search="Lynx").items[0]

    deactivated = controller.deactivate(console.id)
    assert deactivated.active is False
    assert controller.deactivate(console.id).active is False
    assert controller.get(console.id).active is False
    assert controller.get(console.id).created_at == console.created_at

    assert controller.activate(console.id).active is True
    assert controller.activate(console.id).active is True
    assert controller.get(console.id).updated_at > console.updated_at


def test_update_fields(controller: ConsoleController):
    """
    Test a partial update of a model instance
    """
    console = controller.list(search="Atari").items[0]
    console.name = "Atari 2600"

    updated = controller.update(console.id, console)

    assert updated.name == "Atari 2600"
    assert updated.id == console.id
    assert updated.created_at == console.created_at


def test_delete_then_get(controller: ConsoleController):
    """
    Test that a deleted console is gone
    """
    console = controller.list().items[0]

    controller.delete(console.id)

    with pytest.raises(ServiceError) as excinfo:
        controller.get(console.id)

    assert excinfo.value.status_code == 404
    assert excinfo.value.is_not_found

    with pytest.raises(ServiceError):
        controller.delete(console.id)
