from __future__ import annotations

import pytest

from hostel_system.allottees.service import AllotteeService
from hostel_system.core.exceptions import ConflictError, NotFoundError, ValidationError
from hostel_system.rooms.allocation import AllocationService

from conftest import ADMIN_EMAIL, new_id


@pytest.fixture
def svc(allottees, rooms):
    return AllotteeService(allottees, rooms)


def test_register_normalises_email_and_defaults_name(svc):
    a = svc.register(name="", email="  Student@Hostel.TEST ", registered_by=ADMIN_EMAIL)

    assert a.email == "student@hostel.test"
    assert a.name == "New Allottee"
    assert a.registered_by == ADMIN_EMAIL
    assert a.registered_at is not None
    assert not a.is_allocated


def test_register_rejects_duplicate_email(svc):
    svc.register(name="A", email="a@hostel.test", registered_by=ADMIN_EMAIL)

    with pytest.raises(ConflictError):
        svc.register(name="B", email="A@hostel.test", registered_by=ADMIN_EMAIL)


def test_register_requires_email(svc):
    with pytest.raises(ValidationError):
        svc.register(name="A", email=" ", registered_by=ADMIN_EMAIL)


def test_list_is_newest_first(svc):
    first = svc.register(name="A", email="a@hostel.test", registered_by=ADMIN_EMAIL)
    second = svc.register(name="B", email="b@hostel.test", registered_by=ADMIN_EMAIL)

    assert [a.allottee_id for a in svc.list_all()] == [second.allottee_id, first.allottee_id]


def test_update_profile_fields(svc, make_allottee):
    allottee_id = make_allottee("A")

    updated = svc.update(allottee_id, {"name": "Asha", "roll": "R-17"})

    assert (updated.name, updated.roll) == ("Asha", "R-17")


@pytest.mark.parametrize("changes", [{"room": "101"}, {"hostel": "Block A"}, {"email": "x@y"}])
def test_update_rejects_non_profile_fields(svc, make_allottee, changes):
    with pytest.raises(ValidationError):
        svc.update(make_allottee("A"), changes)


def test_get_unknown_and_malformed(svc):
    with pytest.raises(NotFoundError):
        svc.get(new_id())
    with pytest.raises(ValidationError):
        svc.get("nope")


def test_delete_blocked_while_allocated(svc, rooms, allottees, make_room, make_allottee):
    room_id = make_room(number="101")
    a = make_allottee("A")
    allocation = AllocationService(rooms, allottees)
    allocation.allot(room_id, a)

    with pytest.raises(ConflictError) as exc:
        svc.delete(a)
    assert "101" in str(exc.value)

    allocation.deallocate(room_id, a)
    svc.delete(a)
    assert allottees.get_by_id(a) is None
