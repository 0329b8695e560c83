from __future__ import annotations

import pytest

from hostel_system.core.exceptions import ConflictError, NotFoundError, ValidationError
from hostel_system.rooms.allocation import AllocationService
from hostel_system.rooms.service import RoomService

from conftest import new_id


@pytest.fixture
def svc(rooms, allottees):
    return RoomService(rooms, allottees)


@pytest.fixture
def allocation(rooms, allottees):
    return AllocationService(rooms, allottees)


def test_create_defaults_capacity_to_two(svc):
    detail = svc.create(number="101", block="A", floor="1")

    assert detail.room.capacity == 2
    assert detail.occupants == ()


def test_create_requires_fields(svc):
    with pytest.raises(ValidationError) as exc:
        svc.create(number="101", block="", floor=None)

    assert "block" in str(exc.value)
    assert "floor" in str(exc.value)


@pytest.mark.parametrize("capacity", [0, -1, "abc", 1.5, True])
def test_create_rejects_bad_capacity(svc, capacity):
    with pytest.raises(ValidationError):
        svc.create(number="101", block="A", floor="1", capacity=capacity)


def test_room_numbers_are_globally_unique(svc):
    svc.create(number="101", block="A", floor="1")

    with pytest.raises(ConflictError):
        svc.create(number="101", block="B", floor="1")


def test_list_sorted_and_filtered(svc):
    svc.create(number="202", block="B", floor="2")
    svc.create(number="102", block="A", floor="1")
    svc.create(number="101", block="A", floor="1")

    assert [d.room.number for d in svc.list_rooms()] == ["101", "102", "202"]
    assert [d.room.number for d in svc.list_rooms(block="B")] == ["202"]


def test_capacity_cannot_drop_below_occupancy(svc, allocation, make_allottee):
    room_id = svc.create(number="101", block="A", floor="1", capacity=3).room.room_id
    allocation.allot(room_id, make_allottee("A"))
    allocation.allot(room_id, make_allottee("B"))

    with pytest.raises(ConflictError):
        svc.update(room_id, {"capacity": 1})

    assert svc.update(room_id, {"capacity": 2}).room.capacity == 2


def test_number_and_block_only_change_while_empty(svc, allocation, make_allottee):
    room_id = svc.create(number="101", block="A", floor="1").room.room_id
    a = make_allottee("A")
    allocation.allot(room_id, a)

    with pytest.raises(ConflictError):
        svc.update(room_id, {"number": "999"})
    assert svc.update(room_id, {"floor": "3"}).room.floor == "3"

    allocation.deallocate(room_id, a)
    assert svc.update(room_id, {"number": "999", "block": "C"}).room.number == "999"


def test_occupants_are_not_editable(svc):
    room_id = svc.create(number="101", block="A", floor="1").room.room_id

    with pytest.raises(ValidationError):
        svc.update(room_id, {"allotees": []})


def test_delete_only_when_empty(svc, allocation, make_allottee):
    room_id = svc.create(number="101", block="A", floor="1").room.room_id
    a = make_allottee("A")
    allocation.allot(room_id, a)

    with pytest.raises(ConflictError):
        svc.delete(room_id)

    allocation.deallocate(room_id, a)
    svc.delete(room_id)
    with pytest.raises(NotFoundError):
        svc.get(room_id)


def test_get_missing_room(svc):
    with pytest.raises(NotFoundError):
        svc.get(new_id())
