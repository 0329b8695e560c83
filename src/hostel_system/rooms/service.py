from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..allottees.repository import AllotteeRepository
from ..common.locks import KeyedLock
from ..common.validators import require_fields, require_id, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_ROOM_CAPACITY
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Room, RoomDetail
from .repository import RoomRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("number", "block", "floor", "capacity")


def room_lock_key(room_id: str) -> str:
    return f"room:{room_id}"


def allottee_lock_key(allottee_id: str) -> str:
    return f"allottee:{allottee_id}"


def build_room_detail(room: Room, allottees: AllotteeRepository) -> RoomDetail:
    return RoomDetail(room=room, occupants=tuple(allottees.get_many(room.occupants)))


class RoomService:
    """Use case: manage rooms (admin).

    Occupants are never touched here; see ``AllocationService``. Edits that
    could break the occupancy invariant are re-checked in storage.
    """

    def __init__(self, rooms: RoomRepository, allottees: AllotteeRepository, *, locks: Optional[KeyedLock] = None):
        self._rooms = rooms
        self._allottees = allottees
        self._locks = locks or KeyedLock()

    def _require_room(self, room_id: str) -> Room:
        room = self._rooms.get_by_id(require_id(room_id, "room"))
        if not room:
            raise NotFoundError("Room not found")
        return room

    def get(self, room_id: str) -> RoomDetail:
        return build_room_detail(self._require_room(room_id), self._allottees)

    def list_rooms(self, *, block: Optional[str] = None, floor: Optional[str] = None) -> Sequence[RoomDetail]:
        return [build_room_detail(r, self._allottees) for r in self._rooms.list_rooms(block=block, floor=floor)]

    def create(self, *, number: Any, block: Any, floor: Any, capacity: Any = None) -> RoomDetail:
        require_fields({"number": number, "block": block, "floor": floor}, ("number", "block", "floor"))
        number = str(number).strip()
        cap = DEFAULT_ROOM_CAPACITY if capacity in (None, "") else require_positive_int(capacity, "Capacity")

        if self._rooms.get_by_number(number):
            raise ConflictError("Room with this number already exists")

        room_id = self._rooms.create(number=number, block=str(block).strip(), floor=str(floor).strip(), capacity=cap)
        logger.info("Created room %s (block %s, capacity %d)", number, block, cap)
        return self.get(room_id)

    def update(self, room_id: str, changes: Mapping[str, Any]) -> RoomDetail:
        unknown = sorted(k for k in changes if k not in EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")

        with self._locks.hold(room_lock_key(room_id)):
            room = self._require_room(room_id)
            updates: dict = {}

            if "floor" in changes:
                updates["floor"] = require_non_empty(changes["floor"], "Floor")

            max_occupancy = room.capacity
            if "capacity" in changes:
                cap = require_positive_int(changes["capacity"], "Capacity")
                if cap < room.occupancy:
                    raise ConflictError(f"Capacity {cap} is below current occupancy {room.occupancy}")
                updates["capacity"] = cap
                max_occupancy = cap

            for key in ("number", "block"):
                if key not in changes:
                    continue
                value = require_non_empty(changes[key], key.capitalize())
                if value == getattr(room, key):
                    continue
                if room.occupancy:
                    raise ConflictError("Room number and block can only change while the room is empty")
                updates[key] = value
                max_occupancy = 0

            if "number" in updates:
                existing = self._rooms.get_by_number(updates["number"])
                if existing and existing.room_id != room.room_id:
                    raise ConflictError("Room with this number already exists")

            if updates and not self._rooms.update_details(room.room_id, changes=updates, max_occupancy=max_occupancy):
                if not self._rooms.get_by_id(room.room_id):
                    raise NotFoundError("Room not found")
                raise ConflictError("Room occupancy changed during update")

        if updates:
            logger.info("Updated room %s: %s", room.number, sorted(updates))
        return self.get(room.room_id)

    def delete(self, room_id: str) -> None:
        with self._locks.hold(room_lock_key(room_id)):
            room = self._require_room(room_id)
            if room.occupancy or not self._rooms.delete_if_empty(room.room_id):
                raise ConflictError("Cannot delete a room that still has allotees")
        logger.info("Deleted room %s", room.number)
