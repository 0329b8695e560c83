from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..allottees.model import Allottee
from ..allottees.repository import AllotteeRepository
from ..common.locks import KeyedLock
from ..common.validators import require_id
from ..core.exceptions import (
    AlreadyAllocatedError,
    CapacityExceededError,
    NotAllocatedHereError,
    NotFoundError,
)
from .model import Room, RoomDetail
from .repository import RoomRepository
from .service import allottee_lock_key, build_room_detail, room_lock_key

logger = logging.getLogger(__name__)


class AllocationService:
    """Use case: link and unlink allottees and rooms.

    Invariants kept here:
    - a room never holds more occupants than its capacity;
    - an allottee occupies at most one room system-wide;
    - room.occupants and allottee.room/hostel always agree.

    Both documents are written under a keyed lock on the room and the
    allottee. Each write is conditional in storage, and the room write is
    undone if the allottee write does not go through.
    """

    def __init__(self, rooms: RoomRepository, allottees: AllotteeRepository, *, locks: Optional[KeyedLock] = None):
        self._rooms = rooms
        self._allottees = allottees
        self._locks = locks or KeyedLock()

    def _load(self, room_id: str, allottee_id: str) -> tuple[Room, Allottee]:
        room = self._rooms.get_by_id(room_id)
        if not room:
            raise NotFoundError("Room not found")
        allottee = self._allottees.get_by_id(allottee_id)
        if not allottee:
            raise NotFoundError("Allotee not found")
        return room, allottee

    def allot(self, room_id: str, allottee_id: str, *, actor: Optional[str] = None) -> RoomDetail:
        require_id(room_id, "room")
        require_id(allottee_id, "allotee")

        with self._locks.hold(room_lock_key(room_id), allottee_lock_key(allottee_id)):
            room = self._rooms.get_by_id(room_id)
            if not room:
                raise NotFoundError("Room not found")
            if room.is_full:
                raise CapacityExceededError("Room is already at full capacity")

            allottee = self._allottees.get_by_id(allottee_id)
            if not allottee:
                raise NotFoundError("Allotee not found")

            current = self._rooms.find_by_occupant(allottee_id)
            if current:
                raise AlreadyAllocatedError(current.number)
            if allottee.is_allocated:
                raise AlreadyAllocatedError(allottee.room or "")

            if not self._rooms.add_occupant(room_id, allottee_id):
                # Lost a race with a writer outside this process.
                raise CapacityExceededError("Room is already at full capacity")

            try:
                assigned = self._allottees.assign_room(allottee_id, hostel=room.hostel_label, room=room.number)
            except Exception:
                self._rooms.remove_occupant(room_id, allottee_id)
                raise
            if not assigned:
                self._rooms.remove_occupant(room_id, allottee_id)
                latest = self._allottees.get_by_id(allottee_id)
                raise AlreadyAllocatedError((latest.room if latest else None) or "")

        logger.info("Allotted %s to room %s (by %s)", allottee.email, room.number, actor or "-")
        return self.room_detail(room_id)

    def deallocate(self, room_id: str, allottee_id: str, *, actor: Optional[str] = None) -> RoomDetail:
        require_id(room_id, "room")
        require_id(allottee_id, "allotee")

        with self._locks.hold(room_lock_key(room_id), allottee_lock_key(allottee_id)):
            room, allottee = self._load(room_id, allottee_id)
            if not room.has_occupant(allottee_id):
                raise NotAllocatedHereError(f"Allotee is not allotted to room {room.number}")

            if not self._rooms.remove_occupant(room_id, allottee_id):
                raise NotAllocatedHereError(f"Allotee is not allotted to room {room.number}")

            try:
                cleared = self._allottees.clear_room(allottee_id, room=room.number)
            except Exception:
                self._rooms.add_occupant(room_id, allottee_id)
                raise
            if not cleared:
                logger.warning(
                    "Allotee %s was listed in room %s but recorded room %r; link removed",
                    allottee.email,
                    room.number,
                    allottee.room,
                )

        logger.info("Deallocated %s from room %s (by %s)", allottee.email, room.number, actor or "-")
        return self.room_detail(room_id)

    def list_unallocated(self) -> Sequence[Allottee]:
        occupied = self._rooms.occupied_ids()
        if not occupied:
            return self._allottees.list_all()
        return self._allottees.list_excluding(occupied)

    def room_detail(self, room_id: str) -> RoomDetail:
        room = self._rooms.get_by_id(room_id)
        if not room:
            raise NotFoundError("Room not found")
        return build_room_detail(room, self._allottees)
