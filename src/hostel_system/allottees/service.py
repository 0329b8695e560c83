from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..common.validators import require_id, require_non_empty
from ..core.constants import DEFAULT_ALLOTTEE_NAME
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..rooms.repository import RoomRepository
from ..rooms.service import allottee_lock_key
from .model import Allottee
from .repository import AllotteeRepository

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "roll")
ALLOCATION_FIELDS = ("hostel", "room")


class AllotteeService:
    """Use case: register and maintain allottees (admin).

    Room assignment is owned by ``AllocationService``; profile edits here
    never touch ``hostel``/``room``.
    """

    def __init__(self, allottees: AllotteeRepository, rooms: RoomRepository, *, locks: Optional[KeyedLock] = None):
        self._allottees = allottees
        self._rooms = rooms
        self._locks = locks or KeyedLock()

    def register(self, *, name: Any, email: Any, roll: Any = None, registered_by: str) -> Allottee:
        email = require_non_empty(email, "Email").lower()
        name = (str(name).strip() if name else "") or DEFAULT_ALLOTTEE_NAME
        roll = str(roll).strip() if roll else ""

        if self._allottees.get_by_email(email):
            raise ConflictError("Allotee with this email already exists")

        allottee_id = self._allottees.create(
            name=name,
            email=email,
            roll=roll,
            registered_by=registered_by,
            registered_at=now_local(),
        )
        logger.info("Registered allotee %s (by %s)", email, registered_by)
        return self.get(allottee_id)

    def get(self, allottee_id: str) -> Allottee:
        allottee = self._allottees.get_by_id(require_id(allottee_id, "allotee"))
        if not allottee:
            raise NotFoundError("Allotee not found")
        return allottee

    def list_all(self) -> Sequence[Allottee]:
        return self._allottees.list_all()

    def update(self, allottee_id: str, changes: Mapping[str, Any]) -> Allottee:
        if any(k in changes for k in ALLOCATION_FIELDS):
            raise ValidationError("Hostel and room are set through room allotment")
        unknown = sorted(k for k in changes if k not in PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")

        current = self.get(allottee_id)
        name = require_non_empty(changes["name"], "Name") if "name" in changes else current.name
        roll = str(changes.get("roll") or "").strip() if "roll" in changes else current.roll

        if not self._allottees.update_profile(current.allottee_id, name=name, roll=roll):
            raise NotFoundError("Allotee not found")
        return self.get(current.allottee_id)

    def delete(self, allottee_id: str) -> None:
        require_id(allottee_id, "allotee")
        with self._locks.hold(allottee_lock_key(allottee_id)):
            allottee = self.get(allottee_id)
            room = self._rooms.find_by_occupant(allottee_id)
            if room or allottee.is_allocated:
                number = room.number if room else allottee.room
                raise ConflictError(f"Allotee is still allotted to room {number}; deallocate first")
            if not self._allottees.delete_by_id(allottee_id):
                raise ConflictError("Allotee could not be deleted")
        logger.info("Deleted allotee %s", allottee.email)
