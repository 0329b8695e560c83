from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..allottees.model import Allottee
from ..core.constants import DEFAULT_ROOM_CAPACITY, HOSTEL_LABEL_FORMAT


@dataclass(frozen=True)
class Room:
    """Domain entity: a room and the ids of its occupants.

    ``len(occupants) <= capacity`` at all times.
    """

    room_id: str
    number: str
    block: str
    floor: str
    capacity: int = DEFAULT_ROOM_CAPACITY
    occupants: Tuple[str, ...] = ()

    @property
    def occupancy(self) -> int:
        return len(self.occupants)

    @property
    def is_full(self) -> bool:
        return self.occupancy >= self.capacity

    @property
    def hostel_label(self) -> str:
        return HOSTEL_LABEL_FORMAT.format(block=self.block)

    def has_occupant(self, allottee_id: str) -> bool:
        return allottee_id in self.occupants


@dataclass(frozen=True)
class RoomDetail:
    """Read-model: a room with its occupants resolved to allottees."""

    room: Room
    occupants: Tuple[Allottee, ...] = field(default_factory=tuple)
