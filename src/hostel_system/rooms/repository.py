from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Set

from .model import Room


class RoomRepository(Protocol):
    def get_by_id(self, room_id: str) -> Optional[Room]:
        raise NotImplementedError

    def get_by_number(self, number: str) -> Optional[Room]:
        raise NotImplementedError

    def list_rooms(self, *, block: Optional[str] = None, floor: Optional[str] = None) -> Sequence[Room]:
        """Sorted by block, then number."""

        raise NotImplementedError

    def find_by_occupant(self, allottee_id: str) -> Optional[Room]:
        raise NotImplementedError

    def occupied_ids(self) -> Set[str]:
        """Union of every room's occupant ids."""

        raise NotImplementedError

    def create(self, *, number: str, block: str, floor: str, capacity: int) -> str:
        raise NotImplementedError

    def update_details(self, room_id: str, *, changes: Mapping[str, Any], max_occupancy: int) -> bool:
        """Apply ``changes`` only while the room holds at most ``max_occupancy`` occupants."""

        raise NotImplementedError

    def add_occupant(self, room_id: str, allottee_id: str) -> bool:
        """Append only if not already present and the room has free capacity."""

        raise NotImplementedError

    def remove_occupant(self, room_id: str, allottee_id: str) -> bool:
        raise NotImplementedError

    def delete_if_empty(self, room_id: str) -> bool:
        raise NotImplementedError
