from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import Allottee


class AllotteeRepository(Protocol):
    """Repository interface for allottees.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, allottee_id: str) -> Optional[Allottee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Allottee]:
        raise NotImplementedError

    def get_many(self, allottee_ids: Iterable[str]) -> Sequence[Allottee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Allottee]:
        """Newest registration first."""

        raise NotImplementedError

    def list_excluding(self, allottee_ids: Iterable[str]) -> Sequence[Allottee]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        email: str,
        roll: str,
        registered_by: str,
        registered_at: datetime,
    ) -> str:
        raise NotImplementedError

    def update_profile(self, allottee_id: str, *, name: str, roll: str) -> bool:
        raise NotImplementedError

    def assign_room(self, allottee_id: str, *, hostel: str, room: str) -> bool:
        """Set hostel/room only while the allottee holds no room."""

        raise NotImplementedError

    def clear_room(self, allottee_id: str, *, room: str) -> bool:
        """Clear hostel/room only while the allottee holds ``room``."""

        raise NotImplementedError

    def delete_by_id(self, allottee_id: str) -> bool:
        raise NotImplementedError
