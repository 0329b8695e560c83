from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Allottee:
    """Domain entity: a student assigned (or assignable) to a hostel room.

    ``hostel`` and ``room`` are both set or both ``None``.
    """

    allottee_id: str
    email: str
    name: str
    roll: str = ""
    hostel: Optional[str] = None
    room: Optional[str] = None
    registered_by: Optional[str] = None
    registered_at: Optional[datetime] = None

    @property
    def is_allocated(self) -> bool:
        return self.room is not None
