from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        allottee_id: str,
        day: datetime,
        status: AttendanceStatus,
        marked_by: str,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert or overwrite the single record in ``[day, day + 24h)``."""

        raise NotImplementedError

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(self, *, start: datetime, end: datetime) -> Dict[AttendanceStatus, int]:
        raise NotImplementedError

    def get_recent_for_allottee(self, allottee_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
