from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from ..allottees.model import Allottee
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one allottee's attendance for one calendar day.

    ``date`` is always truncated to midnight.
    """

    record_id: str
    allottee_id: str
    date: datetime
    status: AttendanceStatus
    marked_by: Optional[str] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class BatchItemResult:
    allottee_id: object
    success: bool
    record: Optional[AttendanceRecord] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchResult:
    day: datetime
    results: Tuple[BatchItemResult, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)


@dataclass(frozen=True)
class DailyAttendanceRow:
    """Read-model: an allottee paired with that day's record, if any."""

    allottee: Allottee
    attendance: Optional[AttendanceRecord]


@dataclass(frozen=True)
class DailyAttendance:
    day: datetime
    rows: Tuple[DailyAttendanceRow, ...]


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    absent: int
    not_marked: int
    attendance_rate: int
