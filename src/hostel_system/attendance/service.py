from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence, Union

from bson import ObjectId

from ..admins.service import AdminService
from ..allottees.repository import AllotteeRepository
from ..common.datetime_utils import day_window, start_of_day
from ..common.validators import require_id
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import (
    AttendanceRecord,
    AttendanceStats,
    BatchItemResult,
    BatchResult,
    DailyAttendance,
    DailyAttendanceRow,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime, str, None]


class AttendanceService:
    """Use case: daily attendance marking and statistics.

    At most one record exists per (allottee, day); a second submission for
    the same pair overwrites the first.
    """

    def __init__(self, attendance: AttendanceRepository, allottees: AllotteeRepository, admins: AdminService):
        self._attendance = attendance
        self._allottees = allottees
        self._admins = admins

    def record_batch(self, records: Any, *, actor_email: Optional[str], day: DayLike = None) -> BatchResult:
        if not isinstance(records, list):
            raise ValidationError("Records must be an array")
        admin = self._admins.require_admin(actor_email)
        target = start_of_day(day)

        results = [self._record_one(entry, day=target, marked_by=admin.email) for entry in records]
        batch = BatchResult(day=target, results=tuple(results))

        logger.info(
            "Attendance for %s: %d recorded, %d failed (by %s)",
            target.date().isoformat(),
            len(results) - batch.failed,
            batch.failed,
            admin.email,
        )
        return batch

    def _record_one(self, entry: Any, *, day: datetime, marked_by: str) -> BatchItemResult:
        if not isinstance(entry, Mapping):
            return BatchItemResult(allottee_id=None, success=False, error="Invalid record")

        allottee_id = entry.get("alloteeId", entry.get("allotteeId"))
        if not isinstance(allottee_id, str) or not ObjectId.is_valid(allottee_id):
            return BatchItemResult(allottee_id=allottee_id, success=False, error="Invalid allotee ID")

        try:
            status = AttendanceStatus(entry.get("status"))
        except ValueError:
            return BatchItemResult(allottee_id=allottee_id, success=False, error="Invalid status")

        if not self._allottees.get_by_id(allottee_id):
            return BatchItemResult(allottee_id=allottee_id, success=False, error="Allotee not found")

        remarks = entry.get("remarks")
        try:
            record = self._attendance.upsert(
                allottee_id=allottee_id,
                day=day,
                status=status,
                marked_by=marked_by,
                remarks=str(remarks) if remarks is not None else None,
            )
        except Exception as e:
            logger.exception("Failed to record attendance for %s", allottee_id)
            return BatchItemResult(allottee_id=allottee_id, success=False, error=str(e))
        return BatchItemResult(allottee_id=allottee_id, success=True, record=record)

    def get_for_day(self, day: DayLike = None) -> DailyAttendance:
        start, end = day_window(start_of_day(day))
        by_allottee = {r.allottee_id: r for r in self._attendance.list_between(start=start, end=end)}
        rows = tuple(
            DailyAttendanceRow(allottee=a, attendance=by_allottee.get(a.allottee_id))
            for a in self._allottees.list_all()
        )
        return DailyAttendance(day=start, rows=rows)

    def stats(self, day: DayLike = None) -> AttendanceStats:
        start, end = day_window(start_of_day(day))
        total = self._allottees.count()
        counts = self._attendance.count_by_status(start=start, end=end)
        present = int(counts.get(AttendanceStatus.PRESENT, 0))
        absent = int(counts.get(AttendanceStatus.ABSENT, 0))

        rate = 0
        if total > 0:
            # half-up, not banker's rounding
            rate = min(100, max(0, int(math.floor(present * 100 / total + 0.5))))

        return AttendanceStats(
            total=total,
            present=present,
            absent=absent,
            not_marked=max(0, total - (present + absent)),
            attendance_rate=rate,
        )

    def history(self, allottee_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        if not self._allottees.get_by_id(require_id(allottee_id, "allotee")):
            raise NotFoundError("Allotee not found")
        return self._attendance.get_recent_for_allottee(allottee_id, max(1, int(limit)))
