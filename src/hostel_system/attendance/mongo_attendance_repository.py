from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Optional, Sequence

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mongo_base import to_object_id
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _from_doc(doc: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(doc["_id"]),
        allottee_id=str(doc["alloteeId"]),
        date=doc["date"],
        status=AttendanceStatus(doc["status"]),
        marked_by=doc.get("markedBy"),
        remarks=doc.get("remarks"),
    )


class MongoAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.db()["attendances"]

    def upsert(
        self,
        *,
        allottee_id: str,
        day: datetime,
        status: AttendanceStatus,
        marked_by: str,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        oid = to_object_id(allottee_id, "allotee")
        query = {"alloteeId": oid, "date": {"$gte": day, "$lt": day + timedelta(days=1)}}
        update = {"$set": {"date": day, "status": status.value, "markedBy": marked_by, "remarks": remarks}}
        try:
            doc = self._col.find_one_and_update(query, update, upsert=True, return_document=ReturnDocument.AFTER)
        except DuplicateKeyError:
            # A concurrent submission inserted the same (allotee, day) first.
            doc = self._col.find_one_and_update(query, update, return_document=ReturnDocument.AFTER)
        return _from_doc(doc)

    def list_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        return [_from_doc(d) for d in self._col.find({"date": {"$gte": start, "$lt": end}})]

    def count_by_status(self, *, start: datetime, end: datetime) -> Dict[AttendanceStatus, int]:
        counts = {s: 0 for s in AttendanceStatus}
        pipeline = [
            {"$match": {"date": {"$gte": start, "$lt": end}}},
            {"$group": {"_id": "$status", "n": {"$sum": 1}}},
        ]
        for row in self._col.aggregate(pipeline):
            try:
                counts[AttendanceStatus(row["_id"])] = int(row["n"])
            except ValueError:
                continue
        return counts

    def get_recent_for_allottee(self, allottee_id: str, limit: int) -> Sequence[AttendanceRecord]:
        cursor = (
            self._col.find({"alloteeId": to_object_id(allottee_id, "allotee")})
            .sort("date", DESCENDING)
            .limit(int(limit))
        )
        return [_from_doc(d) for d in cursor]
