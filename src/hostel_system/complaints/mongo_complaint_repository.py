from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from pymongo import DESCENDING

from ..core.enums import ComplaintPriority, ComplaintStatus
from ..database.connection import DatabaseConnection
from ..database.mongo_base import to_object_id
from .model import Complaint
from .repository import ComplaintRepository


def _from_doc(doc: dict) -> Complaint:
    return Complaint(
        complaint_id=str(doc["_id"]),
        title=doc["title"],
        description=doc["description"],
        category=doc["category"],
        student_id=str(doc["studentId"]),
        room_number=doc["roomNumber"],
        hostel_block=doc["hostelBlock"],
        status=ComplaintStatus(doc.get("status") or ComplaintStatus.OPEN.value),
        priority=ComplaintPriority(doc.get("priority") or ComplaintPriority.MEDIUM.value),
        resolution=doc.get("resolution"),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


class MongoComplaintRepository(ComplaintRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.db()["complaints"]

    def get_by_id(self, complaint_id: str) -> Optional[Complaint]:
        doc = self._col.find_one({"_id": to_object_id(complaint_id, "complaint")})
        return _from_doc(doc) if doc else None

    def list_complaints(
        self,
        *,
        student_id: Optional[str] = None,
        status: Optional[ComplaintStatus] = None,
    ) -> Sequence[Complaint]:
        query: dict = {}
        if student_id:
            query["studentId"] = to_object_id(student_id, "student")
        if status:
            query["status"] = status.value
        return [_from_doc(d) for d in self._col.find(query).sort("createdAt", DESCENDING)]

    def create(
        self,
        *,
        title: str,
        description: str,
        category: str,
        student_id: str,
        room_number: str,
        hostel_block: str,
        priority: ComplaintPriority,
        created_at: datetime,
    ) -> str:
        result = self._col.insert_one(
            {
                "title": title,
                "description": description,
                "category": category,
                "studentId": to_object_id(student_id, "student"),
                "roomNumber": room_number,
                "hostelBlock": hostel_block,
                "status": ComplaintStatus.OPEN.value,
                "priority": priority.value,
                "resolution": None,
                "createdAt": created_at,
                "updatedAt": created_at,
            }
        )
        return str(result.inserted_id)

    def set_status(
        self,
        complaint_id: str,
        *,
        expected: ComplaintStatus,
        status: ComplaintStatus,
        resolution: Optional[str],
        updated_at: datetime,
    ) -> bool:
        result = self._col.update_one(
            {"_id": to_object_id(complaint_id, "complaint"), "status": expected.value},
            {"$set": {"status": status.value, "resolution": resolution, "updatedAt": updated_at}},
        )
        return result.matched_count > 0

    def delete_by_id(self, complaint_id: str) -> bool:
        return self._col.delete_one({"_id": to_object_id(complaint_id, "complaint")}).deleted_count > 0
