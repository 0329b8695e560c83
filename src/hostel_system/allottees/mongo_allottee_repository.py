from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mongo_base import to_object_id, to_object_ids
from .model import Allottee
from .repository import AllotteeRepository


def _from_doc(doc: dict) -> Allottee:
    return Allottee(
        allottee_id=str(doc["_id"]),
        email=doc["email"],
        name=doc.get("name") or "",
        roll=doc.get("roll") or "",
        hostel=doc.get("hostel"),
        room=doc.get("room"),
        registered_by=doc.get("registeredBy"),
        registered_at=doc.get("registeredAt"),
    )


class MongoAllotteeRepository(AllotteeRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.db()["allotees"]

    def get_by_id(self, allottee_id: str) -> Optional[Allottee]:
        doc = self._col.find_one({"_id": to_object_id(allottee_id, "allotee")})
        return _from_doc(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[Allottee]:
        doc = self._col.find_one({"email": email})
        return _from_doc(doc) if doc else None

    def get_many(self, allottee_ids: Iterable[str]) -> Sequence[Allottee]:
        ids = to_object_ids(allottee_ids)
        if not ids:
            return []
        by_id = {str(d["_id"]): _from_doc(d) for d in self._col.find({"_id": {"$in": ids}})}
        # keep the caller's order (room occupant order)
        return [by_id[str(i)] for i in ids if str(i) in by_id]

    def list_all(self) -> Sequence[Allottee]:
        return [_from_doc(d) for d in self._col.find({}).sort("registeredAt", DESCENDING)]

    def list_excluding(self, allottee_ids: Iterable[str]) -> Sequence[Allottee]:
        ids = to_object_ids(allottee_ids)
        return [
            _from_doc(d)
            for d in self._col.find({"_id": {"$nin": ids}}).sort("registeredAt", DESCENDING)
        ]

    def count(self) -> int:
        return int(self._col.count_documents({}))

    def create(
        self,
        *,
        name: str,
        email: str,
        roll: str,
        registered_by: str,
        registered_at: datetime,
    ) -> str:
        try:
            result = self._col.insert_one(
                {
                    "name": name,
                    "email": email,
                    "roll": roll,
                    "hostel": None,
                    "room": None,
                    "registeredBy": registered_by,
                    "registeredAt": registered_at,
                }
            )
        except DuplicateKeyError:
            raise ConflictError("Allotee with this email already exists")
        return str(result.inserted_id)

    def update_profile(self, allottee_id: str, *, name: str, roll: str) -> bool:
        result = self._col.update_one(
            {"_id": to_object_id(allottee_id, "allotee")},
            {"$set": {"name": name, "roll": roll}},
        )
        return result.matched_count > 0

    def assign_room(self, allottee_id: str, *, hostel: str, room: str) -> bool:
        result = self._col.update_one(
            {"_id": to_object_id(allottee_id, "allotee"), "room": None},
            {"$set": {"hostel": hostel, "room": room}},
        )
        return result.modified_count > 0

    def clear_room(self, allottee_id: str, *, room: str) -> bool:
        result = self._col.update_one(
            {"_id": to_object_id(allottee_id, "allotee"), "room": room},
            {"$set": {"hostel": None, "room": None}},
        )
        return result.modified_count > 0

    def delete_by_id(self, allottee_id: str) -> bool:
        result = self._col.delete_one({"_id": to_object_id(allottee_id, "allotee"), "room": None})
        return result.deleted_count > 0
