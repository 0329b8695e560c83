from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Set

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mongo_base import to_object_id
from .model import Room
from .repository import RoomRepository


def _from_doc(doc: dict) -> Room:
    return Room(
        room_id=str(doc["_id"]),
        number=str(doc["number"]),
        block=str(doc["block"]),
        floor=str(doc["floor"]),
        capacity=int(doc.get("capacity") or 0),
        occupants=tuple(str(a) for a in doc.get("allotees") or []),
    )


def _size_at_most(n: int) -> dict:
    return {"$expr": {"$lte": [{"$size": {"$ifNull": ["$allotees", []]}}, n]}}


class MongoRoomRepository(RoomRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.db()["rooms"]

    def get_by_id(self, room_id: str) -> Optional[Room]:
        doc = self._col.find_one({"_id": to_object_id(room_id, "room")})
        return _from_doc(doc) if doc else None

    def get_by_number(self, number: str) -> Optional[Room]:
        doc = self._col.find_one({"number": number})
        return _from_doc(doc) if doc else None

    def list_rooms(self, *, block: Optional[str] = None, floor: Optional[str] = None) -> Sequence[Room]:
        query: dict = {}
        if block:
            query["block"] = block
        if floor:
            query["floor"] = floor
        cursor = self._col.find(query).sort([("block", ASCENDING), ("number", ASCENDING)])
        return [_from_doc(d) for d in cursor]

    def find_by_occupant(self, allottee_id: str) -> Optional[Room]:
        doc = self._col.find_one({"allotees": to_object_id(allottee_id, "allotee")})
        return _from_doc(doc) if doc else None

    def occupied_ids(self) -> Set[str]:
        return {str(a) for a in self._col.distinct("allotees")}

    def create(self, *, number: str, block: str, floor: str, capacity: int) -> str:
        try:
            result = self._col.insert_one(
                {"number": number, "block": block, "floor": floor, "capacity": capacity, "allotees": []}
            )
        except DuplicateKeyError:
            raise ConflictError("Room with this number already exists")
        return str(result.inserted_id)

    def update_details(self, room_id: str, *, changes: Mapping[str, Any], max_occupancy: int) -> bool:
        query = {"_id": to_object_id(room_id, "room"), **_size_at_most(max_occupancy)}
        try:
            result = self._col.update_one(query, {"$set": dict(changes)})
        except DuplicateKeyError:
            raise ConflictError("Room with this number already exists")
        return result.matched_count > 0

    def add_occupant(self, room_id: str, allottee_id: str) -> bool:
        oid = to_object_id(allottee_id, "allotee")
        # compare-and-swap: not already present and below capacity
        query = {
            "_id": to_object_id(room_id, "room"),
            "allotees": {"$ne": oid},
            "$expr": {"$lt": [{"$size": {"$ifNull": ["$allotees", []]}}, "$capacity"]},
        }
        result = self._col.update_one(query, {"$push": {"allotees": oid}})
        return result.modified_count > 0

    def remove_occupant(self, room_id: str, allottee_id: str) -> bool:
        oid = to_object_id(allottee_id, "allotee")
        result = self._col.update_one(
            {"_id": to_object_id(room_id, "room"), "allotees": oid},
            {"$pull": {"allotees": oid}},
        )
        return result.modified_count > 0

    def delete_if_empty(self, room_id: str) -> bool:
        query = {"_id": to_object_id(room_id, "room"), **_size_at_most(0)}
        return self._col.delete_one(query).deleted_count > 0
