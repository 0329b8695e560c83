from __future__ import annotations

import logging
from typing import Iterable

from pymongo import ASCENDING, IndexModel

from ..core.constants import DEFAULT_ROOM_CAPACITY
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

INDEXES = {
    "allotees": [
        IndexModel([("email", ASCENDING)], unique=True, name="uniq_email"),
        IndexModel([("registeredAt", ASCENDING)], name="registered_at"),
    ],
    "rooms": [
        IndexModel([("number", ASCENDING)], unique=True, name="uniq_number"),
        IndexModel([("allotees", ASCENDING)], name="occupants"),
        IndexModel([("block", ASCENDING), ("number", ASCENDING)], name="block_number"),
    ],
    "attendances": [
        IndexModel([("alloteeId", ASCENDING), ("date", ASCENDING)], unique=True, name="uniq_allotee_day"),
        IndexModel([("date", ASCENDING)], name="date"),
    ],
    "complaints": [
        IndexModel([("studentId", ASCENDING)], name="student"),
        IndexModel([("status", ASCENDING)], name="status"),
    ],
    "admins": [
        IndexModel([("email", ASCENDING)], unique=True, name="uniq_email"),
    ],
}

DEMO_ADMIN = {"email": "admin@hostel.local", "name": "Hostel Admin", "role": "admin"}

DEMO_ROOMS = [
    {"number": "A-101", "block": "A", "floor": "1"},
    {"number": "A-102", "block": "A", "floor": "1"},
    {"number": "B-201", "block": "B", "floor": "2"},
]


def ensure_indexes(conn: DatabaseConnection) -> list[str]:
    """Create every index the invariants rely on (idempotent)."""
    db = conn.db()
    created: list[str] = []
    for collection, models in INDEXES.items():
        created.extend(f"{collection}.{name}" for name in db[collection].create_indexes(models))
    logger.info("Indexes ready: %s", ", ".join(created))
    return created


def seed_demo_data(conn: DatabaseConnection, *, rooms: Iterable[dict] = DEMO_ROOMS) -> None:
    db = conn.db()
    db["admins"].update_one({"email": DEMO_ADMIN["email"]}, {"$setOnInsert": DEMO_ADMIN}, upsert=True)
    for room in rooms:
        doc = {"capacity": DEFAULT_ROOM_CAPACITY, "allotees": [], **room}
        db["rooms"].update_one({"number": doc["number"]}, {"$setOnInsert": doc}, upsert=True)
    logger.info("Demo seed ready (admin=%s)", DEMO_ADMIN["email"])


def list_collections(conn: DatabaseConnection) -> list[str]:
    return sorted(conn.db().list_collection_names())
