from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from .model import Admin
from .repository import AdminRepository


class MongoAdminRepository(AdminRepository):
    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def _col(self):
        return self._conn.db()["admins"]

    def get_by_email(self, email: str) -> Optional[Admin]:
        doc = self._col.find_one({"email": email})
        if not doc:
            return None
        return Admin(
            admin_id=str(doc["_id"]),
            email=doc["email"],
            name=doc.get("name") or "",
            role=doc.get("role") or "admin",
        )
