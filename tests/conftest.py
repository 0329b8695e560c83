from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from bson import ObjectId

from hostel_system.admins.model import Admin
from hostel_system.allottees.model import Allottee
from hostel_system.attendance.model import AttendanceRecord
from hostel_system.complaints.model import Complaint
from hostel_system.container import assemble_container
from hostel_system.core.enums import AttendanceStatus, ComplaintStatus
from hostel_system.main import create_app
from hostel_system.rooms.model import Room

ADMIN_EMAIL = "warden@hostel.test"

_seq = itertools.count()


def new_id() -> str:
    return str(ObjectId())


class InMemoryAdmins:
    def __init__(self):
        self._by_email: dict[str, Admin] = {}

    def get_by_email(self, email: str) -> Optional[Admin]:
        return self._by_email.get(email)

    def add(self, *, email: str, name: str, role: str = "admin") -> str:
        admin = Admin(admin_id=new_id(), email=email, name=name, role=role)
        self._by_email[email] = admin
        return admin.admin_id


class InMemoryAllottees:
    def __init__(self):
        self._rows: dict[str, Allottee] = {}
        self._order: dict[str, int] = {}
        self._lock = threading.Lock()

    def get_by_id(self, allottee_id):
        return self._rows.get(allottee_id)

    def get_by_email(self, email):
        return next((a for a in self._rows.values() if a.email == email), None)

    def get_many(self, allottee_ids):
        return [self._rows[i] for i in allottee_ids if i in self._rows]

    def list_all(self):
        return sorted(self._rows.values(), key=lambda a: self._order[a.allottee_id], reverse=True)

    def list_excluding(self, allottee_ids):
        excluded = set(allottee_ids)
        return [a for a in self.list_all() if a.allottee_id not in excluded]

    def count(self):
        return len(self._rows)

    def create(self, *, name, email, roll, registered_by, registered_at):
        allottee_id = new_id()
        self._rows[allottee_id] = Allottee(
            allottee_id=allottee_id,
            email=email,
            name=name,
            roll=roll,
            registered_by=registered_by,
            registered_at=registered_at,
        )
        self._order[allottee_id] = next(_seq)
        return allottee_id

    def update_profile(self, allottee_id, *, name, roll):
        if allottee_id not in self._rows:
            return False
        self._rows[allottee_id] = replace(self._rows[allottee_id], name=name, roll=roll)
        return True

    def assign_room(self, allottee_id, *, hostel, room):
        with self._lock:
            current = self._rows.get(allottee_id)
            if not current or current.room is not None:
                return False
            self._rows[allottee_id] = replace(current, hostel=hostel, room=room)
            return True

    def clear_room(self, allottee_id, *, room):
        with self._lock:
            current = self._rows.get(allottee_id)
            if not current or current.room != room:
                return False
            self._rows[allottee_id] = replace(current, hostel=None, room=None)
            return True

    def delete_by_id(self, allottee_id):
        current = self._rows.get(allottee_id)
        if not current or current.room is not None:
            return False
        del self._rows[allottee_id]
        return True


class InMemoryRooms:
    def __init__(self):
        self._rows: dict[str, Room] = {}
        self._lock = threading.Lock()

    def get_by_id(self, room_id):
        return self._rows.get(room_id)

    def get_by_number(self, number):
        return next((r for r in self._rows.values() if r.number == number), None)

    def list_rooms(self, *, block=None, floor=None):
        rooms = [
            r for r in self._rows.values()
            if (block is None or r.block == block) and (floor is None or r.floor == floor)
        ]
        return sorted(rooms, key=lambda r: (r.block, r.number))

    def find_by_occupant(self, allottee_id):
        return next((r for r in self._rows.values() if allottee_id in r.occupants), None)

    def occupied_ids(self):
        return {a for r in self._rows.values() for a in r.occupants}

    def create(self, *, number, block, floor, capacity):
        room_id = new_id()
        self._rows[room_id] = Room(room_id=room_id, number=number, block=block, floor=floor, capacity=capacity)
        return room_id

    def update_details(self, room_id, *, changes, max_occupancy):
        with self._lock:
            room = self._rows.get(room_id)
            if not room or room.occupancy > max_occupancy:
                return False
            self._rows[room_id] = replace(room, **changes)
            return True

    def add_occupant(self, room_id, allottee_id):
        with self._lock:
            room = self._rows.get(room_id)
            if not room or allottee_id in room.occupants or room.occupancy >= room.capacity:
                return False
            self._rows[room_id] = replace(room, occupants=room.occupants + (allottee_id,))
            return True

    def remove_occupant(self, room_id, allottee_id):
        with self._lock:
            room = self._rows.get(room_id)
            if not room or allottee_id not in room.occupants:
                return False
            self._rows[room_id] = replace(room, occupants=tuple(a for a in room.occupants if a != allottee_id))
            return True

    def delete_if_empty(self, room_id):
        room = self._rows.get(room_id)
        if not room or room.occupancy:
            return False
        del self._rows[room_id]
        return True


class InMemoryAttendance:
    def __init__(self):
        self._by_key: dict[tuple[str, datetime], AttendanceRecord] = {}

    def _find(self, allottee_id, *, start, end):
        return next(
            (r for (a, d), r in self._by_key.items() if a == allottee_id and start <= d < end),
            None,
        )

    def upsert(self, *, allottee_id, day, status, marked_by, remarks=None):
        existing = self._find(allottee_id, start=day, end=day + timedelta(days=1))
        record = AttendanceRecord(
            record_id=existing.record_id if existing else new_id(),
            allottee_id=allottee_id,
            date=day,
            status=status,
            marked_by=marked_by,
            remarks=remarks,
        )
        if existing:
            del self._by_key[(existing.allottee_id, existing.date)]
        self._by_key[(allottee_id, day)] = record
        return record

    def list_between(self, *, start, end):
        return [r for r in self._by_key.values() if start <= r.date < end]

    def count_by_status(self, *, start, end):
        counts = {s: 0 for s in AttendanceStatus}
        for r in self.list_between(start=start, end=end):
            counts[r.status] += 1
        return counts

    def get_recent_for_allottee(self, allottee_id, limit):
        items = [r for r in self._by_key.values() if r.allottee_id == allottee_id]
        items.sort(key=lambda r: r.date, reverse=True)
        return items[:limit]

    def __len__(self):
        return len(self._by_key)


class InMemoryComplaints:
    def __init__(self):
        self._rows: dict[str, Complaint] = {}
        self._order: dict[str, int] = {}

    def get_by_id(self, complaint_id):
        return self._rows.get(complaint_id)

    def list_complaints(self, *, student_id=None, status=None):
        rows = [
            c for c in self._rows.values()
            if (student_id is None or c.student_id == student_id) and (status is None or c.status == status)
        ]
        return sorted(rows, key=lambda c: self._order[c.complaint_id], reverse=True)

    def create(self, *, title, description, category, student_id, room_number, hostel_block, priority, created_at):
        complaint_id = new_id()
        self._rows[complaint_id] = Complaint(
            complaint_id=complaint_id,
            title=title,
            description=description,
            category=category,
            student_id=student_id,
            room_number=room_number,
            hostel_block=hostel_block,
            status=ComplaintStatus.OPEN,
            priority=priority,
            created_at=created_at,
            updated_at=created_at,
        )
        self._order[complaint_id] = next(_seq)
        return complaint_id

    def set_status(self, complaint_id, *, expected, status, resolution, updated_at):
        current = self._rows.get(complaint_id)
        if not current or current.status != expected:
            return False
        self._rows[complaint_id] = replace(current, status=status, resolution=resolution, updated_at=updated_at)
        return True

    def delete_by_id(self, complaint_id):
        return self._rows.pop(complaint_id, None) is not None


@pytest.fixture
def admins():
    repo = InMemoryAdmins()
    repo.add(email=ADMIN_EMAIL, name="Warden")
    return repo


@pytest.fixture
def allottees():
    return InMemoryAllottees()


@pytest.fixture
def rooms():
    return InMemoryRooms()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def complaints_repo():
    return InMemoryComplaints()


@pytest.fixture
def container(admins, allottees, rooms, attendance_repo, complaints_repo):
    return assemble_container(
        admins_repo=admins,
        allottees_repo=allottees,
        rooms_repo=rooms,
        attendance_repo=attendance_repo,
        complaints_repo=complaints_repo,
    )


@pytest.fixture
def client(container):
    app = create_app(container, settings_module="hostel_system.config.testing")
    return app.test_client()


@pytest.fixture
def make_allottee(allottees):
    def _make(name="Student", email=None):
        email = email or f"{name.lower().replace(' ', '.')}.{next(_seq)}@hostel.test"
        return allottees.create(
            name=name, email=email, roll="", registered_by=ADMIN_EMAIL, registered_at=datetime(2025, 1, 1)
        )

    return _make


@pytest.fixture
def make_room(rooms):
    def _make(number="101", block="A", floor="1", capacity=2):
        return rooms.create(number=number, block=block, floor=floor, capacity=capacity)

    return _make
