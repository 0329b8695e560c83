from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .admins.mongo_admin_repository import MongoAdminRepository
from .admins.repository import AdminRepository
from .admins.service import AdminService
from .allottees.mongo_allottee_repository import MongoAllotteeRepository
from .allottees.repository import AllotteeRepository
from .allottees.service import AllotteeService
from .attendance.mongo_attendance_repository import MongoAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.locks import KeyedLock
from .complaints.mongo_complaint_repository import MongoComplaintRepository
from .complaints.repository import ComplaintRepository
from .complaints.service import ComplaintService
from .database.connection import DatabaseConnection, DBConfig
from .rooms.allocation import AllocationService
from .rooms.mongo_room_repository import MongoRoomRepository
from .rooms.repository import RoomRepository
from .rooms.service import RoomService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    admins_repo: AdminRepository
    allottees_repo: AllotteeRepository
    rooms_repo: RoomRepository
    attendance_repo: AttendanceRepository
    complaints_repo: ComplaintRepository

    admin_service: AdminService
    allottee_service: AllotteeService
    room_service: RoomService
    allocation_service: AllocationService
    attendance_service: AttendanceService
    complaint_service: ComplaintService


def assemble_container(
    *,
    admins_repo: AdminRepository,
    allottees_repo: AllotteeRepository,
    rooms_repo: RoomRepository,
    attendance_repo: AttendanceRepository,
    complaints_repo: ComplaintRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    # One lock table for every service that writes rooms or allottees.
    locks = KeyedLock()

    admin_service = AdminService(admins_repo)
    allottee_service = AllotteeService(allottees_repo, rooms_repo, locks=locks)
    room_service = RoomService(rooms_repo, allottees_repo, locks=locks)
    allocation_service = AllocationService(rooms_repo, allottees_repo, locks=locks)
    attendance_service = AttendanceService(attendance_repo, allottees_repo, admin_service)
    complaint_service = ComplaintService(complaints_repo, allottees_repo)

    return Container(
        conn=conn,
        admins_repo=admins_repo,
        allottees_repo=allottees_repo,
        rooms_repo=rooms_repo,
        attendance_repo=attendance_repo,
        complaints_repo=complaints_repo,
        admin_service=admin_service,
        allottee_service=allottee_service,
        room_service=room_service,
        allocation_service=allocation_service,
        attendance_service=attendance_service,
        complaint_service=complaint_service,
    )


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        uri=str(db_config["uri"]),
        database=str(db_config["database"]),
        server_selection_timeout_ms=int(db_config.get("server_selection_timeout_ms", 5000)),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble_container(
        conn=conn,
        admins_repo=MongoAdminRepository(conn),
        allottees_repo=MongoAllotteeRepository(conn),
        rooms_repo=MongoRoomRepository(conn),
        attendance_repo=MongoAttendanceRepository(conn),
        complaints_repo=MongoComplaintRepository(conn),
    )
