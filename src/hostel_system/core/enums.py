from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily presence state stored per allottee."""

    PRESENT = "present"
    ABSENT = "absent"


class ComplaintStatus(str, Enum):
    """Complaint workflow. Transitions only move forward."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"

    @property
    def rank(self) -> int:
        return _COMPLAINT_ORDER.index(self)


_COMPLAINT_ORDER = [ComplaintStatus.OPEN, ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED]


class ComplaintPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
