from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ComplaintPriority, ComplaintStatus


@dataclass(frozen=True)
class Complaint:
    """Domain entity: a student complaint.

    ``resolution`` is set only once the status is ``Resolved``.
    """

    complaint_id: str
    title: str
    description: str
    category: str
    student_id: str
    room_number: str
    hostel_block: str
    status: ComplaintStatus = ComplaintStatus.OPEN
    priority: ComplaintPriority = ComplaintPriority.MEDIUM
    resolution: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentSummary:
    name: str
    email: str


@dataclass(frozen=True)
class ComplaintView:
    """Read-model: complaint plus the submitting student, when it resolves."""

    complaint: Complaint
    student: Optional[StudentSummary]
