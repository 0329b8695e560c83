from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..allottees.repository import AllotteeRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_fields, require_id
from ..core.enums import ComplaintPriority, ComplaintStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Complaint, ComplaintView, StudentSummary
from .repository import ComplaintRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "category", "studentId", "roomNumber", "hostelBlock")


class ComplaintService:
    def __init__(self, complaints: ComplaintRepository, allottees: AllotteeRepository):
        self._complaints = complaints
        self._allottees = allottees

    @staticmethod
    def _parse_status(value: Any) -> ComplaintStatus:
        try:
            return ComplaintStatus(value)
        except ValueError:
            allowed = ", ".join(s.value for s in ComplaintStatus)
            raise ValidationError(f"Invalid status (expected one of: {allowed})")

    def _view(self, complaint: Complaint) -> ComplaintView:
        student = self._allottees.get_by_id(complaint.student_id)
        if not student:
            # Dangling reference: report it, never patch in another student.
            logger.warning(
                "Complaint %s references missing allotee %s",
                complaint.complaint_id,
                complaint.student_id,
            )
            return ComplaintView(complaint=complaint, student=None)
        return ComplaintView(complaint=complaint, student=StudentSummary(name=student.name, email=student.email))

    def _require(self, complaint_id: str) -> Complaint:
        complaint = self._complaints.get_by_id(require_id(complaint_id, "complaint"))
        if not complaint:
            raise NotFoundError("Complaint not found")
        return complaint

    def create(self, data: Mapping[str, Any]) -> ComplaintView:
        require_fields(data, REQUIRED_FIELDS)
        student_id = require_id(data["studentId"], "student")
        if not self._allottees.get_by_id(student_id):
            raise NotFoundError("Allotee not found")

        try:
            priority = ComplaintPriority(data.get("priority") or ComplaintPriority.MEDIUM.value)
        except ValueError:
            raise ValidationError("Invalid priority (expected one of: Low, Medium, High)")

        complaint_id = self._complaints.create(
            title=str(data["title"]).strip(),
            description=str(data["description"]).strip(),
            category=str(data["category"]).strip(),
            student_id=student_id,
            room_number=str(data["roomNumber"]).strip(),
            hostel_block=str(data["hostelBlock"]).strip(),
            priority=priority,
            created_at=now_local(),
        )
        logger.info("Complaint %s opened by %s", complaint_id, student_id)
        return self.get(complaint_id)

    def get(self, complaint_id: str) -> ComplaintView:
        return self._view(self._require(complaint_id))

    def list_complaints(self, *, student_id: Optional[str] = None, status: Optional[str] = None) -> Sequence[ComplaintView]:
        if student_id:
            require_id(student_id, "student")
        parsed = self._parse_status(status) if status else None
        return [self._view(c) for c in self._complaints.list_complaints(student_id=student_id, status=parsed)]

    def _transition(self, complaint: Complaint, status: ComplaintStatus, resolution: Optional[str]) -> ComplaintView:
        if complaint.status == ComplaintStatus.RESOLVED:
            raise ValidationError("Complaint is already resolved")
        if status.rank < complaint.status.rank:
            raise ValidationError(f"Cannot move complaint from {complaint.status.value} back to {status.value}")

        ok = self._complaints.set_status(
            complaint.complaint_id,
            expected=complaint.status,
            status=status,
            resolution=resolution,
            updated_at=now_local(),
        )
        if not ok:
            if not self._complaints.get_by_id(complaint.complaint_id):
                raise NotFoundError("Complaint not found")
            raise ConflictError("Complaint was updated concurrently; reload and retry")

        logger.info("Complaint %s: %s -> %s", complaint.complaint_id, complaint.status.value, status.value)
        return self.get(complaint.complaint_id)

    def resolve(self, complaint_id: str, resolution: Any) -> ComplaintView:
        if resolution is None or not str(resolution).strip():
            raise ValidationError("Resolution is required")
        complaint = self._require(complaint_id)
        return self._transition(complaint, ComplaintStatus.RESOLVED, str(resolution))

    def update_status(self, complaint_id: str, status: Any) -> ComplaintView:
        target = self._parse_status(status)
        if target == ComplaintStatus.RESOLVED:
            raise ValidationError("Resolution is required")
        complaint = self._require(complaint_id)
        if target == complaint.status:
            return self._view(complaint)
        return self._transition(complaint, target, None)

    def delete(self, complaint_id: str) -> None:
        complaint = self._require(complaint_id)
        if not self._complaints.delete_by_id(complaint.complaint_id):
            raise NotFoundError("Complaint not found")
        logger.info("Deleted complaint %s", complaint.complaint_id)
