from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ComplaintPriority, ComplaintStatus
from .model import Complaint


class ComplaintRepository(Protocol):
    def get_by_id(self, complaint_id: str) -> Optional[Complaint]:
        raise NotImplementedError

    def list_complaints(
        self,
        *,
        student_id: Optional[str] = None,
        status: Optional[ComplaintStatus] = None,
    ) -> Sequence[Complaint]:
        """Newest first."""

        raise NotImplementedError

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
        raise NotImplementedError

    def set_status(
        self,
        complaint_id: str,
        *,
        expected: ComplaintStatus,
        status: ComplaintStatus,
        resolution: Optional[str],
        updated_at: datetime,
    ) -> bool:
        """Move from ``expected`` to ``status``; False if the stored status differs."""

        raise NotImplementedError

    def delete_by_id(self, complaint_id: str) -> bool:
        raise NotImplementedError
