from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import UnauthorizedError
from .model import Admin
from .repository import AdminRepository

logger = logging.getLogger(__name__)


class AdminService:
    """Use case: resolve the acting admin.

    The identity provider sits outside this service; we only trust that the
    email we are handed belongs to a stored admin record.
    """

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def require_admin(self, email: Optional[str]) -> Admin:
        email = (email or "").strip()
        admin = self._admins.get_by_email(email) if email else None
        if not admin:
            logger.warning("Rejected admin action for %r", email)
            raise UnauthorizedError("Unauthorized. Admin not found.")
        return admin
