from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Admin:
    """Admin record the acting identity is matched against."""

    admin_id: str
    email: str
    name: str
    role: str = "admin"
