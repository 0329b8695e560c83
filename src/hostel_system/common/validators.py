from __future__ import annotations

from typing import Any, Iterable, Mapping

from bson import ObjectId

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_id(value: Any, label: str) -> str:
    """Ids are opaque strings, but must look like database ids."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {label} ID")
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    message = f"{field_name} must be a positive integer"
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(message)
    return value


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if data.get(f) is None or not str(data.get(f)).strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
