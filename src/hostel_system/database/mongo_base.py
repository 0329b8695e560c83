from __future__ import annotations

from typing import Any, Iterable, List

from bson import ObjectId
from bson.errors import InvalidId

from ..core.exceptions import ValidationError


def to_object_id(value: Any, label: str = "entity") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} ID")


def to_object_ids(values: Iterable[Any]) -> List[ObjectId]:
    return [to_object_id(v) for v in values]
