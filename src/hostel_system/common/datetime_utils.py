from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from ..core.exceptions import ValidationError

ONE_DAY = timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string (a full ISO timestamp is accepted too)."""
    v = (value or "").strip()
    try:
        if len(v) > 10:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(value: Optional[Union[date, datetime, str]] = None) -> datetime:
    """Truncate to local midnight; ``None`` means today."""
    if value is None:
        value = now_local()
    elif isinstance(value, str):
        value = parse_iso_date(value)
    elif not isinstance(value, date):
        raise ValidationError(f"Invalid date: {value!r}")
    if isinstance(value, datetime):
        value = value.date()
    return datetime(value.year, value.month, value.day)


def day_window(day: datetime) -> Tuple[datetime, datetime]:
    """Half-open ``[day, day + 24h)`` range used for same-day matching."""
    start = start_of_day(day)
    return start, start + ONE_DAY
