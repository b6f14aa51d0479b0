"""Time label and calendar date helpers shared across the package."""

import re
from datetime import date, datetime, timedelta
from typing import Iterator, Union
from zoneinfo import ZoneInfo

from stadium_booking.config import MINUTES_PER_DAY, settings

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def to_minutes(label: str) -> int:
    """Convert an ``HH:MM`` (or ``HH:MM:SS``) label to minutes after midnight.

    ``24:00`` is accepted as the end of the day so a booking can end at
    midnight.

    Examples:
        >>> to_minutes("09:30")
        570
        >>> to_minutes("10:00:00")
        600
    """
    match = _TIME_PATTERN.match(label.strip()) if isinstance(label, str) else None
    if not match:
        raise ValueError(f"Invalid time label: {label!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if minutes > 59 or seconds > 59:
        raise ValueError(f"Invalid time label: {label!r}")
    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY or (total == MINUTES_PER_DAY and seconds):
        raise ValueError(f"Invalid time label: {label!r}")
    return total


def to_label(minutes: int) -> str:
    """Format minutes after midnight as ``HH:MM``."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range: {minutes}")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def normalize_time_label(value: str) -> str:
    """Normalize a stored time value to the canonical ``HH:MM`` form.

    Examples:
        >>> normalize_time_label("9:00")
        '09:00'
        >>> normalize_time_label("18:00:00")
        '18:00'
    """
    return to_label(to_minutes(value))


def slot_labels_between(start: str, end: str, step_minutes: int = 0) -> list[str]:
    """Slot start labels from ``start`` (inclusive) to ``end`` (exclusive)."""
    step = step_minutes or settings.slots.slot_minutes
    return [to_label(m) for m in range(to_minutes(start), to_minutes(end), step)]


def canonical_time_labels() -> list[str]:
    """The fixed slot grid offered for every day (``06:00`` .. ``23:00`` by default)."""
    cfg = settings.slots
    first = cfg.first_slot_hour * 60
    last = cfg.last_slot_hour * 60
    return [to_label(m) for m in range(first, last + 1, cfg.slot_minutes)]


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` string; ``date`` instances pass through."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid ISO date: {value!r}") from None


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def local_today() -> date:
    """Today's date in the configured stadium time zone."""
    return datetime.now(ZoneInfo(settings.booking.timezone)).date()
