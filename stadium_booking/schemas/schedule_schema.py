"""
Weekly schedule and date override models.

Day-of-week convention: one canonical ``Weekday`` enum, Sunday first
(index 0 = Sunday .. 6 = Saturday). Stored records use lowercase day
names; ``Weekday.parse`` is the only place other spellings (capitalised
names, numeric Sunday=0 keys) are accepted.

Date overrides hold one ``SlotState`` per time, so a time can never be
both force-available and force-unavailable for the same date.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from stadium_booking.config import settings
from stadium_booking.utils import normalize_time_label, parse_iso_date, to_label, to_minutes

logger = logging.getLogger(__name__)


class Weekday(str, Enum):
    """Days of the week, Sunday first."""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @property
    def index(self) -> int:
        """Position in the week, Sunday = 0."""
        return _WEEK.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        if not 0 <= index <= 6:
            raise ValueError(f"Weekday index must be 0-6 (Sunday=0), got {index}")
        return _WEEK[index]

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        # date.weekday() is Monday=0; shift so Sunday=0
        return _WEEK[(day.weekday() + 1) % 7]

    @classmethod
    def parse(cls, key: Union["Weekday", str, int]) -> "Weekday":
        """Convert a stored day key into a ``Weekday``.

        Accepts enum members, day names in any case and Sunday=0 indexes
        (as ints or digit strings).
        """
        if isinstance(key, Weekday):
            return key
        if isinstance(key, int):
            return cls.from_index(key)
        text = str(key).strip().lower()
        if text.isdigit():
            return cls.from_index(int(text))
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown weekday: {key!r}") from None


_WEEK: tuple[Weekday, ...] = tuple(Weekday)


def _normalize_times(times: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_time_label(t) for t in times)


class WeeklySchedule:
    """A stadium's default recurring availability: a set of slot labels per weekday.

    A weekday with no entry is closed all day.
    """

    def __init__(self, days: Optional[Mapping[Weekday, Iterable[str]]] = None) -> None:
        self._days: dict[Weekday, frozenset[str]] = {}
        for weekday, times in (days or {}).items():
            self.set_day(weekday, times)

    def slots_for(self, weekday: Weekday) -> frozenset[str]:
        return self._days.get(weekday, frozenset())

    def slots_for_date(self, day: date) -> frozenset[str]:
        return self.slots_for(Weekday.from_date(day))

    def set_day(self, weekday: Weekday, times: Iterable[str]) -> None:
        slots = _normalize_times(times)
        if slots:
            self._days[weekday] = slots
        else:
            self._days.pop(weekday, None)

    def operating_hours(self) -> dict[str, str]:
        """Human-readable hours per weekday, e.g. ``{"Monday": "09:00 - 12:00"}``."""
        hours: dict[str, str] = {}
        for weekday in _WEEK:
            slots = sorted(self.slots_for(weekday), key=to_minutes)
            if not slots:
                hours[weekday.label] = "Closed"
                continue
            closing = min(to_minutes(slots[-1]) + settings.slots.slot_minutes, 1440)
            hours[weekday.label] = f"{slots[0]} - {to_label(closing)}"
        return hours

    def copy(self) -> "WeeklySchedule":
        return WeeklySchedule(self._days)

    @classmethod
    def from_storage(cls, raw: Optional[Mapping[Any, Iterable[str]]]) -> "WeeklySchedule":
        """Build from a stored mapping of day key -> list of ``HH:MM`` labels."""
        schedule = cls()
        for key, times in (raw or {}).items():
            weekday = Weekday.parse(key)
            schedule.set_day(weekday, set(schedule.slots_for(weekday)) | set(times or []))
        return schedule

    def to_storage(self) -> dict[str, list[str]]:
        return {
            weekday.value: sorted(self.slots_for(weekday), key=to_minutes)
            for weekday in _WEEK
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeeklySchedule):
            return NotImplemented
        return self._days == other._days

    def __repr__(self) -> str:
        return f"WeeklySchedule({self.to_storage()!r})"


class SlotState(str, Enum):
    """Per-date state of a single time slot."""

    DEFAULT = "default"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    def next(self) -> "SlotState":
        """Cycle order used by the schedule editor: default -> available -> unavailable."""
        return _CYCLE[(_CYCLE.index(self) + 1) % len(_CYCLE)]


_CYCLE: tuple[SlotState, ...] = (SlotState.DEFAULT, SlotState.AVAILABLE, SlotState.UNAVAILABLE)


@dataclass(frozen=True)
class DayOverride:
    """Force-open and force-closed slot sets for one date."""

    available: frozenset[str] = frozenset()
    unavailable: frozenset[str] = frozenset()


class DateOverrides:
    """Per-date exceptions layered on top of the weekly schedule."""

    def __init__(self, dates: Optional[Mapping[date, Mapping[str, SlotState]]] = None) -> None:
        self._dates: dict[date, dict[str, SlotState]] = {}
        for day, states in (dates or {}).items():
            for time, state in states.items():
                self.set_state(day, time, state)

    def override_for(self, day: date) -> Optional[DayOverride]:
        states = self._dates.get(day)
        if not states:
            return None
        return DayOverride(
            available=frozenset(t for t, s in states.items() if s == SlotState.AVAILABLE),
            unavailable=frozenset(t for t, s in states.items() if s == SlotState.UNAVAILABLE),
        )

    def state_of(self, day: date, time: str) -> SlotState:
        return self._dates.get(day, {}).get(normalize_time_label(time), SlotState.DEFAULT)

    def set_state(self, day: date, time: str, state: SlotState) -> None:
        label = normalize_time_label(time)
        states = self._dates.setdefault(day, {})
        if state == SlotState.DEFAULT:
            states.pop(label, None)
        else:
            states[label] = SlotState(state)
        if not states:
            del self._dates[day]

    def cycle(self, day: date, time: str) -> SlotState:
        """Advance one slot to its next state and return it."""
        new_state = self.state_of(day, time).next()
        self.set_state(day, time, new_state)
        return new_state

    def set_day(self, day: date, times: Iterable[str], state: SlotState) -> None:
        """Replace the whole override for ``day`` with ``state`` on every time given."""
        self.clear_day(day)
        for time in times:
            self.set_state(day, time, state)

    def clear_day(self, day: date) -> None:
        self._dates.pop(day, None)

    def dates(self) -> list[date]:
        return sorted(self._dates)

    def copy(self) -> "DateOverrides":
        return DateOverrides(self._dates)

    def __len__(self) -> int:
        return len(self._dates)

    @classmethod
    def from_storage(cls, raw: Optional[Mapping[Any, Mapping[str, Iterable[str]]]]) -> "DateOverrides":
        """Build from ``{"YYYY-MM-DD": {"available": [...], "unavailable": [...]}}``.

        A time listed in both sets is loaded as unavailable.
        """
        overrides = cls()
        for key, entry in (raw or {}).items():
            day = parse_iso_date(key)
            entry = entry or {}
            for time in entry.get("available") or []:
                overrides.set_state(day, time, SlotState.AVAILABLE)
            for time in entry.get("unavailable") or []:
                if overrides.state_of(day, time) == SlotState.AVAILABLE:
                    logger.warning(
                        "Override for %s lists %s as both available and unavailable; "
                        "keeping unavailable", day.isoformat(), time,
                    )
                overrides.set_state(day, time, SlotState.UNAVAILABLE)
        return overrides

    def to_storage(self) -> dict[str, dict[str, list[str]]]:
        stored: dict[str, dict[str, list[str]]] = {}
        for day in self.dates():
            override = self.override_for(day)
            if override is None:
                continue
            stored[day.isoformat()] = {
                "available": sorted(override.available, key=to_minutes),
                "unavailable": sorted(override.unavailable, key=to_minutes),
            }
        return stored

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateOverrides):
            return NotImplemented
        return self._dates == other._dates

    def __repr__(self) -> str:
        return f"DateOverrides({self.to_storage()!r})"
