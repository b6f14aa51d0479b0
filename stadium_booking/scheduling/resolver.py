"""
Availability resolution.

Merges the three layers that decide whether a slot can be booked, in
this precedence order (first determination wins):

1. inactive stadium            -> STADIUM_INACTIVE
2. date override "unavailable" -> OWNER_BLOCKED
3. date override "available"   -> go to conflict check
4. weekly schedule miss        -> OUTSIDE_OPERATING_HOURS
5. active booking covers slot  -> ALREADY_BOOKED, else OPEN

Usage:
    resolver = AvailabilityResolver(store)
    resolution = resolver.resolve("stadium-1", date(2025, 6, 2), "09:00")
    if resolution.available:
        ...
"""

import logging
from datetime import date
from typing import Iterable, Iterator, Optional, Union

from stadium_booking.scheduling.conflict_detector import ConflictDetector, find_conflict
from stadium_booking.schemas.availability_schema import AvailabilityReason, SlotResolution
from stadium_booking.schemas.booking_schema import Booking
from stadium_booking.schemas.stadium_schema import Stadium
from stadium_booking.store.base import RecordStore
from stadium_booking.utils import canonical_time_labels, normalize_time_label, parse_iso_date

logger = logging.getLogger(__name__)


def schedule_decision(stadium: Stadium, day: date, time: str) -> Optional[AvailabilityReason]:
    """Steps 1-4: the reason a slot is closed, or None if it still needs a conflict check."""
    if not stadium.is_active:
        return AvailabilityReason.STADIUM_INACTIVE

    override = stadium.date_overrides.override_for(day)
    if override is not None:
        if time in override.unavailable:
            return AvailabilityReason.OWNER_BLOCKED
        if time in override.available:
            return None

    if time not in stadium.weekly_schedule.slots_for_date(day):
        return AvailabilityReason.OUTSIDE_OPERATING_HOURS
    return None


class AvailabilityResolver:
    """Decides per-slot availability for a stadium and date."""

    def __init__(
        self,
        store: RecordStore,
        conflict_detector: Optional[ConflictDetector] = None,
    ) -> None:
        self._store = store
        self._conflicts = conflict_detector or ConflictDetector(store)

    def resolve(self, stadium_id: str, day: Union[date, str], time: str) -> SlotResolution:
        return next(self.iter_resolutions(stadium_id, day, [time]))

    def iter_resolutions(
        self, stadium_id: str, day: Union[date, str], times: Iterable[str]
    ) -> Iterator[SlotResolution]:
        """Resolve several slots of one date against a single read of the store.

        The stadium is fetched once up front; bookings are fetched lazily,
        only when a slot gets as far as the conflict check. ``NotFoundError``
        and ``StoreError`` propagate to the caller.
        """
        day = parse_iso_date(day)
        stadium = self._store.get_stadium(stadium_id)
        bookings: Optional[list[Booking]] = None

        for raw_time in times:
            time = normalize_time_label(raw_time)
            closed = schedule_decision(stadium, day, time)
            if closed is not None:
                yield SlotResolution(time=time, available=False, reason=closed)
                continue

            if bookings is None:
                bookings = self._conflicts.active_bookings(stadium_id, day)
            if find_conflict(bookings, time) is not None:
                yield SlotResolution(
                    time=time, available=False, reason=AvailabilityReason.ALREADY_BOOKED
                )
            else:
                yield SlotResolution(time=time, available=True, reason=AvailabilityReason.OPEN)

    def get_available_slots(self, stadium_id: str, day: Union[date, str]) -> list[SlotResolution]:
        """Resolve every canonical time label of the day (``date`` or ``YYYY-MM-DD``)."""
        day = parse_iso_date(day)
        slots = list(self.iter_resolutions(stadium_id, day, canonical_time_labels()))
        logger.debug(
            "Stadium %s on %s: %d of %d slots open",
            stadium_id, day.isoformat(), sum(s.available for s in slots), len(slots),
        )
        return slots
