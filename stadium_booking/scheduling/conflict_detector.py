"""
Booking conflict detection.

A slot is taken when any pending or confirmed booking for the same
stadium and date contains it under half-open interval semantics: a
09:00-11:00 booking occupies "09:00" and "10:00" but not "11:00".
Cancelled bookings never block.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from stadium_booking.schemas.booking_schema import Booking, BookingStatus
from stadium_booking.store.base import RecordStore

logger = logging.getLogger(__name__)

ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED}
)


def find_conflict(bookings: Iterable[Booking], time: str) -> Optional[Booking]:
    """Return the first active booking that contains ``time``, if any."""
    for booking in bookings:
        if booking.is_active and booking.covers(time):
            return booking
    return None


class ConflictDetector:
    """Checks a stadium's active bookings for a date against a slot."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def active_bookings(self, stadium_id: str, day: date) -> list[Booking]:
        """Pending and confirmed bookings for the stadium on ``day``.

        Store faults propagate; a failed read is never treated as "no bookings".
        """
        bookings = self._store.list_bookings(stadium_id, day, status_in=ACTIVE_STATUSES)
        return [b for b in bookings if b.status in ACTIVE_STATUSES]

    def has_conflict(self, stadium_id: str, day: date, time: str) -> bool:
        """Single-slot check: is ``time`` inside an active booking on ``day``?

        The resolver reads ``active_bookings`` once per date and applies
        ``find_conflict`` per slot, so both paths share the same rule.
        """
        conflict = find_conflict(self.active_bookings(stadium_id, day), time)
        if conflict is not None:
            logger.debug(
                "Slot %s on %s conflicts with booking %s (%s-%s)",
                time, day.isoformat(), conflict.id, conflict.start_time, conflict.end_time,
            )
        return conflict is not None
