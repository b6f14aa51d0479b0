"""
In-memory record store.

Used by tests and the console demo. Records are copied on the way in and
out so callers never share mutable state with the store. Booking inserts
are serialized by a lock and rejected when they overlap a non-cancelled
booking, which is the guard against two requests that both passed
validation.
"""

import logging
import threading
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from stadium_booking.errors import (
    InvalidTransitionError,
    NotFoundError,
    SlotTakenConcurrentlyError,
)
from stadium_booking.schemas.booking_schema import ActorRole, Booking, BookingStatus
from stadium_booking.schemas.schedule_schema import DateOverrides, WeeklySchedule
from stadium_booking.schemas.stadium_schema import Stadium
from stadium_booking.store.base import RecordStore
from stadium_booking.utils import to_label, to_minutes

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """Dict-backed ``RecordStore``."""

    def __init__(self) -> None:
        self._stadiums: dict[str, Stadium] = {}
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()

    def add_stadium(self, stadium: Stadium) -> Stadium:
        """Create or replace a stadium record."""
        self._stadiums[stadium.id] = stadium.clone()
        return stadium.clone()

    def delete_stadium(self, stadium_id: str) -> None:
        """Remove a stadium; its historical bookings are kept."""
        if self._stadiums.pop(stadium_id, None) is None:
            raise NotFoundError("Stadium", stadium_id)

    def get_stadium(self, stadium_id: str) -> Stadium:
        stadium = self._stadiums.get(stadium_id)
        if stadium is None:
            raise NotFoundError("Stadium", stadium_id)
        return stadium.clone()

    def list_stadiums(self, owner_id: Optional[str] = None) -> list[Stadium]:
        return [
            s.clone()
            for s in self._stadiums.values()
            if owner_id is None or s.owner_id == owner_id
        ]

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking.model_copy()

    def list_bookings(
        self,
        stadium_id: str,
        day: Optional[date] = None,
        status_in: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        statuses = set(status_in) if status_in is not None else None
        found = [
            b.model_copy()
            for b in self._bookings.values()
            if b.stadium_id == stadium_id
            and (day is None or b.date == day)
            and (statuses is None or b.status in statuses)
        ]
        return sorted(found, key=lambda b: (b.date, to_minutes(b.start_time)))

    def insert_booking(self, booking: Booking) -> Booking:
        with self._lock:
            for existing in self._bookings.values():
                if (
                    existing.stadium_id == booking.stadium_id
                    and existing.date == booking.date
                    and existing.is_active
                    and booking.is_active
                    and existing.overlaps(booking.start_time, booking.end_time)
                ):
                    clash = max(to_minutes(existing.start_time), to_minutes(booking.start_time))
                    raise SlotTakenConcurrentlyError(
                        booking.stadium_id, booking.date.isoformat(), to_label(clash)
                    )
            self._bookings[booking.id] = booking.model_copy()
        logger.debug("Inserted booking %s", booking.id)
        return booking.model_copy()

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        notes: Optional[str] = None,
        cancelled_by: Optional[ActorRole] = None,
        expected_status: Optional[BookingStatus] = None,
    ) -> Booking:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            if expected_status is not None and booking.status != expected_status:
                raise InvalidTransitionError(
                    f"Booking '{booking_id}' is {booking.status.value}, "
                    f"expected {expected_status.value}"
                )
            update: dict = {"status": status, "updated_at": datetime.now(timezone.utc)}
            if notes is not None:
                update["notes"] = notes
            if cancelled_by is not None:
                update["cancelled_by"] = cancelled_by
            self._bookings[booking_id] = booking.model_copy(update=update)
            return self._bookings[booking_id].model_copy()

    def update_stadium_schedule(
        self,
        stadium_id: str,
        weekly_schedule: Optional[WeeklySchedule] = None,
        date_overrides: Optional[DateOverrides] = None,
    ) -> Stadium:
        stadium = self._stadiums.get(stadium_id)
        if stadium is None:
            raise NotFoundError("Stadium", stadium_id)
        update: dict = {}
        if weekly_schedule is not None:
            update["weekly_schedule"] = weekly_schedule.copy()
        if date_overrides is not None:
            update["date_overrides"] = date_overrides.copy()
        self._stadiums[stadium_id] = stadium.model_copy(update=update)
        return self._stadiums[stadium_id].clone()
