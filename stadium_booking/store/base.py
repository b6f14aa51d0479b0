"""
Record store interface.

The availability core reads and writes stadiums and bookings only
through this interface. Implementations are passed in explicitly
(constructor injection) so tests can substitute an in-memory store.

Implementations raise ``NotFoundError`` for missing records and
``StoreError`` for any read/write fault. ``insert_booking`` must reject a
booking that overlaps a non-cancelled booking of the same stadium and
date with ``SlotTakenConcurrentlyError``. ``update_booking_status`` with an
``expected_status`` must compare and write atomically, raising
``InvalidTransitionError`` when the stored status has moved on.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from stadium_booking.schemas.booking_schema import ActorRole, Booking, BookingStatus
from stadium_booking.schemas.schedule_schema import DateOverrides, WeeklySchedule
from stadium_booking.schemas.stadium_schema import Stadium


class RecordStore(ABC):
    """Abstract access to the Stadium and Booking collections."""

    @abstractmethod
    def get_stadium(self, stadium_id: str) -> Stadium:
        ...

    @abstractmethod
    def list_stadiums(self, owner_id: Optional[str] = None) -> list[Stadium]:
        ...

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking:
        ...

    @abstractmethod
    def list_bookings(
        self,
        stadium_id: str,
        day: Optional[date] = None,
        status_in: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        ...

    @abstractmethod
    def insert_booking(self, booking: Booking) -> Booking:
        ...

    @abstractmethod
    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        notes: Optional[str] = None,
        cancelled_by: Optional[ActorRole] = None,
        expected_status: Optional[BookingStatus] = None,
    ) -> Booking:
        ...

    @abstractmethod
    def update_stadium_schedule(
        self,
        stadium_id: str,
        weekly_schedule: Optional[WeeklySchedule] = None,
        date_overrides: Optional[DateOverrides] = None,
    ) -> Stadium:
        ...
