"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest

from stadium_booking.errors import StoreError
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.scheduling.validator import BookingValidator
from stadium_booking.schemas.booking_schema import Actor, ActorRole, Booking, BookingStatus
from stadium_booking.schemas.notification_schema import Notification
from stadium_booking.schemas.stadium_schema import Stadium
from stadium_booking.services.booking_service import BookingService
from stadium_booking.services.notifications import Notifier
from stadium_booking.services.schedule_service import ScheduleService
from stadium_booking.store.memory import InMemoryRecordStore

# 2025-06-01 is a Sunday, 2025-06-02 a Monday.
TODAY = date(2025, 6, 1)
MONDAY = date(2025, 6, 2)
TUESDAY = date(2025, 6, 3)

STADIUM_ID = "stadium-x"
OWNER_ID = "owner-1"
PLAYER_ID = "player-1"


class RecordingNotifier(Notifier):
    """Keeps every notification it is asked to send."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)


class BrokenNotifier(Notifier):
    def send(self, notification: Notification) -> None:
        raise ConnectionError("push gateway unreachable")


class FlakyStore(InMemoryRecordStore):
    """In-memory store whose reads or writes can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_booking_reads = False
        self.fail_schedule_write_numbers: set[int] = set()
        self.schedule_writes = 0

    def list_bookings(self, stadium_id, day=None, status_in=None):
        if self.fail_booking_reads:
            raise StoreError("connection reset while listing bookings")
        return super().list_bookings(stadium_id, day, status_in)

    def update_stadium_schedule(self, stadium_id, weekly_schedule=None, date_overrides=None):
        self.schedule_writes += 1
        if self.schedule_writes in self.fail_schedule_write_numbers:
            raise StoreError("write timed out")
        return super().update_stadium_schedule(stadium_id, weekly_schedule, date_overrides)


def make_stadium(
    stadium_id: str = STADIUM_ID,
    owner_id: str = OWNER_ID,
    is_active: bool = True,
    weekly_schedule: Optional[dict] = None,
    date_overrides: Optional[dict] = None,
    price_per_hour: float = 300,
) -> Stadium:
    """Stadium X: Monday 09:00-11:00 slots unless told otherwise."""
    return Stadium(
        id=stadium_id,
        owner_id=owner_id,
        name="Stadium X",
        price_per_hour=price_per_hour,
        is_active=is_active,
        weekly_schedule=(
            weekly_schedule if weekly_schedule is not None
            else {"monday": ["09:00", "10:00", "11:00"]}
        ),
        date_overrides=date_overrides or {},
    )


def make_booking(
    booking_id: str = "booking-1",
    start_time: str = "10:00",
    end_time: str = "11:00",
    day: date = MONDAY,
    status: BookingStatus = BookingStatus.PENDING,
    stadium_id: str = STADIUM_ID,
    user_id: str = PLAYER_ID,
    total_price: float = 0.0,
) -> Booking:
    return Booking(
        id=booking_id,
        stadium_id=stadium_id,
        user_id=user_id,
        date=day,
        start_time=start_time,
        end_time=end_time,
        status=status,
        total_price=total_price,
    )


@pytest.fixture
def store():
    store = FlakyStore()
    store.add_stadium(make_stadium())
    return store


@pytest.fixture
def resolver(store):
    return AvailabilityResolver(store)


@pytest.fixture
def validator(resolver):
    return BookingValidator(resolver, today=lambda: TODAY)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def booking_service(store, validator, notifier):
    return BookingService(store, validator=validator, notifier=notifier)


@pytest.fixture
def schedule_service(store):
    return ScheduleService(store)


@pytest.fixture
def owner():
    return Actor(id=OWNER_ID, role=ActorRole.OWNER)


@pytest.fixture
def player():
    return Actor(id=PLAYER_ID, role=ActorRole.PLAYER)


@pytest.fixture
def admin():
    return Actor(id="admin-1", role=ActorRole.ADMIN)
