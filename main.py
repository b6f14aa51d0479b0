"""
Console entry point.

Seeds an in-memory store with one stadium, prints the day's slot grid,
books a slot and prints the grid again. No external services needed.

Usage:
    python main.py                 # today
    python main.py 2025-06-02      # a given date
"""

import logging
import sys

from stadium_booking.config import settings
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.schemas.booking_schema import Actor, ActorRole
from stadium_booking.schemas.stadium_schema import Stadium
from stadium_booking.services.booking_service import BookingService
from stadium_booking.services.schedule_service import ScheduleService
from stadium_booking.store.memory import InMemoryRecordStore
from stadium_booking.utils import local_today, parse_iso_date

logger = logging.getLogger(__name__)

DEMO_STADIUM_ID = "demo-stadium"
DEMO_HOURS = ["09:00", "10:00", "11:00", "17:00", "18:00", "19:00", "20:00"]


def build_demo_store() -> InMemoryRecordStore:
    store = InMemoryRecordStore()
    store.add_stadium(
        Stadium(
            id=DEMO_STADIUM_ID,
            owner_id="demo-owner",
            name="Demo Arena",
            price_per_hour=300,
            weekly_schedule={day: DEMO_HOURS for day in range(7)},
        )
    )
    return store


def _print_grid(resolver: AvailabilityResolver, stadium: Stadium, day) -> None:
    print(f"\n{stadium.name} - {day.isoformat()}")
    for slot in resolver.get_available_slots(stadium.id, day):
        marker = "open " if slot.available else "     "
        print(f"  {slot.time}  {marker} {'' if slot.available else slot.message}")


def run_demo(day) -> None:
    store = build_demo_store()
    stadium = store.get_stadium(DEMO_STADIUM_ID)
    resolver = AvailabilityResolver(store)
    bookings = BookingService(store)
    schedule = ScheduleService(store)
    owner = Actor(id=stadium.owner_id, role=ActorRole.OWNER)

    info = schedule.get_availability_info(stadium.id)
    for weekday, hours in info.operating_hours.items():
        print(f"  {weekday:<10} {hours}")

    _print_grid(resolver, stadium, day)

    result = bookings.create_booking(stadium.id, "demo-player", day, "17:00", "19:00")
    print(f"\n{result.message}")
    if result.booking is not None:
        bookings.confirm_booking(result.booking.id, owner)

    _print_grid(resolver, stadium, day)


if __name__ == "__main__":
    target = parse_iso_date(sys.argv[1]) if len(sys.argv) > 1 else local_today()
    logger.info("%s demo for %s", settings.app_name, target.isoformat())
    run_demo(target)
