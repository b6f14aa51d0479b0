"""
Booking request validation.

Runs the resolver over every slot of a requested range before a booking
is written. The validator only advises: it reserves nothing, so the
store's insert constraint remains the final guard against two requests
for the same slot.
"""

import logging
from datetime import date
from typing import Callable, Optional, Union

from stadium_booking.config import settings
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.schemas.availability_schema import AvailabilityReason, ValidationResult
from stadium_booking.utils import local_today, parse_iso_date, slot_labels_between, to_minutes

logger = logging.getLogger(__name__)


def _invalid(reason: AvailabilityReason, message: str, slot: Optional[str] = None) -> ValidationResult:
    return ValidationResult(valid=False, reason=reason, message=message, slot=slot)


class BookingValidator:
    """Checks that every slot in ``[start_time, end_time)`` is bookable."""

    def __init__(
        self,
        resolver: AvailabilityResolver,
        today: Callable[[], date] = local_today,
        max_booking_hours: int = settings.booking.max_booking_hours,
    ) -> None:
        self._resolver = resolver
        self._today = today
        self._max_minutes = max_booking_hours * 60

    def validate(
        self, stadium_id: str, day: Union[date, str], start_time: str, end_time: str
    ) -> ValidationResult:
        """
        Validate a booking request.

        Returns:
            A ``ValidationResult``; on failure ``reason`` is the first
            failing check and ``slot`` the first unavailable slot, if any.

        Raises:
            NotFoundError: If the stadium does not exist.
            StoreError: If the store cannot be read.
        """
        try:
            day = parse_iso_date(day)
        except ValueError as exc:
            return _invalid(AvailabilityReason.INVALID_RANGE, str(exc))

        try:
            start, end = to_minutes(start_time), to_minutes(end_time)
        except ValueError:
            return _invalid(
                AvailabilityReason.INVALID_RANGE,
                f"Invalid time range: {start_time!r} - {end_time!r}",
            )

        if end <= start:
            return _invalid(
                AvailabilityReason.INVALID_RANGE,
                f"End time {end_time} must be after start time {start_time}",
            )
        if (end - start) % settings.slots.slot_minutes:
            return _invalid(
                AvailabilityReason.INVALID_RANGE,
                f"Booking must cover whole {settings.slots.slot_minutes}-minute slots",
            )
        if end - start > self._max_minutes:
            return _invalid(
                AvailabilityReason.INVALID_RANGE,
                f"Bookings are limited to {self._max_minutes // 60} hours",
            )
        if day < self._today():
            return _invalid(AvailabilityReason.PAST_DATE, AvailabilityReason.PAST_DATE.message)

        times = slot_labels_between(start_time, end_time)
        for resolution in self._resolver.iter_resolutions(stadium_id, day, times):
            if not resolution.available:
                logger.info(
                    "Booking request for %s on %s rejected at %s: %s",
                    stadium_id, day.isoformat(), resolution.time, resolution.reason.value,
                )
                return _invalid(
                    resolution.reason,
                    f"Time slot {resolution.time} unavailable: {resolution.message}",
                    slot=resolution.time,
                )

        return ValidationResult(
            valid=True,
            reason=AvailabilityReason.OPEN,
            message="Booking request is valid",
        )
