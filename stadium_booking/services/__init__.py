from stadium_booking.services.booking_service import BookingService
from stadium_booking.services.notifications import LoggingNotifier, Notifier
from stadium_booking.services.schedule_service import (
    BulkOperation,
    BulkUpdateResult,
    ScheduleService,
)

__all__ = [
    "BookingService",
    "ScheduleService",
    "BulkOperation",
    "BulkUpdateResult",
    "Notifier",
    "LoggingNotifier",
]
