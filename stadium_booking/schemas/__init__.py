from stadium_booking.schemas.availability_schema import (
    AvailabilityInfo,
    AvailabilityReason,
    SlotResolution,
    ValidationResult,
)
from stadium_booking.schemas.booking_schema import (
    Actor,
    ActorRole,
    Booking,
    BookingResult,
    BookingStats,
    BookingStatus,
    PaymentStatus,
)
from stadium_booking.schemas.notification_schema import Notification, NotificationType
from stadium_booking.schemas.schedule_schema import (
    DateOverrides,
    DayOverride,
    SlotState,
    WeeklySchedule,
    Weekday,
)
from stadium_booking.schemas.stadium_schema import Stadium

__all__ = [
    "AvailabilityInfo", "AvailabilityReason", "SlotResolution", "ValidationResult",
    "Actor", "ActorRole", "Booking", "BookingResult", "BookingStats", "BookingStatus", "PaymentStatus",
    "Notification", "NotificationType",
    "DateOverrides", "DayOverride", "SlotState", "WeeklySchedule", "Weekday",
    "Stadium",
]
