from stadium_booking.scheduling.conflict_detector import ConflictDetector
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.scheduling.state_machine import (
    BookingAction,
    BookingStateMachine,
    Transition,
)
from stadium_booking.scheduling.validator import BookingValidator

__all__ = [
    "ConflictDetector",
    "AvailabilityResolver",
    "BookingValidator",
    "BookingStateMachine",
    "BookingAction",
    "Transition",
]
