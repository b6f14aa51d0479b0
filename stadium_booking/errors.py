"""Exception taxonomy.

Computed unavailability (inactive stadium, owner block, booked slot...)
is never raised; it is returned as an ``AvailabilityReason``. Only store
faults, missing records and rejected actions are exceptional.
"""


class StadiumBookingError(Exception):
    """Base class for all errors raised by this package."""


class NotFoundError(StadiumBookingError):
    """A referenced stadium or booking does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id


class StoreError(StadiumBookingError):
    """The record store failed to read or write."""


class SlotTakenConcurrentlyError(StoreError):
    """An insert collided with a non-cancelled booking for the same slot.

    The caller should re-run validation and tell the user the slot is no
    longer available. It is never retried automatically.
    """

    def __init__(self, stadium_id: str, day: str, time: str) -> None:
        super().__init__(
            f"Slot {time} on {day} at stadium '{stadium_id}' was taken concurrently"
        )
        self.stadium_id = stadium_id
        self.day = day
        self.time = time


class InvalidTransitionError(StadiumBookingError):
    """Raised when a booking status transition is not valid from the current state."""


class PermissionDeniedError(StadiumBookingError):
    """Raised when an actor is not allowed to perform an action."""
