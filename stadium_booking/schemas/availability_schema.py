"""Availability and validation result models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AvailabilityReason(str, Enum):
    """Why a slot is (un)available or a request is (in)valid."""

    OPEN = "open"
    STADIUM_INACTIVE = "stadium_inactive"
    OWNER_BLOCKED = "owner_blocked"
    OUTSIDE_OPERATING_HOURS = "outside_operating_hours"
    ALREADY_BOOKED = "already_booked"
    INVALID_RANGE = "invalid_range"
    PAST_DATE = "past_date"

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self]


REASON_MESSAGES: dict[AvailabilityReason, str] = {
    AvailabilityReason.OPEN: "Available for booking",
    AvailabilityReason.STADIUM_INACTIVE: "Stadium is not active",
    AvailabilityReason.OWNER_BLOCKED: "Time slot marked as unavailable by stadium owner",
    AvailabilityReason.OUTSIDE_OPERATING_HOURS: "Time slot not in stadium operating hours",
    AvailabilityReason.ALREADY_BOOKED: "Time slot already booked",
    AvailabilityReason.INVALID_RANGE: "End time must be after start time on the slot grid",
    AvailabilityReason.PAST_DATE: "Cannot book a date in the past",
}


class SlotResolution(BaseModel):
    """Availability decision for one time slot."""

    time: str
    available: bool
    reason: AvailabilityReason

    @property
    def message(self) -> str:
        return self.reason.message


class ValidationResult(BaseModel):
    """Verdict for a requested booking range."""

    valid: bool
    reason: AvailabilityReason
    message: str
    slot: Optional[str] = None


class AvailabilityInfo(BaseModel):
    """Display summary of a stadium's schedule."""

    name: str
    is_active: bool
    operating_hours: dict[str, str] = Field(default_factory=dict)
    has_date_specific_rules: bool = False
