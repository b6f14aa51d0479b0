"""Booking data models."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from stadium_booking.schemas.availability_schema import ValidationResult
from stadium_booking.utils import normalize_time_label, to_minutes


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Stored alongside the booking; never computed here."""

    UNPAID = "unpaid"
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class ActorRole(str, Enum):
    PLAYER = "player"
    OWNER = "owner"
    ADMIN = "admin"


class Actor(BaseModel):
    """The account performing an action."""

    id: str
    role: ActorRole


class Booking(BaseModel):
    """A reservation of one or more consecutive slots on one date."""

    id: str
    stadium_id: str
    user_id: str
    date: date
    start_time: str
    end_time: str
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    total_price: float = 0.0
    notes: Optional[str] = None
    cancelled_by: Optional[ActorRole] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_time_label(value)

    @model_validator(mode="after")
    def _check_range(self) -> "Booking":
        if to_minutes(self.end_time) <= to_minutes(self.start_time):
            raise ValueError(
                f"end_time {self.end_time} must be after start_time {self.start_time}"
            )
        return self

    @property
    def duration_hours(self) -> float:
        return (to_minutes(self.end_time) - to_minutes(self.start_time)) / 60

    @property
    def is_active(self) -> bool:
        """Whether the booking occupies its slots."""
        return self.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)

    def covers(self, time: str) -> bool:
        """Half-open containment: ``start_time <= time < end_time``."""
        minute = to_minutes(time)
        return to_minutes(self.start_time) <= minute < to_minutes(self.end_time)

    def overlaps(self, start_time: str, end_time: str) -> bool:
        return (
            to_minutes(self.start_time) < to_minutes(end_time)
            and to_minutes(start_time) < to_minutes(self.end_time)
        )


class BookingStats(BaseModel):
    """Booking counts and revenue for one owner."""

    total: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    total_revenue: float = 0.0
    pending_revenue: float = 0.0


class BookingResult(BaseModel):
    """Outcome of a booking creation attempt."""

    success: bool
    message: str
    booking: Optional[Booking] = None
    validation: Optional[ValidationResult] = None
