"""Notification models sent to the counter-party of a booking change."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_REQUEST_SENT = "booking_request_sent"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED_BY_OWNER = "booking_cancelled_by_owner"
    BOOKING_CANCELLED_BY_CUSTOMER = "booking_cancelled_by_customer"


class Notification(BaseModel):
    """A single message addressed to one account."""

    user_id: str
    type: NotificationType
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)
