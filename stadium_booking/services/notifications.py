"""
Booking notifications.

Builds the messages sent to the counter-party of a booking change and
dispatches them fire-and-forget: a failed send is logged and never
undoes the status change that triggered it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from stadium_booking.config import settings
from stadium_booking.schemas.booking_schema import ActorRole, Booking
from stadium_booking.schemas.notification_schema import Notification, NotificationType
from stadium_booking.schemas.stadium_schema import Stadium

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Delivery channel for notifications (push, in-app inbox, ...)."""

    @abstractmethod
    def send(self, notification: Notification) -> None:
        ...


class LoggingNotifier(Notifier):
    """Writes notifications to the log instead of delivering them."""

    def send(self, notification: Notification) -> None:
        logger.info(
            "Notification to %s [%s]: %s - %s",
            notification.user_id, notification.type.value, notification.title, notification.body,
        )


def _data(booking: Booking, kind: NotificationType, **extra: object) -> dict:
    data = {"type": kind.value, "booking_id": booking.id, "stadium_id": booking.stadium_id}
    data.update({k: v for k, v in extra.items() if v is not None})
    return data


def _when(booking: Booking) -> str:
    return f"{booking.date.isoformat()} at {booking.start_time}"


def booking_created(booking: Booking, stadium: Stadium) -> list[Notification]:
    name = stadium.name or "your stadium"
    return [
        Notification(
            user_id=stadium.owner_id,
            type=NotificationType.BOOKING_CREATED,
            title="New Booking Request!",
            body=f"A player wants to book {name} on {_when(booking)}",
            data=_data(booking, NotificationType.BOOKING_CREATED, customer_id=booking.user_id),
        ),
        Notification(
            user_id=booking.user_id,
            type=NotificationType.BOOKING_REQUEST_SENT,
            title="Booking Request Sent!",
            body=(
                f"Your booking request for {name} on {_when(booking)} has been sent "
                f"({booking.total_price:g} {settings.booking.currency})"
            ),
            data=_data(booking, NotificationType.BOOKING_REQUEST_SENT),
        ),
    ]


def booking_confirmed(booking: Booking, stadium: Stadium) -> list[Notification]:
    return [
        Notification(
            user_id=booking.user_id,
            type=NotificationType.BOOKING_CONFIRMED,
            title="Booking Confirmed!",
            body=f"Your booking for {stadium.name or 'the stadium'} on {_when(booking)} has been confirmed",
            data=_data(booking, NotificationType.BOOKING_CONFIRMED),
        )
    ]


def booking_cancelled(
    booking: Booking, stadium: Stadium, cancelled_by: ActorRole, reason: Optional[str] = None
) -> list[Notification]:
    """The player hears about staff cancellations; the owner about player cancellations."""
    name = stadium.name or "the stadium"
    if cancelled_by == ActorRole.PLAYER:
        kind = NotificationType.BOOKING_CANCELLED_BY_CUSTOMER
        return [
            Notification(
                user_id=stadium.owner_id,
                type=kind,
                title="Booking Cancelled",
                body=f"A player cancelled their booking for {name} on {_when(booking)}",
                data=_data(booking, kind, reason=reason),
            )
        ]
    kind = NotificationType.BOOKING_CANCELLED_BY_OWNER
    return [
        Notification(
            user_id=booking.user_id,
            type=kind,
            title="Booking Cancelled",
            body=f"Your booking for {name} on {_when(booking)} was cancelled",
            data=_data(booking, kind, reason=reason),
        )
    ]


def dispatch(notifier: Notifier, notifications: Iterable[Notification]) -> int:
    """Send each notification, logging failures. Returns how many were sent."""
    sent = 0
    for notification in notifications:
        try:
            notifier.send(notification)
            sent += 1
        except Exception:
            logger.exception(
                "Failed to deliver %s notification to %s",
                notification.type.value, notification.user_id,
            )
    return sent
