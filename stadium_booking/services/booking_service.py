"""
Booking service: create, confirm and cancel bookings.

Creation is validate-then-insert. The validator reserves nothing, so two
concurrent requests can both pass; the store's insert constraint decides
and the loser gets ``SlotTakenConcurrentlyError``, which is re-raised to
the caller untouched (re-validate and tell the user, never auto-retry).
"""

import logging
import uuid
from datetime import date
from typing import Optional, Union

from stadium_booking.errors import NotFoundError, SlotTakenConcurrentlyError
from stadium_booking.logging_context import request_context
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.scheduling.state_machine import (
    INITIAL_STATUS,
    BookingAction,
    BookingStateMachine,
)
from stadium_booking.scheduling.validator import BookingValidator
from stadium_booking.schemas.booking_schema import (
    Actor,
    Booking,
    BookingResult,
    BookingStats,
    BookingStatus,
    PaymentStatus,
)
from stadium_booking.schemas.stadium_schema import Stadium
from stadium_booking.services import notifications
from stadium_booking.services.notifications import LoggingNotifier, Notifier
from stadium_booking.store.base import RecordStore
from stadium_booking.utils import normalize_time_label, parse_iso_date, to_minutes

logger = logging.getLogger(__name__)


def make_booking_id() -> str:
    return str(uuid.uuid4())


class BookingService:
    """Booking lifecycle operations on top of a ``RecordStore``."""

    def __init__(
        self,
        store: RecordStore,
        validator: Optional[BookingValidator] = None,
        notifier: Optional[Notifier] = None,
        state_machine: Optional[BookingStateMachine] = None,
    ) -> None:
        self._store = store
        self._validator = validator or BookingValidator(AvailabilityResolver(store))
        self._notifier = notifier or LoggingNotifier()
        self._sm = state_machine or BookingStateMachine()

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    def create_booking(
        self,
        stadium_id: str,
        user_id: str,
        day: Union[date, str],
        start_time: str,
        end_time: str,
        notes: Optional[str] = None,
    ) -> BookingResult:
        """Validate the requested range and insert a pending booking.

        The booking id is allocated up front and used as the request id for
        every log record of the attempt, rejected or not.

        Raises:
            NotFoundError: If the stadium does not exist.
            SlotTakenConcurrentlyError: If another booking landed first.
            StoreError: On any other store fault.
        """
        booking_id = make_booking_id()
        with request_context(booking_id):
            return self._create(booking_id, stadium_id, user_id, day, start_time, end_time, notes)

    def _create(
        self,
        booking_id: str,
        stadium_id: str,
        user_id: str,
        day: Union[date, str],
        start_time: str,
        end_time: str,
        notes: Optional[str],
    ) -> BookingResult:
        stadium = self._store.get_stadium(stadium_id)
        validation = self._validator.validate(stadium_id, day, start_time, end_time)
        if not validation.valid:
            return BookingResult(success=False, message=validation.message, validation=validation)

        day = parse_iso_date(day)
        start, end = normalize_time_label(start_time), normalize_time_label(end_time)
        hours = (to_minutes(end) - to_minutes(start)) / 60
        booking = Booking(
            id=booking_id,
            stadium_id=stadium_id,
            user_id=user_id,
            date=day,
            start_time=start,
            end_time=end,
            status=INITIAL_STATUS,
            payment_status=PaymentStatus.UNPAID,
            total_price=stadium.price_per_hour * hours,
            notes=notes,
        )

        try:
            created = self._store.insert_booking(booking)
        except SlotTakenConcurrentlyError:
            logger.warning(
                "Slot taken concurrently for stadium %s on %s %s-%s",
                stadium_id, day.isoformat(), start, end,
            )
            raise

        logger.info(
            "Booking created for user %s at stadium %s on %s %s-%s",
            user_id, stadium_id, day.isoformat(), start, end,
        )
        notifications.dispatch(self._notifier, notifications.booking_created(created, stadium))
        return BookingResult(
            success=True,
            message=f"Booking request sent for {day.isoformat()} {start}-{end}.",
            booking=created,
            validation=validation,
        )

    # ------------------------------------------------------------------ #
    # Status transitions
    # ------------------------------------------------------------------ #

    def confirm_booking(self, booking_id: str, actor: Actor) -> Booking:
        """Move a pending booking to confirmed (stadium owner or admin)."""
        with request_context(booking_id):
            booking, stadium = self._load(booking_id)
            new_status = self._sm.transition(
                booking, BookingAction.CONFIRM, actor, stadium.owner_id if stadium else ""
            )
            updated = self._store.update_booking_status(
                booking_id, new_status, expected_status=booking.status
            )
            logger.info("Booking confirmed by %s %s", actor.role.value, actor.id)
            if stadium is not None:
                notifications.dispatch(
                    self._notifier, notifications.booking_confirmed(updated, stadium)
                )
            return updated

    def cancel_booking(self, booking_id: str, actor: Actor, reason: Optional[str] = None) -> Booking:
        """Cancel a pending or confirmed booking (owner, admin or the booking's player).

        The write only lands if the booking still has the status the
        transition was checked against; otherwise ``InvalidTransitionError``.
        """
        with request_context(booking_id):
            booking, stadium = self._load(booking_id)
            new_status = self._sm.transition(
                booking, BookingAction.CANCEL, actor, stadium.owner_id if stadium else ""
            )
            note = f"Cancelled by {actor.role.value}"
            if reason:
                note = f"{note}: {reason}"
            updated = self._store.update_booking_status(
                booking_id,
                new_status,
                notes=note,
                cancelled_by=actor.role,
                expected_status=booking.status,
            )
            logger.info("Booking cancelled by %s %s", actor.role.value, actor.id)
            if stadium is not None:
                notifications.dispatch(
                    self._notifier,
                    notifications.booking_cancelled(updated, stadium, actor.role, reason),
                )
            return updated

    def _load(self, booking_id: str) -> tuple[Booking, Optional[Stadium]]:
        booking = self._store.get_booking(booking_id)
        try:
            stadium: Optional[Stadium] = self._store.get_stadium(booking.stadium_id)
        except NotFoundError:
            # Stadium deleted; its historical bookings can still be cancelled.
            logger.warning("Booking %s refers to missing stadium %s", booking_id, booking.stadium_id)
            stadium = None
        return booking, stadium

    # ------------------------------------------------------------------ #
    # Owner views
    # ------------------------------------------------------------------ #

    def list_owner_bookings(
        self,
        owner_id: str,
        status: Optional[BookingStatus] = None,
        stadium_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Booking]:
        """All bookings across an owner's stadiums, newest first."""
        found: list[Booking] = []
        for stadium in self._store.list_stadiums(owner_id):
            if stadium_id is not None and stadium.id != stadium_id:
                continue
            statuses = [status] if status is not None else None
            for booking in self._store.list_bookings(stadium.id, status_in=statuses):
                if date_from is not None and booking.date < date_from:
                    continue
                if date_to is not None and booking.date > date_to:
                    continue
                found.append(booking)
        return sorted(found, key=lambda b: b.created_at, reverse=True)

    def get_owner_stats(self, owner_id: str) -> BookingStats:
        """Counts per status plus confirmed and pending revenue."""
        stats = BookingStats()
        for booking in self.list_owner_bookings(owner_id):
            stats.total += 1
            if booking.status == BookingStatus.PENDING:
                stats.pending += 1
                stats.pending_revenue += booking.total_price
            elif booking.status == BookingStatus.CONFIRMED:
                stats.confirmed += 1
                stats.total_revenue += booking.total_price
            else:
                stats.cancelled += 1
        return stats
