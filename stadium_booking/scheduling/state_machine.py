"""
Finite state machine for the booking lifecycle.

    create()  -> pending
    confirm() :  pending            -> confirmed  (owner, admin)
    cancel()  :  pending|confirmed  -> cancelled  (owner, admin, booking's player)

``cancelled`` is terminal. Every transition must be explicitly listed;
anything else is rejected with ``InvalidTransitionError``.

Usage:
    sm = BookingStateMachine()
    new_status = sm.transition(booking, BookingAction.CONFIRM, actor, stadium.owner_id)
"""

import logging
from dataclasses import dataclass
from enum import Enum

from stadium_booking.errors import InvalidTransitionError, PermissionDeniedError
from stadium_booking.schemas.booking_schema import Actor, ActorRole, Booking, BookingStatus

logger = logging.getLogger(__name__)

INITIAL_STATUS = BookingStatus.PENDING


class BookingAction(str, Enum):
    """Events that change a booking's status."""

    CONFIRM = "confirm"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Transition:
    """A single valid status transition and who may trigger it."""

    from_status: BookingStatus
    to_status: BookingStatus
    action: BookingAction
    allowed_roles: frozenset[ActorRole]


_STAFF = frozenset({ActorRole.OWNER, ActorRole.ADMIN})
_ANYONE = frozenset({ActorRole.OWNER, ActorRole.ADMIN, ActorRole.PLAYER})


class BookingStateMachine:
    """Validates booking status transitions and the actor performing them."""

    TRANSITIONS: list[Transition] = [
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED,
                   BookingAction.CONFIRM, _STAFF),
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED,
                   BookingAction.CANCEL, _ANYONE),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED,
                   BookingAction.CANCEL, _ANYONE),
    ]

    def transition(
        self, booking: Booking, action: BookingAction, actor: Actor, stadium_owner_id: str
    ) -> BookingStatus:
        """
        Compute the status ``action`` moves ``booking`` to.

        Args:
            booking: Current booking record.
            action: Requested action.
            actor: Account requesting it.
            stadium_owner_id: Owner of the booked stadium.

        Returns:
            The new booking status.

        Raises:
            InvalidTransitionError: If no transition exists from the current status.
            PermissionDeniedError: If the actor may not perform the action.
        """
        for t in self.TRANSITIONS:
            if t.from_status != booking.status or t.action != action:
                continue
            if actor.role not in t.allowed_roles or not self._is_party(booking, actor, stadium_owner_id):
                raise PermissionDeniedError(
                    f"{actor.role.value} '{actor.id}' may not {action.value} booking '{booking.id}'"
                )
            logger.debug(
                "Booking %s: %s -> %s (action: %s, by %s)",
                booking.id, booking.status.value, t.to_status.value, action.value, actor.role.value,
            )
            return t.to_status

        valid = [a.value for a in self.get_valid_actions(booking.status)]
        raise InvalidTransitionError(
            f"No valid transition from '{booking.status.value}' "
            f"with action '{action.value}'. Valid actions: {valid}"
        )

    @staticmethod
    def _is_party(booking: Booking, actor: Actor, stadium_owner_id: str) -> bool:
        if actor.role == ActorRole.ADMIN:
            return True
        if actor.role == ActorRole.OWNER:
            return actor.id == stadium_owner_id
        return actor.id == booking.user_id

    def get_valid_actions(self, status: BookingStatus) -> list[BookingAction]:
        """Return all actions valid from ``status``."""
        return [t.action for t in self.TRANSITIONS if t.from_status == status]

    def is_terminal(self, status: BookingStatus) -> bool:
        return not self.get_valid_actions(status)
