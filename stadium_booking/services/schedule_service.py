"""
Schedule management for stadium owners.

Edits the weekly schedule and per-date overrides. Only the owning
account may change a stadium's schedule. Bulk edits over a date range
are written one date at a time and are not transactional: a failure on
one date is recorded and the remaining dates are still attempted.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Mapping, Union

from stadium_booking.config import settings
from stadium_booking.errors import PermissionDeniedError, StoreError
from stadium_booking.schemas.availability_schema import AvailabilityInfo
from stadium_booking.schemas.booking_schema import Actor, ActorRole
from stadium_booking.schemas.schedule_schema import SlotState, WeeklySchedule, Weekday
from stadium_booking.schemas.stadium_schema import Stadium
from stadium_booking.store.base import RecordStore
from stadium_booking.utils import (
    canonical_time_labels,
    iter_dates,
    normalize_time_label,
    parse_iso_date,
)

logger = logging.getLogger(__name__)


class BulkOperation(str, Enum):
    """Whole-day edits applied to every date of a range."""

    MARK_AVAILABLE = "available"
    MARK_UNAVAILABLE = "unavailable"
    RESET = "reset"


@dataclass
class BulkUpdateResult:
    """Per-date outcome of a bulk edit."""

    updated: list[date] = field(default_factory=list)
    failed: dict[date, str] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failed


def _check_grid(times: Iterable[str]) -> list[str]:
    grid = set(canonical_time_labels())
    labels = [normalize_time_label(t) for t in times]
    off_grid = sorted(set(labels) - grid)
    if off_grid:
        raise ValueError(f"Times not on the slot grid: {', '.join(off_grid)}")
    return labels


class ScheduleService:
    """Owner-facing edits of weekly schedules and date overrides."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def _owned_stadium(self, stadium_id: str, actor: Actor) -> Stadium:
        stadium = self._store.get_stadium(stadium_id)
        if actor.role != ActorRole.OWNER or actor.id != stadium.owner_id:
            raise PermissionDeniedError(
                f"{actor.role.value} '{actor.id}' does not own stadium '{stadium_id}'"
            )
        return stadium

    # ------------------------------------------------------------------ #
    # Weekly schedule
    # ------------------------------------------------------------------ #

    def update_weekly_schedule(
        self,
        stadium_id: str,
        actor: Actor,
        schedule: Union[WeeklySchedule, Mapping[Union[Weekday, str, int], Iterable[str]]],
    ) -> Stadium:
        """Replace the whole weekly schedule."""
        self._owned_stadium(stadium_id, actor)
        if not isinstance(schedule, WeeklySchedule):
            schedule = WeeklySchedule.from_storage(schedule)
        for weekday in Weekday:
            _check_grid(schedule.slots_for(weekday))
        updated = self._store.update_stadium_schedule(stadium_id, weekly_schedule=schedule)
        logger.info("Weekly schedule updated for stadium %s", stadium_id)
        return updated

    def set_day_schedule(
        self, stadium_id: str, actor: Actor, weekday: Union[Weekday, str, int], times: Iterable[str]
    ) -> Stadium:
        """Replace the slots of one weekday."""
        stadium = self._owned_stadium(stadium_id, actor)
        schedule = stadium.weekly_schedule.copy()
        schedule.set_day(Weekday.parse(weekday), _check_grid(times))
        return self._store.update_stadium_schedule(stadium_id, weekly_schedule=schedule)

    # ------------------------------------------------------------------ #
    # Date overrides
    # ------------------------------------------------------------------ #

    def set_slot_state(
        self, stadium_id: str, actor: Actor, day: Union[date, str], time: str, state: SlotState
    ) -> Stadium:
        day = parse_iso_date(day)
        stadium = self._owned_stadium(stadium_id, actor)
        (label,) = _check_grid([time])
        overrides = stadium.date_overrides.copy()
        overrides.set_state(day, label, state)
        return self._store.update_stadium_schedule(stadium_id, date_overrides=overrides)

    def cycle_slot(
        self, stadium_id: str, actor: Actor, day: Union[date, str], time: str
    ) -> SlotState:
        """Advance one slot: default -> available -> unavailable -> default."""
        day = parse_iso_date(day)
        stadium = self._owned_stadium(stadium_id, actor)
        (label,) = _check_grid([time])
        overrides = stadium.date_overrides.copy()
        new_state = overrides.cycle(day, label)
        self._store.update_stadium_schedule(stadium_id, date_overrides=overrides)
        logger.debug("Stadium %s %s %s -> %s", stadium_id, day.isoformat(), label, new_state.value)
        return new_state

    def apply_bulk(
        self,
        stadium_id: str,
        actor: Actor,
        start: Union[date, str],
        end: Union[date, str],
        operation: BulkOperation,
    ) -> BulkUpdateResult:
        """Apply ``operation`` to every date in ``[start, end]``, one write per date.

        Best effort: callers should inspect ``failed`` and re-verify.
        """
        start, end = parse_iso_date(start), parse_iso_date(end)
        if end < start:
            raise ValueError(f"Range end {end.isoformat()} is before start {start.isoformat()}")
        span = (end - start).days + 1
        if span > settings.booking.max_bulk_days:
            raise ValueError(
                f"Bulk edits are limited to {settings.booking.max_bulk_days} days, got {span}"
            )
        self._owned_stadium(stadium_id, actor)

        result = BulkUpdateResult()
        labels = canonical_time_labels()
        for day in iter_dates(start, end):
            try:
                overrides = self._store.get_stadium(stadium_id).date_overrides.copy()
                if operation == BulkOperation.RESET:
                    overrides.clear_day(day)
                elif operation == BulkOperation.MARK_AVAILABLE:
                    overrides.set_day(day, labels, SlotState.AVAILABLE)
                else:
                    overrides.set_day(day, labels, SlotState.UNAVAILABLE)
                self._store.update_stadium_schedule(stadium_id, date_overrides=overrides)
                result.updated.append(day)
            except StoreError as exc:
                logger.warning(
                    "Bulk %s failed for stadium %s on %s: %s",
                    operation.value, stadium_id, day.isoformat(), exc,
                )
                result.failed[day] = str(exc)

        logger.info(
            "Bulk %s for stadium %s: %d updated, %d failed",
            operation.value, stadium_id, len(result.updated), len(result.failed),
        )
        return result

    # ------------------------------------------------------------------ #
    # Display
    # ------------------------------------------------------------------ #

    def get_availability_info(self, stadium_id: str) -> AvailabilityInfo:
        stadium = self._store.get_stadium(stadium_id)
        return AvailabilityInfo(
            name=stadium.name,
            is_active=stadium.is_active,
            operating_hours=stadium.weekly_schedule.operating_hours(),
            has_date_specific_rules=len(stadium.date_overrides) > 0,
        )
