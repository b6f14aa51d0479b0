"""Tests for booking range validation."""

from datetime import timedelta

import pytest

from stadium_booking.errors import NotFoundError, StoreError
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.scheduling.validator import BookingValidator
from stadium_booking.schemas.availability_schema import AvailabilityReason
from stadium_booking.schemas.schedule_schema import SlotState
from tests.conftest import MONDAY, STADIUM_ID, TODAY, make_booking, make_stadium


def _set_override(store, time, state):
    overrides = store.get_stadium(STADIUM_ID).date_overrides.copy()
    overrides.set_state(MONDAY, time, state)
    store.update_stadium_schedule(STADIUM_ID, date_overrides=overrides)


class TestScenarioD:
    def test_valid_before_override(self, validator):
        result = validator.validate(STADIUM_ID, MONDAY, "09:00", "11:00")
        assert result.valid
        assert result.reason == AvailabilityReason.OPEN

    def test_invalid_after_owner_block(self, store, validator):
        _set_override(store, "09:00", SlotState.UNAVAILABLE)
        result = validator.validate(STADIUM_ID, MONDAY, "09:00", "11:00")
        assert not result.valid
        assert result.reason == AvailabilityReason.OWNER_BLOCKED
        assert result.slot == "09:00"


class TestRange:
    def test_all_slots_open(self, validator):
        assert validator.validate(STADIUM_ID, MONDAY, "09:00", "12:00").valid

    def test_reports_first_blocked_slot(self, store, resolver, validator):
        store.insert_booking(make_booking(start_time="10:00", end_time="11:00"))
        result = validator.validate(STADIUM_ID, MONDAY, "09:00", "12:00")
        assert not result.valid
        assert result.slot == "10:00"
        assert result.reason == resolver.resolve(STADIUM_ID, MONDAY, "10:00").reason
        assert result.message.startswith("Time slot 10:00 unavailable")

    def test_range_past_closing_fails(self, validator):
        result = validator.validate(STADIUM_ID, MONDAY, "10:00", "13:00")
        assert not result.valid
        assert result.slot == "12:00"
        assert result.reason == AvailabilityReason.OUTSIDE_OPERATING_HOURS

    def test_booking_until_midnight(self, store):
        store.add_stadium(make_stadium(weekly_schedule={"monday": ["22:00", "23:00"]}))
        validator = BookingValidator(AvailabilityResolver(store), today=lambda: TODAY)
        assert validator.validate(STADIUM_ID, MONDAY, "22:00", "24:00").valid

    def test_revalidation_is_idempotent(self, store, validator):
        store.insert_booking(make_booking(start_time="10:00", end_time="11:00"))
        first = validator.validate(STADIUM_ID, MONDAY, "09:00", "12:00")
        second = validator.validate(STADIUM_ID, MONDAY, "09:00", "12:00")
        assert first == second


class TestInvalidRequests:
    @pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "09:00")])
    def test_end_not_after_start(self, validator, start, end):
        result = validator.validate(STADIUM_ID, MONDAY, start, end)
        assert not result.valid
        assert result.reason == AvailabilityReason.INVALID_RANGE

    def test_unparseable_time(self, validator):
        result = validator.validate(STADIUM_ID, MONDAY, "nine", "10:00")
        assert result.reason == AvailabilityReason.INVALID_RANGE

    def test_partial_slot(self, validator):
        result = validator.validate(STADIUM_ID, MONDAY, "09:00", "09:30")
        assert result.reason == AvailabilityReason.INVALID_RANGE

    def test_too_long(self, store):
        validator = BookingValidator(
            AvailabilityResolver(store), today=lambda: TODAY, max_booking_hours=2
        )
        result = validator.validate(STADIUM_ID, MONDAY, "09:00", "12:00")
        assert result.reason == AvailabilityReason.INVALID_RANGE
        assert "2 hours" in result.message

    def test_past_date(self, validator):
        result = validator.validate(STADIUM_ID, TODAY - timedelta(days=1), "09:00", "10:00")
        assert not result.valid
        assert result.reason == AvailabilityReason.PAST_DATE

    def test_today_is_not_past(self, store):
        store.add_stadium(make_stadium(weekly_schedule={"sunday": ["09:00"]}))
        validator = BookingValidator(AvailabilityResolver(store), today=lambda: TODAY)
        assert validator.validate(STADIUM_ID, TODAY, "09:00", "10:00").valid


class TestFailClosed:
    def test_unknown_stadium(self, validator):
        with pytest.raises(NotFoundError):
            validator.validate("missing", MONDAY, "09:00", "10:00")

    def test_store_failure_is_not_a_pass(self, store, validator):
        store.fail_booking_reads = True
        with pytest.raises(StoreError):
            validator.validate(STADIUM_ID, MONDAY, "09:00", "10:00")


class TestIsoDates:
    def test_validate_accepts_date_string(self, validator):
        result = validator.validate(STADIUM_ID, "2025-06-02", "09:00", "10:00")
        assert result.valid

    def test_past_date_string(self, validator):
        result = validator.validate(STADIUM_ID, "2025-05-31", "09:00", "10:00")
        assert result.reason == AvailabilityReason.PAST_DATE

    def test_malformed_date_string(self, validator):
        result = validator.validate(STADIUM_ID, "2025-13-40", "09:00", "10:00")
        assert not result.valid
        assert result.reason == AvailabilityReason.INVALID_RANGE
