"""Tests for the availability resolver's precedence rules."""

import pytest

from stadium_booking.errors import NotFoundError, StoreError
from stadium_booking.scheduling.resolver import AvailabilityResolver
from stadium_booking.schemas.availability_schema import AvailabilityReason
from stadium_booking.schemas.booking_schema import BookingStatus
from stadium_booking.schemas.schedule_schema import SlotState
from tests.conftest import MONDAY, STADIUM_ID, TUESDAY, make_booking, make_stadium


def _block(store, day, time, state=SlotState.UNAVAILABLE):
    stadium = store.get_stadium(STADIUM_ID)
    overrides = stadium.date_overrides.copy()
    overrides.set_state(day, time, state)
    store.update_stadium_schedule(STADIUM_ID, date_overrides=overrides)


class TestScenarios:
    def test_scenario_a_open_slot(self, resolver):
        result = resolver.resolve(STADIUM_ID, MONDAY, "09:00")
        assert result.available
        assert result.reason == AvailabilityReason.OPEN

    def test_scenario_a_outside_hours(self, resolver):
        result = resolver.resolve(STADIUM_ID, MONDAY, "08:00")
        assert not result.available
        assert result.reason == AvailabilityReason.OUTSIDE_OPERATING_HOURS

    def test_scenario_b_owner_blocked(self, store, resolver):
        _block(store, MONDAY, "09:00")
        result = resolver.resolve(STADIUM_ID, MONDAY, "09:00")
        assert not result.available
        assert result.reason == AvailabilityReason.OWNER_BLOCKED

    def test_scenario_c_booked_then_cancelled(self, store, resolver):
        store.insert_booking(make_booking(start_time="10:00", end_time="11:00"))
        blocked = resolver.resolve(STADIUM_ID, MONDAY, "10:00")
        assert blocked.reason == AvailabilityReason.ALREADY_BOOKED

        store.update_booking_status("booking-1", BookingStatus.CANCELLED)
        reopened = resolver.resolve(STADIUM_ID, MONDAY, "10:00")
        assert reopened.available
        assert reopened.reason == AvailabilityReason.OPEN


class TestPrecedence:
    def test_owner_block_beats_booking(self, store, resolver):
        store.insert_booking(make_booking(start_time="09:00", end_time="10:00"))
        _block(store, MONDAY, "09:00")
        assert resolver.resolve(STADIUM_ID, MONDAY, "09:00").reason == AvailabilityReason.OWNER_BLOCKED

    def test_owner_block_outside_weekly_hours(self, store, resolver):
        _block(store, MONDAY, "15:00")
        assert resolver.resolve(STADIUM_ID, MONDAY, "15:00").reason == AvailabilityReason.OWNER_BLOCKED

    def test_dual_membership_from_storage_is_blocked(self, store):
        store.add_stadium(
            make_stadium(
                date_overrides={"2025-06-02": {"available": ["09:00"], "unavailable": ["09:00"]}}
            )
        )
        result = AvailabilityResolver(store).resolve(STADIUM_ID, MONDAY, "09:00")
        assert result.reason == AvailabilityReason.OWNER_BLOCKED

    def test_override_available_opens_closed_hour(self, store, resolver):
        _block(store, MONDAY, "15:00", SlotState.AVAILABLE)
        result = resolver.resolve(STADIUM_ID, MONDAY, "15:00")
        assert result.available

    def test_override_available_still_checks_bookings(self, store, resolver):
        _block(store, MONDAY, "15:00", SlotState.AVAILABLE)
        store.insert_booking(make_booking(start_time="14:00", end_time="16:00"))
        assert resolver.resolve(STADIUM_ID, MONDAY, "15:00").reason == AvailabilityReason.ALREADY_BOOKED

    def test_override_for_other_time_falls_back_to_weekly(self, store, resolver):
        _block(store, MONDAY, "09:00")
        assert resolver.resolve(STADIUM_ID, MONDAY, "10:00").available
        assert (
            resolver.resolve(STADIUM_ID, MONDAY, "08:00").reason
            == AvailabilityReason.OUTSIDE_OPERATING_HOURS
        )

    def test_no_override_matches_weekly_and_bookings(self, store, resolver):
        store.insert_booking(make_booking(start_time="11:00", end_time="12:00"))
        for time in ["08:00", "09:00", "10:00", "11:00", "12:00"]:
            expected = time in {"09:00", "10:00"}
            assert resolver.resolve(STADIUM_ID, MONDAY, time).available is expected

    def test_closed_weekday(self, resolver):
        result = resolver.resolve(STADIUM_ID, TUESDAY, "09:00")
        assert result.reason == AvailabilityReason.OUTSIDE_OPERATING_HOURS


class TestInactiveStadium:
    def test_every_slot_unavailable(self, store):
        store.add_stadium(
            make_stadium(
                is_active=False,
                date_overrides={"2025-06-02": {"available": ["15:00"]}},
            )
        )
        resolver = AvailabilityResolver(store)
        for day in (MONDAY, TUESDAY):
            for slot in resolver.get_available_slots(STADIUM_ID, day):
                assert not slot.available
                assert slot.reason == AvailabilityReason.STADIUM_INACTIVE


class TestAvailableSlots:
    def test_covers_canonical_grid(self, resolver):
        slots = resolver.get_available_slots(STADIUM_ID, MONDAY)
        assert [s.time for s in slots][0] == "06:00"
        assert len(slots) == 18
        assert [s.time for s in slots if s.available] == ["09:00", "10:00", "11:00"]

    def test_multi_hour_booking_excludes_every_covered_slot(self, store, resolver):
        store.insert_booking(make_booking(start_time="09:00", end_time="11:00"))
        open_times = [s.time for s in resolver.get_available_slots(STADIUM_ID, MONDAY) if s.available]
        assert open_times == ["11:00"]

    def test_message_is_human_readable(self, store, resolver):
        store.insert_booking(make_booking(start_time="09:00", end_time="10:00"))
        assert resolver.resolve(STADIUM_ID, MONDAY, "09:00").message == "Time slot already booked"


class TestFailClosed:
    def test_unknown_stadium_raises(self, resolver):
        with pytest.raises(NotFoundError):
            resolver.resolve("missing", MONDAY, "09:00")

    def test_booking_read_failure_propagates(self, store, resolver):
        store.fail_booking_reads = True
        with pytest.raises(StoreError):
            resolver.resolve(STADIUM_ID, MONDAY, "09:00")

    def test_closed_slot_needs_no_booking_read(self, store, resolver):
        store.fail_booking_reads = True
        result = resolver.resolve(STADIUM_ID, MONDAY, "08:00")
        assert result.reason == AvailabilityReason.OUTSIDE_OPERATING_HOURS


class TestIsoDates:
    def test_resolve_accepts_date_string(self, resolver):
        assert resolver.resolve(STADIUM_ID, "2025-06-02", "09:00") == resolver.resolve(STADIUM_ID, MONDAY, "09:00")

    def test_available_slots_accepts_date_string(self, resolver):
        open_times = [s.time for s in resolver.get_available_slots(STADIUM_ID, "2025-06-02") if s.available]
        assert open_times == ["09:00", "10:00", "11:00"]

    def test_malformed_date_string(self, resolver):
        with pytest.raises(ValueError, match="Invalid ISO date"):
            resolver.resolve(STADIUM_ID, "June 2nd", "09:00")
