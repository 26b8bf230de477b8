"""Tests for the slot calculator."""

from datetime import date, timedelta

import pytest

from barber_booking.schemas.booking_schema import BookingStatus, Period
from barber_booking.scheduling.availability import (
    get_available_dates,
    list_day_slots,
    list_slots,
    next_available,
    round_up_to_step,
)
from barber_booking.scheduling.conflicts import is_available

from tests.conftest import MONDAY, SATURDAY, SUNDAY, TUESDAY, at, make_booking, make_service


def _times(slots):
    return [f"{s:%H:%M}" for s in slots]


class TestRoundUpToStep:
    def test_rounds_up(self):
        assert round_up_to_step(at(*MONDAY, 10, 47)) == at(*MONDAY, 11, 0)

    def test_on_the_mark_unchanged(self):
        assert round_up_to_step(at(*MONDAY, 10, 30)) == at(*MONDAY, 10, 30)

    def test_seconds_dropped(self):
        assert round_up_to_step(at(*MONDAY, 10, 30, 59)) == at(*MONDAY, 10, 30)

    def test_first_half_hour(self):
        assert round_up_to_step(at(*MONDAY, 10, 1)) == at(*MONDAY, 10, 30)

    def test_rolls_over_midnight(self):
        assert round_up_to_step(at(*MONDAY, 23, 45)) == at(*TUESDAY, 0, 0)


class TestListSlotsCalendar:
    @pytest.mark.parametrize("period", [Period.MORNING, Period.AFTERNOON])
    def test_sunday_empty(self, haircut, staff, period):
        assert list_slots(date(*SUNDAY), haircut, staff, period, [], at(2026, 10, 17)) == []

    def test_full_morning(self, haircut, staff, now):
        slots = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now)
        assert _times(slots) == [
            "08:00", "08:30", "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
        ]

    def test_extended_afternoon_runs_to_eight(self, haircut, staff, now):
        slots = list_slots(date(*MONDAY), haircut, staff, Period.AFTERNOON, [], now)
        assert _times(slots)[0] == "14:00"
        assert _times(slots)[-1] == "20:00"
        assert len(slots) == 13

    def test_regular_afternoon_45_minutes(self, staff, now):
        slots = list_slots(date(*TUESDAY), make_service(45), staff, Period.AFTERNOON, [], now)
        times = _times(slots)
        assert times[-1] == "17:00"
        assert "17:30" not in times
        assert all(slot + timedelta(minutes=45) <= at(*TUESDAY, 18) for slot in slots)

    @pytest.mark.parametrize("minutes", [75, 90])
    def test_saturday_afternoon_long_service(self, staff, now, minutes):
        slots = list_slots(date(*SATURDAY), make_service(minutes), staff, Period.AFTERNOON, [], now)
        times = _times(slots)
        assert times[-1] == "19:00"
        assert "19:30" not in times

    def test_morning_never_offers_afternoon(self, haircut, staff, now):
        slots = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now)
        assert all(s.hour < 12 for s in slots)

    def test_service_too_long_for_period(self, staff, now):
        assert list_slots(date(*MONDAY), make_service(300), staff, Period.MORNING, [], now) == []


class TestListSlotsSameDay:
    def test_now_rounds_up_to_next_half_hour(self, haircut, staff):
        now = at(*MONDAY, 10, 47)
        slots = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now)
        assert _times(slots) == ["11:00", "11:30"]

    def test_now_on_the_mark_skips_current_slot(self, haircut, staff):
        now = at(*MONDAY, 10, 30)
        slots = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now)
        assert _times(slots) == ["11:00", "11:30"]

    def test_before_opening_keeps_full_period(self, haircut, staff):
        now = at(*MONDAY, 7, 10)
        slots = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now)
        assert _times(slots)[0] == "08:00"

    def test_after_period_closed(self, haircut, staff):
        now = at(*MONDAY, 11, 47)
        assert list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now) == []

    def test_afternoon_unaffected_by_morning_now(self, haircut, staff):
        now = at(*MONDAY, 10, 47)
        slots = list_slots(date(*MONDAY), haircut, staff, Period.AFTERNOON, [], now)
        assert _times(slots)[0] == "14:00"

    def test_past_day_empty(self, haircut, staff):
        now = at(*TUESDAY, 9)
        assert list_slots(date(*MONDAY), haircut, staff, Period.AFTERNOON, [], now) == []

    def test_result_shrinks_as_time_passes(self, haircut, staff):
        early = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], at(*MONDAY, 9, 10))
        later = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], at(*MONDAY, 9, 40))
        assert len(later) < len(early)
        assert set(later) <= set(early)


class TestListSlotsBookings:
    def test_booked_slot_omitted(self, haircut, staff, now):
        existing = [make_booking(at(*MONDAY, 10))]
        times = _times(list_slots(date(*MONDAY), haircut, staff, Period.MORNING, existing, now))
        assert "10:00" not in times
        assert "09:30" in times and "10:30" in times

    def test_hour_service_avoids_leading_slot(self, staff, now):
        existing = [make_booking(at(*MONDAY, 10))]
        times = _times(list_slots(date(*MONDAY), make_service(60), staff, Period.MORNING, existing, now))
        assert "09:30" not in times
        assert "10:00" not in times
        assert "09:00" in times and "10:30" in times

    def test_cancelled_booking_not_blocking(self, haircut, staff, now):
        existing = [make_booking(at(*MONDAY, 10), status=BookingStatus.CANCELLED)]
        times = _times(list_slots(date(*MONDAY), haircut, staff, Period.MORNING, existing, now))
        assert "10:00" in times

    def test_other_staff_not_blocking(self, haircut, staff, now):
        existing = [make_booking(at(*MONDAY, 10), staff_id="rafael")]
        times = _times(list_slots(date(*MONDAY), haircut, staff, Period.MORNING, existing, now))
        assert "10:00" in times

    def test_sorted_and_consistent_with_detector(self, staff, now):
        service = make_service(45)
        existing = [
            make_booking(at(*MONDAY, 14), minutes=75, booking_id="A"),
            make_booking(at(*MONDAY, 17, 15), minutes=30, booking_id="B"),
            make_booking(at(*MONDAY, 19), minutes=60, booking_id="C"),
        ]
        slots = list_slots(date(*MONDAY), service, staff, Period.AFTERNOON, existing, now)
        assert slots == sorted(slots)
        assert slots
        for slot in slots:
            assert is_available(slot, service, staff, Period.AFTERNOON, existing, now)

    def test_idempotent_for_fixed_now(self, haircut, staff, now):
        existing = [make_booking(at(*MONDAY, 10))]
        first = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, existing, now)
        second = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, existing, now)
        assert first == second

    def test_slots_are_independent_values(self, haircut, staff, now):
        slots = list_slots(date(*MONDAY), haircut, staff, Period.MORNING, [], now)
        assert len(set(slots)) == len(slots)


class TestMissingSelection:
    def test_no_service(self, staff, now):
        assert list_slots(date(*MONDAY), None, staff, Period.MORNING, [], now) == []

    def test_no_staff(self, haircut, now):
        assert list_slots(date(*MONDAY), haircut, None, Period.MORNING, [], now) == []


class TestUpcomingDates:
    def test_day_slots_cover_both_periods(self, haircut, staff, now):
        per_period = list_day_slots(date(*TUESDAY), haircut, staff, [], now)
        assert len(per_period[Period.MORNING]) == 8
        assert len(per_period[Period.AFTERNOON]) == 8

    def test_available_dates_skip_sunday(self, haircut, staff, now):
        dates = get_available_dates(haircut, staff, [], now, days=7, limit=3)
        assert [d["date"] for d in dates] == ["2026-10-19", "2026-10-20", "2026-10-21"]
        assert dates[0]["slot_count"] == 21
        assert dates[1]["slot_count"] == 16
        assert dates[0]["day_name"] == "Monday"

    def test_next_available(self, haircut, staff, now):
        assert next_available(haircut, staff, [], now, days=7) == at(*MONDAY, 8)

    def test_next_available_skips_full_morning(self, staff, now):
        existing = [make_booking(at(*MONDAY, 8), minutes=240)]
        assert next_available(make_service(30), staff, existing, now, days=7) == at(*MONDAY, 14)

    def test_next_available_none_when_nothing_fits(self, staff, now):
        assert next_available(make_service(600), staff, [], now, days=7) is None

    def test_zero_day_horizon_is_empty(self, haircut, staff, now):
        assert get_available_dates(haircut, staff, [], now, days=0) == []
        assert next_available(haircut, staff, [], now, days=0) is None
