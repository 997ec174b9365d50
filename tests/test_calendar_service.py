"""Tests for the business-hours calendar."""
from datetime import date, datetime, time, timedelta

import pytest

from vetclinic.services.calendar_service import (
    clinic_zone, combine, generate_slots, is_on_grid, parse_clock, week_bounds,
)

MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 25)


def week():
    return [MONDAY + timedelta(days=offset) for offset in range(7)]


class TestGenerateSlots:
    """Slot grid per weekday."""

    def test_sunday_is_a_half_day(self):
        slots = generate_slots(SUNDAY)

        assert SUNDAY.weekday() == 6
        assert slots[0] == time(8, 0)
        assert slots[-1] == time(11, 45)
        assert len(slots) == 16
        assert all(slot < time(12, 0) for slot in slots)

    def test_weekdays_skip_the_lunch_hour(self):
        for day in week()[:6]:
            slots = generate_slots(day)

            assert slots[0] == time(8, 0)
            assert slots[-1] == time(16, 45)
            assert len(slots) == 32
            assert not [slot for slot in slots if time(12, 0) <= slot < time(13, 0)]
            assert time(13, 0) in slots

    def test_slots_are_strictly_increasing_on_the_grid(self):
        for day in week():
            slots = generate_slots(day)
            minutes = [slot.hour * 60 + slot.minute for slot in slots]

            assert minutes == sorted(set(minutes))
            assert all(m % 15 == 0 for m in minutes)

    def test_same_day_gives_same_slots(self):
        assert generate_slots(MONDAY) == generate_slots(MONDAY)

    def test_no_day_means_no_slots(self):
        assert generate_slots(None) == []

    def test_datetime_input_uses_its_date(self):
        assert generate_slots(datetime(2026, 10, 25, 15, 30)) == generate_slots(SUNDAY)

    def test_custom_policy(self):
        slots = generate_slots(MONDAY, hours={0: ('09:00', '11:00')}, lunch_break=None, slot_minutes=30)

        assert slots == [time(9, 0), time(9, 30), time(10, 0), time(10, 30)]

    def test_closed_day_has_no_slots(self):
        assert generate_slots(SUNDAY, hours={0: ('08:00', '17:00')}) == []

    def test_invalid_slot_length_raises(self):
        with pytest.raises(ValueError):
            generate_slots(MONDAY, slot_minutes=0)


class TestParseClock:
    @pytest.mark.parametrize('value, expected', [
        ('09:00', time(9, 0)),
        ('13:15', time(13, 15)),
        ('13:15:00', time(13, 15)),
        ('9:00 AM', time(9, 0)),
        ('1:15 pm', time(13, 15)),
        (time(10, 30, 12), time(10, 30)),
    ])
    def test_accepted_formats(self, value, expected):
        assert parse_clock(value) == expected

    @pytest.mark.parametrize('value', ['', 'noon', '25:00', None])
    def test_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_clock(value)


class TestCombine:
    def test_uses_only_hour_and_minute(self):
        zone = clinic_zone('Asia/Manila')
        placeholder = datetime(1970, 1, 1, 9, 30)

        instant = combine(MONDAY, placeholder, zone)

        assert instant == datetime(2026, 10, 19, 9, 30, tzinfo=zone)
        assert instant.utcoffset() == timedelta(hours=8)

    def test_unknown_zone_raises(self):
        with pytest.raises(ValueError):
            clinic_zone('Mars/Olympus_Mons')


class TestGrid:
    def test_lunch_and_off_grid_times_are_not_bookable(self):
        assert is_on_grid(MONDAY, '09:00')
        assert not is_on_grid(MONDAY, '12:15')
        assert not is_on_grid(MONDAY, '09:10')
        assert not is_on_grid(MONDAY, '17:00')
        assert not is_on_grid(SUNDAY, '12:15')

    def test_week_runs_sunday_to_saturday(self):
        start, end = week_bounds(date(2026, 10, 21))

        assert start == date(2026, 10, 18)
        assert end == date(2026, 10, 24)
        assert week_bounds(SUNDAY)[0] == SUNDAY
