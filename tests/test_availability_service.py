"""Tests for slot availability."""
from datetime import date, datetime, time

from vetclinic.services.availability_service import format_clock_label, resolve_slots
from vetclinic.services.calendar_service import clinic_zone

SUNDAY = date(2026, 10, 25)
TUESDAY = date(2026, 10, 20)


def booked(slots):
    return [slot['time'] for slot in slots if slot['booked']]


class TestResolveSlots:
    """Marking generated slots booked or free."""

    def test_sunday_with_one_booking(self):
        slots = resolve_slots(SUNDAY, [time(9, 0)])

        assert len(slots) == 16
        assert booked(slots) == ['09:00']
        assert slots[0] == {'time': '08:00', 'label': '8:00 AM', 'booked': False}

    def test_booked_slots_stay_in_the_list(self):
        slots = resolve_slots(TUESDAY, ['9:00 AM', '13:00'])

        assert len(slots) == 32
        assert booked(slots) == ['09:00', '13:00']

    def test_no_day_gives_empty_list(self):
        assert resolve_slots(None, [time(9, 0)]) == []

    def test_no_bookings_leaves_everything_free(self):
        assert booked(resolve_slots(TUESDAY, None)) == []

    def test_buffer_blocks_neighbouring_slots(self):
        slots = resolve_slots(TUESDAY, [time(9, 0)], buffer_minutes=20)

        assert booked(slots) == ['08:45', '09:00', '09:15']

    def test_gap_equal_to_buffer_is_free(self):
        slots = resolve_slots(TUESDAY, [time(9, 0)], buffer_minutes=15)

        assert booked(slots) == ['09:00']

    def test_off_grid_booking_needs_a_buffer_to_block(self):
        assert booked(resolve_slots(TUESDAY, [time(9, 10)])) == []
        assert booked(resolve_slots(TUESDAY, [time(9, 10)], buffer_minutes=15)) == ['09:00', '09:15']


class TestHelpers:
    def test_slots_up_to_now_are_taken(self):
        zone = clinic_zone('Asia/Manila')
        now = datetime(2026, 10, 20, 10, 0, tzinfo=zone)

        slots = resolve_slots(TUESDAY, [], zone=zone, now=now)

        assert booked(slots)[-1] == '10:00'
        assert len(booked(slots)) == 9

    def test_past_day_is_fully_taken(self):
        zone = clinic_zone('Asia/Manila')
        now = datetime(2026, 10, 26, 8, 0, tzinfo=zone)

        assert all(slot['booked'] for slot in resolve_slots(SUNDAY, [], zone=zone, now=now))

    def test_clock_labels(self):
        assert format_clock_label(time(0, 5)) == '12:05 AM'
        assert format_clock_label(time(12, 0)) == '12:00 PM'
        assert format_clock_label(time(16, 45)) == '4:45 PM'
