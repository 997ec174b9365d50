# Business-hours calendar: which time slots exist on a given day
from datetime import date, datetime, time, timedelta

from dateutil import tz

SUNDAY = 6

DEFAULT_BUSINESS_HOURS = {
    0: ('08:00', '17:00'),
    1: ('08:00', '17:00'),
    2: ('08:00', '17:00'),
    3: ('08:00', '17:00'),
    4: ('08:00', '17:00'),
    5: ('08:00', '17:00'),
    SUNDAY: ('08:00', '12:00'),
}
DEFAULT_LUNCH_BREAK = ('12:00', '13:00')
DEFAULT_SLOT_MINUTES = 15
DEFAULT_TIMEZONE = 'Asia/Manila'


def parse_clock(value):
    """Accept a ``time``, ``'HH:MM'``, ``'HH:MM:SS'`` or ``'h:MM AM'`` string."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if isinstance(value, datetime):
        return value.time().replace(second=0, microsecond=0)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'Invalid time: {value!r}')
    text = value.strip().upper()
    for fmt in ('%H:%M', '%H:%M:%S', '%I:%M %p', '%I:%M%p'):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f'Invalid time: {value!r}')


def clinic_zone(name=DEFAULT_TIMEZONE):
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f'Unknown timezone: {name}')
    return zone


def combine(day, at, zone=None):
    """Join a stored date and time-of-day into one clinic-local instant.

    Only the hour and minute of ``at`` are used; any date part it carries is
    a placeholder and is dropped.
    """
    clock = parse_clock(at)
    return datetime.combine(day, clock).replace(tzinfo=zone or clinic_zone())


def _minutes(value):
    clock = parse_clock(value)
    return clock.hour * 60 + clock.minute


def generate_slots(day, hours=None, lunch_break=None, slot_minutes=DEFAULT_SLOT_MINUTES):
    """Return the ordered bookable times for ``day``.

    Sunday runs a half day; Monday to Saturday skip the lunch hour. With no
    day selected the list is empty.
    """
    if day is None:
        return []
    if isinstance(day, datetime):
        day = day.date()
    if not isinstance(day, date):
        raise ValueError(f'Invalid date: {day!r}')
    if slot_minutes <= 0:
        raise ValueError('slot_minutes must be positive')

    hours = DEFAULT_BUSINESS_HOURS if hours is None else hours
    lunch_break = DEFAULT_LUNCH_BREAK if lunch_break is None else lunch_break

    window = hours.get(day.weekday())
    if not window:
        return []
    start, end = _minutes(window[0]), _minutes(window[1])
    lunch_start, lunch_end = (_minutes(lunch_break[0]), _minutes(lunch_break[1])) if lunch_break else (0, 0)

    slots = []
    for minute in range(start, end, slot_minutes):
        if lunch_start <= minute < lunch_end:
            continue
        slots.append(time(minute // 60, minute % 60))
    return slots


def is_on_grid(day, at, **policy):
    return parse_clock(at) in generate_slots(day, **policy)


def policy_from_config(config):
    """Pick the calendar settings out of a Flask config mapping."""
    return {
        'hours': {int(k): v for k, v in config.get('BUSINESS_HOURS', DEFAULT_BUSINESS_HOURS).items()},
        'lunch_break': config.get('LUNCH_BREAK', DEFAULT_LUNCH_BREAK),
        'slot_minutes': config.get('SLOT_MINUTES', DEFAULT_SLOT_MINUTES),
    }


def week_bounds(day):
    """Sunday-to-Saturday week containing ``day``."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)
