# Slot availability: which generated slots on a day are already taken
from .calendar_service import combine, generate_slots, parse_clock


def format_clock_label(value):
    hour = value.hour % 12 or 12
    period = 'PM' if value.hour >= 12 else 'AM'
    return f'{hour}:{value.minute:02d} {period}'


def is_booked(slot, booked_instants, buffer_minutes=0):
    """A slot is booked on an exact hour/minute match or when it sits
    strictly inside the separation buffer of an existing appointment."""
    for booked in booked_instants:
        gap = abs((slot - booked).total_seconds()) / 60
        if gap == 0 or gap < buffer_minutes:
            return True
    return False


def resolve_slots(day, booked_times, buffer_minutes=0, zone=None, now=None, **policy):
    """Annotate every slot of ``day`` with whether it is booked.

    ``booked_times`` holds the time-of-day values already taken on that day.
    Both sides are pinned to ``day`` in the clinic zone before comparing, so
    a time stored with a placeholder date cannot drift onto another day.
    Booked slots are kept in the result for display. With ``now`` given,
    slots at or before it read as booked too.
    """
    slots = generate_slots(day, **policy)
    if not slots:
        return []

    booked_instants = [combine(day, parse_clock(t), zone) for t in booked_times or []]
    result = []
    for slot in slots:
        instant = combine(day, slot, zone)
        result.append({
            'time': slot.strftime('%H:%M'),
            'label': format_clock_label(slot),
            'booked': (now is not None and instant <= now) or is_booked(instant, booked_instants, buffer_minutes),
        })
    return result
