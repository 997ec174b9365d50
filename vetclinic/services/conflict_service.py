# Advisory double-booking scan over one listing batch
from .calendar_service import combine

DEFAULT_BUFFER_MINUTES = 15


def find_conflicts(appointments, buffer_minutes=DEFAULT_BUFFER_MINUTES, zone=None):
    """Return the ids of appointments that sit too close to another one.

    Two appointments conflict when they fall on the same calendar day and
    start strictly less than ``buffer_minutes`` apart. Every pair in the
    batch is compared, so pass a page of rows rather than a whole table.
    Nothing is blocked; callers only flag the rows.
    """
    instants = [(a.id, a.date, combine(a.date, a.time, zone)) for a in appointments]
    conflicted = set()
    for i, (first_id, first_day, first_at) in enumerate(instants):
        for second_id, second_day, second_at in instants[i + 1:]:
            if first_day != second_day:
                continue
            gap = abs((first_at - second_at).total_seconds()) / 60
            if gap < buffer_minutes:
                conflicted.add(first_id)
                conflicted.add(second_id)
    return conflicted


def annotate_conflicts(appointments, formatted, buffer_minutes=DEFAULT_BUFFER_MINUTES, zone=None):
    """Attach ``hasConflict`` to already formatted rows, matched by id."""
    conflicted = find_conflicts(appointments, buffer_minutes, zone)
    for row in formatted:
        row['hasConflict'] = row['id'] in conflicted
    return formatted
