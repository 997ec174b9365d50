# Appointment status state machine
from ..models.appointment_model import AppointmentStatus
from .errors import InvalidTransition, RecordRequired
from .record_type_service import RecordType

ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: (AppointmentStatus.SCHEDULED,),
    AppointmentStatus.SCHEDULED: (AppointmentStatus.COMPLETED, AppointmentStatus.MISSED),
    AppointmentStatus.COMPLETED: (AppointmentStatus.SCHEDULED,),
    AppointmentStatus.MISSED: (AppointmentStatus.SCHEDULED,),
}

DELETABLE_STATUSES = (
    AppointmentStatus.PENDING,
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.MISSED,
)


def is_allowed(current, target):
    return target in ALLOWED_TRANSITIONS.get(current, ())


def check_transition(current, target, required_record=RecordType.NONE, record_exists=False):
    """Raise if ``current -> target`` may not happen right now.

    ``scheduled -> completed`` additionally needs the service's medical
    record to exist when one is required.
    """
    if not is_allowed(current, target):
        raise InvalidTransition(f'Invalid status transition from {current} to {target}')
    if (target == AppointmentStatus.COMPLETED
            and required_record != RecordType.NONE
            and not record_exists):
        raise RecordRequired(
            f'A {required_record} must be added before this appointment can be completed',
            required_record,
        )


def is_missed_candidate(status, instant, now):
    """Scheduled appointments whose time has passed read as missed.

    This is a listing rule only; the stored status is left alone.
    """
    return status == AppointmentStatus.SCHEDULED and instant < now


def display_status(status, instant, now):
    if is_missed_candidate(status, instant, now):
        return AppointmentStatus.MISSED
    return status


def can_delete(status):
    return status in DELETABLE_STATUSES
