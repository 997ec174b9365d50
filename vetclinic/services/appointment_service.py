# Appointment service module: the only place appointment rows change
import logging
from datetime import date, datetime

from dateutil.parser import isoparse
from flask import current_app

from .. import db
from ..models import Appointment, AppointmentStatus
from .availability_service import format_clock_label, is_booked, resolve_slots
from .calendar_service import (
    DEFAULT_TIMEZONE, clinic_zone, combine, is_on_grid, parse_clock, policy_from_config, week_bounds,
)
from .conflict_service import DEFAULT_BUFFER_MINUTES, annotate_conflicts
from .errors import DeleteNotAllowed, InvalidTransition, NotFound, SchedulingError, SlotTaken, ValidationError
from .record_type_service import RecordType, get_record_type
from .repository import SqlAppointmentRepository
from .status_service import can_delete, check_transition, display_status, is_missed_candidate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('pet_id', 'service_id', 'date', 'time')
DATE_FILTERS = ('today', 'week')


def parse_day(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(value).date()
    except (ValueError, TypeError):
        raise ValidationError('Invalid date format. Use ISO format (YYYY-MM-DD)')


def format_appointment(appointment, zone=None, now=None):
    instant = combine(appointment.date, appointment.time, zone)
    pet = appointment.pet
    service = appointment.service
    user = appointment.user
    data = {
        'id': appointment.id,
        'user_id': appointment.user_id,
        'pet_id': appointment.pet_id,
        'pet_name': pet.name if pet else None,
        'service_id': appointment.service_id,
        'service_name': service.name if service else None,
        'record_type': get_record_type(service.name if service else None),
        'date': appointment.date.isoformat(),
        'time': appointment.time.strftime('%H:%M'),
        'time_label': format_clock_label(appointment.time),
        'datetime': instant.isoformat(),
        'status': appointment.status,
        'notes': appointment.notes,
        'owner_name': user.full_name if user else None,
        'owner_email': user.email if user else None,
    }
    if now is not None:
        data['display_status'] = display_status(appointment.status, instant, now)
    return data


class AppointmentScheduler:
    """Creates appointments and moves them through their statuses.

    Holds no state between calls; every operation reads fresh from the
    repository and returns ``(data, error, status_code)`` with ``error`` set
    to ``{'message': ..., 'code': ...}`` on failure.
    """

    def __init__(self, repository, notifier, clock, settings=None):
        settings = settings or {}
        self.repository = repository
        self.notifier = notifier
        self.clock = clock
        self.zone = clinic_zone(settings.get('CLINIC_TIMEZONE', DEFAULT_TIMEZONE))
        self.policy = policy_from_config(settings)
        self.conflict_buffer = settings.get('CONFLICT_BUFFER_MINUTES', DEFAULT_BUFFER_MINUTES)
        self.slot_buffer = settings.get('SLOT_BUFFER_MINUTES', 0)
        self.follow_up_time = parse_clock(settings.get('FOLLOW_UP_TIME', '09:00'))

    def _run(self, action, operation, success_status=200):
        try:
            return operation(), None, success_status
        except SchedulingError as e:
            logger.info(f"{action} rejected: {e.code}: {e.message}")
            return None, e.to_dict(), e.status
        except Exception as e:
            logger.exception(f"Unexpected error while trying to {action}")
            return None, {'message': f'Failed to {action}', 'code': 'unexpected', 'error': str(e)}, 500

    def _format(self, appointment):
        return format_appointment(appointment, self.zone, self.clock.now())

    def _notify(self, event, appointment_data):
        try:
            self.notifier.notify(event, appointment_data)
        except Exception:
            logger.exception(f"Notifier failed for '{event}' on appointment {appointment_data.get('id')}")

    def _get(self, appointment_id):
        appointment = self.repository.get_appointment(appointment_id)
        if appointment is None:
            raise NotFound('Appointment not found')
        return appointment

    # Create

    def _validate_new(self, user_id, data, admin):
        data = data or {}
        missing = [field for field in REQUIRED_FIELDS if data.get(field) in (None, '')]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        day = parse_day(data['date'])
        try:
            at = parse_clock(data['time'])
        except ValueError as e:
            raise ValidationError(str(e))

        try:
            pet_id, service_id = int(data['pet_id']), int(data['service_id'])
        except (TypeError, ValueError):
            raise ValidationError('pet_id and service_id must be integers')

        pet = self.repository.get_pet(pet_id)
        if pet is None:
            raise ValidationError('Pet not found')
        if not admin and pet.owner_id != user_id:
            raise ValidationError('You can only book appointments for your own pets')
        service = self.repository.get_service(service_id)
        if service is None:
            raise ValidationError('Service not found')

        if not is_on_grid(day, at, **self.policy):
            raise ValidationError('The selected time is outside business hours')
        if combine(day, at, self.zone) <= self.clock.now():
            raise ValidationError('Appointment time must be in the future')

        return {
            'user_id': pet.owner_id,
            'pet_id': pet.id,
            'service_id': service.id,
            'date': day,
            'time': at,
            'notes': data.get('notes') or None,
        }

    def _check_slot_free(self, day, at, exclude_id=None):
        held = self.repository.find_booked_times(day, exclude_id=exclude_id)
        slot = combine(day, at, self.zone)
        held_instants = [combine(day, t, self.zone) for t in held]
        if is_booked(slot, held_instants, self.slot_buffer):
            raise SlotTaken('This time slot has just been booked. Please choose another time.')

    def create(self, user_id, data, admin=False):
        """Book an appointment.

        Self-service bookings start ``pending`` and may not take a held slot.
        Clinic bookings start ``scheduled``; overlaps they cause show up in
        the conflict flags instead of being refused.
        """
        def operation():
            values = self._validate_new(user_id, data, admin)
            if not admin:
                self._check_slot_free(values['date'], values['time'])
            values['status'] = AppointmentStatus.SCHEDULED if admin else AppointmentStatus.PENDING
            appointment = self.repository.create_appointment(values)
            logger.info(f"Appointment {appointment.id} created as {appointment.status}")
            result = self._format(appointment)
            self._notify('confirmed' if admin else 'created', result)
            return result
        return self._run('create appointment', operation, 201)

    # Status

    def _transition(self, appointment_id, target):
        appointment = self._get(appointment_id)
        current = appointment.status
        if target not in Appointment.VALID_STATUSES:
            raise InvalidTransition(f'Invalid status transition from {current} to {target}')

        required = RecordType.NONE
        exists = False
        if target == AppointmentStatus.COMPLETED:
            required = get_record_type(appointment.service.name)
            if required != RecordType.NONE:
                exists = self.repository.record_exists(appointment.id, required)
        check_transition(current, target, required, exists)

        appointment = self.repository.update_appointment_status(appointment.id, target)
        logger.info(f"Appointment {appointment.id}: {current} -> {target}")
        result = self._format(appointment)
        if current == AppointmentStatus.PENDING and target == AppointmentStatus.SCHEDULED:
            event = 'confirmed'
        elif target in (AppointmentStatus.COMPLETED, AppointmentStatus.MISSED):
            event = target
        else:
            event = 'status_changed'
        self._notify(event, result)
        return result

    def transition(self, appointment_id, target):
        return self._run('update appointment status', lambda: self._transition(appointment_id, target))

    # Delete

    def cancel(self, appointment_id, owner_id=None):
        """Delete an appointment that has not been completed.

        With ``owner_id`` set, appointments of other users read as missing.
        """
        def operation():
            appointment = self._get(appointment_id)
            if owner_id is not None and appointment.user_id != owner_id:
                raise NotFound('Appointment not found or unauthorized')
            if not can_delete(appointment.status):
                raise DeleteNotAllowed('Completed appointments cannot be cancelled')
            snapshot = self._format(appointment)
            self.repository.delete_appointment(appointment.id)
            logger.info(f"Appointment {appointment_id} cancelled")
            self._notify('cancelled', snapshot)
            return {'message': 'Appointment deleted', 'appointment': snapshot}
        return self._run('delete appointment', operation)

    # Reschedule

    def reschedule(self, appointment_id, data, owner_id=None):
        """Move an appointment to another slot, pet, service or note.

        Fields left out of ``data`` keep their current values and the status
        is never touched here. Owners (``owner_id`` set) get the same checks as
        a new request, with the appointment's own slot not counted as taken.
        """
        def operation():
            appointment = self._get(appointment_id)
            if owner_id is not None and appointment.user_id != owner_id:
                raise NotFound('Appointment not found or unauthorized')
            if appointment.status == AppointmentStatus.COMPLETED:
                raise InvalidTransition('Completed appointments cannot be rescheduled')

            merged = {
                'pet_id': appointment.pet_id,
                'service_id': appointment.service_id,
                'date': appointment.date.isoformat(),
                'time': appointment.time.strftime('%H:%M'),
                'notes': appointment.notes,
            }
            merged.update({k: v for k, v in (data or {}).items() if k in merged})
            admin = owner_id is None
            values = self._validate_new(owner_id, merged, admin)
            if not admin:
                self._check_slot_free(values['date'], values['time'], exclude_id=appointment.id)

            appointment = self.repository.update_appointment(appointment.id, values)
            logger.info(f"Appointment {appointment.id} rescheduled to {appointment.date} {appointment.time}")
            result = self._format(appointment)
            self._notify('status_changed', result)
            return result
        return self._run('reschedule appointment', operation)

    # Follow-up

    def schedule_follow_up(self, appointment_id, next_due_date):
        """Book the next visit for the same pet and service on ``next_due_date``.

        The new appointment is created ``pending`` at the follow-up time and
        then confirmed. A failure here is reported to the caller but leaves
        the originating record and appointment as they are.
        """
        def operation():
            source = self._get(appointment_id)
            day = parse_day(next_due_date)
            if day is None:
                raise ValidationError('A next due date is required')
            if not is_on_grid(day, self.follow_up_time, **self.policy):
                raise ValidationError('The follow-up time is outside business hours')
            follow_up = self.repository.create_appointment({
                'user_id': source.user_id,
                'pet_id': source.pet_id,
                'service_id': source.service_id,
                'date': day,
                'time': self.follow_up_time,
                'status': AppointmentStatus.PENDING,
                'notes': f'Follow-up for appointment #{source.id}',
            })
            logger.info(f"Follow-up appointment {follow_up.id} created for appointment {source.id}")
            try:
                return self._transition(follow_up.id, AppointmentStatus.SCHEDULED)
            except SchedulingError as e:
                e.message = f'{e.message} (follow-up appointment {follow_up.id} left pending)'
                raise

        data, error, status = self._run('schedule follow-up appointment', operation, 201)
        if error:
            logger.error(f"Follow-up for appointment {appointment_id} failed: {error['message']}")
            error = dict(error, code='cascade-failure', cause=error.get('code'))
        return data, error, status

    # Reads

    def get(self, appointment_id):
        return self._run('load appointment', lambda: self._format(self._get(appointment_id)))

    def list_for_user(self, user_id):
        def operation():
            now = self.clock.now()
            appointments = self.repository.find_appointments(user_id=user_id, newest_first=True)
            return [format_appointment(a, self.zone, now) for a in appointments]
        return self._run('list appointments', operation)

    def _date_range(self, date_filter, today):
        if not date_filter:
            return None, None
        if date_filter not in DATE_FILTERS:
            raise ValidationError(f"Invalid date filter. Allowed: {', '.join(DATE_FILTERS)}")
        if date_filter == 'today':
            return today, today
        return week_bounds(today)

    def list_buckets(self, date_filter=None):
        """Admin listing split by status.

        Scheduled appointments whose time has passed are listed under
        ``missed`` without touching their stored status, and the remaining
        scheduled rows carry ``hasConflict`` flags.
        """
        def operation():
            now = self.clock.now()
            start, end = self._date_range(date_filter, now.astimezone(self.zone).date())
            find = self.repository.find_appointments

            pending = find(status=AppointmentStatus.PENDING, start=start, end=end)
            completed = find(status=AppointmentStatus.COMPLETED, start=start, end=end, newest_first=True)
            missed = find(status=AppointmentStatus.MISSED, start=start, end=end, newest_first=True)
            upcoming, overdue = [], []
            for appointment in find(status=AppointmentStatus.SCHEDULED, start=start, end=end):
                instant = combine(appointment.date, appointment.time, self.zone)
                (overdue if is_missed_candidate(appointment.status, instant, now) else upcoming).append(appointment)
            missed = sorted(missed + overdue, key=lambda a: (a.date, a.time), reverse=True)

            def fmt(rows):
                return [format_appointment(a, self.zone, now) for a in rows]

            # Overdue rows still count as neighbours of upcoming ones
            scheduled = annotate_conflicts(upcoming + overdue, fmt(upcoming), self.conflict_buffer, self.zone)
            return {
                'pending': fmt(pending),
                'scheduled': scheduled,
                'completed': fmt(completed),
                'missed': fmt(missed),
                'counts': {
                    'pending': len(pending),
                    'scheduled': len(upcoming),
                    'completed': len(completed),
                    'missed': len(missed),
                },
            }
        return self._run('list appointments', operation)

    def available_slots(self, day, user_id=None):
        def operation():
            selected = parse_day(day)
            if selected is None:
                return {'date': None, 'slots': []}
            booked = self.repository.find_booked_times(selected, user_id)
            slots = resolve_slots(selected, booked, self.slot_buffer, self.zone, now=self.clock.now(), **self.policy)
            return {'date': selected.isoformat(), 'slots': slots}
        return self._run('fetch available slots', operation)

    def today_count(self):
        today = self.clock.now().astimezone(self.zone).date()
        return len(self.repository.find_appointments(start=today, end=today))


def get_scheduler():
    """Build a scheduler wired to the current app's collaborators."""
    app = current_app
    return AppointmentScheduler(
        SqlAppointmentRepository(db.session),
        app.extensions['vetclinic.notifier'],
        app.extensions['vetclinic.clock'],
        app.config,
    )
