# Medical record service module: health records, vaccinations and dewormings
import logging

from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..models import Appointment, AppointmentStatus, Pet, HealthRecord, Vaccination, Deworming
from .appointment_service import parse_day
from .errors import ValidationError
from .record_type_service import FOLLOW_UP_RECORD_TYPES, RecordType, get_record_type

logger = logging.getLogger(__name__)

RECORD_FIELDS = {
    RecordType.HEALTH_RECORD: {
        'model': HealthRecord,
        'required': ('date', 'diagnosis', 'treatment'),
        'optional': ('weight', 'temperature', 'notes'),
    },
    RecordType.VACCINATION: {
        'model': Vaccination,
        'required': ('date', 'vaccine_name'),
        'optional': ('medicine_name', 'manufacturer', 'weight', 'next_due_date', 'veterinarian_id'),
    },
    RecordType.DEWORMING: {
        'model': Deworming,
        'required': ('date', 'deworming_name'),
        'optional': ('medicine_name', 'manufacturer', 'weight', 'next_due_date', 'veterinarian_id'),
    },
}

FLOAT_FIELDS = ('weight', 'temperature')
DATE_FIELDS = ('date', 'next_due_date')
INT_FIELDS = ('veterinarian_id',)


def format_record(record, record_type):
    data = {
        'id': record.id,
        'record_type': record_type,
        'pet_id': record.pet_id,
        'appointment_id': record.appointment_id,
        'date': record.date.isoformat(),
        'weight': record.weight,
    }
    if record_type == RecordType.HEALTH_RECORD:
        data.update({
            'temperature': record.temperature,
            'diagnosis': record.diagnosis,
            'treatment': record.treatment,
            'notes': record.notes,
        })
    else:
        data.update({
            'name': record.vaccine_name if record_type == RecordType.VACCINATION else record.deworming_name,
            'medicine_name': record.medicine_name,
            'manufacturer': record.manufacturer,
            'next_due_date': record.next_due_date.isoformat() if record.next_due_date else None,
            'veterinarian_id': record.veterinarian_id,
        })
    return data


def _clean_fields(record_type, data):
    fields = RECORD_FIELDS[record_type]
    missing = [f for f in fields['required'] if data.get(f) in (None, '')]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    values = {}
    for field in fields['required'] + fields['optional']:
        value = data.get(field)
        if value in (None, ''):
            continue
        if field in DATE_FIELDS:
            value = parse_day(value)
        elif field in INT_FIELDS:
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ValidationError(f'{field} must be an integer')
        elif field in FLOAT_FIELDS:
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValidationError(f'{field} must be a number')
            if value <= 0:
                raise ValidationError(f'{field} must be a positive number')
        values[field] = value
    return values


def create_record(record_type, appointment_id, data, scheduler, complete=True):
    """Write a medical record for an appointment.

    With ``complete`` the appointment is then moved to ``completed``. A
    vaccination or deworming with a ``next_due_date`` books the follow-up
    visit. Both steps run after the record is committed and their failures
    are returned next to the record instead of undoing it.
    """
    if record_type not in RECORD_FIELDS:
        return None, {'message': f'Unknown record type: {record_type}'}, 400

    appointment = db.session.get(Appointment, appointment_id)
    if appointment is None:
        return None, {'message': 'Appointment not found'}, 404

    required = get_record_type(appointment.service.name)
    if required != RecordType.NONE and required != record_type:
        return None, {'message': f'{appointment.service.name} appointments need a {required}',
                      'code': 'validation'}, 400

    model = RECORD_FIELDS[record_type]['model']
    if model.query.filter_by(appointment_id=appointment.id).first():
        return None, {'message': f'A {record_type} already exists for this appointment'}, 409

    try:
        values = _clean_fields(record_type, data or {})
    except ValidationError as e:
        return None, e.to_dict(), 400

    try:
        record = model(pet_id=appointment.pet_id, appointment_id=appointment.id, **values)
        db.session.add(record)
        db.session.commit()
        logger.info(f"{record_type} {record.id} added for appointment {appointment.id}")
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception(f"Error creating {record_type}")
        return None, {'message': f'Failed to add {record_type}', 'error': str(e)}, 500

    result = {'record': format_record(record, record_type)}

    if complete and appointment.status != AppointmentStatus.COMPLETED:
        updated, error, _ = scheduler.transition(appointment.id, AppointmentStatus.COMPLETED)
        result['appointment'] = updated
        if error:
            result['completion_error'] = error

    next_due = getattr(record, 'next_due_date', None)
    if record_type in FOLLOW_UP_RECORD_TYPES and next_due:
        follow_up, error, _ = scheduler.schedule_follow_up(appointment.id, next_due)
        result['follow_up'] = follow_up
        if error:
            result['follow_up_error'] = error

    return result, None, 201


def get_pet_records(pet_id):
    pet = db.session.get(Pet, pet_id)
    if pet is None:
        return None, {'message': 'Pet not found'}, 404
    return {
        'pet_id': pet.id,
        'health_records': [format_record(r, RecordType.HEALTH_RECORD) for r in pet.health_records],
        'vaccinations': [format_record(r, RecordType.VACCINATION) for r in pet.vaccinations],
        'dewormings': [format_record(r, RecordType.DEWORMING) for r in pet.dewormings],
    }, None, 200
