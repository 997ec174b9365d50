# Persistence for the scheduling services, backed by the SQLAlchemy session
import logging

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..models import Appointment, AppointmentStatus, Pet, Service, HealthRecord, Vaccination, Deworming
from .errors import PersistenceError
from .record_type_service import RecordType

logger = logging.getLogger(__name__)

# Columns a reschedule may change; status moves only through transitions
RESCHEDULE_FIELDS = ('user_id', 'pet_id', 'service_id', 'date', 'time', 'notes')

RECORD_MODELS = {
    RecordType.HEALTH_RECORD: HealthRecord,
    RecordType.VACCINATION: Vaccination,
    RecordType.DEWORMING: Deworming,
}


class SqlAppointmentRepository:
    """Reads and writes appointments; every write commits on its own."""

    def __init__(self, session=None):
        self.session = session or db.session

    def _commit(self, action):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception(f"Failed to {action}")
            raise PersistenceError(f'Failed to {action}') from e

    def _read(self, action, query):
        try:
            return query()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception(f"Failed to {action}")
            raise PersistenceError(f'Failed to {action}') from e

    def get_appointment(self, appointment_id):
        return self._read('load appointment', lambda: self.session.get(Appointment, appointment_id))

    def get_pet(self, pet_id):
        return self._read('load pet', lambda: self.session.get(Pet, pet_id))

    def get_service(self, service_id):
        return self._read('load service', lambda: self.session.get(Service, service_id))

    def find_appointments(self, status=None, user_id=None, start=None, end=None, newest_first=False):
        def query():
            q = Appointment.query
            if status is not None:
                q = q.filter(Appointment.status == status)
            if user_id is not None:
                q = q.filter(Appointment.user_id == user_id)
            if start is not None:
                q = q.filter(Appointment.date >= start)
            if end is not None:
                q = q.filter(Appointment.date <= end)
            if newest_first:
                q = q.order_by(Appointment.date.desc(), Appointment.time.desc())
            else:
                q = q.order_by(Appointment.date.asc(), Appointment.time.asc())
            return q.all()
        return self._read('list appointments', query)

    def create_appointment(self, data):
        appointment = Appointment(
            user_id=data['user_id'],
            pet_id=data['pet_id'],
            service_id=data['service_id'],
            date=data['date'],
            time=data['time'],
            status=data.get('status', AppointmentStatus.PENDING),
            notes=data.get('notes'),
        )
        self.session.add(appointment)
        self._commit('create appointment')
        return appointment

    def update_appointment_status(self, appointment_id, status):
        appointment = self.get_appointment(appointment_id)
        appointment.status = status
        self._commit('update appointment status')
        return appointment

    def update_appointment(self, appointment_id, values):
        appointment = self.get_appointment(appointment_id)
        for field in RESCHEDULE_FIELDS:
            if field in values:
                setattr(appointment, field, values[field])
        self._commit('reschedule appointment')
        return appointment

    def delete_appointment(self, appointment_id):
        appointment = self.get_appointment(appointment_id)
        self.session.delete(appointment)
        self._commit('delete appointment')

    def find_booked_times(self, day, user_id=None, exclude_id=None):
        """Times held on ``day``: every scheduled appointment, plus the
        pending ones belonging to ``user_id``. ``exclude_id`` leaves one
        appointment out, so a booking being moved does not block itself."""
        def query():
            held = Appointment.status == AppointmentStatus.SCHEDULED
            if user_id is not None:
                held = or_(held, and_(
                    Appointment.status == AppointmentStatus.PENDING,
                    Appointment.user_id == user_id,
                ))
            q = self.session.query(Appointment.time).filter(Appointment.date == day, held)
            if exclude_id is not None:
                q = q.filter(Appointment.id != exclude_id)
            rows = q.all()
            return [row[0] for row in rows]
        return self._read('fetch booked times', query)

    def record_exists(self, appointment_id, record_type):
        model = RECORD_MODELS.get(record_type)
        if model is None:
            return False
        return self._read(
            'check medical record',
            lambda: model.query.filter_by(appointment_id=appointment_id).first() is not None,
        )
