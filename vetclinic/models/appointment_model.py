from datetime import datetime

from vetclinic import db


class AppointmentStatus:
    PENDING = 'pending'
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    MISSED = 'missed'


class Appointment(db.Model):
    """A booked visit.

    ``date`` and ``time`` are separate columns; they are only meaningful
    together and are joined into one clinic-local instant by
    ``calendar_service.combine``.
    """
    __tablename__ = 'appointment'

    VALID_STATUSES = (
        AppointmentStatus.PENDING,
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.MISSED,
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    pet_id = db.Column(db.Integer, db.ForeignKey('pet.id'), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey('service.id'), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    time = db.Column(db.Time, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=AppointmentStatus.PENDING)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    health_record = db.relationship('HealthRecord', backref='appointment', uselist=False)
    vaccination = db.relationship('Vaccination', backref='appointment', uselist=False)
    deworming = db.relationship('Deworming', backref='appointment', uselist=False)

    def __repr__(self):
        return f'<Appointment {self.id} {self.date} {self.time} ({self.status})>'
