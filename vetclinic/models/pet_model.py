from datetime import datetime

from vetclinic import db


class Pet(db.Model):
    __tablename__ = 'pet'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    species = db.Column(db.String(50), nullable=False)
    breed = db.Column(db.String(50))
    gender = db.Column(db.String(20))
    birth_date = db.Column(db.Date)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    # Appointments go through AppointmentScheduler.cancel, never a cascade
    appointments = db.relationship('Appointment', backref='pet', lazy=True)

    def __repr__(self):
        return f'<Pet {self.name} ({self.species})>'
