from datetime import datetime

from vetclinic import db


class HealthRecord(db.Model):
    __tablename__ = 'health_record'
    id = db.Column(db.Integer, primary_key=True)
    pet_id = db.Column(db.Integer, db.ForeignKey('pet.id'), nullable=False)
    appointment_id = db.Column(db.Integer, db.ForeignKey('appointment.id', ondelete='SET NULL'), unique=True)
    date = db.Column(db.Date, nullable=False)
    weight = db.Column(db.Float)
    temperature = db.Column(db.Float)
    diagnosis = db.Column(db.Text, nullable=False)
    treatment = db.Column(db.Text, nullable=False)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    pet = db.relationship('Pet', backref=db.backref('health_records', lazy=True, cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<HealthRecord {self.id} for Pet {self.pet_id}>'


class Vaccination(db.Model):
    __tablename__ = 'vaccination'
    id = db.Column(db.Integer, primary_key=True)
    pet_id = db.Column(db.Integer, db.ForeignKey('pet.id'), nullable=False)
    appointment_id = db.Column(db.Integer, db.ForeignKey('appointment.id', ondelete='SET NULL'), unique=True)
    veterinarian_id = db.Column(db.Integer, db.ForeignKey('user.id'))
    date = db.Column(db.Date, nullable=False)
    vaccine_name = db.Column(db.String(120), nullable=False)
    medicine_name = db.Column(db.String(120))
    manufacturer = db.Column(db.String(120))
    weight = db.Column(db.Float)
    next_due_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    pet = db.relationship('Pet', backref=db.backref('vaccinations', lazy=True, cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<Vaccination {self.vaccine_name} for Pet {self.pet_id}>'


class Deworming(db.Model):
    __tablename__ = 'deworming'
    id = db.Column(db.Integer, primary_key=True)
    pet_id = db.Column(db.Integer, db.ForeignKey('pet.id'), nullable=False)
    appointment_id = db.Column(db.Integer, db.ForeignKey('appointment.id', ondelete='SET NULL'), unique=True)
    veterinarian_id = db.Column(db.Integer, db.ForeignKey('user.id'))
    date = db.Column(db.Date, nullable=False)
    deworming_name = db.Column(db.String(120), nullable=False)
    medicine_name = db.Column(db.String(120))
    manufacturer = db.Column(db.String(120))
    weight = db.Column(db.Float)
    next_due_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    pet = db.relationship('Pet', backref=db.backref('dewormings', lazy=True, cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<Deworming {self.deworming_name} for Pet {self.pet_id}>'
