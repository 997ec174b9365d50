import enum
from datetime import datetime

from vetclinic import db


class Role(enum.Enum):
    CLIENT = 'CLIENT'
    VETERINARIAN = 'VETERINARIAN'
    ADMIN = 'ADMIN'


# Roles allowed to run the clinic side of scheduling
STAFF_ROLES = (Role.ADMIN, Role.VETERINARIAN)


class User(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(80), nullable=False)
    first_name = db.Column(db.String(80))
    last_name = db.Column(db.String(80))
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    role = db.Column(db.Enum(Role), nullable=False, default=Role.CLIENT)
    isBanned = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    pets = db.relationship('Pet', backref='owner', lazy=True, cascade='all, delete-orphan')
    appointments = db.relationship('Appointment', backref='user', lazy=True)

    @property
    def full_name(self):
        name = ' '.join(part for part in (self.first_name, self.last_name) if part)
        return name or self.username

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'
