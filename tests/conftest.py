"""Shared fixtures: an in-memory app, a fixed clock and seeded clinic data."""
from datetime import date, datetime, time
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

from vetclinic import create_app, db
from vetclinic.config import TestConfig
from vetclinic.models import Appointment, AppointmentStatus, Pet, Role, Service, User
from vetclinic.services.calendar_service import clinic_zone

ZONE = clinic_zone('Asia/Manila')
# Monday morning in the clinic's zone
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=ZONE)
TOMORROW = date(2026, 10, 20)        # Tuesday
NEXT_SUNDAY = date(2026, 10, 25)
YESTERDAY = date(2026, 10, 18)       # Sunday


class FixedClock:
    def __init__(self, now):
        self.current = now

    def now(self):
        return self.current


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def notify(self, event, appointment_data):
        self.events.append((event, appointment_data))

    @property
    def names(self):
        return [event for event, _ in self.events]


@pytest.fixture
def app():
    """App on an in-memory database with the clock pinned to NOW."""
    app = create_app(TestConfig)
    app.extensions['vetclinic.clock'] = FixedClock(NOW)
    app.extensions['vetclinic.notifier'] = RecordingNotifier()
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def notifier(app):
    return app.extensions['vetclinic.notifier']


@pytest.fixture
def scheduler(app):
    from vetclinic.services.appointment_service import get_scheduler
    return get_scheduler()


def _user(username, role, first_name=None):
    user = User(
        username=username,
        first_name=first_name,
        last_name='Tester' if first_name else None,
        email=f'{username}@example.com',
        password='not-a-real-hash',
        role=role,
    )
    db.session.add(user)
    return user


@pytest.fixture
def seed(app):
    """Two owners, clinic staff, a pet each and the service catalog."""
    owner = _user('owner', Role.CLIENT, 'Olivia')
    other = _user('other', Role.CLIENT)
    admin = _user('admin', Role.ADMIN)
    vet = _user('vet', Role.VETERINARIAN)
    db.session.flush()

    pet = Pet(name='Bantay', species='Dog', owner_id=owner.id)
    other_pet = Pet(name='Mingming', species='Cat', owner_id=other.id)
    services = {
        'checkup': Service(name='Check-up and Consultation', price=500, duration=30),
        'immunization': Service(name='Immunization', price=800, duration=15),
        'antiparasitic': Service(name='Anti-parasitic', price=400, duration=15),
        'grooming': Service(name='Grooming', price=600, duration=60),
    }
    db.session.add_all([pet, other_pet, *services.values()])
    db.session.commit()

    return SimpleNamespace(
        owner_id=owner.id,
        other_id=other.id,
        admin_id=admin.id,
        vet_id=vet.id,
        pet_id=pet.id,
        other_pet_id=other_pet.id,
        checkup_id=services['checkup'].id,
        immunization_id=services['immunization'].id,
        antiparasitic_id=services['antiparasitic'].id,
        grooming_id=services['grooming'].id,
    )


@pytest.fixture
def headers(seed):
    """Bearer headers per role."""
    def bearer(user_id, role):
        token = create_access_token(identity=str(user_id), additional_claims={'role': role.value})
        return {'Authorization': f'Bearer {token}'}

    return SimpleNamespace(
        owner=bearer(seed.owner_id, Role.CLIENT),
        other=bearer(seed.other_id, Role.CLIENT),
        admin=bearer(seed.admin_id, Role.ADMIN),
        vet=bearer(seed.vet_id, Role.VETERINARIAN),
    )


@pytest.fixture
def make_appointment(seed):
    """Insert an appointment directly, skipping booking rules."""
    def make(day, at, status=AppointmentStatus.SCHEDULED, service_id=None, pet_id=None, user_id=None):
        appointment = Appointment(
            user_id=user_id or seed.owner_id,
            pet_id=pet_id or seed.pet_id,
            service_id=service_id or seed.checkup_id,
            date=day,
            time=at if isinstance(at, time) else time.fromisoformat(at),
            status=status,
        )
        db.session.add(appointment)
        db.session.commit()
        return appointment
    return make
