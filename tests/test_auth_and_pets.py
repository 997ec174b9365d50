"""HTTP tests for registration, login and pets."""
from vetclinic import db
from vetclinic.models import Appointment, AppointmentStatus, HealthRecord, Pet, Vaccination

from .conftest import TOMORROW, YESTERDAY


def register(client, email='new@example.com', password='secret1'):
    return client.post('/auth/register', json={'username': 'newbie', 'email': email, 'password': password})


class TestAuth:
    def test_register_then_login(self, client, app):
        assert register(client).status_code == 201

        response = client.post('/auth/login', json={'email': 'new@example.com', 'password': 'secret1'})
        body = response.get_json()

        assert response.status_code == 200
        assert body['user']['role'] == 'CLIENT'
        assert 'book_appointment' in body['user']['permissions']['actions']

        verify = client.get('/auth/verify', headers={'Authorization': f"Bearer {body['access_token']}"})
        assert verify.status_code == 200

    def test_weak_password(self, client, app):
        assert register(client, password='short').status_code == 400

    def test_duplicate_email(self, client, app):
        register(client)
        assert register(client).status_code == 400

    def test_wrong_password(self, client, app):
        register(client)
        response = client.post('/auth/login', json={'email': 'new@example.com', 'password': 'wrong123'})

        assert response.status_code == 401


class TestPets:
    def test_owner_lists_own_pets(self, client, seed, headers):
        pets = client.get('/pets', headers=headers.owner).get_json()

        assert [p['name'] for p in pets] == ['Bantay']
        assert len(client.get('/pets', headers=headers.vet).get_json()) == 2

    def test_create_and_update(self, client, seed, headers):
        created = client.post('/pets', headers=headers.owner,
                              json={'name': 'Brownie', 'species': 'Dog', 'birth_date': '2023-04-01'})
        pet_id = created.get_json()['id']

        updated = client.put(f'/pets/{pet_id}', headers=headers.owner, json={'breed': 'Aspin'})

        assert created.status_code == 201
        assert updated.get_json()['breed'] == 'Aspin'
        assert updated.get_json()['birth_date'] == '2023-04-01'

    def test_foreign_pet_is_forbidden(self, client, seed, headers):
        assert client.get(f'/pets/{seed.other_pet_id}', headers=headers.owner).status_code == 403
        assert client.delete(f'/pets/{seed.other_pet_id}', headers=headers.owner).status_code == 403

    def test_services_are_public(self, client, seed):
        services = client.get('/services').get_json()

        assert {s['name']: s['record_type'] for s in services}['Immunization'] == 'Vaccination'
        assert {s['name']: s['requires_record'] for s in services}['Grooming'] is False


class TestPetDeletion:
    """Deleting a pet never takes its medical history with it."""

    def test_completed_visit_keeps_the_pet(self, client, seed, headers, make_appointment):
        visit = make_appointment(YESTERDAY, '09:00', AppointmentStatus.COMPLETED)
        db.session.add(HealthRecord(pet_id=seed.pet_id, appointment_id=visit.id, date=YESTERDAY,
                                    diagnosis='Otitis', treatment='Ear drops'))
        db.session.commit()

        response = client.delete(f'/pets/{seed.pet_id}', headers=headers.owner)

        assert response.status_code == 409
        assert response.get_json()['code'] == 'delete-not-allowed'
        assert db.session.get(Pet, seed.pet_id) is not None
        assert db.session.get(Appointment, visit.id) is not None
        assert HealthRecord.query.filter_by(pet_id=seed.pet_id).count() == 1

    def test_record_without_visit_keeps_the_pet(self, client, seed, headers):
        db.session.add(Vaccination(pet_id=seed.pet_id, date=YESTERDAY, vaccine_name='Rabies'))
        db.session.commit()

        response = client.delete(f'/pets/{seed.pet_id}', headers=headers.owner)

        assert response.status_code == 409

    def test_open_appointments_are_cancelled(self, client, seed, headers, make_appointment, notifier):
        first = make_appointment(TOMORROW, '09:00')
        second = make_appointment(TOMORROW, '10:00', AppointmentStatus.PENDING)
        ids = [first.id, second.id]

        response = client.delete(f'/pets/{seed.pet_id}', headers=headers.owner)

        assert response.status_code == 200
        assert db.session.get(Pet, seed.pet_id) is None
        assert [db.session.get(Appointment, i) for i in ids] == [None, None]
        assert notifier.names == ['cancelled', 'cancelled']
