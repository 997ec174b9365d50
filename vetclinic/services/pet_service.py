# Pet service module for business logic
import logging

from dateutil.parser import isoparse

from ..models import AppointmentStatus, Pet, Role, STAFF_ROLES
from .. import db

logger = logging.getLogger(__name__)

PET_FIELDS = ('name', 'species', 'breed', 'gender', 'birth_date')


def format_pet(pet):
    return {
        'id': pet.id,
        'name': pet.name,
        'species': pet.species,
        'breed': pet.breed,
        'gender': pet.gender,
        'birth_date': pet.birth_date.isoformat() if pet.birth_date else None,
        'owner_id': pet.owner_id,
        'owner': {'id': pet.owner.id, 'name': pet.owner.full_name} if pet.owner else None
    }


def check_pet_authorization(pet, identity):
    if identity['role'] in STAFF_ROLES or pet.owner_id == identity['id']:
        return True, None
    return False, "No permission to access this pet"


def _apply_fields(pet, data):
    for field in PET_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == 'birth_date' and value:
            value = isoparse(value).date()
        setattr(pet, field, value or None)


def get_pets(identity):
    query = Pet.query
    if identity['role'] == Role.CLIENT:
        query = query.filter_by(owner_id=identity['id'])
    return [format_pet(p) for p in query.order_by(Pet.name.asc()).all()]


def create_pet(data, identity):
    if not data or not data.get('name') or not data.get('species'):
        return None, {'message': 'Missing required fields: name, species'}, 400
    owner_id = identity['id']
    if identity['role'] == Role.ADMIN and data.get('owner_id'):
        owner_id = int(data['owner_id'])
    try:
        pet = Pet(owner_id=owner_id, name=data['name'], species=data['species'])
        _apply_fields(pet, data)
        db.session.add(pet)
        db.session.commit()
        logger.info(f"Pet {pet.id} created for user {owner_id}")
        return format_pet(pet), None, 201
    except ValueError:
        db.session.rollback()
        return None, {'message': 'Invalid birth_date. Use ISO format (YYYY-MM-DD)'}, 400
    except Exception as e:
        db.session.rollback()
        logger.exception("Error creating pet")
        return None, {'message': 'Error creating pet', 'error': str(e)}, 500


def get_pet_by_id(pet_id, identity):
    pet = db.get_or_404(Pet, pet_id)
    authorized, error_message = check_pet_authorization(pet, identity)
    if not authorized:
        return None, {'message': error_message}, 403
    return format_pet(pet), None, 200


def update_pet(pet_id, data, identity):
    pet = db.get_or_404(Pet, pet_id)
    authorized, error_message = check_pet_authorization(pet, identity)
    if not authorized:
        return None, {'message': error_message}, 403
    try:
        _apply_fields(pet, data or {})
        db.session.commit()
        return format_pet(pet), None, 200
    except ValueError:
        db.session.rollback()
        return None, {'message': 'Invalid birth_date. Use ISO format (YYYY-MM-DD)'}, 400
    except Exception as e:
        db.session.rollback()
        logger.exception(f"Error updating pet {pet_id}")
        return None, {'message': 'Error updating pet', 'error': str(e)}, 500


def delete_pet(pet_id, identity, scheduler):
    """Remove a pet whose history holds nothing worth keeping.

    Pets with a completed visit or any medical record stay. Open
    appointments are cancelled one by one so their owners are notified.
    """
    pet = db.get_or_404(Pet, pet_id)
    authorized, error_message = check_pet_authorization(pet, identity)
    if not authorized:
        return {'message': error_message}, 403

    has_history = (
        any(a.status == AppointmentStatus.COMPLETED for a in pet.appointments)
        or pet.health_records or pet.vaccinations or pet.dewormings
    )
    if has_history:
        return {'message': 'Pets with completed visits or medical records cannot be deleted',
                'code': 'delete-not-allowed'}, 409

    for appointment_id in [a.id for a in pet.appointments]:
        _, error, status = scheduler.cancel(appointment_id)
        if error:
            return error, status

    try:
        db.session.delete(pet)
        db.session.commit()
        logger.info(f"Pet {pet_id} deleted")
        return {'message': 'Pet deleted'}, 200
    except Exception as e:
        db.session.rollback()
        logger.exception(f"Error deleting pet {pet_id}")
        return {'message': 'Error deleting pet', 'error': str(e)}, 500
