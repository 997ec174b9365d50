from flask_restx import Namespace, Resource, fields
from flask import request
from flask_jwt_extended import jwt_required
from ..services import pet_service
from ..services.appointment_service import get_scheduler
from ..services.record_service import get_pet_records
from ..services.pet_service import check_pet_authorization
from ..models import Pet
from .. import db
from ..utils import current_identity

pet_ns = Namespace('pets', description='Pet operations', path='/pets')

pet_model = pet_ns.model('Pet', {
    'name': fields.String(required=True),
    'species': fields.String(required=True),
    'breed': fields.String(),
    'gender': fields.String(),
    'birth_date': fields.String(description='Date in ISO format'),
    'owner_id': fields.Integer(description='Owner (admin only)'),
})


@pet_ns.route('')
class PetList(Resource):
    @jwt_required()
    def get(self):
        """List pets (owners see their own)"""
        return pet_service.get_pets(current_identity()), 200

    @jwt_required()
    @pet_ns.expect(pet_model)
    def post(self):
        """Register a pet"""
        data, error, status = pet_service.create_pet(request.get_json(), current_identity())
        return (error if error else data), status


@pet_ns.route('/<int:pet_id>')
class PetResource(Resource):
    @jwt_required()
    def get(self, pet_id):
        """Get a pet"""
        data, error, status = pet_service.get_pet_by_id(pet_id, current_identity())
        return (error if error else data), status

    @jwt_required()
    @pet_ns.expect(pet_model)
    def put(self, pet_id):
        """Update a pet"""
        data, error, status = pet_service.update_pet(pet_id, request.get_json(), current_identity())
        return (error if error else data), status

    @jwt_required()
    def delete(self, pet_id):
        """Delete a pet"""
        return pet_service.delete_pet(pet_id, current_identity(), get_scheduler())


@pet_ns.route('/<int:pet_id>/records')
class PetRecords(Resource):
    @jwt_required()
    def get(self, pet_id):
        """Health records, vaccinations and dewormings of a pet"""
        pet = db.get_or_404(Pet, pet_id)
        authorized, error_message = check_pet_authorization(pet, current_identity())
        if not authorized:
            return {'message': error_message}, 403
        data, error, status = get_pet_records(pet_id)
        return (error if error else data), status
