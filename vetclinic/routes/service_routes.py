from flask_restx import Namespace, Resource, fields
from flask import request
from flask_jwt_extended import jwt_required
import logging
from ..models import Service, Role
from .. import db
from ..services.record_type_service import get_record_type, requires_record
from ..utils import role_required

logger = logging.getLogger(__name__)

service_ns = Namespace('services', description='Clinic service catalog')

# Swagger model
service_model = service_ns.model('Service', {
    'name': fields.String(required=True, description='Service name'),
    'description': fields.String(description='Service description'),
    'price': fields.Float(description='Price'),
    'duration': fields.Integer(description='Duration in minutes')
})


# Helper function
def format_service(service):
    return {
        'id': service.id,
        'name': service.name,
        'description': service.description,
        'price': float(service.price) if service.price is not None else None,
        'duration': service.duration,
        'record_type': get_record_type(service.name),
        'requires_record': requires_record(service.name)
    }


@service_ns.route('')
class ServiceList(Resource):
    def get(self):
        """Get all services (public)"""
        services = Service.query.order_by(Service.name.asc()).all()
        return [format_service(s) for s in services], 200

    @jwt_required()
    @role_required(Role.ADMIN)
    @service_ns.expect(service_model)
    def post(self):
        """Create a new service (Admin only)"""
        data = request.get_json()
        if not data or not data.get('name'):
            return {'message': 'Missing required field: name'}, 400

        if Service.query.filter_by(name=data['name']).first():
            return {'message': f"Service with name '{data['name']}' already exists"}, 409

        try:
            new_service = Service(
                name=data['name'],
                description=data.get('description'),
                price=data.get('price', 0),
                duration=data.get('duration', 30)
            )
            db.session.add(new_service)
            db.session.commit()
            return {'message': 'Service created successfully', 'service': format_service(new_service)}, 201
        except Exception as e:
            db.session.rollback()
            logger.exception("Failed to create service")
            return {'message': 'Failed to create service', 'error': str(e)}, 500


@service_ns.route('/<int:service_id>')
class ServiceResource(Resource):
    def get(self, service_id):
        """Get a single service (public)"""
        return format_service(db.get_or_404(Service, service_id)), 200

    @jwt_required()
    @role_required(Role.ADMIN)
    @service_ns.expect(service_model)
    def put(self, service_id):
        """Update a service (Admin only)"""
        service = db.get_or_404(Service, service_id)
        data = request.get_json()
        if not data:
            return {'message': 'No data provided for update'}, 400

        if 'name' in data and data['name'] != service.name:
            if Service.query.filter(Service.id != service_id, Service.name == data['name']).first():
                return {'message': f"Service with name '{data['name']}' already exists"}, 409
            service.name = data['name']

        for field in ('description', 'price', 'duration'):
            if field in data:
                setattr(service, field, data[field])

        try:
            db.session.commit()
            return {'message': 'Service updated successfully', 'service': format_service(service)}, 200
        except Exception as e:
            db.session.rollback()
            logger.exception(f"Failed to update service {service_id}")
            return {'message': 'Failed to update service', 'error': str(e)}, 500

    @jwt_required()
    @role_required(Role.ADMIN)
    def delete(self, service_id):
        """Delete a service (Admin only)"""
        service = db.get_or_404(Service, service_id)
        if service.appointments:
            return {'message': 'Cannot delete service: it has appointments.'}, 400
        try:
            db.session.delete(service)
            db.session.commit()
            return {'message': 'Service deleted successfully'}, 200
        except Exception as e:
            db.session.rollback()
            logger.exception(f"Failed to delete service {service_id}")
            return {'message': 'Failed to delete service', 'error': str(e)}, 500
