from flask_restx import Namespace, Resource, fields
from flask import request
from flask_jwt_extended import jwt_required
from ..models import Role, STAFF_ROLES
from ..services.appointment_service import get_scheduler
from ..utils import role_required, current_identity

appointment_ns = Namespace('appointments', description='Operations related to vet appointments')

# Swagger models
appointment_model = appointment_ns.model('Appointment', {
    'pet_id': fields.Integer(required=True, description='ID of the pet'),
    'service_id': fields.Integer(required=True, description='ID of the service'),
    'date': fields.String(required=True, description='Date in ISO format (YYYY-MM-DD)'),
    'time': fields.String(required=True, description='Time of day, HH:MM or h:MM AM'),
    'notes': fields.String(description='Notes for the clinic'),
})

status_model = appointment_ns.model('AppointmentStatus', {
    'status': fields.String(required=True, description='pending, scheduled, completed or missed'),
})


def respond(result):
    data, error, status = result
    return (error if error else data), status


@appointment_ns.route('')
class AppointmentList(Resource):
    @jwt_required()
    @appointment_ns.param('date_filter', 'today or week (staff listing only)')
    def get(self):
        """Own appointments for owners; status buckets for clinic staff"""
        identity = current_identity()
        scheduler = get_scheduler()
        if identity['role'] in STAFF_ROLES:
            return respond(scheduler.list_buckets(request.args.get('date_filter')))
        return respond(scheduler.list_for_user(identity['id']))

    @jwt_required()
    @appointment_ns.expect(appointment_model)
    def post(self):
        """Request an appointment (starts pending)"""
        identity = current_identity()
        return respond(get_scheduler().create(identity['id'], request.get_json(), admin=False))


@appointment_ns.route('/admin')
class AdminAppointmentList(Resource):
    @jwt_required()
    @role_required(Role.ADMIN, Role.VETERINARIAN)
    @appointment_ns.expect(appointment_model)
    def post(self):
        """Book an appointment for a client (starts scheduled)"""
        identity = current_identity()
        return respond(get_scheduler().create(identity['id'], request.get_json(), admin=True))


@appointment_ns.route('/slots')
class AppointmentSlots(Resource):
    @jwt_required()
    @appointment_ns.param('date', 'Date in ISO format (YYYY-MM-DD)')
    def get(self):
        """Time slots for a date, each marked booked or free"""
        identity = current_identity()
        return respond(get_scheduler().available_slots(request.args.get('date'), identity['id']))


@appointment_ns.route('/<int:appointment_id>')
class AppointmentResource(Resource):
    @jwt_required()
    def get(self, appointment_id):
        """Get appointment by ID"""
        identity = current_identity()
        data, error, status = get_scheduler().get(appointment_id)
        if error:
            return error, status
        if identity['role'] not in STAFF_ROLES and data['user_id'] != identity['id']:
            return {'message': 'Permission denied'}, 403
        return data, status

    @jwt_required()
    @appointment_ns.expect(appointment_model)
    def put(self, appointment_id):
        """Reschedule an appointment (owners may move only their own)"""
        identity = current_identity()
        owner_id = None if identity['role'] in STAFF_ROLES else identity['id']
        return respond(get_scheduler().reschedule(appointment_id, request.get_json(), owner_id=owner_id))

    @jwt_required()
    def delete(self, appointment_id):
        """Cancel an appointment (owners may cancel only their own)"""
        identity = current_identity()
        owner_id = None if identity['role'] == Role.ADMIN else identity['id']
        return respond(get_scheduler().cancel(appointment_id, owner_id=owner_id))


@appointment_ns.route('/<int:appointment_id>/status')
class AppointmentStatusResource(Resource):
    @jwt_required()
    @role_required(Role.ADMIN, Role.VETERINARIAN)
    @appointment_ns.expect(status_model)
    def patch(self, appointment_id):
        """Move an appointment to another status"""
        data = request.get_json() or {}
        if not data.get('status'):
            return {'message': 'Missing status field', 'code': 'validation'}, 400
        return respond(get_scheduler().transition(appointment_id, data['status']))
