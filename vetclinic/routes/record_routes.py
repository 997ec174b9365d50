from flask_restx import Namespace, Resource, fields
from flask import request
from flask_jwt_extended import jwt_required
from ..models import Role
from ..services.appointment_service import get_scheduler
from ..services.record_service import create_record
from ..services.record_type_service import RecordType
from ..utils import role_required

record_ns = Namespace('records', description='Medical records written at appointments')

RECORD_ROUTES = {
    'health-records': RecordType.HEALTH_RECORD,
    'vaccinations': RecordType.VACCINATION,
    'dewormings': RecordType.DEWORMING,
}

record_model = record_ns.model('MedicalRecord', {
    'date': fields.String(required=True, description='Date in ISO format'),
    'weight': fields.Float(),
    'temperature': fields.Float(description='Health records only'),
    'diagnosis': fields.String(description='Health records only'),
    'treatment': fields.String(description='Health records only'),
    'notes': fields.String(),
    'vaccine_name': fields.String(description='Vaccinations only'),
    'deworming_name': fields.String(description='Dewormings only'),
    'medicine_name': fields.String(),
    'manufacturer': fields.String(),
    'next_due_date': fields.String(description='Books a follow-up visit on this date'),
    'veterinarian_id': fields.Integer(),
    'complete': fields.Boolean(default=True, description='Mark the appointment completed'),
})


@record_ns.route('/appointments/<int:appointment_id>/<string:kind>')
@record_ns.param('kind', 'health-records, vaccinations or dewormings')
class AppointmentRecord(Resource):
    @jwt_required()
    @role_required(Role.ADMIN, Role.VETERINARIAN)
    @record_ns.expect(record_model)
    def post(self, appointment_id, kind):
        """Add a medical record to an appointment"""
        record_type = RECORD_ROUTES.get(kind)
        if record_type is None:
            return {'message': f'Unknown record kind: {kind}'}, 404
        data = request.get_json() or {}
        complete = data.pop('complete', True) is not False
        result, error, status = create_record(record_type, appointment_id, data, get_scheduler(), complete)
        return (error if error else result), status
