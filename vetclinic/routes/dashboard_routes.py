from flask_restx import Namespace, Resource
from flask_jwt_extended import jwt_required
import logging
from ..models import Pet, User, Role, Service
from ..services.appointment_service import get_scheduler
from ..utils import role_required

logger = logging.getLogger(__name__)

dashboard_ns = Namespace('dashboard', description='Operations related to dashboard statistics')


@dashboard_ns.route('/stats')
class DashboardStats(Resource):
    @jwt_required()
    @role_required(Role.ADMIN, Role.VETERINARIAN)
    def get(self):
        """Appointment counts per status and clinic totals"""
        scheduler = get_scheduler()
        buckets, error, status = scheduler.list_buckets()
        if error:
            return error, status
        try:
            return {
                'appointments_by_status': buckets['counts'],
                'appointments_today': scheduler.today_count(),
                'conflicts': sum(1 for a in buckets['scheduled'] if a['hasConflict']),
                'total_pets': Pet.query.count(),
                'total_clients': User.query.filter_by(role=Role.CLIENT).count(),
                'total_services': Service.query.count(),
            }, 200
        except Exception as e:
            logger.exception("Failed to retrieve dashboard statistics")
            return {'message': 'Failed to retrieve dashboard statistics', 'error': str(e)}, 500
