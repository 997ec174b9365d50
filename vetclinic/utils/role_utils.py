# vetclinic/utils/role_utils.py
from ..models.user_model import Role

# Dashboard sections and actions each role may use
ROLE_PERMISSIONS = {
    Role.CLIENT: {
        'interface_sections': ['profile', 'pets', 'appointments', 'records', 'services'],
        'actions': [
            'view_services', 'manage_own_pets', 'book_appointment',
            'view_own_appointments', 'cancel_own_appointment', 'view_own_records'
        ]
    },
    Role.VETERINARIAN: {
        'interface_sections': ['profile', 'pets', 'appointments', 'records', 'services', 'dashboard'],
        'actions': [
            'view_services', 'view_all_pets', 'view_all_appointments',
            'update_appointment_status', 'create_records', 'view_all_records'
        ]
    },
    Role.ADMIN: {
        'interface_sections': [
            'profile', 'users', 'pets', 'appointments', 'records', 'services', 'dashboard'
        ],
        'actions': [
            'view_services', 'manage_services', 'view_all_pets', 'manage_any_pet',
            'view_all_appointments', 'create_appointment_for_client',
            'update_appointment_status', 'cancel_any_appointment',
            'create_records', 'view_all_records', 'view_stats'
        ]
    }
}


def get_user_permissions(user):
    """Get user permissions based on their role"""
    if not user or not user.role:
        return {
            'interface_sections': ['login', 'register', 'services'],
            'actions': ['view_services']
        }
    return ROLE_PERMISSIONS.get(user.role, ROLE_PERMISSIONS[Role.CLIENT])


def get_user_data_with_permissions(user):
    """Return user data with their permissions"""
    if not user:
        return None
    return {
        'id': user.id,
        'username': user.username,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'email': user.email,
        'role': user.role.value,
        'permissions': get_user_permissions(user),
        'isBanned': user.isBanned
    }
