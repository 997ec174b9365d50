# vetclinic/utils/util.py
from functools import wraps

from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity

from ..models.user_model import Role


def current_identity():
    """The caller's id and role, read from the access token."""
    claims = get_jwt()
    return {'id': int(get_jwt_identity()), 'role': Role(claims['role'])}


def role_required(*roles):
    def wrapper(fn):
        @wraps(fn)
        @jwt_required()
        def decorator(*args, **kwargs):
            if get_jwt().get('role') not in [role.value for role in roles]:
                return {'message': 'Access denied'}, 403
            return fn(*args, **kwargs)
        return decorator
    return wrapper
