from flask_restx import Namespace, Resource, fields
from flask import request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity, unset_jwt_cookies
from sqlalchemy.exc import IntegrityError
import datetime
import logging
import re
from .. import db, bcrypt
from ..models import User, Role
from ..utils.role_utils import get_user_data_with_permissions

logger = logging.getLogger(__name__)

auth_ns = Namespace('auth', description='Authentication operations')

register_model = auth_ns.model('Register', {
    'username': fields.String(required=True, description='Username'),
    'first_name': fields.String(description='First name'),
    'last_name': fields.String(description='Last name'),
    'email': fields.String(required=True, description='Email'),
    'password': fields.String(required=True, description='Password')
})

login_model = auth_ns.model('Login', {
    'email': fields.String(required=True, description='Email'),
    'password': fields.String(required=True, description='Password')
})

PASSWORD_REGEX = re.compile(r'^(?=.*[A-Za-z])(?=.*\d).{6,}$')
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$')


def issue_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={'role': user.role.value, 'username': user.username},
        expires_delta=datetime.timedelta(minutes=current_app.config.get('JWT_ACCESS_TOKEN_MINUTES', 60))
    )


@auth_ns.route('/roles')
class Roles(Resource):
    def get(self):
        """List the available roles"""
        return {'roles': [role.value for role in Role]}, 200


@auth_ns.route('/register')
class Register(Resource):
    @auth_ns.expect(register_model)
    def post(self):
        """Register a new pet owner account (role CLIENT)"""
        data = request.get_json() or {}
        if not all(k in data for k in ('username', 'email', 'password')):
            return {'message': 'Missing required fields: username, email, password.'}, 400

        if not EMAIL_REGEX.match(data['email']):
            return {'message': 'Invalid email format.'}, 400

        if not PASSWORD_REGEX.match(data['password']):
            return {'message': 'Password must be at least 6 characters and contain a letter and a digit.'}, 400

        if User.query.filter_by(email=data['email']).first():
            return {'message': 'Email is already registered.'}, 400

        new_user = User(
            username=data['username'],
            first_name=data.get('first_name'),
            last_name=data.get('last_name'),
            email=data['email'],
            password=bcrypt.generate_password_hash(data['password']).decode('utf-8'),
            role=Role.CLIENT
        )

        try:
            db.session.add(new_user)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.exception("Failed to register user")
            return {'message': 'Database error: unable to register user.'}, 500

        logger.info(f"Registered user {new_user.id}")
        return {
            'message': 'User registered successfully.',
            'access_token': issue_token(new_user),
            'user': get_user_data_with_permissions(new_user)
        }, 201


@auth_ns.route('/login')
class Login(Resource):
    @auth_ns.expect(login_model)
    def post(self):
        """Log in"""
        data = request.get_json() or {}
        if not all(k in data for k in ('email', 'password')):
            return {'message': 'Missing required fields: email, password.'}, 400

        user = User.query.filter_by(email=data['email']).first()
        if not user:
            return {'message': 'User not found.'}, 404

        if user.isBanned:
            return {'message': 'Your account is blocked. Please contact the clinic.'}, 403

        if bcrypt.check_password_hash(user.password, data['password']):
            return {
                'message': 'Logged in successfully.',
                'access_token': issue_token(user),
                'user': get_user_data_with_permissions(user)
            }, 200

        return {'message': 'Invalid password.'}, 401


@auth_ns.route('/logout')
class Logout(Resource):
    @jwt_required()
    def post(self):
        """Log out"""
        response = jsonify({'message': 'Logged out successfully.'})
        unset_jwt_cookies(response)
        return response


@auth_ns.route('/verify')
class VerifyToken(Resource):
    @jwt_required()
    def get(self):
        """Check that the token is still valid"""
        user = db.session.get(User, int(get_jwt_identity()))
        if not user:
            return {'message': 'User not found.'}, 404
        return {
            'message': 'Token is valid.',
            'user': get_user_data_with_permissions(user)
        }, 200
