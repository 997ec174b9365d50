from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from flask_restx import Api
from .config import Config

migrate = Migrate()
db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()


def build_api():
    return Api(
        title='Veterinary Clinic API',
        version='1.0',
        description='Appointments, pets and medical records for the clinic',
        doc='/docs',
        ui_config={
            'displayOperationId': True,
            'docExpansion': 'none',
            'filter': True,
            'defaultModelsExpandDepth': 1,
            'defaultModelExpandDepth': 1
        },
        security=[{'BearerAuth': []}],  # Define JWT security
        authorizations={
            'BearerAuth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter your JWT token as "Bearer <token>"'
            }
        }
    )


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)
    api = build_api()
    api.init_app(app)
    register_namespaces(api)

    # Enable CORS
    CORS(app, resources={r"/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         allow_headers=app.config.get('CORS_ALLOW_HEADERS', ["Content-Type", "Authorization"]),
         methods=app.config.get('CORS_METHODS', ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]))

    # Scheduling collaborators, swapped out in tests
    from .services.notification_service import EmailNotifier
    from .utils.clock import SystemClock
    app.extensions['vetclinic.notifier'] = EmailNotifier(app.config)
    app.extensions['vetclinic.clock'] = SystemClock(app.config['CLINIC_TIMEZONE'])

    from .commands import register_commands
    register_commands(app)

    # Error handler
    @app.errorhandler(403)
    def forbidden(error):
        return jsonify({
            'message': 'You do not have permission to perform this operation',
            'error': str(error)
        }), 403

    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()  # Create all tables

    return app


def register_namespaces(api):
    from .routes.auth_routes import auth_ns
    from .routes.pet_routes import pet_ns
    from .routes.service_routes import service_ns
    from .routes.appointment_routes import appointment_ns
    from .routes.record_routes import record_ns
    from .routes.dashboard_routes import dashboard_ns

    for namespace in (auth_ns, pet_ns, service_ns, appointment_ns, record_ns, dashboard_ns):
        api.add_namespace(namespace)

