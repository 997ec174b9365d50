# vetclinic/models/__init__.py
from .user_model import User, Role, STAFF_ROLES
from .pet_model import Pet
from .service_model import Service
from .appointment_model import Appointment, AppointmentStatus
from .record_model import HealthRecord, Vaccination, Deworming
