"""Errors raised inside the scheduling services.

Each error carries a short ``code`` so callers can tell a record that still
has to be written apart from a transition that is never allowed.
"""


class SchedulingError(Exception):
    code = 'scheduling-error'
    status = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class ValidationError(SchedulingError):
    """Missing or malformed input on create."""
    code = 'validation'


class SlotTaken(ValidationError):
    """The requested slot is already held by another appointment."""
    code = 'slot-taken'
    status = 409


class NotFound(SchedulingError):
    code = 'not-found'
    status = 404


class InvalidTransition(SchedulingError):
    """The status change is not in the transition table."""
    code = 'invalid-transition'
    status = 409


class RecordRequired(SchedulingError):
    """Completion needs a medical record that does not exist yet."""
    code = 'record-required'
    status = 409

    def __init__(self, message, record_type):
        super().__init__(message)
        self.record_type = record_type

    def to_dict(self):
        data = super().to_dict()
        data['record_type'] = self.record_type
        return data


class DeleteNotAllowed(SchedulingError):
    code = 'delete-not-allowed'
    status = 409


class PersistenceError(SchedulingError):
    """The store was unreachable or rejected a write."""
    code = 'persistence-failure'
    status = 500
