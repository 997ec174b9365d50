from .util import role_required, current_identity
