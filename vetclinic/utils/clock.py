from datetime import datetime

from ..services.calendar_service import clinic_zone


class SystemClock:
    """Current time in the clinic's zone."""

    def __init__(self, timezone_name):
        self.zone = clinic_zone(timezone_name)

    def now(self):
        return datetime.now(self.zone)
