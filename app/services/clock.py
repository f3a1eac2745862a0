# app/services/clock.py
from datetime import datetime

import pytz


class Clock:
    """Fuente de la hora local usada para ventanas de fecha y de horario."""

    def now(self):
        raise NotImplementedError

    def today(self):
        return self.now().date()


class SystemClock(Clock):

    def __init__(self, tz_name='America/Santiago'):
        self.tz = pytz.timezone(tz_name)

    def now(self):
        return datetime.now(pytz.utc).astimezone(self.tz)


class FixedClock(Clock):

    def __init__(self, instant):
        self.instant = instant

    def now(self):
        return self.instant

    def set(self, instant):
        self.instant = instant
