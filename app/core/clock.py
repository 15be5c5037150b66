"""Wall-clock access for the availability engine.

All "has this schedule opened yet" decisions read the time through a clock
instance handed to the services, so tests can pin or advance it. The
operational timezone comes from configuration and is carried by the clock.
"""
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from app.core.config import settings

UTC = timezone.utc


def to_utc(value: datetime, assume_tz: Optional[tzinfo] = None) -> datetime:
    """Normalize an instant to aware UTC. Naive values are read in `assume_tz` (UTC when omitted)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=assume_tz or UTC)
    return value.astimezone(UTC)


class Clock:
    def __init__(self, tz_name: Optional[str] = None):
        self.tz = ZoneInfo(tz_name or settings.OPERATIONAL_TIMEZONE)

    def now(self) -> datetime:
        raise NotImplementedError

    def localize(self, value: datetime) -> datetime:
        """Interpret client supplied instants; naive ones are operational-timezone wall time."""
        return to_utc(value, assume_tz=self.tz)


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, instant: datetime, tz_name: Optional[str] = None):
        super().__init__(tz_name)
        self._instant = self.localize(instant)

    def now(self) -> datetime:
        return self._instant.astimezone(self.tz)

    def set(self, instant: datetime):
        self._instant = self.localize(instant)

    def advance(self, **kwargs) -> datetime:
        self._instant = self._instant + timedelta(**kwargs)
        return self.now()


def get_system_clock() -> Clock:
    return SystemClock()
