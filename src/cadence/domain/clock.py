"""
Time source abstraction.

Scheduling code never calls datetime.now() directly; it asks a Clock, so
tests can pin and advance time.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


def ensure_aware(instant: datetime) -> datetime:
    """Treat a naive datetime as UTC; aware datetimes pass through unchanged."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        pass


class SystemClock(Clock):
    """Wall-clock time in the local timezone."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: datetime):
        self._now = ensure_aware(start)

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta | None = None, **kwargs) -> datetime:
        self._now = self._now + (delta or timedelta(**kwargs))
        return self._now

    def set(self, instant: datetime) -> None:
        self._now = ensure_aware(instant)
