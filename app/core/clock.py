"""Injectable time source.

Ranking windows are computed relative to "now".  Everything that needs the
current instant asks a ``Clock`` instead of calling ``datetime.utcnow()``
directly, so tests can pin time with ``FixedClock``.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a naive UTC datetime."""
        pass


class SystemClock(Clock):
    """Wall-clock time, matching the naive UTC timestamps stored in the database."""

    def now(self) -> datetime:
        return datetime.utcnow()


class FixedClock(Clock):
    """Always returns the same instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
