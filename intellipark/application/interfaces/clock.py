"""Clock port - lets tests pin the time used for timestamps and durations."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware UTC."""
        raise NotImplementedError

    def iso_now(self) -> str:
        """Current time as ISO 8601 with millisecond precision and a ``Z`` suffix."""
        return self.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def millis(self) -> int:
        return int(self.now().timestamp() * 1000)


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """
    Fixed clock for deterministic tests.

    Args:
        fixed_time: Time to return. Defaults to the real time at construction.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._fixed_time

    def advance(self, seconds: int = 0, minutes: int = 0, hours: int = 0) -> None:
        self._fixed_time = self._fixed_time + timedelta(
            seconds=seconds, minutes=minutes, hours=hours
        )
