"""Value Object StayDuration - elapsed time between booking and exit."""

from dataclasses import dataclass
from datetime import datetime, timezone


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; a trailing ``Z`` and naive values are read as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class StayDuration:
    """Whole minutes spent in a slot, floor-rounded."""

    minutes: int

    def __post_init__(self) -> None:
        if self.minutes < 0:
            raise ValueError("stay duration cannot be negative")

    @classmethod
    def between(cls, start: str, end: str) -> "StayDuration":
        delta = parse_timestamp(end) - parse_timestamp(start)
        return cls(minutes=int(delta.total_seconds() // 60))

    @property
    def hours(self) -> int:
        return self.minutes // 60

    @property
    def remainder_minutes(self) -> int:
        return self.minutes % 60

    def __str__(self) -> str:
        return f"{self.hours}h {self.remainder_minutes}m"
