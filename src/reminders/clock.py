"""Clock abstraction so reminder timing can be tested without waiting."""

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Supplies the current instant."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC instant."""
        ...


class SystemClock:
    """Clock backed by the system wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Manually driven clock for tests and simulations.

    Attributes:
        current: The instant returned by ``now()``.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and return the new instant."""
        if delta < timedelta(0):
            raise ValueError("FixedClock cannot move backwards")
        self.current = self.current + delta
        return self.current

    def set(self, instant: datetime) -> None:
        """Jump to an absolute instant."""
        self.current = instant
