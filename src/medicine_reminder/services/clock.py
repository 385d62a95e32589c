"""Wall clock bound to the configured timezone."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""

    def today(self) -> date:
        """Return the current calendar date."""


@dataclass
class SystemClock(Clock):
    """Clock reading the system time in a named timezone."""

    timezone_name: str = "UTC"

    def now(self) -> datetime:
        return datetime.now(tz=ZoneInfo(self.timezone_name))

    def today(self) -> date:
        return self.now().date()
