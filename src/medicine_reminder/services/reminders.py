"""Reminder scheduling service."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Protocol

from medicine_reminder.domain.medicines import Frequency
from medicine_reminder.services.clock import Clock
from medicine_reminder.services.recurrence import expand

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "⏰ Medicine Reminder"


class PermissionStatus(str, Enum):
    """Outcome of a notification permission request."""

    GRANTED = "granted"
    DENIED = "denied"


class NotificationFacility(Protocol):
    """Host facility that delivers reminders at a given time."""

    async def request_permission(self) -> PermissionStatus:
        """Ask for permission to deliver notifications."""

    async def schedule(self, title: str, body: str, at: datetime) -> str:
        """Register a reminder and return its handle."""

    async def cancel_all(self) -> None:
        """Cancel every registered reminder."""


@dataclass(frozen=True)
class ReminderBatch:
    """Result of scheduling reminders for one medicine."""

    handles: list[str]
    failures: list[datetime]
    permission_denied: bool = False
    alert: bool = False


@dataclass
class ReminderScheduler:
    """Expands dose schedules into reminders on a notification facility."""

    facility: NotificationFacility
    clock: Clock
    title: str = DEFAULT_TITLE
    _permission_granted: bool = field(default=False, init=False, repr=False)
    _denial_reported: bool = field(default=False, init=False, repr=False)

    async def ensure_permission(self) -> bool:
        """Request permission unless it was already granted."""
        if self._permission_granted:
            return True
        status = await self.facility.request_permission()
        self._permission_granted = status is PermissionStatus.GRANTED
        return self._permission_granted

    async def schedule_reminders(
        self, medicine_name: str, base_time: time, frequency: Frequency | str
    ) -> ReminderBatch:
        """Register one reminder per expanded timestamp."""
        if not await self.ensure_permission():
            alert = not self._denial_reported
            self._denial_reported = True
            logger.warning(
                "Notification permission denied, skipping reminders for %s",
                medicine_name,
            )
            return ReminderBatch(
                handles=[], failures=[], permission_denied=True, alert=alert
            )

        times = expand(base_time, frequency, self.clock.now())
        body = f"Time to take {medicine_name}"
        results = await asyncio.gather(
            *(self.facility.schedule(self.title, body, at) for at in times),
            return_exceptions=True,
        )
        handles: list[str] = []
        failures: list[datetime] = []
        for at, result in zip(times, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    "Failed to schedule reminder for %s at %s",
                    medicine_name,
                    at.isoformat(),
                    exc_info=result,
                )
                failures.append(at)
            else:
                handles.append(result)
        logger.info(
            "Scheduled %d of %d reminders for %s",
            len(handles),
            len(times),
            medicine_name,
        )
        return ReminderBatch(handles=handles, failures=failures)

    async def cancel_all(self) -> None:
        """Cancel every reminder registered for the app."""
        await self.facility.cancel_all()
