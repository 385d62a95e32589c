"""Notification facility delivering reminders as Telegram messages."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

import httpx

from medicine_reminder.adapters.telegram_client import TelegramClient
from medicine_reminder.services.clock import Clock
from medicine_reminder.services.reminders import (
    NotificationFacility,
    PermissionStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class TelegramReminderFacility(NotificationFacility):
    """Holds one event-loop timer per reminder and sends it when due.

    Reminders live only as long as the process.
    """

    client: TelegramClient | None
    chat_id: int | None
    clock: Clock
    _timers: dict[str, asyncio.TimerHandle] = field(
        default_factory=dict, init=False, repr=False
    )
    _deliveries: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    @property
    def pending(self) -> list[str]:
        """Return handles of reminders not yet delivered."""
        return list(self._timers)

    async def request_permission(self) -> PermissionStatus:
        """Grant delivery only when a bot and a chat are configured."""
        if self.client is None or self.chat_id is None:
            return PermissionStatus.DENIED
        return PermissionStatus.GRANTED

    async def schedule(self, title: str, body: str, at: datetime) -> str:
        """Arm a timer that sends the reminder at ``at``."""
        if self.client is None or self.chat_id is None:
            raise RuntimeError("Telegram reminders are not configured")
        loop = asyncio.get_running_loop()
        delay = max(at.timestamp() - self.clock.now().timestamp(), 0.0)
        handle = str(uuid4())
        self._timers[handle] = loop.call_later(
            delay, self._fire, handle, f"{title}\n{body}"
        )
        logger.info("Reminder %s armed for %s", handle, at.isoformat())
        return handle

    async def cancel_all(self) -> None:
        """Cancel every pending reminder timer."""
        for timer in self._timers.values():
            timer.cancel()
        count = len(self._timers)
        self._timers.clear()
        logger.info("Cancelled %d reminders", count)

    def _fire(self, handle: str, text: str) -> None:
        self._timers.pop(handle, None)
        task = asyncio.get_running_loop().create_task(self._deliver(handle, text))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, handle: str, text: str) -> None:
        if self.client is None or self.chat_id is None:
            return
        try:
            await self.client.send_message(chat_id=self.chat_id, text=text)
        except httpx.HTTPError:
            logger.exception("Failed to deliver reminder %s", handle)
