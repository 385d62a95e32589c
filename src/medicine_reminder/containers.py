"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from medicine_reminder.adapters.file_storage import FileKeyValueStorage
from medicine_reminder.adapters.key_value_medicine_repository import (
    KeyValueMedicineRepository,
)
from medicine_reminder.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from medicine_reminder.adapters.telegram_reminders import TelegramReminderFacility
from medicine_reminder.config import Settings
from medicine_reminder.services.clock import Clock, SystemClock
from medicine_reminder.services.medicines import MedicineStore
from medicine_reminder.services.reminders import ReminderScheduler
from medicine_reminder.services.views import MedicineViewService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    telegram_client: TelegramClient | None
    medicine_store: MedicineStore
    view_service: MedicineViewService
    reminder_scheduler: ReminderScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    clock = SystemClock(resolved_settings.timezone)
    repository = KeyValueMedicineRepository(
        storage=FileKeyValueStorage(resolved_settings.data_dir),
        key=resolved_settings.storage_key,
    )
    medicine_store = MedicineStore(
        repository=repository,
        clock=clock,
        dosage_unit=resolved_settings.dosage_unit,
        time_format=resolved_settings.time_format,
    )
    telegram_client = (
        HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
        if resolved_settings.telegram_bot_token
        else None
    )
    facility = TelegramReminderFacility(
        client=telegram_client,
        chat_id=resolved_settings.telegram_chat_id,
        clock=clock,
    )
    reminder_scheduler = ReminderScheduler(
        facility=facility,
        clock=clock,
        title=resolved_settings.reminder_title,
    )

    async def close_resources() -> None:
        await reminder_scheduler.cancel_all()
        if telegram_client is not None:
            await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        telegram_client=telegram_client,
        medicine_store=medicine_store,
        view_service=MedicineViewService(store=medicine_store, clock=clock),
        reminder_scheduler=reminder_scheduler,
        close_resources=close_resources,
    )
