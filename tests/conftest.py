"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time

import pytest

from medicine_reminder.adapters.file_storage import KeyValueStorage
from medicine_reminder.adapters.key_value_medicine_repository import (
    KeyValueMedicineRepository,
)
from medicine_reminder.adapters.telegram_client import TelegramClient
from medicine_reminder.config import Settings
from medicine_reminder.containers import AppContainer
from medicine_reminder.domain.medicines import (
    Frequency,
    MedicineDraft,
    MedicineRecord,
    MedicineType,
)
from medicine_reminder.services.clock import Clock
from medicine_reminder.services.medicines import (
    MedicineRepository,
    MedicineStore,
    StorageWriteError,
)
from medicine_reminder.services.reminders import (
    NotificationFacility,
    PermissionStatus,
    ReminderScheduler,
)
from medicine_reminder.services.views import MedicineViewService

REFERENCE_NOW = datetime(2024, 5, 10, 9, 0, tzinfo=UTC)


@dataclass
class FixedClock(Clock):
    """Clock frozen at a settable instant."""

    current: datetime = REFERENCE_NOW

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()


@dataclass
class InMemoryKeyValueStorage(KeyValueStorage):
    """Dictionary-backed key-value storage for tests."""

    items: dict[str, str] = field(default_factory=dict)
    fail_writes: bool = False

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.items[key] = value


@dataclass
class InMemoryMedicineRepository(MedicineRepository):
    """Repository keeping saved snapshots in memory."""

    stored: list[MedicineRecord] = field(default_factory=list)
    saves: int = 0
    fail_writes: bool = False

    def load_all(self) -> list[MedicineRecord]:
        return list(self.stored)

    def save_all(self, records: list[MedicineRecord]) -> None:
        if self.fail_writes:
            raise StorageWriteError("write failed")
        self.saves += 1
        self.stored = list(records)


@dataclass
class FakeNotificationFacility(NotificationFacility):
    """Facility recording scheduled reminders."""

    permission: PermissionStatus = PermissionStatus.GRANTED
    permission_requests: int = 0
    scheduled: list[tuple[str, str, datetime]] = field(default_factory=list)
    fail_at: set[datetime] = field(default_factory=set)
    cancelled: int = 0

    async def request_permission(self) -> PermissionStatus:
        self.permission_requests += 1
        return self.permission

    async def schedule(self, title: str, body: str, at: datetime) -> str:
        if at in self.fail_at:
            raise RuntimeError("scheduling failed")
        self.scheduled.append((title, body, at))
        return f"reminder-{len(self.scheduled)}"

    async def cancel_all(self) -> None:
        self.cancelled += 1
        self.scheduled.clear()


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    closed: bool = False

    async def send_message(self, chat_id: int, text: str) -> None:
        self.messages.append((chat_id, text))

    async def close(self) -> None:
        self.closed = True


def make_draft(  # noqa: PLR0913
    name: str = "Aspirin",
    dosage: str = "500",
    medicine_type: MedicineType = MedicineType.TABLET,
    at: time = time(8, 30),
    frequency: Frequency = Frequency.ONCE_DAILY,
    start_date: date = REFERENCE_NOW.date(),
) -> MedicineDraft:
    return MedicineDraft(
        name=name,
        dosage=dosage,
        type=medicine_type,
        time=at,
        frequency=frequency,
        start_date=start_date,
    )


def make_record(
    record_id: str,
    start_date: str,
    taken: bool = False,
    name: str = "Aspirin",
) -> MedicineRecord:
    return MedicineRecord(
        id=record_id,
        name=name,
        dosage="500 mg",
        type=MedicineType.TABLET,
        time="08:30 AM",
        frequency=Frequency.ONCE_DAILY,
        start_date=start_date,
        taken=taken,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        timezone="UTC",
        telegram_bot_token=None,
        telegram_chat_id=None,
        access_token=None,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def facility() -> FakeNotificationFacility:
    return FakeNotificationFacility()


@pytest.fixture
def store(storage: InMemoryKeyValueStorage, clock: FixedClock) -> MedicineStore:
    return MedicineStore(
        repository=KeyValueMedicineRepository(storage=storage),
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    clock: FixedClock,
    store: MedicineStore,
    facility: FakeNotificationFacility,
) -> AppContainer:
    scheduler = ReminderScheduler(facility=facility, clock=clock)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        clock=clock,
        telegram_client=None,
        medicine_store=store,
        view_service=MedicineViewService(store=store, clock=clock),
        reminder_scheduler=scheduler,
        close_resources=close_resources,
    )
