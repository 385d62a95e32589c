"""Medicine record store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import uuid4

from medicine_reminder.domain.medicines import MedicineDraft, MedicineRecord
from medicine_reminder.domain.views import HistoryFilter
from medicine_reminder.services.clock import Clock
from medicine_reminder.services.views import matches_filter

logger = logging.getLogger(__name__)

Records = tuple[MedicineRecord, ...]
Listener = Callable[[Records], None]

CLEARABLE_FILTERS = frozenset({HistoryFilter.TAKEN, HistoryFilter.MISSED})


class StorageReadError(RuntimeError):
    """Raised when the persisted collection cannot be decoded."""


class StorageWriteError(RuntimeError):
    """Raised when the collection cannot be written."""


class UnsupportedClearError(ValueError):
    """Raised when bulk clear is requested for a tab that does not offer it."""


class MedicineRepository(Protocol):
    """Persistence interface for the medicine collection."""

    def load_all(self) -> list[MedicineRecord]:
        """Return the persisted collection, empty when nothing is stored."""

    def save_all(self, records: list[MedicineRecord]) -> None:
        """Overwrite the persisted collection."""


@dataclass
class MedicineStore:
    """Shared, ordered medicine collection mirrored to storage.

    Every mutation replaces the whole collection, writes it through the
    repository and then notifies subscribers with the new snapshot.
    """

    repository: MedicineRepository
    clock: Clock
    dosage_unit: str = "mg"
    time_format: str = "%I:%M %p"
    _records: Records = field(default=(), init=False, repr=False)
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)

    @property
    def records(self) -> Records:
        """Return the current snapshot."""
        return self._records

    def load(self) -> Records:
        """Read the persisted collection, falling back to empty on failure."""
        try:
            loaded = self.repository.load_all()
        except StorageReadError:
            logger.warning("Stored medicines unreadable, starting empty", exc_info=True)
            loaded = []
        self._records = _dedupe(loaded)
        self._notify()
        return self._records

    def add(self, draft: MedicineDraft) -> tuple[Records, MedicineRecord | None]:
        """Append a record built from the draft.

        Returns the collection and the created record, which is None when
        the draft has an empty name or dosage.
        """
        if not draft.name.strip() or not draft.dosage.strip():
            logger.info("Rejected medicine draft without name or dosage")
            return self._records, None
        record = MedicineRecord(
            id=self._new_id(),
            name=draft.name,
            dosage=(
                f"{draft.dosage} {self.dosage_unit}"
                if self.dosage_unit
                else draft.dosage
            ),
            type=draft.type,
            time=draft.time.strftime(self.time_format),
            frequency=draft.frequency,
            start_date=draft.start_date.isoformat(),
            taken=False,
        )
        self._commit((*self._records, record))
        return self._records, record

    def toggle(self, medicine_id: str) -> Records:
        """Flip the taken flag of a record; unknown ids are ignored."""
        if not self._contains(medicine_id):
            return self._records
        self._commit(
            tuple(
                replace(record, taken=not record.taken)
                if record.id == medicine_id
                else record
                for record in self._records
            )
        )
        return self._records

    def remove(self, medicine_id: str) -> Records:
        """Drop a record; unknown ids are ignored."""
        if not self._contains(medicine_id):
            return self._records
        self._commit(
            tuple(record for record in self._records if record.id != medicine_id)
        )
        return self._records

    def clear(self) -> Records:
        """Remove every record."""
        self._commit(())
        return self._records

    def clear_filtered(self, mode: HistoryFilter) -> Records:
        """Remove every record currently matching a taken or missed tab."""
        if mode not in CLEARABLE_FILTERS:
            raise UnsupportedClearError(f"Bulk clear is not offered for {mode.value}")
        today = self.clock.today()
        remaining = tuple(
            record
            for record in self._records
            if not matches_filter(record, mode, today)
        )
        if len(remaining) != len(self._records):
            self._commit(remaining)
        return self._records

    def persist(self, records: Records) -> None:
        """Write the full collection, logging failures."""
        try:
            self.repository.save_all(list(records))
        except StorageWriteError:
            logger.exception("Failed to persist %d medicines", len(records))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for new snapshots and return an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, records: Records) -> None:
        self._records = records
        try:
            self.persist(records)
        finally:
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._records)
            except Exception:
                logger.exception("Medicine listener failed")

    def _contains(self, medicine_id: str) -> bool:
        return any(record.id == medicine_id for record in self._records)

    def _new_id(self) -> str:
        existing = {record.id for record in self._records}
        while True:
            candidate = str(uuid4())
            if candidate not in existing:
                return candidate


def _dedupe(records: list[MedicineRecord]) -> Records:
    seen: set[str] = set()
    unique: list[MedicineRecord] = []
    for record in records:
        if record.id in seen:
            logger.warning("Dropping duplicate stored medicine %s", record.id)
            continue
        seen.add(record.id)
        unique.append(record)
    return tuple(unique)
