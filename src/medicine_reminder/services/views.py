"""Read-only projections over the medicine collection."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from medicine_reminder.domain.medicines import MedicineRecord
from medicine_reminder.domain.views import DayStatus, HistoryFilter, TodaySchedule

if TYPE_CHECKING:
    from medicine_reminder.services.clock import Clock
    from medicine_reminder.services.medicines import MedicineStore


def today_schedule(records: Iterable[MedicineRecord], today: date) -> TodaySchedule:
    """Return today's records and the rounded percentage taken."""
    day_key = today.isoformat()
    todays = [record for record in records if record.start_date == day_key]
    taken_count = sum(1 for record in todays if record.taken)
    total = len(todays)
    return TodaySchedule(
        records=todays,
        taken_count=taken_count,
        total=total,
        percent=_percent(taken_count, total),
    )


def calendar_marks(records: Iterable[MedicineRecord]) -> dict[str, DayStatus]:
    """Group records by start date and compute each day's status."""
    grouped: dict[str, list[MedicineRecord]] = {}
    for record in records:
        grouped.setdefault(record.start_date, []).append(record)

    marks: dict[str, DayStatus] = {}
    for day_key, day_records in grouped.items():
        taken_count = sum(1 for record in day_records if record.taken)
        if taken_count == len(day_records):
            marks[day_key] = DayStatus.ALL_TAKEN
        elif taken_count == 0:
            marks[day_key] = DayStatus.NONE_TAKEN
        else:
            marks[day_key] = DayStatus.PARTIAL
    return marks


def records_for_date(
    records: Iterable[MedicineRecord], selected: date | None
) -> list[MedicineRecord]:
    """Return records for the selected calendar day; none without a selection."""
    if selected is None:
        return []
    day_key = selected.isoformat()
    return [record for record in records if record.start_date == day_key]


def matches_filter(record: MedicineRecord, mode: HistoryFilter, today: date) -> bool:
    """Return True when the record belongs to the given history tab."""
    day_key = today.isoformat()
    if mode is HistoryFilter.TAKEN:
        return record.taken and record.start_date <= day_key
    if mode is HistoryFilter.MISSED:
        return not record.taken and record.start_date < day_key
    if mode is HistoryFilter.UPCOMING:
        return record.start_date > day_key
    return False


def history(
    records: Iterable[MedicineRecord],
    mode: HistoryFilter,
    search: str,
    today: date,
) -> list[MedicineRecord]:
    """Filter by tab and name, newest start date first."""
    needle = search.lower()
    selected = [
        record
        for record in records
        if matches_filter(record, mode, today) and needle in record.name.lower()
    ]
    # sorted() is stable with reverse=True, ties keep insertion order.
    return sorted(selected, key=lambda record: record.start_date, reverse=True)


def _percent(part: int, total: int) -> int:
    if total == 0:
        return 0
    return math.floor(part * 100 / total + 0.5)


@dataclass
class MedicineViewService:
    """Derived views bound to the live store and today's date."""

    store: MedicineStore
    clock: Clock

    def today(self) -> TodaySchedule:
        """Return today's schedule."""
        return today_schedule(self.store.records, self.clock.today())

    def calendar(
        self, selected: date | None = None
    ) -> tuple[dict[str, DayStatus], list[MedicineRecord]]:
        """Return calendar marks and the records for the selected day."""
        records = self.store.records
        return calendar_marks(records), records_for_date(records, selected)

    def history(self, mode: HistoryFilter, search: str = "") -> list[MedicineRecord]:
        """Return filtered, searched and sorted history."""
        return history(self.store.records, mode, search, self.clock.today())
