"""Domain models for derived medicine views."""

from dataclasses import dataclass
from enum import Enum

from medicine_reminder.domain.medicines import MedicineRecord


class HistoryFilter(str, Enum):
    """History tabs."""

    TAKEN = "Taken"
    MISSED = "Missed"
    UPCOMING = "Upcoming"


class DayStatus(str, Enum):
    """Aggregate taken status of all records sharing a day."""

    NONE_TAKEN = "none-taken"
    ALL_TAKEN = "all-taken"
    PARTIAL = "partial"

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_COLORS = {
    DayStatus.NONE_TAKEN: "#e74c3c",
    DayStatus.ALL_TAKEN: "#2ecc71",
    DayStatus.PARTIAL: "#f1c40f",
}


@dataclass(frozen=True)
class TodaySchedule:
    """Records due today with completion progress."""

    records: list[MedicineRecord]
    taken_count: int
    total: int
    percent: int
