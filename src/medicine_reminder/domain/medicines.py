"""Domain models for medicine records."""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum

DEFAULT_TYPE_ICON = "📦"


class MedicineType(str, Enum):
    """Kind of medicine, with a fallback for unrecognized values."""

    TABLET = "Tablet"
    SYRUP = "Syrup"
    INJECTION = "Injection"
    CAPSULE = "Capsule"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: object) -> "MedicineType":
        """Return the matching type, or OTHER when the value is unknown."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.OTHER

    @property
    def icon(self) -> str:
        return _TYPE_ICONS.get(self, DEFAULT_TYPE_ICON)


_TYPE_ICONS = {
    MedicineType.TABLET: "💊",
    MedicineType.SYRUP: "🧴",
    MedicineType.INJECTION: "💉",
    MedicineType.CAPSULE: "💊",
}


class Frequency(str, Enum):
    """Named recurrence policy for reminders."""

    ONCE_DAILY = "Once Daily"
    TWICE_DAILY = "Twice Daily"
    EVERY_6_HOURS = "Every 6 Hours"
    EVERY_8_HOURS = "Every 8 Hours"

    @classmethod
    def parse(cls, value: object) -> "Frequency":
        """Return the matching frequency, falling back to once daily."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.ONCE_DAILY

    @property
    def icon(self) -> str:
        return _FREQUENCY_ICONS[self]


_FREQUENCY_ICONS = {
    Frequency.ONCE_DAILY: "🔁",
    Frequency.TWICE_DAILY: "🔁🔁",
    Frequency.EVERY_6_HOURS: "⏲️",
    Frequency.EVERY_8_HOURS: "⏰",
}


@dataclass(frozen=True)
class MedicineRecord:
    """A persisted medicine schedule entry."""

    id: str
    name: str
    dosage: str
    type: MedicineType
    time: str
    frequency: Frequency
    start_date: str
    taken: bool = False


@dataclass(frozen=True)
class MedicineDraft:
    """User input for a new medicine before an id is assigned.

    ``time`` stays structured so reminders can be computed from it; the
    record only keeps its formatted display string.
    """

    name: str
    dosage: str
    type: MedicineType
    time: time
    frequency: Frequency
    start_date: date
