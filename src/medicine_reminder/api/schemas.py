"""Pydantic models for API payloads."""

from datetime import date, time

from pydantic import BaseModel, field_validator

from medicine_reminder.domain.medicines import Frequency, MedicineDraft, MedicineType


class MedicineCreate(BaseModel):
    """Payload for adding a medicine."""

    name: str
    dosage: str
    type: str = MedicineType.TABLET.value
    time: time
    frequency: str = Frequency.ONCE_DAILY.value
    start_date: date | None = None

    @field_validator("time")
    @classmethod
    def _check_local_time(cls, value: time) -> time:
        # Dose times are wall-clock times in the configured timezone.
        if value.tzinfo is not None:
            raise ValueError("time must not carry a UTC offset")
        return value

    def to_draft(self, today: date) -> MedicineDraft:
        """Build a draft, defaulting the start date to today."""
        return MedicineDraft(
            name=self.name,
            dosage=self.dosage,
            type=MedicineType.parse(self.type),
            time=self.time,
            frequency=Frequency.parse(self.frequency),
            start_date=self.start_date or today,
        )
