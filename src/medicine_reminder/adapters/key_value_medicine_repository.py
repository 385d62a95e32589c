"""Key-value repository for the medicine collection."""

import json
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from medicine_reminder.adapters.file_storage import KeyValueStorage
from medicine_reminder.domain.medicines import Frequency, MedicineRecord, MedicineType
from medicine_reminder.services.medicines import (
    MedicineRepository,
    StorageReadError,
    StorageWriteError,
)

SCHEMA_VERSION = 1


class StoredMedicine(BaseModel):
    """Serialized shape of one medicine record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    dosage: str
    type: str
    time: str
    frequency: str
    start_date: str = Field(alias="startDate")
    taken: bool = False

    @field_validator("start_date")
    @classmethod
    def _check_start_date(cls, value: str) -> str:
        parsed = date.fromisoformat(value)
        if parsed.isoformat() != value:
            raise ValueError("startDate must be YYYY-MM-DD")
        return value

    @classmethod
    def from_record(cls, record: MedicineRecord) -> "StoredMedicine":
        return cls(
            id=record.id,
            name=record.name,
            dosage=record.dosage,
            type=record.type.value,
            time=record.time,
            frequency=record.frequency.value,
            start_date=record.start_date,
            taken=record.taken,
        )

    def to_record(self) -> MedicineRecord:
        return MedicineRecord(
            id=self.id,
            name=self.name,
            dosage=self.dosage,
            type=MedicineType.parse(self.type),
            time=self.time,
            frequency=Frequency.parse(self.frequency),
            start_date=self.start_date,
            taken=self.taken,
        )


class StoredCollection(BaseModel):
    """Versioned envelope written under the storage key."""

    schema_version: int = SCHEMA_VERSION
    medicines: list[StoredMedicine]


@dataclass
class KeyValueMedicineRepository(MedicineRepository):
    """Stores the whole collection as one JSON blob under a fixed key."""

    storage: KeyValueStorage
    key: str = "medicines"

    def load_all(self) -> list[MedicineRecord]:
        """Decode the stored blob."""
        try:
            raw = self.storage.get_item(self.key)
        except (OSError, ValueError) as exc:
            raise StorageReadError(f"Failed to read {self.key}") from exc
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
            if isinstance(payload, list):
                # Unversioned blobs hold the bare record list.
                payload = {"schema_version": SCHEMA_VERSION, "medicines": payload}
            collection = StoredCollection.model_validate(payload)
        except (ValueError, ValidationError) as exc:
            raise StorageReadError(f"Corrupt data under {self.key}") from exc
        if collection.schema_version > SCHEMA_VERSION:
            raise StorageReadError(
                f"Unsupported schema version {collection.schema_version}"
            )
        return [item.to_record() for item in collection.medicines]

    def save_all(self, records: list[MedicineRecord]) -> None:
        """Encode and overwrite the stored blob."""
        collection = StoredCollection(
            medicines=[StoredMedicine.from_record(record) for record in records]
        )
        try:
            self.storage.set_item(
                self.key, collection.model_dump_json(by_alias=True)
            )
        except (OSError, ValueError) as exc:
            raise StorageWriteError(f"Failed to write {self.key}") from exc
