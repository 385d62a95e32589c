"""Local key-value storage backed by files."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from uuid import uuid4

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(Protocol):
    """Interface for string blobs stored under fixed keys."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""


@dataclass
class FileKeyValueStorage(KeyValueStorage):
    """Stores each key as a JSON file inside a data directory."""

    directory: Path

    def get_item(self, key: str) -> str | None:
        """Read the file for a key."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Write the file for a key atomically."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        finally:
            tmp.unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"
