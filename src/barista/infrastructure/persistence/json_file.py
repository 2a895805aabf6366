"""Shared plumbing for the JSON-file-backed repositories."""

from __future__ import annotations

import json
from pathlib import Path


class JsonFile:
    """A JSON array on disk, read and rewritten whole on every call."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def upsert(self, record: dict, key: str = "id") -> None:
        """Replace the record with the same key, otherwise append it."""
        records = self.load()
        for i, raw in enumerate(records):
            if raw[key] == record[key]:
                records[i] = record
                break
        else:
            records.append(record)
        self.persist(records)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
