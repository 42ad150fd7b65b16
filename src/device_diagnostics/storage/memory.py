"""In-process record store, used by tests and short-lived sessions."""
from __future__ import annotations

from device_diagnostics.storage.base import RecordStore


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed :class:`RecordStore`.

    Parameters
    ----------
    initial:
        Optional records to seed the store with.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._records: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> str | None:
        return self._records.get(name)

    def set(self, name: str, value: str) -> None:
        self._records[name] = value

    def delete(self, name: str) -> None:
        self._records.pop(name, None)

    def names(self) -> list[str]:
        """Return the names of all stored records, sorted."""
        return sorted(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"InMemoryRecordStore(records={self.names()!r})"
