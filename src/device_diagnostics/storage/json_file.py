"""JsonFileRecordStore — one file per record inside a data directory.

Record ``name`` is stored at ``<directory>/<name>.json``.  Writes go to a
temporary sibling file first and are moved into place with
:func:`os.replace`, so a crashed write never leaves a truncated record.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from device_diagnostics.storage.base import RecordStore

logger = logging.getLogger(__name__)

_VALID_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileRecordStore(RecordStore):
    """File-backed :class:`RecordStore`.

    Parameters
    ----------
    directory:
        Directory holding the record files.  Created on first write if it
        does not exist.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        """Directory the records live in."""
        return self._directory

    def get(self, name: str) -> str | None:
        path = self._path_for(name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, name: str, value: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(name)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)
        logger.debug("Wrote record %r (%d bytes) to %s", name, len(value), path)

    def delete(self, name: str) -> None:
        path = self._path_for(name)
        if path.exists():
            path.unlink()
            logger.debug("Deleted record %r (%s)", name, path)

    def _path_for(self, name: str) -> Path:
        if not _VALID_NAME.match(name):
            raise ValueError(f"Invalid record name {name!r}.")
        return self._directory / f"{name}.json"

    def __repr__(self) -> str:
        return f"JsonFileRecordStore(directory={str(self._directory)!r})"
