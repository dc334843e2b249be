from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import StorageMode
from ..core.exceptions import StorageError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class JsonFileAttendanceRepository(AttendanceRepository):
    """Local fallback store: a single JSON array of records on disk.

    A missing file reads as an empty store. A corrupt file is renamed to
    ``<name>.corrupt-<timestamp>`` and the store starts over empty. Writes go
    through a temp file and ``os.replace`` so a crash never leaves half a
    document.
    """

    mode = StorageMode.LOCAL

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _set_aside(self, reason: str) -> None:
        """Move an unreadable store out of the way so the next write cannot destroy it."""

        target = self._path.with_name(f"{self._path.name}.corrupt-{now_utc().strftime('%Y%m%dT%H%M%S%f')}")
        try:
            os.replace(self._path, target)
        except OSError as e:
            raise StorageError(f"Local attendance store {self._path} is unreadable and could not be moved aside: {e}") from e
        logger.error("Local attendance store %s is unreadable (%s); moved it to %s", self._path, reason, target)

    def _read(self) -> list[AttendanceRecord]:
        if not self._path.exists():
            return []
        try:
            data = self._path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read local attendance store {self._path}: {e}") from e
        try:
            raw = json.loads(data.decode("utf-8"))
        except ValueError as e:
            self._set_aside(str(e))
            return []
        if not isinstance(raw, list):
            self._set_aside("not a JSON array")
            return []

        records = []
        for item in raw:
            try:
                records.append(AttendanceRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed local record %r: %s", item, e)
        return records

    def _write(self, records: Sequence[AttendanceRecord]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".records-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write local attendance store {self._path}: {e}") from e

    def list_all(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            return self._read()

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return next((r for r in self._read() if r.id == record_id), None)

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            records = self._read()
            records.append(record)
            self._write(records)
        return record

    def delete(self, record_id: str) -> bool:
        with self._lock:
            records = self._read()
            kept = [r for r in records if r.id != record_id]
            if len(kept) == len(records):
                return False
            self._write(kept)
            return True

    def clear(self) -> int:
        with self._lock:
            count = len(self._read())
            if self._path.exists():
                try:
                    self._path.unlink()
                except OSError as e:
                    raise StorageError(f"Failed to clear local attendance store {self._path}: {e}") from e
            return count

    def ping(self) -> None:
        return None
