from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Store/retrieve/delete-by-id/list-all; no other semantics."""

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def clear(self) -> int:
        """Delete every record and return how many were removed."""

        raise NotImplementedError

    def ping(self) -> None:
        """Raise ``StorageError`` when the backend is unreachable."""

        raise NotImplementedError
