from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import parse_iso_datetime, to_epoch_ms

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_record_id(now: datetime) -> str:
    """``record_<epoch ms>_<9 base-36 chars>``, matching ids already in the stores."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"record_{to_epoch_ms(now)}_{suffix}"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one accepted scan. Immutable once created."""

    id: str
    name: str
    country: str
    scan_timestamp: datetime
    raw_qr_data: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "country": self.country,
            "scan_timestamp": self.scan_timestamp.isoformat(),
            "raw_qr_data": self.raw_qr_data,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AttendanceRecord":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            country=str(data["country"]),
            scan_timestamp=parse_iso_datetime(data["scan_timestamp"]),
            raw_qr_data=str(data.get("raw_qr_data") or ""),
            created_at=parse_iso_datetime(data.get("created_at") or data["scan_timestamp"]),
            updated_at=parse_iso_datetime(data.get("updated_at") or data["scan_timestamp"]),
        )


def newest_first(records) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: r.scan_timestamp, reverse=True)
