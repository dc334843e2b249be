from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ..core.enums import StorageMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, name, country, scan_timestamp, raw_qr_data, created_at, updated_at"


def _to_db(value: datetime) -> datetime:
    # DATETIME columns hold naive UTC.
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(r["id"]),
        name=r["name"],
        country=r["country"],
        scan_timestamp=_from_db(r["scan_timestamp"]),
        raw_qr_data=r.get("raw_qr_data") or "",
        created_at=_from_db(r["created_at"]),
        updated_at=_from_db(r["updated_at"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Remote store shared by every scanner pointed at the same database."""

    mode = StorageMode.REMOTE

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                ORDER BY scan_timestamp DESC
                """
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s",
                (record_id,),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.id,
                    record.name,
                    record.country,
                    _to_db(record.scan_timestamp),
                    record.raw_qr_data,
                    _to_db(record.created_at),
                    _to_db(record.updated_at),
                ),
            )
        return record

    def delete(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE id=%s", (record_id,))
            return cur.rowcount > 0

    def clear(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records")
            return int(cur.rowcount)

    def ping(self) -> None:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT 1")
            cur.fetchall()
