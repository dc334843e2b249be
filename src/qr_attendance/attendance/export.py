from __future__ import annotations

import csv
import io
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from ..core.constants import CSV_HEADERS
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, newest_first


def _local(value: datetime, tz: Optional[tzinfo]) -> datetime:
    return value.astimezone(tz) if tz is not None else value.astimezone()


def records_to_csv(records: Iterable[AttendanceRecord], *, tz: Optional[tzinfo] = None) -> str:
    """Render records newest scan first.

    The header row is written as-is; every data field is quoted and embedded
    quotes are doubled. Downstream spreadsheets depend on this exact layout.
    """

    rows = newest_first(records)
    if not rows:
        raise ValidationError("No attendance records to export.")

    out = io.StringIO()
    header = csv.writer(out, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    header.writerow(CSV_HEADERS)

    writer = csv.writer(out, lineterminator="\n", quoting=csv.QUOTE_ALL)
    for index, record in enumerate(rows, start=1):
        ts = _local(record.scan_timestamp, tz)
        writer.writerow(
            [
                index,
                record.name,
                record.country,
                ts.strftime("%Y-%m-%d"),
                ts.strftime("%H:%M:%S"),
                ts.strftime("%Y-%m-%d %H:%M:%S"),
            ]
        )

    # No trailing newline after the last row.
    return out.getvalue().rstrip("\n")


def export_filename(now: datetime) -> str:
    return f"attendance-records-{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"
