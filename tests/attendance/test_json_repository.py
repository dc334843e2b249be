from __future__ import annotations

import json
from datetime import datetime, timezone

from qr_attendance.attendance.json_attendance_repository import JsonFileAttendanceRepository
from qr_attendance.attendance.model import AttendanceRecord
from qr_attendance.core.enums import StorageMode


def _record(record_id: str, raw: str, minute: int = 0) -> AttendanceRecord:
    ts = datetime(2026, 3, 1, 9, minute, 0, tzinfo=timezone.utc)
    return AttendanceRecord(
        id=record_id,
        name="DOE, John",
        country="USA",
        scan_timestamp=ts,
        raw_qr_data=raw,
        created_at=ts,
        updated_at=ts,
    )


def test_missing_file_reads_as_empty(tmp_path):
    repo = JsonFileAttendanceRepository(tmp_path / "nested" / "records.json")
    assert repo.list_all() == []
    assert repo.mode is StorageMode.LOCAL


def test_create_persists_to_disk(tmp_path):
    path = tmp_path / "records.json"
    repo = JsonFileAttendanceRepository(path)
    repo.create(_record("record_1", "DOE, John, USA"))

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored[0]["id"] == "record_1"
    assert stored[0]["raw_qr_data"] == "DOE, John, USA"

    reopened = JsonFileAttendanceRepository(path)
    assert reopened.get_by_id("record_1") == _record("record_1", "DOE, John, USA")


def test_corrupt_file_is_moved_aside_and_kept(tmp_path):
    path = tmp_path / "records.json"
    path.write_text("{not valid json", encoding="utf-8")
    repo = JsonFileAttendanceRepository(path)

    assert repo.list_all() == []
    repo.create(_record("record_1", "A, B, C"))
    assert [r.id for r in repo.list_all()] == ["record_1"]

    kept = [p for p in tmp_path.iterdir() if p.name.startswith("records.json.corrupt-")]
    assert len(kept) == 1
    assert kept[0].read_text(encoding="utf-8") == "{not valid json"


def test_non_array_document_is_moved_aside(tmp_path):
    path = tmp_path / "records.json"
    path.write_text('{"id": "record_1"}', encoding="utf-8")

    assert JsonFileAttendanceRepository(path).list_all() == []
    assert not path.exists()
    assert any(p.name.startswith("records.json.corrupt-") for p in tmp_path.iterdir())


def test_malformed_entries_are_skipped(tmp_path):
    path = tmp_path / "records.json"
    good = _record("record_1", "A, B, C").to_dict()
    path.write_text(json.dumps([good, {"id": "broken"}]), encoding="utf-8")

    assert [r.id for r in JsonFileAttendanceRepository(path).list_all()] == ["record_1"]


def test_delete_and_clear(tmp_path):
    path = tmp_path / "records.json"
    repo = JsonFileAttendanceRepository(path)
    repo.create(_record("record_1", "A, B, C"))
    repo.create(_record("record_2", "D, E, F", minute=5))

    assert repo.delete("record_1") is True
    assert repo.delete("record_1") is False
    assert [r.id for r in repo.list_all()] == ["record_2"]

    assert repo.clear() == 1
    assert repo.list_all() == []
    assert not path.exists()


def test_no_temp_files_left_behind(tmp_path):
    repo = JsonFileAttendanceRepository(tmp_path / "records.json")
    repo.create(_record("record_1", "A, B, C"))
    repo.create(_record("record_2", "D, E, F"))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["records.json"]
