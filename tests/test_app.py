from __future__ import annotations

import pytest

from qr_attendance import create_app


@pytest.fixture
def store_path(tmp_path, monkeypatch):
    path = tmp_path / "records.json"
    monkeypatch.setattr("config.testing.LOCAL_STORE_PATH", str(path))
    return path


@pytest.fixture
def client(store_path):
    app = create_app("config.testing")
    return app.test_client()


def _start(client):
    res = client.post("/api/session/start")
    assert res.status_code == 200
    return res.get_json()


def test_scanner_page_renders(client):
    res = client.get("/")
    assert res.status_code == 200
    assert b"QR Attendance Scanner" in res.data


def test_start_reports_camera(client):
    data = _start(client)
    assert data["state"] == "SCANNING"
    assert data["camera"] == "environment"
    assert data["message"].startswith("Back camera started")


def test_scan_before_start_is_rejected(client):
    res = client.post("/api/scan", json={"code": "SMITH, John, USA"})
    assert res.status_code == 400
    assert res.get_json()["error_type"] == "validation_error"


def test_scan_then_duplicate(client, store_path):
    _start(client)

    res = client.post("/api/scan", json={"code": "SMITH, John, USA"})
    body = res.get_json()
    assert res.status_code == 200
    assert body["decision"] == "ACCEPT"
    assert body["record"]["name"] == "SMITH, John"
    assert body["message"] == "Attendance recorded for SMITH, John"
    assert body["resume_after_ms"] == 2000
    assert store_path.exists()

    # Immediate re-read of the same frame is swallowed.
    res = client.post("/api/scan", json={"code": "SMITH, John, USA"})
    assert res.status_code == 200
    assert res.get_json()["decision"] == "SUPPRESS_COOLDOWN"

    # A different code resets the cooldown, so the first one is now a duplicate.
    client.post("/api/scan", json={"code": "Jane Roe, Canada"})
    res = client.post("/api/scan", json={"code": "SMITH, John, USA"})
    assert res.status_code == 409
    body = res.get_json()
    assert body["error_type"] == "duplicate"
    assert body["title"] == "QR Code Already Scanned!"


def test_unparseable_code(client):
    _start(client)

    res = client.post("/api/scan", json={"code": "JUSTONEWORD"})

    assert res.status_code == 422
    assert res.get_json()["error_type"] == "parse_failure"
    assert client.get("/api/records").get_json()["total"] == 0


def test_missing_code(client):
    _start(client)
    res = client.post("/api/scan", json={"code": 42})
    assert res.status_code == 400


def test_delete_allows_rescan(client):
    _start(client)
    record = client.post("/api/scan", json={"code": "SMITH, John, USA"}).get_json()["record"]
    client.post("/api/scan", json={"code": "Jane Roe, Canada"})

    res = client.delete(f"/api/records/{record['id']}")
    assert res.status_code == 200

    listing = client.get("/api/records").get_json()
    assert listing["total"] == 1
    assert listing["storage_mode"] == "local"

    res = client.post("/api/scan", json={"code": "SMITH, John, USA"})
    assert res.status_code == 200
    assert res.get_json()["decision"] == "ACCEPT"


def test_delete_unknown_record(client):
    _start(client)
    assert client.delete("/api/records/record_nope").status_code == 400


def test_export_and_clear(client):
    _start(client)
    client.post("/api/scan", json={"code": "SMITH, John, USA"})

    res = client.get("/export.csv")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "attachment; filename=attendance-records-" in res.headers["Content-Disposition"]
    assert res.data.startswith(b"\xef\xbb\xbf")
    text = res.data.decode("utf-8-sig")
    assert text.splitlines()[0] == "No.,Name,Country,Scan Date,Scan Time,Full Timestamp"
    assert '"SMITH, John","USA"' in text

    res = client.post("/api/records/clear")
    assert res.get_json()["cleared"] == 1
    assert client.get("/export.csv").status_code == 400


def test_stop_reports_count(client):
    _start(client)
    client.post("/api/records/test")

    res = client.post("/api/session/stop")

    assert res.get_json()["record_count"] == 1
    assert client.post("/api/session/stop").status_code == 400


def test_test_record_only_once(client):
    res = client.post("/api/records/test")
    assert res.status_code == 201
    assert res.get_json()["record"]["country"] == "Test Country"
    assert client.post("/api/records/test").status_code == 409


def test_switch_camera(client):
    res = client.post("/api/session/camera")
    assert res.get_json() == {"success": True, "camera": "user", "label": "Front"}


def test_diagnostics(client):
    _start(client)
    client.post("/api/scan", json={"code": "SMITH, John, USA"})

    info = client.get("/api/diagnostics").get_json()

    assert info["state"] == "SCANNING"
    assert info["blocked"] == ["SMITH, John, USA"]
    assert info["storage_mode"] == "local"


def test_badge_png(client):
    res = client.get("/api/qr/badge?last=Smith&first=John&country=USA")
    assert res.status_code == 200
    assert res.mimetype == "image/png"
    assert client.get("/api/qr/badge?last=Smith").status_code == 400


def test_blank_code_is_format_error(client):
    _start(client)

    res = client.post("/api/scan", json={"code": "   "})

    assert res.status_code == 422
    assert res.get_json()["error_type"] == "parse_failure"


def test_storage_check_reports_local_store(client):
    client.post("/api/records/test")

    res = client.post("/api/storage/test")

    body = res.get_json()
    assert res.status_code == 200
    assert body["storage_mode"] == "local"
    assert body["record_count"] == 1
    assert body["message"] == "Using local storage. Found 1 records."


def test_two_clients_share_duplicate_blocking(store_path):
    app = create_app("config.testing")
    first, second = app.test_client(), app.test_client()
    _start(first)
    _start(second)

    assert first.post("/api/scan", json={"code": "SMITH, John, USA"}).status_code == 200
    assert second.post("/api/scan", json={"code": "SMITH, John, USA"}).status_code == 409

    first.post("/api/records/clear")
    assert second.post("/api/scan", json={"code": "SMITH, John, USA"}).get_json()["decision"] == "ACCEPT"
