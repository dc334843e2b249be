"""Example: drive the scanner service directly (no Flask, local JSON store)."""

import tempfile
from pathlib import Path

from qr_attendance.container import build_container
from qr_attendance.core.exceptions import DuplicatePayload


def main():
    store = Path(tempfile.mkdtemp()) / "records.json"
    container = build_container(db_config=None, storage_backend="local", local_store_path=store)
    service = container.scanner_service

    session = service.start_session(container.sessions.get_or_create())
    print(service.handle_decoded(session, "SMITH, John, USA", now_ms=0))
    print(service.handle_decoded(session, "SMITH, John, USA", now_ms=500))
    try:
        service.handle_decoded(session, "SMITH, John, USA", now_ms=10_000)
    except DuplicatePayload as e:
        print("duplicate:", e)

    print(service.export_csv()[1])


if __name__ == "__main__":
    main()
