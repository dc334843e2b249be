"""Write every stored attendance record to a CSV file.

Usage: python scripts/export_csv.py [output_dir]
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from qr_attendance.container import build_container
from qr_attendance.core.constants import DEFAULT_LOCAL_STORE_PATH
from qr_attendance.core.exceptions import ValidationError


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=getattr(settings, "DB_CONFIG", None),
        storage_backend=getattr(settings, "STORAGE_BACKEND", "auto"),
        local_store_path=REPO_ROOT / getattr(settings, "LOCAL_STORE_PATH", DEFAULT_LOCAL_STORE_PATH),
    )

    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else REPO_ROOT / "exports"
    out_dir.mkdir(parents=True, exist_ok=True)

    try:
        filename, text = container.scanner_service.export_csv()
    except ValidationError as e:
        raise SystemExit(str(e))

    out_file = out_dir / filename
    out_file.write_text(text, encoding="utf-8-sig")
    print(f"OK: Exported -> {out_file}")


if __name__ == "__main__":
    main()
