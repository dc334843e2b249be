"""QR attendance scanner package.

Organized by feature modules (parsing, dedup, attendance, scanning) with a thin
Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_LOCAL_STORE_PATH, DEFAULT_SCAN_COOLDOWN_MS, DEFAULT_SESSION_IDLE_TTL_S
from .core.exceptions import StorageError
from .database.bootstrap import apply_schema, list_tables
from .scanning.controller import register as register_scanning

REPO_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"), static_folder=str(REPO_ROOT / "static"))

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    db_config = getattr(settings, "DB_CONFIG", None)
    storage_backend = getattr(settings, "STORAGE_BACKEND", "auto")
    local_store_path = Path(getattr(settings, "LOCAL_STORE_PATH", DEFAULT_LOCAL_STORE_PATH))
    if not local_store_path.is_absolute():
        local_store_path = REPO_ROOT / local_store_path
    cooldown_ms = int(getattr(settings, "SCAN_COOLDOWN_MS", DEFAULT_SCAN_COOLDOWN_MS))
    session_idle_ttl_s = float(getattr(settings, "SESSION_IDLE_TTL_S", DEFAULT_SESSION_IDLE_TTL_S))

    logger.info("settings=%s storage=%s", settings_module, storage_backend)

    if bool(getattr(settings, "AUTO_INIT_DB", False)) and db_config and storage_backend != "local":
        schema_path = REPO_ROOT / "database" / "schema.sql"
        try:
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        except StorageError as e:
            if storage_backend == "remote":
                raise
            # Failover will pick the local store on the first call.
            logger.warning("Skipping schema init: %s", e)

    container = build_container(
        db_config=db_config,
        storage_backend=storage_backend,
        local_store_path=local_store_path,
        cooldown_ms=cooldown_ms,
        session_idle_ttl_s=session_idle_ttl_s,
    )
    app.extensions["qr_attendance"] = container

    mode = container.scanner_service.storage_mode
    logger.info("Attendance storage mode: %s", mode.value if mode else "unknown")

    register_scanning(app, container)

    return app
