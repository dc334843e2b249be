from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .attendance.failover_repository import FailoverAttendanceRepository
from .attendance.json_attendance_repository import JsonFileAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .core.constants import DEFAULT_LOCAL_STORE_PATH, DEFAULT_SCAN_COOLDOWN_MS, DEFAULT_SESSION_IDLE_TTL_S
from .database.connection import DatabaseConnection, DBConfig
from .scanning.service import ScannerService
from .scanning.session import SessionRegistry

STORAGE_BACKENDS = {"auto", "remote", "local"}


@dataclass(frozen=True)
class Container:
    repository: AttendanceRepository
    sessions: SessionRegistry
    scanner_service: ScannerService


def build_repository(
    *,
    backend: str,
    db_config: Optional[dict],
    local_store_path: str | Path,
) -> AttendanceRepository:
    backend = (backend or "auto").lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {sorted(STORAGE_BACKENDS)}")

    local = JsonFileAttendanceRepository(local_store_path)
    if backend == "local" or not db_config:
        return local

    remote = MySQLAttendanceRepository(DatabaseConnection(DBConfig.from_dict(db_config)))
    if backend == "remote":
        return remote
    return FailoverAttendanceRepository(remote, local)


def build_container(
    *,
    db_config: Optional[dict],
    storage_backend: str = "auto",
    local_store_path: str | Path = DEFAULT_LOCAL_STORE_PATH,
    cooldown_ms: int = DEFAULT_SCAN_COOLDOWN_MS,
    session_idle_ttl_s: float = DEFAULT_SESSION_IDLE_TTL_S,
) -> Container:
    repository = build_repository(
        backend=storage_backend,
        db_config=db_config,
        local_store_path=local_store_path,
    )
    if isinstance(repository, FailoverAttendanceRepository):
        # Decide remote vs local once, up front.
        repository.probe()

    return Container(
        repository=repository,
        sessions=SessionRegistry(idle_ttl_s=session_idle_ttl_s),
        scanner_service=ScannerService(repository, cooldown_ms=cooldown_ms),
    )
