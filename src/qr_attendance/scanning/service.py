from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import BinaryIO, Callable, Optional, Sequence

from ..attendance.export import export_filename, records_to_csv
from ..attendance.model import AttendanceRecord, generate_record_id, newest_first
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc, to_epoch_ms
from ..core.constants import DEFAULT_SCAN_COOLDOWN_MS, TEST_RECORD_PAYLOAD
from ..core.enums import CameraFacing, ScanDecision, StorageMode
from ..core.exceptions import DuplicatePayload, ParseFailure, ValidationError
from ..dedup.policy import cooldown_remaining_ms, decide, seen_from_records
from ..parsing.model import Identity
from ..parsing.parser import PayloadParser
from ..qr.codes import decode_image
from .session import ScanSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    decision: ScanDecision
    record: Optional[AttendanceRecord] = None
    identity: Optional[Identity] = None

    @property
    def recorded(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class StopSummary:
    record_count: int


@dataclass(frozen=True)
class StorageCheck:
    mode: Optional[StorageMode]
    record_count: int


class ScannerService:
    """Use cases of the scanner page.

    Every tab shares one store, so the seen set is rebuilt from it before each
    decision. Decisions and writes run under one store lock, so two tabs
    cannot both accept the same badge.
    """

    def __init__(
        self,
        repository: AttendanceRepository,
        *,
        parser: Optional[PayloadParser] = None,
        cooldown_ms: int = DEFAULT_SCAN_COOLDOWN_MS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._repo = repository
        self._parser = parser or PayloadParser()
        self._cooldown_ms = int(cooldown_ms)
        self._clock = clock
        self._store_lock = threading.RLock()

    @property
    def cooldown_ms(self) -> int:
        return self._cooldown_ms

    @property
    def storage_mode(self) -> Optional[StorageMode]:
        return getattr(self._repo, "mode", None)

    def _refresh_seen(self, session: ScanSession) -> None:
        session.seen = seen_from_records(self._repo.list_all())

    # ---- session lifecycle ----

    def start_session(self, session: ScanSession) -> ScanSession:
        with session.lock:
            self._refresh_seen(session)
            session.begin(self._clock())
        logger.info(
            "Scan session %s started (%s camera, %d codes blocked)",
            session.session_id, session.camera.label, len(session.seen),
        )
        return session

    def stop_session(self, session: ScanSession) -> StopSummary:
        with session.lock:
            session.stop()
        count = len(self._repo.list_all())
        logger.info("Scan session %s stopped with %d records", session.session_id, count)
        return StopSummary(record_count=count)

    def switch_camera(self, session: ScanSession) -> CameraFacing:
        with session.lock:
            session.camera = session.camera.toggled()
            return session.camera

    # ---- scanning ----

    def handle_decoded(self, session: ScanSession, payload: str, *, now_ms: Optional[int] = None) -> ScanOutcome:
        with session.lock, self._store_lock:
            session.require_scanning()
            session.scan_attempts += 1
            now_ms = to_epoch_ms(self._clock()) if now_ms is None else int(now_ms)
            self._refresh_seen(session)

            decision = decide(
                payload,
                now_ms,
                session.last_payload,
                session.last_accepted_at_ms,
                session.seen,
                self._cooldown_ms,
            )
            if decision is ScanDecision.SUPPRESS_COOLDOWN:
                logger.debug("Cooldown suppressed repeat read of %r", payload)
                return ScanOutcome(decision=decision)
            if decision is ScanDecision.REJECT_DUPLICATE:
                logger.warning("Duplicate QR code blocked: %r", payload)
                raise DuplicatePayload(payload)

            session.mark_accepted(payload, now_ms)
            record = self._record(session, payload)
            session.scan_attempts = 0
            return ScanOutcome(decision=decision, record=record, identity=Identity(record.name, record.country))

    def decode_image(self, session: ScanSession, stream: BinaryIO, *, now_ms: Optional[int] = None) -> ScanOutcome:
        codes = decode_image(stream)
        if not codes:
            raise ValidationError("No QR code found in image")
        return self.handle_decoded(session, codes[0], now_ms=now_ms)

    def add_test_record(self, session: ScanSession) -> AttendanceRecord:
        """Record the built-in test badge without going through the cooldown."""

        with session.lock, self._store_lock:
            self._refresh_seen(session)
            if TEST_RECORD_PAYLOAD in session.seen:
                raise DuplicatePayload(TEST_RECORD_PAYLOAD)
            return self._record(session, TEST_RECORD_PAYLOAD)

    def _record(self, session: ScanSession, payload: str) -> AttendanceRecord:
        identity = self._parser.parse(payload)
        if not identity.is_complete:
            logger.info("Invalid QR format: %r", payload)
            raise ParseFailure(payload)

        now = self._clock()
        record = AttendanceRecord(
            id=generate_record_id(now),
            name=identity.name,
            country=identity.country,
            scan_timestamp=now,
            raw_qr_data=payload,
            created_at=now,
            updated_at=now,
        )
        self._repo.create(record)
        session.seen.add(payload)
        logger.info("Attendance recorded for %s (%s)", record.name, record.country)
        return record

    # ---- records ----

    def list_records(self) -> list[AttendanceRecord]:
        return newest_first(self._repo.list_all())

    def delete_record(self, session: ScanSession, record_id: str) -> AttendanceRecord:
        with session.lock, self._store_lock:
            record = self._repo.get_by_id(record_id)
            if record is None or not self._repo.delete(record_id):
                raise ValidationError("Attendance record not found")
            self._refresh_seen(session)
        logger.info("Deleted attendance record %s", record_id)
        return record

    def clear_all(self, session: ScanSession) -> int:
        with session.lock, self._store_lock:
            count = self._repo.clear()
            session.seen.clear()
        logger.info("Cleared %d attendance records", count)
        return count

    def export_csv(self, *, tz: Optional[tzinfo] = None) -> tuple[str, str]:
        text = records_to_csv(self._repo.list_all(), tz=tz)
        return export_filename(self._clock().astimezone(tz)), text

    # ---- storage ----

    def check_storage(self) -> StorageCheck:
        """Re-test the remote store; a failover repository goes back online if it answers."""

        recheck = getattr(self._repo, "recheck_remote", None)
        if recheck is not None:
            mode = recheck()
        else:
            self._repo.ping()
            mode = self.storage_mode
        count = len(self._repo.list_all())
        logger.info("Storage check: %s store, %d records", mode.value if mode else "unknown", count)
        return StorageCheck(mode=mode, record_count=count)

    def diagnostics(self, session: ScanSession) -> dict:
        now_ms = to_epoch_ms(self._clock())
        with session.lock, self._store_lock:
            self._refresh_seen(session)
            blocked: Sequence[str] = sorted(session.seen)
            return {
                "session_id": session.session_id,
                "state": session.state.value,
                "camera": session.camera.value,
                "scan_attempts": session.scan_attempts,
                "last_scanned_code": session.last_payload,
                "cooldown_ms": self._cooldown_ms,
                "cooldown_remaining_ms": cooldown_remaining_ms(
                    now_ms, session.last_accepted_at_ms, self._cooldown_ms
                ),
                "blocked_count": len(blocked),
                "blocked": list(blocked),
                "storage_mode": self.storage_mode.value if self.storage_mode else None,
            }
