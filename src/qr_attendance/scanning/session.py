from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..core.constants import DEFAULT_SESSION_IDLE_TTL_S
from ..core.enums import CameraFacing, SessionState
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ScanSession:
    """State of one scanner page (one browser tab).

    Cooldown and camera state live here rather than in module globals so
    tabs never see each other's cooldown. ``seen`` is a cache of the shared
    store, rebuilt by the service before each decision.
    """

    session_id: str
    state: SessionState = SessionState.IDLE
    camera: CameraFacing = CameraFacing.BACK
    last_payload: Optional[str] = None
    last_accepted_at_ms: int = 0
    seen: set[str] = field(default_factory=set)
    scan_attempts: int = 0
    started_at: Optional[datetime] = None
    last_active: float = 0.0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def is_scanning(self) -> bool:
        return self.state is SessionState.SCANNING

    def begin(self, now: datetime) -> None:
        if self.state is SessionState.SCANNING:
            return
        if self.state is SessionState.STOPPED:
            self.reset()
        # A fresh start forgets the cooldown.
        self.state = SessionState.SCANNING
        self.scan_attempts = 0
        self.last_payload = None
        self.last_accepted_at_ms = 0
        self.started_at = now

    def stop(self) -> None:
        if self.state is not SessionState.SCANNING:
            raise ValidationError("Scanner is not running")
        self.state = SessionState.STOPPED
        self.scan_attempts = 0

    def reset(self) -> None:
        self.state = SessionState.IDLE

    def require_scanning(self) -> None:
        if self.state is not SessionState.SCANNING:
            raise ValidationError("Scanner is not running")

    def mark_accepted(self, payload: str, now_ms: int) -> None:
        self.last_payload = payload
        self.last_accepted_at_ms = now_ms


class SessionRegistry:
    """Thread-safe map of session id -> ScanSession.

    Sessions untouched for ``idle_ttl_s`` are dropped on the next lookup; a
    tab coming back after that starts over in ``IDLE``.
    """

    def __init__(
        self,
        *,
        idle_ttl_s: float = DEFAULT_SESSION_IDLE_TTL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sessions: dict[str, ScanSession] = {}
        self._lock = threading.Lock()
        self._idle_ttl_s = idle_ttl_s
        self._clock = clock

    def get_or_create(self, session_id: Optional[str] = None) -> ScanSession:
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            session = self._sessions.get(session_id) if session_id else None
            if session is None:
                session = ScanSession(session_id=session_id or uuid.uuid4().hex)
                self._sessions[session.session_id] = session
            session.last_active = now
            return session

    def get(self, session_id: Optional[str]) -> Optional[ScanSession]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def evict_idle(self) -> int:
        with self._lock:
            return self._evict_idle(self._clock())

    def _evict_idle(self, now: float) -> int:
        expired = [sid for sid, s in self._sessions.items() if now - s.last_active > self._idle_ttl_s]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Dropped %d idle scan sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
