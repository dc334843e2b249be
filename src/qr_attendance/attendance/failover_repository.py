from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence, TypeVar

from ..core.enums import StorageMode
from ..core.exceptions import StorageError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailoverAttendanceRepository(AttendanceRepository):
    """Use the remote store until it fails, then the local store.

    Call sites see one repository; the remote/local choice lives here only.
    Only ``StorageError`` (the remote is unreachable or broken) switches the
    mode; a rejected row propagates unchanged. Going back online is explicit,
    through ``recheck_remote``.
    """

    def __init__(self, primary: AttendanceRepository, fallback: AttendanceRepository):
        self._primary = primary
        self._fallback = fallback
        self._mode = StorageMode.REMOTE
        self._lock = threading.Lock()

    @property
    def mode(self) -> StorageMode:
        return self._mode

    def _switch_to_local(self, error: StorageError) -> None:
        with self._lock:
            if self._mode is StorageMode.LOCAL:
                return
            self._mode = StorageMode.LOCAL
        logger.warning("Remote attendance store failed, switching to local storage: %s", error)

    def _call(self, op: Callable[[AttendanceRepository], T]) -> T:
        if self._mode is StorageMode.REMOTE:
            try:
                return op(self._primary)
            except StorageError as e:
                self._switch_to_local(e)
        return op(self._fallback)

    def probe(self) -> StorageMode:
        """Check the remote store once at startup; returns the mode in use."""

        self._call(lambda repo: repo.ping())
        return self._mode

    def recheck_remote(self) -> StorageMode:
        """Ping the remote store and go back online if it answers.

        Records written locally while offline stay in the local store.
        """

        try:
            self._primary.ping()
        except StorageError as e:
            self._switch_to_local(e)
            return self._mode

        with self._lock:
            previous, self._mode = self._mode, StorageMode.REMOTE
        if previous is StorageMode.LOCAL:
            logger.info("Remote attendance store is reachable again, switching to remote storage")
        return self._mode

    def list_all(self) -> Sequence[AttendanceRecord]:
        return self._call(lambda repo: repo.list_all())

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return self._call(lambda repo: repo.get_by_id(record_id))

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        return self._call(lambda repo: repo.create(record))

    def delete(self, record_id: str) -> bool:
        return self._call(lambda repo: repo.delete(record_id))

    def clear(self) -> int:
        return self._call(lambda repo: repo.clear())

    def ping(self) -> None:
        self._call(lambda repo: repo.ping())
