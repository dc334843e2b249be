from __future__ import annotations

from enum import Enum


class ScanDecision(str, Enum):
    """Outcome of the duplicate/cooldown policy for one decoded payload."""

    ACCEPT = "ACCEPT"
    SUPPRESS_COOLDOWN = "SUPPRESS_COOLDOWN"
    REJECT_DUPLICATE = "REJECT_DUPLICATE"


class SessionState(str, Enum):
    IDLE = "IDLE"
    SCANNING = "SCANNING"
    STOPPED = "STOPPED"


class CameraFacing(str, Enum):
    """Camera selection forwarded to the browser (getUserMedia facingMode)."""

    BACK = "environment"
    FRONT = "user"

    @property
    def label(self) -> str:
        return "Back" if self is CameraFacing.BACK else "Front"

    def toggled(self) -> "CameraFacing":
        return CameraFacing.FRONT if self is CameraFacing.BACK else CameraFacing.BACK


class StorageMode(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
