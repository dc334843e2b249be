from __future__ import annotations

from typing import Optional

from ..model import Identity
from .base import PayloadStrategy


class MultiLineStrategy(PayloadStrategy):
    """One field per line: ``LAST / First / Country`` or ``Full Name / Country``."""

    name = "multiline"

    def try_parse(self, payload: str) -> Optional[Identity]:
        lines = [line.strip() for line in payload.splitlines() if line.strip()]
        if len(lines) == 3:
            return Identity(name=f"{lines[0]}, {lines[1]}", country=lines[2])
        if len(lines) == 2:
            return Identity(name=lines[0], country=lines[1])
        return None
