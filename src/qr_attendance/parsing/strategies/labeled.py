from __future__ import annotations

import re
from typing import Optional

from ..model import Identity
from .base import PayloadStrategy

_LABELED = re.compile(r"Name:\s*([^,]+),\s*Country:\s*(.+)", re.IGNORECASE)


class LabeledStrategy(PayloadStrategy):
    """``Name: John Doe, Country: USA`` (labels are case-insensitive)."""

    name = "labeled"

    def try_parse(self, payload: str) -> Optional[Identity]:
        match = _LABELED.search(payload)
        if not match:
            return None
        return Identity(name=match.group(1).strip(), country=match.group(2).strip())
