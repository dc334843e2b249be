from __future__ import annotations

import re
from typing import Optional

from ..model import Identity
from .base import PayloadStrategy

_THREE_PART = re.compile(r"([^,]+),\s*([^,]+),\s*(.+)")


class ThreePartCommaStrategy(PayloadStrategy):
    """``LAST NAME, First Name, Country``; the primary badge format."""

    name = "three_part"

    def try_parse(self, payload: str) -> Optional[Identity]:
        match = _THREE_PART.fullmatch(payload)
        if not match:
            return None
        last_name = match.group(1).strip()
        first_name = match.group(2).strip()
        return Identity(name=f"{last_name}, {first_name}", country=match.group(3).strip())
