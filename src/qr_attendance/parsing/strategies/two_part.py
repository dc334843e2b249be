from __future__ import annotations

import re
from typing import Optional

from ..model import Identity
from .base import PayloadStrategy

_TWO_PART = re.compile(r"([^,]+),\s*(.+)")


class TwoPartCommaStrategy(PayloadStrategy):
    """``Full Name, Country``; later commas stay in the country."""

    name = "two_part"

    def try_parse(self, payload: str) -> Optional[Identity]:
        match = _TWO_PART.fullmatch(payload)
        if not match:
            return None
        return Identity(name=match.group(1).strip(), country=match.group(2).strip())
