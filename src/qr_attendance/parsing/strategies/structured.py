from __future__ import annotations

import json
from typing import Any, Optional

from ..model import Identity
from .base import PayloadStrategy


def _text(data: dict, key: str) -> Optional[str]:
    value: Any = data.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


class StructuredStrategy(PayloadStrategy):
    """JSON object with ``name``/``country`` or ``lastName``/``firstName``/``country``."""

    name = "structured"

    def try_parse(self, payload: str) -> Optional[Identity]:
        try:
            data = json.loads(payload)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None

        name = _text(data, "name")
        country = _text(data, "country")
        if name and country:
            return Identity(name=name, country=country)

        last_name = _text(data, "lastName")
        first_name = _text(data, "firstName")
        if last_name and first_name and country:
            return Identity(name=f"{last_name}, {first_name}", country=country)
        return None
