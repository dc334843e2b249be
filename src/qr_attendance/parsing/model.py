from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Identity:
    """Participant identity recovered from a QR payload."""

    name: str
    country: str

    EMPTY: ClassVar["Identity"]

    @property
    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.country)

    def to_dict(self) -> dict:
        return {"name": self.name, "country": self.country}


Identity.EMPTY = Identity(name="", country="")
