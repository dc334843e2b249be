from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..model import Identity


class PayloadStrategy(ABC):
    """Strategy Pattern: one way of reading a name and country out of QR text.

    Implementations return ``None`` when the payload is not in their format and
    must never raise on arbitrary text.
    """

    name: str = "base"

    @abstractmethod
    def try_parse(self, payload: str) -> Optional[Identity]:
        raise NotImplementedError
