from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .model import Identity
from .strategies.base import PayloadStrategy
from .strategies.labeled import LabeledStrategy
from .strategies.multiline import MultiLineStrategy
from .strategies.structured import StructuredStrategy
from .strategies.three_part import ThreePartCommaStrategy
from .strategies.two_part import TwoPartCommaStrategy

logger = logging.getLogger(__name__)


def default_strategies() -> list[PayloadStrategy]:
    # Order matters: the three-part form must win over the looser two-part split.
    return [
        ThreePartCommaStrategy(),
        LabeledStrategy(),
        TwoPartCommaStrategy(),
        StructuredStrategy(),
        MultiLineStrategy(),
    ]


@dataclass
class PayloadParser:
    """Try each payload strategy in priority order; first match wins.

    ``parse`` is total: unmatched text yields ``Identity.EMPTY`` and callers
    decide what an incomplete identity means.
    """

    strategies: Sequence[PayloadStrategy] = field(default_factory=default_strategies)

    def parse(self, payload: str) -> Identity:
        for strategy in self.strategies:
            identity = strategy.try_parse(payload)
            if identity is not None:
                logger.debug("Payload matched %s strategy", strategy.name)
                return identity
        logger.debug("No payload strategy matched %r", payload)
        return Identity.EMPTY


_default_parser = PayloadParser()


def parse_payload(payload: str) -> Identity:
    return _default_parser.parse(payload)
