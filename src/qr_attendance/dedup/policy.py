"""Duplicate and cooldown policy for decoded QR payloads.

Two separate guards run in a fixed order:

- a short cooldown absorbs the scanner reading the same physical code on
  consecutive frames; this is silent,
- the session's seen set rejects a payload that is already recorded; this is
  reported to the operator.

The seen set is never authoritative on its own: it is always rebuilt from the
persisted records (``seen_from_records``) so deleting a record unblocks its
payload and clearing all records empties it.
"""
from __future__ import annotations

from typing import AbstractSet, Iterable, Optional, Protocol

from ..core.constants import DEFAULT_SCAN_COOLDOWN_MS
from ..core.enums import ScanDecision


class _HasRawPayload(Protocol):
    raw_qr_data: str


def decide(
    payload: str,
    now_ms: int,
    last_payload: Optional[str],
    last_accepted_at_ms: int,
    seen: AbstractSet[str],
    cooldown_ms: int = DEFAULT_SCAN_COOLDOWN_MS,
) -> ScanDecision:
    if payload == last_payload and now_ms - last_accepted_at_ms < cooldown_ms:
        return ScanDecision.SUPPRESS_COOLDOWN
    if payload in seen:
        return ScanDecision.REJECT_DUPLICATE
    return ScanDecision.ACCEPT


def seen_from_records(records: Iterable[_HasRawPayload]) -> set[str]:
    return {r.raw_qr_data for r in records if r.raw_qr_data}


def cooldown_remaining_ms(now_ms: int, last_accepted_at_ms: int, cooldown_ms: int) -> int:
    return max(0, cooldown_ms - (now_ms - last_accepted_at_ms))
