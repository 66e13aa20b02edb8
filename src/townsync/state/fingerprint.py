"""Change detection for candidate record sets.

The fingerprint is a weak 32-bit rolling hash. A collision can only hide
a change until the next edit of the sheet, so no stronger digest is used.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from townsync.models.town import TownRecord

Fingerprint = int

_MASK = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def serialize_records(records: Iterable[TownRecord]) -> str:
    """Canonical JSON form of *records* (source order, declared field order)."""
    payload = [record.model_dump(mode="json") for record in records]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def rolling_hash(text: str) -> int:
    """``h = h * 31 + ord(ch)`` wrapped to a signed 32-bit integer."""
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & _MASK
    if value & _SIGN_BIT:
        value -= 1 << 32
    return value


def fingerprint(records: Iterable[TownRecord]) -> Fingerprint:
    return rolling_hash(serialize_records(records))


def has_changed(candidate: Fingerprint, previous: Fingerprint | None) -> bool:
    """Return ``True`` unless *candidate* equals the last accepted fingerprint."""
    if previous is None:
        return True
    return candidate != previous
