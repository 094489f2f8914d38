"""
Multi-item payload framing shared with the remote scope.

Framing version 1: a payload is a sequence of base64 items joined by
``PACK_DELIMITER``. The delimiter is outside the base64 alphabet, so items
never need escaping. Items that decode to an empty string or to ``null`` are
nil and are dropped by ``decode_items``.
"""

from typing import Iterable, List

from .command_builder import from_base64, to_base64

FRAMING_VERSION = 1
PACK_DELIMITER = ","
NIL_SENTINELS = ("", "null")


def pack(values: Iterable[str]) -> str:
    """Encode strings and join them into a single payload."""
    return PACK_DELIMITER.join(to_base64(value) for value in values)


def unpack(text: str) -> List[str]:
    """Split a payload into its still-encoded items, skipping blank ones."""
    if not text:
        return []
    items = (item.strip() for item in text.split(PACK_DELIMITER))
    return [item for item in items if item]


def decode_one(item: str) -> str:
    """Decode a single payload item."""
    return from_base64(item.strip())


def is_nil(value) -> bool:
    """Only the exact sentinels are nil; whitespace is a value."""
    return value is None or value in NIL_SENTINELS


def decode_items(text: str) -> List[str]:
    """Unpack and decode a payload, dropping nil items while keeping order."""
    decoded = (decode_one(item) for item in unpack(text))
    return [value for value in decoded if not is_nil(value)]
