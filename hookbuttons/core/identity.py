"""Stable accessory identifiers derived from button names."""

from __future__ import annotations

import hashlib

_UUID_TEMPLATE = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"


def generate_uuid(name: str) -> str:
    """Return a UUID-shaped identifier derived from the SHA-1 digest of `name`.

    Each `x` in the template consumes the next digest nibble; `y` consumes one
    and forces the RFC 4122 variant bits. The literal `4` consumes nothing.
    """
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()
    nibbles = iter(digest)
    chars: list[str] = []
    for slot in _UUID_TEMPLATE:
        if slot == "x":
            chars.append(next(nibbles))
        elif slot == "y":
            chars.append(format((int(next(nibbles), 16) & 0x3) | 0x8, "x"))
        else:
            chars.append(slot)
    return "".join(chars)
