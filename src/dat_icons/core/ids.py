"""Canonical record ID resolution.

Callers may spell the same archive record four ways:

================  ==============  =========================================
Spelling          Example         Rule
================  ==============  =========================================
Short hex         ``0x0F5A``      signed 16-bit, relative to ``BASE``
Long hex          ``0x06000F5A``  signed 32-bit, absolute
Short decimal     ``3930``        below ``BASE``, relative to ``BASE``
Long decimal      ``100667226``   at or above ``BASE``, absolute
================  ==============  =========================================

All four resolve to ``100667226``. Only the resolved value (a signed 32-bit
integer) travels downstream. Negative decimals are accepted and offset like
any other relative value; the catalog lookup rejects them later.
"""

from __future__ import annotations

import re

from .errors import InvalidIdentifier

BASE = 0x06000000

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_HEX_PREFIX = "0x"
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def resolve(text: str) -> int:
    """Normalize an identifier string to its canonical record ID.

    Raises:
        InvalidIdentifier: If *text* is neither 4/8 hex digits after a
            ``0x`` prefix nor a base-10 signed 32-bit integer.
    """
    if text[:2].lower() == _HEX_PREFIX:
        return _resolve_hex(text, text[2:])
    return _resolve_decimal(text)


def _resolve_hex(text: str, digits: str) -> int:
    if not _HEX_DIGITS.fullmatch(digits):
        raise InvalidIdentifier(f"Invalid hex identifier `{text}`")
    if len(digits) not in (4, 8):
        raise InvalidIdentifier(
            f"Hex identifier `{text}` must have exactly 4 or 8 digits, "
            f"got {len(digits)}"
        )

    value = int.from_bytes(bytes.fromhex(digits), "big", signed=True)
    if len(digits) == 4:
        return BASE + value
    return value


def _resolve_decimal(text: str) -> int:
    if not _DECIMAL.fullmatch(text):
        raise InvalidIdentifier(f"Invalid identifier `{text}`")

    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidIdentifier(f"Identifier `{text}` is out of 32-bit range")

    if value < BASE:
        return BASE + value
    return value


def format_id(record_id: int) -> str:
    """Render a canonical ID as ``0x06000F5A`` for logs and messages."""
    return f"0x{record_id & 0xFFFFFFFF:08X}"
