"""Small numeric helpers shared by the shell, the allocators and the archive reader."""

from __future__ import annotations

import string

_UNSIGNED_LONG_MASK = (1 << 64) - 1
_WORD_MASK = (1 << 32) - 1
_HEX_FIELD_WIDTH = 8


def atoi(text: str) -> int:
    """Parse an unsigned decimal number; an empty string yields 0.

    The result wraps at 64 bits like an unsigned long.
    """
    value = 0
    for char in text:
        if char not in string.digits:
            raise ValueError(f"not a decimal digit: {char!r} in {text!r}")
        value = (value * 10 + int(char)) & _UNSIGNED_LONG_MASK
    return value


def log2(value: int) -> int:
    """Return the floor of the base-2 logarithm; 0 and 1 both give 0."""
    if value < 0:
        raise ValueError(f"log2 of a negative number: {value}")
    return max(value.bit_length() - 1, 0)


def pow2(exponent: int) -> int:
    """Return two raised to ``exponent``."""
    if exponent < 0:
        raise ValueError(f"negative exponent: {exponent}")
    return 1 << exponent


def hex_to_int(field: str | bytes | bytearray | memoryview) -> int:
    """Decode the first eight hexadecimal digits of a header field."""
    if isinstance(field, (bytes, bytearray, memoryview)):
        field = bytes(field).decode("ascii")
    digits = field[:_HEX_FIELD_WIDTH]
    if len(digits) < _HEX_FIELD_WIDTH:
        raise ValueError(f"hex field too short: {field!r}")
    if any(char not in string.hexdigits for char in digits):
        raise ValueError(f"invalid hex field: {digits!r}")
    return int(digits, 16)


def format_hex(value: int) -> str:
    """Render the low 32 bits of ``value`` as eight upper-case hex digits."""
    return f"{value & _WORD_MASK:08X}"