"""
Fixed-point helpers for Q64.64 arithmetic.

Intermediate products are exact Python ints, so no helper here can lose
precision before its final shift or division. What the ledger program *can*
do is refuse a value that does not fit the field it is stored in; `checked_uint`
mirrors that by rejecting results wider than their target width.

Rounding is always explicit:
- `Rounding.DOWN` is floor division (amounts owed to the trader),
- `Rounding.UP` is ceil division (amounts owed to the pool).
"""

from __future__ import annotations

from enum import Enum, unique

from ...errors import ArithmeticOverflowError, InvalidRangeError


@unique
class Rounding(Enum):
    UP = "up"
    DOWN = "down"


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint(name: str, value: int, bits: int) -> int:
    """Validate an *input* against an unsigned width (domain error on failure)."""
    require_int(name, value)
    if value < 0:
        raise InvalidRangeError(f"{name} must be non-negative: {value}")
    if value >> bits:
        raise InvalidRangeError(f"{name} does not fit u{bits}: {value}")
    return value


def checked_uint(name: str, value: int, bits: int) -> int:
    """Validate a computed *result* against an unsigned width (overflow on failure)."""
    if value < 0:
        raise InvalidRangeError(f"{name} must be non-negative: {value}")
    if value >> bits:
        raise ArithmeticOverflowError(name, value, bits)
    return value


def ceil_div(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise InvalidRangeError("denominator must be positive")
    if numerator < 0:
        raise InvalidRangeError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


def div_rounding(numerator: int, denominator: int, rounding: Rounding) -> int:
    if rounding is Rounding.UP:
        return ceil_div(numerator, denominator)
    if denominator <= 0:
        raise InvalidRangeError("denominator must be positive")
    return numerator // denominator


def mul_div(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """`x * y / denominator` with the requested rounding."""
    return div_rounding(x * y, denominator, rounding)


def mul_shr(x: int, y: int, offset: int, rounding: Rounding) -> int:
    """`(x * y) >> offset` with the requested rounding."""
    return div_rounding(x * y, 1 << offset, rounding)


def shl_div(x: int, y: int, offset: int, rounding: Rounding) -> int:
    """`(x << offset) / y` with the requested rounding."""
    return div_rounding(x << offset, y, rounding)


def wrapping_sub(a: int, b: int, bits: int) -> int:
    """Modular `a - b` in a `bits`-wide unsigned register."""
    return (a - b) & ((1 << bits) - 1)
