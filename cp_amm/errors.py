"""Exception types for the pricing engine.

``InvalidRangeError`` also derives from ``ValueError`` and
``ArithmeticOverflowError`` from ``ArithmeticError`` so callers that guard
with the builtin types keep working.
"""

from __future__ import annotations


class CpAmmError(Exception):
    """Base class for all engine errors."""


class InvalidRangeError(CpAmmError, ValueError):
    """Raised when an input lies outside its defined domain."""


class ArithmeticOverflowError(CpAmmError, ArithmeticError):
    """Raised when a result does not fit its ledger integer width."""

    def __init__(self, name: str, value: int, bits: int) -> None:
        self.name = name
        self.value = value
        self.bits = bits
        super().__init__(f"{name} overflows u{bits}: {value}")
