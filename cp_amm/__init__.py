"""
Off-chain pricing, fee scheduling and accrual engine for a bounded
constant-product AMM.

Every function is a pure computation over immutable pool / position
snapshots; nothing here mutates ledger state.
"""

from .errors import ArithmeticOverflowError, CpAmmError, InvalidRangeError

__version__ = "0.1.0"

__all__ = [
    "ArithmeticOverflowError",
    "CpAmmError",
    "InvalidRangeError",
    "__version__",
]
