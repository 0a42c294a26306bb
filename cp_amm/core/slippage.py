"""Slippage thresholds and price impact.

Rates are percentages with at most two decimal places (e.g. "0.5" = 0.5%),
applied in basis points so the result is an exact integer floor.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from ..constants import BASIS_POINT_MAX, PERCENT_MAX, U64_BITS
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import Rounding, mul_div, require_uint
from .price import DecimalLike, decimal_context, to_decimal


def slippage_rate_to_bps(rate: DecimalLike) -> int:
    """Convert a percentage with at most two decimals into basis points."""
    r = to_decimal(rate, name="rate")
    if r < 0:
        raise InvalidRangeError(f"slippage rate must be non-negative: {rate}")
    bps = r * PERCENT_MAX
    if bps != bps.to_integral_value():
        raise InvalidRangeError(f"slippage rate supports at most two decimal places: {rate}")
    return int(bps)


def get_max_amount_with_slippage(amount: int, rate: DecimalLike) -> int:
    """`amount * (10_000 + rate_bps) / 10_000`, rounded down."""
    require_uint("amount", amount, U64_BITS)
    bps = slippage_rate_to_bps(rate)
    return mul_div(amount, BASIS_POINT_MAX + bps, BASIS_POINT_MAX, Rounding.DOWN)


def get_min_amount_with_slippage(amount: int, rate: DecimalLike) -> int:
    """`amount * (10_000 - rate_bps) / 10_000`, rounded down."""
    require_uint("amount", amount, U64_BITS)
    bps = slippage_rate_to_bps(rate)
    if bps > BASIS_POINT_MAX:
        raise InvalidRangeError(f"slippage rate must be <= {PERCENT_MAX}: {rate}")
    return mul_div(amount, BASIS_POINT_MAX - bps, BASIS_POINT_MAX, Rounding.DOWN)


def get_price_impact(actual_amount: int, ideal_amount: int) -> Decimal:
    """Price impact in percent: `(ideal - actual) / ideal * 100` (1.5 means 1.5%)."""
    require_uint("actual_amount", actual_amount, U64_BITS)
    require_uint("ideal_amount", ideal_amount, U64_BITS)
    if ideal_amount == 0:
        raise InvalidRangeError("ideal_amount must be positive")
    with localcontext(decimal_context()):
        return (Decimal(ideal_amount) - Decimal(actual_amount)) / Decimal(ideal_amount) * PERCENT_MAX
