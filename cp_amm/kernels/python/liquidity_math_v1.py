"""
Liquidity math kernel (v1 semantics).

Converts between token amounts and virtual liquidity over the pool's full
bounded range `[sqrt_min_price, sqrt_max_price]`:

- token A backs the segment of the curve above the current price,
  `amount_a = L * (1/P - 1/P_max)`,
- token B backs the segment below it,
  `amount_b = L * (P - P_min)`.

Sizing from maximum amounts takes the smaller of the two liquidities and
floors it, so converting back (rounding up) never asks for more than either
maximum. When the price sits exactly on a bound, the segment on that side is
empty and its constraint drops out.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...constants import LIQUIDITY_SCALE, U64_BITS, U128_BITS
from ...errors import InvalidRangeError
from .cp_curve_v1 import get_delta_amount_a, get_delta_amount_b
from .q64_math import Rounding, checked_uint, mul_div, require_uint, shl_div


@dataclass(frozen=True)
class TokenAmounts:
    amount_a: int
    amount_b: int


def _require_range(sqrt_price: int, sqrt_min_price: int, sqrt_max_price: int) -> None:
    for name, v in (
        ("sqrt_price", sqrt_price),
        ("sqrt_min_price", sqrt_min_price),
        ("sqrt_max_price", sqrt_max_price),
    ):
        require_uint(name, v, U128_BITS)
    if sqrt_min_price <= 0:
        raise InvalidRangeError("sqrt_min_price must be positive")
    if sqrt_min_price >= sqrt_max_price:
        raise InvalidRangeError(
            f"empty price range: sqrt_min_price={sqrt_min_price} >= sqrt_max_price={sqrt_max_price}"
        )
    if not (sqrt_min_price <= sqrt_price <= sqrt_max_price):
        raise InvalidRangeError(
            f"sqrt_price {sqrt_price} outside [{sqrt_min_price}, {sqrt_max_price}]"
        )


def get_liquidity_delta_from_amount_a(*, amount: int, lower_sqrt_price: int, upper_sqrt_price: int) -> int:
    """`L = amount * lower * upper / (upper - lower)`, rounded down."""
    if lower_sqrt_price >= upper_sqrt_price:
        raise InvalidRangeError("amount A constraint needs lower < upper")
    product = amount * lower_sqrt_price
    return mul_div(product, upper_sqrt_price, upper_sqrt_price - lower_sqrt_price, Rounding.DOWN)


def get_liquidity_delta_from_amount_b(*, amount: int, lower_sqrt_price: int, upper_sqrt_price: int) -> int:
    """`L = (amount << 128) / (upper - lower)`, rounded down."""
    if lower_sqrt_price >= upper_sqrt_price:
        raise InvalidRangeError("amount B constraint needs lower < upper")
    return shl_div(amount, upper_sqrt_price - lower_sqrt_price, LIQUIDITY_SCALE, Rounding.DOWN)


def get_liquidity_delta(
    *,
    max_amount_a: int,
    max_amount_b: int,
    sqrt_price: int,
    sqrt_min_price: int,
    sqrt_max_price: int,
) -> int:
    """
    Largest liquidity addable without exceeding either maximum amount.

    Raises ArithmeticOverflowError if the liquidity does not fit a u128.
    """
    require_uint("max_amount_a", max_amount_a, U64_BITS)
    require_uint("max_amount_b", max_amount_b, U64_BITS)
    _require_range(sqrt_price, sqrt_min_price, sqrt_max_price)

    candidates: list[int] = []
    if sqrt_price < sqrt_max_price:
        candidates.append(
            get_liquidity_delta_from_amount_a(
                amount=max_amount_a, lower_sqrt_price=sqrt_price, upper_sqrt_price=sqrt_max_price
            )
        )
    if sqrt_price > sqrt_min_price:
        candidates.append(
            get_liquidity_delta_from_amount_b(
                amount=max_amount_b, lower_sqrt_price=sqrt_min_price, upper_sqrt_price=sqrt_price
            )
        )
    # _require_range guarantees at least one side of the range is non-empty.
    liquidity_delta = min(candidates)
    return checked_uint("liquidity_delta", liquidity_delta, U128_BITS)


def get_amounts_for_liquidity(
    *,
    liquidity: int,
    sqrt_price: int,
    sqrt_min_price: int,
    sqrt_max_price: int,
    rounding: Rounding,
) -> TokenAmounts:
    """
    Token amounts backing `liquidity` at the current price.

    Use `Rounding.UP` for deposits (owed to the pool) and `Rounding.DOWN`
    for withdrawals (owed to the owner).
    """
    require_uint("liquidity", liquidity, U128_BITS)
    _require_range(sqrt_price, sqrt_min_price, sqrt_max_price)

    amount_a = get_delta_amount_a(
        lower_sqrt_price=sqrt_price,
        upper_sqrt_price=sqrt_max_price,
        liquidity=liquidity,
        rounding=rounding,
    )
    amount_b = get_delta_amount_b(
        lower_sqrt_price=sqrt_min_price,
        upper_sqrt_price=sqrt_price,
        liquidity=liquidity,
        rounding=rounding,
    )
    return TokenAmounts(amount_a=amount_a, amount_b=amount_b)
