"""
Bounded constant-product curve kernel (v1 semantics).

The curve is parameterised by virtual liquidity `L` (Q64.64) and the current
sqrt price `P` (Q64.64, sqrt of token-B-per-token-A):

- A->B moves the price down:  P_new = L * P / (L + dA * P)   (rounded up)
                              dB_out = L * (P - P_new)       (rounded down)
- B->A moves the price up:    P_new = P + dB / L             (rounded down)
                              dA_out = L * (1/P - 1/P_new)   (rounded down)

In Q64.64 integers:
    delta_a = L * (upper - lower) / (lower * upper)
    delta_b = L * (upper - lower) >> 128

Every price move rounds in the pool's favour: the price lands where the pool
owes the trader less, and amounts paid to the trader round down.

The trade is bounded by the pool's `[sqrt_min_price, sqrt_max_price]` range.
An input that would push the price past a bound is filled only up to the
bound; the remainder is reported as unfilled rather than rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...constants import LIQUIDITY_SCALE, U64_BITS, U128_BITS
from ...errors import InvalidRangeError
from .q64_math import Rounding, checked_uint, mul_div, mul_shr, require_uint, shl_div


@dataclass(frozen=True)
class SwapStepResult:
    amount_in: int
    consumed_in: int
    unfilled_in: int
    output_amount: int
    sqrt_price_before: int
    next_sqrt_price: int
    hit_bound: bool


def _require_ordered(lower_sqrt_price: int, upper_sqrt_price: int) -> None:
    if lower_sqrt_price <= 0:
        raise InvalidRangeError("lower_sqrt_price must be positive")
    if lower_sqrt_price > upper_sqrt_price:
        raise InvalidRangeError(
            f"sqrt prices out of order: lower={lower_sqrt_price} > upper={upper_sqrt_price}"
        )


def _delta_amount_a_raw(lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding) -> int:
    _require_ordered(lower_sqrt_price, upper_sqrt_price)
    numerator = liquidity * (upper_sqrt_price - lower_sqrt_price)
    denominator = lower_sqrt_price * upper_sqrt_price
    return mul_div(numerator, 1, denominator, rounding)


def _delta_amount_b_raw(lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding) -> int:
    _require_ordered(lower_sqrt_price, upper_sqrt_price)
    return mul_shr(liquidity, upper_sqrt_price - lower_sqrt_price, LIQUIDITY_SCALE, rounding)


def get_delta_amount_a(*, lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding) -> int:
    """Token A needed to move the price between `lower` and `upper` at liquidity `L`."""
    value = _delta_amount_a_raw(lower_sqrt_price, upper_sqrt_price, liquidity, rounding)
    return checked_uint("delta_amount_a", value, U64_BITS)


def get_delta_amount_b(*, lower_sqrt_price: int, upper_sqrt_price: int, liquidity: int, rounding: Rounding) -> int:
    """Token B needed to move the price between `lower` and `upper` at liquidity `L`."""
    value = _delta_amount_b_raw(lower_sqrt_price, upper_sqrt_price, liquidity, rounding)
    return checked_uint("delta_amount_b", value, U64_BITS)


def get_next_sqrt_price_from_amount_a_rounding_up(*, sqrt_price: int, liquidity: int, amount: int) -> int:
    """
    Compute `P_new = L * P / (L + amount * P)`, rounded up.
    """
    if amount == 0:
        return sqrt_price
    product = amount * sqrt_price
    denominator = liquidity + product
    return mul_div(liquidity, sqrt_price, denominator, Rounding.UP)


def get_next_sqrt_price_from_amount_b_rounding_down(*, sqrt_price: int, liquidity: int, amount: int) -> int:
    """
    Compute `P_new = P + (amount << 128) / L`, rounded down.
    """
    if liquidity <= 0:
        raise InvalidRangeError("liquidity must be positive")
    quotient = shl_div(amount, liquidity, LIQUIDITY_SCALE, Rounding.DOWN)
    return sqrt_price + quotient


def get_next_sqrt_price_from_input(*, sqrt_price: int, liquidity: int, amount_in: int, a_to_b: bool) -> int:
    if a_to_b:
        return get_next_sqrt_price_from_amount_a_rounding_up(
            sqrt_price=sqrt_price, liquidity=liquidity, amount=amount_in
        )
    return get_next_sqrt_price_from_amount_b_rounding_down(
        sqrt_price=sqrt_price, liquidity=liquidity, amount=amount_in
    )


def swap_step(
    *,
    sqrt_price: int,
    liquidity: int,
    amount_in: int,
    a_to_b: bool,
    sqrt_min_price: int,
    sqrt_max_price: int,
) -> SwapStepResult:
    """
    Exact-in swap against the bounded curve.

    Raises InvalidRangeError on out-of-domain inputs and ArithmeticOverflowError
    if the output does not fit a u64 token amount.
    """
    require_uint("sqrt_price", sqrt_price, U128_BITS)
    require_uint("liquidity", liquidity, U128_BITS)
    require_uint("amount_in", amount_in, U64_BITS)
    require_uint("sqrt_min_price", sqrt_min_price, U128_BITS)
    require_uint("sqrt_max_price", sqrt_max_price, U128_BITS)
    if not isinstance(a_to_b, bool):
        raise TypeError("a_to_b must be a bool")
    if not (0 < sqrt_min_price <= sqrt_price <= sqrt_max_price):
        raise InvalidRangeError(
            f"sqrt_price {sqrt_price} outside [{sqrt_min_price}, {sqrt_max_price}]"
        )

    if amount_in == 0 or liquidity == 0:
        return SwapStepResult(
            amount_in=amount_in,
            consumed_in=0,
            unfilled_in=amount_in,
            output_amount=0,
            sqrt_price_before=sqrt_price,
            next_sqrt_price=sqrt_price,
            hit_bound=False,
        )

    target = get_next_sqrt_price_from_input(
        sqrt_price=sqrt_price, liquidity=liquidity, amount_in=amount_in, a_to_b=a_to_b
    )

    if a_to_b:
        hit_bound = target < sqrt_min_price
        next_sqrt_price = sqrt_min_price if hit_bound else target
        if hit_bound:
            needed = _delta_amount_a_raw(next_sqrt_price, sqrt_price, liquidity, Rounding.UP)
            consumed_in = min(amount_in, needed)
        else:
            consumed_in = amount_in
        output_amount = get_delta_amount_b(
            lower_sqrt_price=next_sqrt_price,
            upper_sqrt_price=sqrt_price,
            liquidity=liquidity,
            rounding=Rounding.DOWN,
        )
    else:
        hit_bound = target > sqrt_max_price
        next_sqrt_price = sqrt_max_price if hit_bound else target
        if hit_bound:
            needed = _delta_amount_b_raw(sqrt_price, next_sqrt_price, liquidity, Rounding.UP)
            consumed_in = min(amount_in, needed)
        else:
            consumed_in = amount_in
        output_amount = get_delta_amount_a(
            lower_sqrt_price=sqrt_price,
            upper_sqrt_price=next_sqrt_price,
            liquidity=liquidity,
            rounding=Rounding.DOWN,
        )

    return SwapStepResult(
        amount_in=amount_in,
        consumed_in=consumed_in,
        unfilled_in=amount_in - consumed_in,
        output_amount=output_amount,
        sqrt_price_before=sqrt_price,
        next_sqrt_price=next_sqrt_price,
        hit_bound=hit_bound,
    )
