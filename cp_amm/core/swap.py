"""
Bounded constant-product swap curve.

Thin wrapper over the v1 curve kernel that adds the global sqrt-price domain
check and verifies the post-swap invariants:
- the price only moves in the trade's direction,
- the price stays inside the pool's bounds,
- consumed + unfilled input equals the input.
"""

from __future__ import annotations

import logging

from ..constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE
from ..errors import InvalidRangeError
from ..kernels.python.cp_curve_v1 import SwapStepResult, swap_step

logger = logging.getLogger(__name__)


def swap_exact_in(
    *,
    sqrt_price: int,
    liquidity: int,
    amount_in: int,
    a_to_b: bool,
    sqrt_min_price: int = MIN_SQRT_PRICE,
    sqrt_max_price: int = MAX_SQRT_PRICE,
) -> SwapStepResult:
    """
    Compute the gross output of an exact-in swap.

    `amount_in` must already be net of any fee taken on the input side.
    If the input would carry the price past a bound, the swap fills up to
    the bound and the remainder is returned in `unfilled_in`.

    Raises:
        InvalidRangeError: a price or amount lies outside its domain.
        ArithmeticOverflowError: the output does not fit a u64 amount.
    """
    if not (MIN_SQRT_PRICE <= sqrt_min_price < sqrt_max_price <= MAX_SQRT_PRICE):
        raise InvalidRangeError(
            f"price bounds must satisfy {MIN_SQRT_PRICE} <= min < max <= {MAX_SQRT_PRICE}: "
            f"[{sqrt_min_price}, {sqrt_max_price}]"
        )

    res = swap_step(
        sqrt_price=sqrt_price,
        liquidity=liquidity,
        amount_in=amount_in,
        a_to_b=a_to_b,
        sqrt_min_price=sqrt_min_price,
        sqrt_max_price=sqrt_max_price,
    )

    if a_to_b and res.next_sqrt_price > res.sqrt_price_before:
        raise AssertionError("A->B swap moved the price up")
    if not a_to_b and res.next_sqrt_price < res.sqrt_price_before:
        raise AssertionError("B->A swap moved the price down")
    if not (sqrt_min_price <= res.next_sqrt_price <= sqrt_max_price):
        raise AssertionError("swap left the price outside its bounds")
    if res.consumed_in + res.unfilled_in != res.amount_in:
        raise AssertionError("swap input accounting mismatch")

    if res.hit_bound:
        logger.info(
            "swap clamped at %s bound: consumed=%d unfilled=%d sqrt_price=%d",
            "lower" if a_to_b else "upper", res.consumed_in, res.unfilled_in, res.next_sqrt_price,
        )
    return res
