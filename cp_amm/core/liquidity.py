"""
Liquidity sizing for deposits and withdrawals.

`get_liquidity_delta` turns a pair of maximum token amounts into the largest
liquidity delta the pool can absorb without breaching either maximum:

    L_from_a = max_a / (1/P - 1/P_max)
    L_from_b = max_b / (P - P_min)
    liquidity_delta = floor(min(L_from_a, L_from_b))

A price sitting exactly on a bound leaves that side's constraint inactive.

Deposit and withdraw quotes apply the inverse relation with the rounding the
ledger uses: deposits round token amounts up, withdrawals round them down.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE
from ..errors import InvalidRangeError
from ..kernels.python.liquidity_math_v1 import TokenAmounts
from ..kernels.python.liquidity_math_v1 import get_amounts_for_liquidity as _kernel_get_amounts_for_liquidity
from ..kernels.python.liquidity_math_v1 import get_liquidity_delta as _kernel_get_liquidity_delta
from ..kernels.python.q64_math import Rounding
from ..state.pools import PoolSnapshot
from .price import DecimalLike
from .slippage import get_max_amount_with_slippage, get_min_amount_with_slippage


def _require_global_bounds(sqrt_min_price: int, sqrt_max_price: int) -> None:
    if not (MIN_SQRT_PRICE <= sqrt_min_price < sqrt_max_price <= MAX_SQRT_PRICE):
        raise InvalidRangeError(
            f"price bounds must satisfy {MIN_SQRT_PRICE} <= min < max <= {MAX_SQRT_PRICE}: "
            f"[{sqrt_min_price}, {sqrt_max_price}]"
        )


def get_liquidity_delta(
    *,
    max_amount_token_a: int,
    max_amount_token_b: int,
    sqrt_price: int,
    sqrt_min_price: int,
    sqrt_max_price: int,
) -> int:
    """
    Largest liquidity delta that needs at most `max_amount_token_a` of A
    and `max_amount_token_b` of B.

    Raises:
        InvalidRangeError: bounds or price outside their domain.
        ArithmeticOverflowError: the liquidity does not fit a u128.
    """
    _require_global_bounds(sqrt_min_price, sqrt_max_price)
    return _kernel_get_liquidity_delta(
        max_amount_a=max_amount_token_a,
        max_amount_b=max_amount_token_b,
        sqrt_price=sqrt_price,
        sqrt_min_price=sqrt_min_price,
        sqrt_max_price=sqrt_max_price,
    )


def get_amounts_for_liquidity(
    *,
    liquidity_delta: int,
    sqrt_price: int,
    sqrt_min_price: int,
    sqrt_max_price: int,
    rounding: Rounding,
) -> TokenAmounts:
    _require_global_bounds(sqrt_min_price, sqrt_max_price)
    return _kernel_get_amounts_for_liquidity(
        liquidity=liquidity_delta,
        sqrt_price=sqrt_price,
        sqrt_min_price=sqrt_min_price,
        sqrt_max_price=sqrt_max_price,
        rounding=rounding,
    )


@dataclass(frozen=True)
class DepositQuote:
    liquidity_delta: int
    token_a_amount: int
    token_b_amount: int
    token_a_amount_threshold: int
    token_b_amount_threshold: int


@dataclass(frozen=True)
class WithdrawQuote:
    liquidity_delta: int
    token_a_amount: int
    token_b_amount: int
    token_a_amount_threshold: int
    token_b_amount_threshold: int


def get_deposit_quote(
    pool: PoolSnapshot,
    *,
    max_amount_token_a: int,
    max_amount_token_b: int,
    slippage: Optional[DecimalLike] = None,
) -> DepositQuote:
    """Size a deposit and report the amounts it pulls plus the max-in thresholds."""
    liquidity_delta = get_liquidity_delta(
        max_amount_token_a=max_amount_token_a,
        max_amount_token_b=max_amount_token_b,
        sqrt_price=pool.sqrt_price,
        sqrt_min_price=pool.sqrt_min_price,
        sqrt_max_price=pool.sqrt_max_price,
    )
    amounts = get_amounts_for_liquidity(
        liquidity_delta=liquidity_delta,
        sqrt_price=pool.sqrt_price,
        sqrt_min_price=pool.sqrt_min_price,
        sqrt_max_price=pool.sqrt_max_price,
        rounding=Rounding.UP,
    )
    if amounts.amount_a > max_amount_token_a or amounts.amount_b > max_amount_token_b:
        raise AssertionError("liquidity delta requires more than the maximum amounts")

    if slippage is None:
        threshold_a, threshold_b = amounts.amount_a, amounts.amount_b
    else:
        threshold_a = get_max_amount_with_slippage(amounts.amount_a, slippage)
        threshold_b = get_max_amount_with_slippage(amounts.amount_b, slippage)
    return DepositQuote(
        liquidity_delta=liquidity_delta,
        token_a_amount=amounts.amount_a,
        token_b_amount=amounts.amount_b,
        token_a_amount_threshold=threshold_a,
        token_b_amount_threshold=threshold_b,
    )


def get_withdraw_quote(
    pool: PoolSnapshot,
    *,
    liquidity_delta: int,
    slippage: Optional[DecimalLike] = None,
) -> WithdrawQuote:
    """Amounts returned for burning `liquidity_delta` plus the min-out thresholds."""
    if liquidity_delta > pool.liquidity:
        raise InvalidRangeError(
            f"liquidity_delta exceeds pool liquidity: {liquidity_delta} > {pool.liquidity}"
        )
    amounts = get_amounts_for_liquidity(
        liquidity_delta=liquidity_delta,
        sqrt_price=pool.sqrt_price,
        sqrt_min_price=pool.sqrt_min_price,
        sqrt_max_price=pool.sqrt_max_price,
        rounding=Rounding.DOWN,
    )
    if slippage is None:
        threshold_a, threshold_b = amounts.amount_a, amounts.amount_b
    else:
        threshold_a = get_min_amount_with_slippage(amounts.amount_a, slippage)
        threshold_b = get_min_amount_with_slippage(amounts.amount_b, slippage)
    return WithdrawQuote(
        liquidity_delta=liquidity_delta,
        token_a_amount=amounts.amount_a,
        token_b_amount=amounts.amount_b,
        token_a_amount_threshold=threshold_a,
        token_b_amount_threshold=threshold_b,
    )
