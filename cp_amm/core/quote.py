"""
Swap quote pipeline.

Pipeline (pure function of the pool snapshot and the caller's inputs):
1. Resolve the trade direction from the input mint (token A in => A->B).
2. Resolve the fee numerator at `current_point` (FeeScheduler).
3. Run the bounded curve (SwapCurve), taking the fee on the side the pool's
   collect-fee mode selects:
   - BOTH_TOKEN: fee on the output token,
   - ONLY_B: fee always in token B, so B->A swaps pay it on the input
     before the curve and A->B swaps pay it on the output. On a partial
     fill the input fee covers only the gross input that traded.
4. Split the fee into LP / protocol / partner / referral shares (FeeApplier).

`get_quote` raises on domain errors; `try_get_quote` wraps the same pipeline
and reports failures as a `QuoteResult` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..constants import LIQUIDITY_SCALE, U64_BITS, U64_MAX
from ..errors import CpAmmError
from ..kernels.python.q64_math import Rounding, mul_div, require_uint
from ..state.pools import CollectFeeMode, MintLike, PoolSnapshot
from .fee_scheduler import get_fee_rate
from .fees import apply_fee, get_gross_amount_for_net
from .price import DecimalLike
from .slippage import get_min_amount_with_slippage, get_price_impact
from .swap import swap_exact_in

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapQuote:
    actual_amount: int
    total_fee: int
    lp_fee: int
    protocol_fee: int
    partner_fee: int
    referral_fee: int
    fee_numerator: int
    fee_on_input: bool
    next_sqrt_price: int
    consumed_in_amount: int
    unfilled_in_amount: int
    min_out_amount: Optional[int] = None
    price_impact: Optional[Decimal] = None


@dataclass(frozen=True)
class QuoteResult:
    ok: bool
    quote: SwapQuote | None = None
    error: str | None = None


def _ideal_output(amount_in: int, sqrt_price: int, a_to_b: bool) -> int:
    # Output at the spot price with no curve movement.
    price_q128 = sqrt_price * sqrt_price
    if a_to_b:
        return mul_div(amount_in, price_q128, 1 << LIQUIDITY_SCALE, Rounding.DOWN)
    return mul_div(amount_in, 1 << LIQUIDITY_SCALE, price_q128, Rounding.DOWN)


def get_quote(
    pool: PoolSnapshot,
    *,
    input_mint: MintLike,
    in_amount: int,
    current_point: int,
    slippage: Optional[DecimalLike] = None,
    has_referral: bool = False,
) -> SwapQuote:
    """
    Quote an exact-in swap of `in_amount` of `input_mint` at `current_point`.

    `price_impact` compares the curve's gross output with the spot-price
    output for the same consumed input (fees excluded); it is None when the
    spot output rounds to zero.

    Raises:
        InvalidRangeError: unknown mint, or an amount or price outside its domain.
        ArithmeticOverflowError: an amount does not fit its ledger width.
    """
    require_uint("in_amount", in_amount, U64_BITS)
    a_to_b = pool.is_token_a(input_mint)
    fee_rate = get_fee_rate(pool.pool_fees, pool.activation_point, current_point)
    fee_numerator = fee_rate.total_fee_numerator
    fee_on_input = pool.collect_fee_mode is CollectFeeMode.ONLY_B and not a_to_b

    if fee_on_input:
        fee = apply_fee(in_amount, fee_numerator, pool.pool_fees, has_referral=has_referral)
        step = swap_exact_in(
            sqrt_price=pool.sqrt_price,
            liquidity=pool.liquidity,
            amount_in=fee.amount,
            a_to_b=a_to_b,
            sqrt_min_price=pool.sqrt_min_price,
            sqrt_max_price=pool.sqrt_max_price,
        )
        if step.unfilled_in > 0:
            # Only the gross input that actually traded pays the fee.
            gross = min(in_amount, get_gross_amount_for_net(step.consumed_in, fee_numerator))
            fee = apply_fee(gross, fee_numerator, pool.pool_fees, has_referral=has_referral)
            if fee.amount != step.consumed_in:
                raise AssertionError("fee-on-input refund mismatch")
        actual_amount = step.output_amount
        consumed_in_amount = fee.gross_amount
        unfilled_in_amount = in_amount - consumed_in_amount
    else:
        step = swap_exact_in(
            sqrt_price=pool.sqrt_price,
            liquidity=pool.liquidity,
            amount_in=in_amount,
            a_to_b=a_to_b,
            sqrt_min_price=pool.sqrt_min_price,
            sqrt_max_price=pool.sqrt_max_price,
        )
        fee = apply_fee(step.output_amount, fee_numerator, pool.pool_fees, has_referral=has_referral)
        actual_amount = fee.amount
        consumed_in_amount = step.consumed_in
        unfilled_in_amount = step.unfilled_in

    min_out_amount = None
    if slippage is not None:
        min_out_amount = get_min_amount_with_slippage(actual_amount, slippage)

    price_impact = None
    ideal = _ideal_output(step.consumed_in, pool.sqrt_price, a_to_b)
    if 0 < ideal <= U64_MAX:
        price_impact = get_price_impact(step.output_amount, ideal)

    quote = SwapQuote(
        actual_amount=actual_amount,
        total_fee=fee.trading_fee,
        lp_fee=fee.lp_fee,
        protocol_fee=fee.protocol_fee,
        partner_fee=fee.partner_fee,
        referral_fee=fee.referral_fee,
        fee_numerator=fee_numerator,
        fee_on_input=fee_on_input,
        next_sqrt_price=step.next_sqrt_price,
        consumed_in_amount=consumed_in_amount,
        unfilled_in_amount=unfilled_in_amount,
        min_out_amount=min_out_amount,
        price_impact=price_impact,
    )
    logger.debug(
        "quote: a_to_b=%s in=%d out=%d fee=%d fee_numerator=%d unfilled=%d",
        a_to_b, in_amount, actual_amount, fee.trading_fee, fee_numerator, unfilled_in_amount,
    )
    return quote


def try_get_quote(
    pool: PoolSnapshot,
    *,
    input_mint: MintLike,
    in_amount: int,
    current_point: int,
    slippage: Optional[DecimalLike] = None,
    has_referral: bool = False,
) -> QuoteResult:
    """Like `get_quote` but reports domain and overflow errors as a result value."""
    try:
        quote = get_quote(
            pool,
            input_mint=input_mint,
            in_amount=in_amount,
            current_point=current_point,
            slippage=slippage,
            has_referral=has_referral,
        )
    except (CpAmmError, TypeError) as exc:
        return QuoteResult(ok=False, error=str(exc))
    return QuoteResult(ok=True, quote=quote)
