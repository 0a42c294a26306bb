"""
Trading fee application (deterministic, integer-only).

The fee is taken from a gross amount with floor rounding and then attributed
across protocol, partner and referral shares, each floored independently.
Whatever the floors leave behind stays with liquidity providers, so the
shares can never over-distribute the fee.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import FEE_DENOMINATOR, MAX_FEE_NUMERATOR, PERCENT_MAX, U64_BITS
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import Rounding, mul_div, require_uint
from ..state.fees import PoolFeeState


@dataclass(frozen=True)
class FeeOnAmountResult:
    amount: int
    trading_fee: int
    lp_fee: int
    protocol_fee: int
    partner_fee: int
    referral_fee: int

    def __post_init__(self) -> None:
        for name, v in (
            ("amount", self.amount),
            ("trading_fee", self.trading_fee),
            ("lp_fee", self.lp_fee),
            ("protocol_fee", self.protocol_fee),
            ("partner_fee", self.partner_fee),
            ("referral_fee", self.referral_fee),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def gross_amount(self) -> int:
        return self.amount + self.trading_fee


def compute_trading_fee(amount: int, fee_numerator: int) -> int:
    """`floor(amount * fee_numerator / FEE_DENOMINATOR)`."""
    require_uint("amount", amount, U64_BITS)
    require_uint("fee_numerator", fee_numerator, U64_BITS)
    if fee_numerator > MAX_FEE_NUMERATOR:
        raise InvalidRangeError(f"fee_numerator must be <= {MAX_FEE_NUMERATOR}: {fee_numerator}")
    return mul_div(amount, fee_numerator, FEE_DENOMINATOR, Rounding.DOWN)


def get_gross_amount_for_net(net_amount: int, fee_numerator: int) -> int:
    """
    Smallest gross `g` whose net after `compute_trading_fee` reaches `net_amount`.

    `g - floor(g * f / D) >= n` holds iff `g * (D - f) > (n - 1) * D`. Since the
    fee is capped at 50%, the net grows by at most one per unit of gross, so the
    net of the returned amount is exactly `net_amount`.
    """
    require_uint("net_amount", net_amount, U64_BITS)
    require_uint("fee_numerator", fee_numerator, U64_BITS)
    if fee_numerator > MAX_FEE_NUMERATOR:
        raise InvalidRangeError(f"fee_numerator must be <= {MAX_FEE_NUMERATOR}: {fee_numerator}")
    if net_amount == 0:
        return 0
    return (net_amount - 1) * FEE_DENOMINATOR // (FEE_DENOMINATOR - fee_numerator) + 1


def _share(fee: int, percent: int) -> int:
    return mul_div(fee, percent, PERCENT_MAX, Rounding.DOWN)


def apply_fee(
    amount: int,
    fee_numerator: int,
    pool_fees: PoolFeeState,
    *,
    has_referral: bool = False,
) -> FeeOnAmountResult:
    """
    Split `amount` into the net amount and the trading fee, then attribute the fee.

    Without a referral account the referral share is credited to the protocol.
    """
    trading_fee = compute_trading_fee(amount, fee_numerator)
    net = amount - trading_fee

    protocol_fee = _share(trading_fee, pool_fees.protocol_fee_percent)
    partner_fee = _share(trading_fee, pool_fees.partner_fee_percent)
    referral_fee = _share(trading_fee, pool_fees.referral_fee_percent)
    if not has_referral:
        protocol_fee += referral_fee
        referral_fee = 0

    distributed = protocol_fee + partner_fee + referral_fee
    if distributed > trading_fee:
        raise AssertionError("fee split over-distributed")
    if net + trading_fee != amount:
        raise AssertionError("fee split leaked value")

    return FeeOnAmountResult(
        amount=net,
        trading_fee=trading_fee,
        lp_fee=trading_fee - distributed,
        protocol_fee=protocol_fee,
        partner_fee=partner_fee,
        referral_fee=referral_fee,
    )
