"""Fee scheduler: time-decaying base fee plus optional volatility surcharge.

Timeline, driven by `current_point` (slot or unix timestamp, depending on the
pool's activation type) relative to `activation_point`:

  before activation → period 0 (cliff fee, the maximal state)
  after activation  → period = min(number_of_periods, elapsed // period_frequency)
  period == number_of_periods → floor fee for the rest of the pool's life

The two scheduler modes share one input contract and differ only in the
decay formula, so they are dispatched through a table keyed by mode.

Out-of-range times never fail; they clamp to the first or last period.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..constants import (
    BASIS_POINT_MAX,
    DYNAMIC_FEE_SCALING_FACTOR,
    MAX_FEE_NUMERATOR,
    MIN_FEE_NUMERATOR,
    U64_BITS,
    U64_MAX,
)
from ..kernels.python.q64_math import ceil_div, require_int, require_uint
from ..state.fees import BaseFeeConfig, DynamicFeeConfig, FeeSchedulerMode, PoolFeeState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeRate:
    """Resolved fee numerators (over FEE_DENOMINATOR) at one point in time."""

    period: int
    base_fee_numerator: int
    dynamic_fee_numerator: int
    total_fee_numerator: int
    capped: bool


def get_current_period(base_fee: BaseFeeConfig, activation_point: int, current_point: int) -> int:
    """
    Elapsed schedule period at `current_point`.

    `current_point` is clamped into `[0, U64_MAX]` rather than rejected, so a
    time past the u64 range still resolves to the last period.
    """
    require_uint("activation_point", activation_point, U64_BITS)
    require_int("current_point", current_point)
    current_point = min(max(current_point, 0), U64_MAX)
    if current_point < activation_point:
        return 0
    if base_fee.number_of_periods == 0 or base_fee.period_frequency == 0:
        return 0
    elapsed = current_point - activation_point
    return min(base_fee.number_of_periods, elapsed // base_fee.period_frequency)


# ---------------------------------------------------------------------------
# Base fee formulas
# ---------------------------------------------------------------------------

def _linear_fee_numerator(base_fee: BaseFeeConfig, period: int) -> int:
    return base_fee.cliff_fee_numerator - period * base_fee.reduction_factor


def _exponential_fee_numerator(base_fee: BaseFeeConfig, period: int) -> int:
    # cliff * (1 - r / 10_000)^period, exact then floored
    keep = BASIS_POINT_MAX - base_fee.reduction_factor
    return (base_fee.cliff_fee_numerator * keep**period) // BASIS_POINT_MAX**period


_BASE_FEE_FORMULAS: dict[FeeSchedulerMode, Callable[[BaseFeeConfig, int], int]] = {
    FeeSchedulerMode.LINEAR: _linear_fee_numerator,
    FeeSchedulerMode.EXPONENTIAL: _exponential_fee_numerator,
}


def get_base_fee_numerator(base_fee: BaseFeeConfig, period: int) -> int:
    """Base fee numerator for `period`, never below MIN_FEE_NUMERATOR.

    Periods past `number_of_periods` are treated as the last period.
    """
    require_uint("period", period, U64_BITS)
    effective_period = min(period, base_fee.number_of_periods)
    formula = _BASE_FEE_FORMULAS[base_fee.mode]
    return max(formula(base_fee, effective_period), MIN_FEE_NUMERATOR)


def get_min_base_fee_numerator(base_fee: BaseFeeConfig) -> int:
    """Floor reached once every period has elapsed."""
    return get_base_fee_numerator(base_fee, base_fee.number_of_periods)


def get_dynamic_fee_numerator(dynamic_fee: Optional[DynamicFeeConfig]) -> int:
    """ceil(variable_fee_control * (volatility_accumulator * bin_step)^2 / 1e11)"""
    if dynamic_fee is None:
        return 0
    square_vfa_bin = (dynamic_fee.volatility_accumulator * dynamic_fee.bin_step) ** 2
    v_fee = square_vfa_bin * dynamic_fee.variable_fee_control
    return ceil_div(v_fee, DYNAMIC_FEE_SCALING_FACTOR)


def get_fee_rate(pool_fees: PoolFeeState, activation_point: int, current_point: int) -> FeeRate:
    period = get_current_period(pool_fees.base_fee, activation_point, current_point)
    base = get_base_fee_numerator(pool_fees.base_fee, period)
    dynamic = get_dynamic_fee_numerator(pool_fees.dynamic_fee)
    uncapped = base + dynamic
    total = min(uncapped, MAX_FEE_NUMERATOR)

    logger.debug(
        "fee rate: period=%d base=%d dynamic=%d total=%d capped=%s",
        period, base, dynamic, total, uncapped > MAX_FEE_NUMERATOR,
    )
    return FeeRate(
        period=period,
        base_fee_numerator=base,
        dynamic_fee_numerator=dynamic,
        total_fee_numerator=total,
        capped=uncapped > MAX_FEE_NUMERATOR,
    )
