"""Pool fee configuration state.

Immutable once a pool is created:
- `BaseFeeConfig` drives the time-decaying base fee,
- `DynamicFeeConfig` (optional) adds a volatility surcharge,
- `PoolFeeState` bundles both with the protocol/partner/referral shares.

Numerators are over `FEE_DENOMINATOR` (1e9); shares are percentages of the
trading fee.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional

from ..constants import (
    BASIS_POINT_MAX,
    MAX_FEE_NUMERATOR,
    MIN_FEE_NUMERATOR,
    PERCENT_MAX,
    U64_BITS,
    U128_BITS,
)
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import require_uint


@unique
class FeeSchedulerMode(Enum):
    LINEAR = 0
    EXPONENTIAL = 1


@dataclass(frozen=True)
class BaseFeeConfig:
    cliff_fee_numerator: int
    number_of_periods: int
    period_frequency: int
    reduction_factor: int
    mode: FeeSchedulerMode = FeeSchedulerMode.LINEAR

    def __post_init__(self) -> None:
        require_uint("cliff_fee_numerator", self.cliff_fee_numerator, U64_BITS)
        require_uint("number_of_periods", self.number_of_periods, 16)
        require_uint("period_frequency", self.period_frequency, U64_BITS)
        require_uint("reduction_factor", self.reduction_factor, U64_BITS)
        if not isinstance(self.mode, FeeSchedulerMode):
            raise TypeError("mode must be a FeeSchedulerMode")
        if not (MIN_FEE_NUMERATOR <= self.cliff_fee_numerator <= MAX_FEE_NUMERATOR):
            raise InvalidRangeError(
                f"cliff_fee_numerator must be in [{MIN_FEE_NUMERATOR}, {MAX_FEE_NUMERATOR}]: "
                f"{self.cliff_fee_numerator}"
            )
        if self.mode is FeeSchedulerMode.EXPONENTIAL and self.reduction_factor > BASIS_POINT_MAX:
            raise InvalidRangeError(
                f"exponential reduction_factor must be <= {BASIS_POINT_MAX}: {self.reduction_factor}"
            )


@dataclass(frozen=True)
class DynamicFeeConfig:
    """Volatility surcharge parameters plus the externally maintained accumulator."""

    bin_step: int
    filter_period: int
    decay_period: int
    reduction_factor: int
    max_volatility_accumulator: int
    variable_fee_control: int
    volatility_accumulator: int = 0

    def __post_init__(self) -> None:
        require_uint("bin_step", self.bin_step, 16)
        require_uint("filter_period", self.filter_period, 16)
        require_uint("decay_period", self.decay_period, 16)
        require_uint("reduction_factor", self.reduction_factor, 16)
        require_uint("max_volatility_accumulator", self.max_volatility_accumulator, 32)
        require_uint("variable_fee_control", self.variable_fee_control, 32)
        require_uint("volatility_accumulator", self.volatility_accumulator, U128_BITS)
        if self.filter_period > self.decay_period:
            raise InvalidRangeError(
                f"filter_period must be <= decay_period: {self.filter_period} > {self.decay_period}"
            )
        if self.reduction_factor > BASIS_POINT_MAX:
            raise InvalidRangeError(f"reduction_factor must be <= {BASIS_POINT_MAX}: {self.reduction_factor}")


@dataclass(frozen=True)
class PoolFeeState:
    base_fee: BaseFeeConfig
    protocol_fee_percent: int = 0
    partner_fee_percent: int = 0
    referral_fee_percent: int = 0
    dynamic_fee: Optional[DynamicFeeConfig] = None

    def __post_init__(self) -> None:
        if not isinstance(self.base_fee, BaseFeeConfig):
            raise TypeError("base_fee must be a BaseFeeConfig")
        if self.dynamic_fee is not None and not isinstance(self.dynamic_fee, DynamicFeeConfig):
            raise TypeError("dynamic_fee must be a DynamicFeeConfig or None")
        for name, v in (
            ("protocol_fee_percent", self.protocol_fee_percent),
            ("partner_fee_percent", self.partner_fee_percent),
            ("referral_fee_percent", self.referral_fee_percent),
        ):
            require_uint(name, v, 8)
            if v > PERCENT_MAX:
                raise InvalidRangeError(f"{name} must be in [0, {PERCENT_MAX}]: {v}")
        total = self.protocol_fee_percent + self.partner_fee_percent + self.referral_fee_percent
        if total > PERCENT_MAX:
            raise InvalidRangeError(f"fee share percentages must sum to <= {PERCENT_MAX}, got {total}")
