# [TESTER] v1

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cp_amm.constants import MAX_FEE_NUMERATOR, MIN_FEE_NUMERATOR
from cp_amm.core.fee_scheduler import (
    get_base_fee_numerator,
    get_current_period,
    get_dynamic_fee_numerator,
    get_fee_rate,
    get_min_base_fee_numerator,
)
from cp_amm.errors import InvalidRangeError
from cp_amm.state.fees import BaseFeeConfig, DynamicFeeConfig, FeeSchedulerMode, PoolFeeState

LINEAR = BaseFeeConfig(
    cliff_fee_numerator=1_000_000,
    number_of_periods=10,
    period_frequency=10,
    reduction_factor=2,
    mode=FeeSchedulerMode.LINEAR,
)


def _dynamic(volatility_accumulator: int) -> DynamicFeeConfig:
    return DynamicFeeConfig(
        bin_step=1,
        filter_period=10,
        decay_period=120,
        reduction_factor=5000,
        max_volatility_accumulator=14_460_000,
        variable_fee_control=2_674_000,
        volatility_accumulator=volatility_accumulator,
    )


def test_linear_period_five() -> None:
    assert get_base_fee_numerator(LINEAR, 5) == 999_990
    assert get_current_period(LINEAR, 100, 150) == 5
    rate = get_fee_rate(PoolFeeState(base_fee=LINEAR), 100, 155)
    assert rate.period == 5
    assert rate.total_fee_numerator == 999_990
    assert rate.capped is False


def test_before_activation_charges_the_cliff_fee() -> None:
    assert get_current_period(LINEAR, 1_000, 0) == 0
    assert get_fee_rate(PoolFeeState(base_fee=LINEAR), 1_000, 999).base_fee_numerator == 1_000_000


@pytest.mark.parametrize("period", [10, 11, 1_000, 1 << 40])
def test_fee_saturates_after_the_last_period(period: int) -> None:
    assert get_base_fee_numerator(LINEAR, period) == get_min_base_fee_numerator(LINEAR) == 999_980


def test_elapsed_time_past_schedule_clamps_to_last_period() -> None:
    assert get_current_period(LINEAR, 0, (1 << 64) - 1) == 10


def test_times_outside_u64_clamp_instead_of_failing() -> None:
    assert get_current_period(LINEAR, 0, 1 << 70) == 10
    assert get_current_period(LINEAR, 100, -5) == 0
    assert get_fee_rate(PoolFeeState(base_fee=LINEAR), 0, 1 << 70).base_fee_numerator == 999_980
    with pytest.raises(TypeError):
        get_current_period(LINEAR, 0, "10")  # type: ignore[arg-type]


def test_linear_decay_never_goes_below_the_floor() -> None:
    steep = BaseFeeConfig(
        cliff_fee_numerator=1_000_000,
        number_of_periods=10,
        period_frequency=1,
        reduction_factor=200_000,
    )
    assert get_base_fee_numerator(steep, 4) == 200_000
    assert get_base_fee_numerator(steep, 5) == MIN_FEE_NUMERATOR
    assert get_base_fee_numerator(steep, 10) == MIN_FEE_NUMERATOR


def test_exponential_decay_is_exact() -> None:
    cfg = BaseFeeConfig(
        cliff_fee_numerator=500_000_000,
        number_of_periods=120,
        period_frequency=10,
        reduction_factor=1_000,
        mode=FeeSchedulerMode.EXPONENTIAL,
    )
    assert get_base_fee_numerator(cfg, 0) == 500_000_000
    assert get_base_fee_numerator(cfg, 1) == 450_000_000
    assert get_base_fee_numerator(cfg, 2) == 405_000_000
    assert get_min_base_fee_numerator(cfg) == MIN_FEE_NUMERATOR


def test_zero_frequency_or_zero_periods_means_constant_fee() -> None:
    constant = BaseFeeConfig(cliff_fee_numerator=10_000_000, number_of_periods=0, period_frequency=0, reduction_factor=0)
    assert get_current_period(constant, 0, 10**9) == 0
    no_freq = BaseFeeConfig(cliff_fee_numerator=10_000_000, number_of_periods=5, period_frequency=0, reduction_factor=1)
    assert get_current_period(no_freq, 0, 10**9) == 0


def test_dynamic_fee_surcharge_rounds_up() -> None:
    assert get_dynamic_fee_numerator(None) == 0
    assert get_dynamic_fee_numerator(_dynamic(0)) == 0
    assert get_dynamic_fee_numerator(_dynamic(1)) == 1
    # 2_674_000 * (10_000 * 1)^2 / 1e11 = 2_674 exactly
    assert get_dynamic_fee_numerator(_dynamic(10_000)) == 2_674


def test_total_fee_is_capped() -> None:
    pool_fees = PoolFeeState(
        base_fee=BaseFeeConfig(
            cliff_fee_numerator=MAX_FEE_NUMERATOR, number_of_periods=0, period_frequency=0, reduction_factor=0
        ),
        dynamic_fee=_dynamic(10_000_000),
    )
    rate = get_fee_rate(pool_fees, 0, 0)
    assert rate.dynamic_fee_numerator > 0
    assert rate.total_fee_numerator == MAX_FEE_NUMERATOR
    assert rate.capped is True


def test_base_fee_config_validation() -> None:
    with pytest.raises(InvalidRangeError):
        BaseFeeConfig(cliff_fee_numerator=MIN_FEE_NUMERATOR - 1, number_of_periods=0, period_frequency=0, reduction_factor=0)
    with pytest.raises(InvalidRangeError):
        BaseFeeConfig(cliff_fee_numerator=MAX_FEE_NUMERATOR + 1, number_of_periods=0, period_frequency=0, reduction_factor=0)
    with pytest.raises(InvalidRangeError):
        BaseFeeConfig(
            cliff_fee_numerator=MAX_FEE_NUMERATOR,
            number_of_periods=1,
            period_frequency=1,
            reduction_factor=10_001,
            mode=FeeSchedulerMode.EXPONENTIAL,
        )
    with pytest.raises(InvalidRangeError):
        BaseFeeConfig(cliff_fee_numerator=MAX_FEE_NUMERATOR, number_of_periods=1 << 16, period_frequency=1, reduction_factor=0)


@settings(max_examples=200, deadline=None)
@given(
    cliff=st.integers(min_value=MIN_FEE_NUMERATOR, max_value=MAX_FEE_NUMERATOR),
    periods=st.integers(min_value=0, max_value=200),
    frequency=st.integers(min_value=0, max_value=1_000),
    reduction=st.integers(min_value=0, max_value=10_000),
    mode=st.sampled_from(list(FeeSchedulerMode)),
    t1=st.integers(min_value=0, max_value=10**6),
    t2=st.integers(min_value=0, max_value=10**6),
)
def test_base_fee_is_non_increasing_over_time(
    cliff: int, periods: int, frequency: int, reduction: int, mode: FeeSchedulerMode, t1: int, t2: int
) -> None:
    cfg = BaseFeeConfig(
        cliff_fee_numerator=cliff,
        number_of_periods=periods,
        period_frequency=frequency,
        reduction_factor=reduction,
        mode=mode,
    )
    pool_fees = PoolFeeState(base_fee=cfg)
    early, late = sorted((t1, t2))
    fee_early = get_fee_rate(pool_fees, 500, early).base_fee_numerator
    fee_late = get_fee_rate(pool_fees, 500, late).base_fee_numerator
    assert MIN_FEE_NUMERATOR <= fee_late <= fee_early <= cliff
