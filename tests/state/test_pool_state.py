# [TESTER] v1

from __future__ import annotations

import pytest

from cp_amm.constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE, NUM_REWARDS, ONE_Q64
from cp_amm.errors import InvalidRangeError
from cp_amm.state import (
    BaseFeeConfig,
    DynamicFeeConfig,
    PoolFeeState,
    PoolRewardInfo,
    PoolSnapshot,
    PositionSnapshot,
    init_position_snapshot,
    mint_to_int,
    normalize_mint,
)

MINT_A = "0x" + "01" * 32
MINT_B = "0x" + "02" * 32
FEES = PoolFeeState(
    base_fee=BaseFeeConfig(cliff_fee_numerator=10_000_000, number_of_periods=0, period_frequency=0, reduction_factor=0)
)


def test_normalize_mint_accepts_bytes_and_hex() -> None:
    assert normalize_mint(bytes([1] * 32)) == MINT_A
    assert normalize_mint(MINT_A.upper().replace("0X", "0x")) == MINT_A
    assert normalize_mint("  " + MINT_A + " ") == MINT_A
    assert mint_to_int(MINT_A) < mint_to_int(MINT_B)
    with pytest.raises(InvalidRangeError, match="32 bytes"):
        normalize_mint("0x01")
    with pytest.raises(InvalidRangeError, match="0x-prefixed"):
        normalize_mint("01" * 32)
    with pytest.raises(InvalidRangeError, match="hex"):
        normalize_mint("0x" + "zz" * 32)
    with pytest.raises(TypeError):
        normalize_mint(1)  # type: ignore[arg-type]


def test_pool_snapshot_validates_price_and_bounds() -> None:
    pool = PoolSnapshot(token_a_mint=MINT_A, token_b_mint=MINT_B, sqrt_price=ONE_Q64, liquidity=0, pool_fees=FEES)
    assert pool.sqrt_min_price == MIN_SQRT_PRICE
    assert pool.sqrt_max_price == MAX_SQRT_PRICE
    assert pool.is_token_a(MINT_A) is True
    assert pool.is_token_a(bytes([2] * 32)) is False
    with pytest.raises(InvalidRangeError, match="not part of this pool"):
        pool.is_token_a("0x" + "03" * 32)

    with pytest.raises(InvalidRangeError, match="outside"):
        PoolSnapshot(
            token_a_mint=MINT_A,
            token_b_mint=MINT_B,
            sqrt_price=ONE_Q64,
            liquidity=0,
            pool_fees=FEES,
            sqrt_min_price=ONE_Q64 + 1,
            sqrt_max_price=ONE_Q64 << 1,
        )
    with pytest.raises(InvalidRangeError, match="price bounds"):
        PoolSnapshot(
            token_a_mint=MINT_A,
            token_b_mint=MINT_B,
            sqrt_price=ONE_Q64,
            liquidity=0,
            pool_fees=FEES,
            sqrt_max_price=MAX_SQRT_PRICE + 1,
        )
    with pytest.raises(InvalidRangeError, match="must differ"):
        PoolSnapshot(token_a_mint=MINT_A, token_b_mint=MINT_A, sqrt_price=ONE_Q64, liquidity=0, pool_fees=FEES)


def test_pool_snapshot_limits_reward_slots() -> None:
    with pytest.raises(InvalidRangeError, match="reward slots"):
        PoolSnapshot(
            token_a_mint=MINT_A,
            token_b_mint=MINT_B,
            sqrt_price=ONE_Q64,
            liquidity=0,
            pool_fees=FEES,
            reward_infos=tuple(PoolRewardInfo() for _ in range(NUM_REWARDS + 1)),
        )


def test_position_total_liquidity_and_initial_state() -> None:
    position = PositionSnapshot(unlocked_liquidity=1, vested_liquidity=2, permanent_locked_liquidity=3)
    assert position.total_liquidity == 6

    fresh = init_position_snapshot()
    assert fresh.total_liquidity == 0
    assert len(fresh.reward_infos) == NUM_REWARDS
    assert all(info.reward_pendings == 0 for info in fresh.reward_infos)

    with pytest.raises(InvalidRangeError):
        PositionSnapshot(fee_a_pending=1 << 64)


def test_fee_state_validation() -> None:
    with pytest.raises(InvalidRangeError, match="filter_period"):
        DynamicFeeConfig(
            bin_step=1,
            filter_period=20,
            decay_period=10,
            reduction_factor=0,
            max_volatility_accumulator=0,
            variable_fee_control=0,
        )
    with pytest.raises(InvalidRangeError):
        PoolFeeState(base_fee=FEES.base_fee, protocol_fee_percent=101)
    with pytest.raises(TypeError):
        PoolFeeState(base_fee=None)  # type: ignore[arg-type]
