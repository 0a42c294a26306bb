"""
Checkpoint-based fee and reward accrual.

The pool keeps monotonic per-liquidity accumulators; every position records
the accumulator value at its last settlement. What a position has earned since
then is its liquidity times the accumulator growth:

    pending = total_liquidity * (pool_acc - checkpoint) >> LIQUIDITY_SCALE
              + already_settled_pending

Accumulators are stored as u256 on the ledger, so the growth is taken as a
modular u256 subtraction: a wrapped accumulator still yields the true growth.

Reward slots follow the same pattern. When a reading time is supplied, the
slot's `reward_per_token_stored` is first projected forward to that time
(the ledger only advances it on settlement):

    elapsed = max(0, min(now, reward_duration_end) - last_update_time)
    stored += ((reward_rate * elapsed) << SCALE_OFFSET) // pool_liquidity

This module only reads snapshots; checkpoints are advanced by the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import LIQUIDITY_SCALE, SCALE_OFFSET, U64_BITS, U128_BITS, U256_BITS
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import checked_uint, require_uint, wrapping_sub
from ..state.pools import PoolRewardInfo, PoolSnapshot
from ..state.positions import PositionRewardInfo, PositionSnapshot


@dataclass(frozen=True)
class UnclaimedAccruals:
    fee_a: int
    fee_b: int
    rewards: Tuple[int, ...]


def _accrued(liquidity: int, accumulator: int, checkpoint: int, pending: int, *, name: str) -> int:
    growth = wrapping_sub(accumulator, checkpoint, U256_BITS)
    earned = (liquidity * growth) >> LIQUIDITY_SCALE
    return checked_uint(name, earned + pending, U64_BITS)


def pending_fee(position: PositionSnapshot, pool: PoolSnapshot) -> Tuple[int, int]:
    """(fee_a, fee_b) owed to `position`, settled pending amounts included."""
    liquidity = position.total_liquidity
    fee_a = _accrued(
        liquidity,
        pool.accumulators.fee_a_per_liquidity,
        position.fee_a_per_token_checkpoint,
        position.fee_a_pending,
        name="fee_a",
    )
    fee_b = _accrued(
        liquidity,
        pool.accumulators.fee_b_per_liquidity,
        position.fee_b_per_token_checkpoint,
        position.fee_b_pending,
        name="fee_b",
    )
    return fee_a, fee_b


def projected_reward_per_token_stored(
    reward_info: PoolRewardInfo, pool_liquidity: int, current_time: int
) -> int:
    require_uint("pool_liquidity", pool_liquidity, U128_BITS)
    require_uint("current_time", current_time, U64_BITS)
    if pool_liquidity == 0:
        return reward_info.reward_per_token_stored

    last_applicable = min(current_time, reward_info.reward_duration_end)
    elapsed = max(0, last_applicable - reward_info.last_update_time)
    growth = ((reward_info.reward_rate * elapsed) << SCALE_OFFSET) // pool_liquidity
    # The ledger stores the accumulator in a u256 register and lets it wrap.
    return (reward_info.reward_per_token_stored + growth) & ((1 << U256_BITS) - 1)


def pending_reward(
    position: PositionSnapshot,
    pool: PoolSnapshot,
    reward_index: int,
    current_time: Optional[int] = None,
) -> int:
    """
    Reward owed to `position` from pool reward slot `reward_index`.

    Uninitialized slots accrue nothing; any settled pending amount on the
    position is still reported. Without `current_time` the pool's stored
    accumulator is used as is.
    """
    require_uint("reward_index", reward_index, 8)
    if reward_index >= len(pool.reward_infos):
        raise InvalidRangeError(
            f"reward_index {reward_index} out of range for {len(pool.reward_infos)} reward slots"
        )
    reward_info = pool.reward_infos[reward_index]
    if reward_index < len(position.reward_infos):
        position_info = position.reward_infos[reward_index]
    else:
        position_info = PositionRewardInfo()

    if not reward_info.initialized:
        return position_info.reward_pendings

    if current_time is None:
        stored = reward_info.reward_per_token_stored
    else:
        stored = projected_reward_per_token_stored(reward_info, pool.liquidity, current_time)
    return _accrued(
        position.total_liquidity,
        stored,
        position_info.reward_per_token_checkpoint,
        position_info.reward_pendings,
        name=f"reward_{reward_index}",
    )


def unclaimed_fees_and_rewards(
    pool: PoolSnapshot,
    position: PositionSnapshot,
    current_time: Optional[int] = None,
) -> UnclaimedAccruals:
    fee_a, fee_b = pending_fee(position, pool)
    rewards = tuple(
        pending_reward(position, pool, i, current_time) for i in range(len(pool.reward_infos))
    )
    return UnclaimedAccruals(fee_a=fee_a, fee_b=fee_b, rewards=rewards)
