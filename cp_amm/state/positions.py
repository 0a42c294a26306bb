"""
Position snapshot types.

Checkpoints record the pool accumulators at the position's last settlement;
pending fields hold amounts already settled into the position but not yet
withdrawn. Only the ledger program advances them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..constants import NUM_REWARDS, U64_BITS, U128_BITS, U256_BITS
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import require_uint


@dataclass(frozen=True)
class PositionRewardInfo:
    reward_per_token_checkpoint: int = 0
    reward_pendings: int = 0

    def __post_init__(self) -> None:
        require_uint("reward_per_token_checkpoint", self.reward_per_token_checkpoint, U256_BITS)
        require_uint("reward_pendings", self.reward_pendings, U64_BITS)


@dataclass(frozen=True)
class PositionSnapshot:
    unlocked_liquidity: int = 0
    vested_liquidity: int = 0
    permanent_locked_liquidity: int = 0
    fee_a_per_token_checkpoint: int = 0
    fee_b_per_token_checkpoint: int = 0
    fee_a_pending: int = 0
    fee_b_pending: int = 0
    reward_infos: Tuple[PositionRewardInfo, ...] = ()

    def __post_init__(self) -> None:
        for name, v in (
            ("unlocked_liquidity", self.unlocked_liquidity),
            ("vested_liquidity", self.vested_liquidity),
            ("permanent_locked_liquidity", self.permanent_locked_liquidity),
        ):
            require_uint(name, v, U128_BITS)
        require_uint("fee_a_per_token_checkpoint", self.fee_a_per_token_checkpoint, U256_BITS)
        require_uint("fee_b_per_token_checkpoint", self.fee_b_per_token_checkpoint, U256_BITS)
        require_uint("fee_a_pending", self.fee_a_pending, U64_BITS)
        require_uint("fee_b_pending", self.fee_b_pending, U64_BITS)
        infos = tuple(self.reward_infos)
        if len(infos) > NUM_REWARDS:
            raise InvalidRangeError(f"at most {NUM_REWARDS} reward slots, got {len(infos)}")
        for info in infos:
            if not isinstance(info, PositionRewardInfo):
                raise TypeError("reward_infos must contain PositionRewardInfo")
        object.__setattr__(self, "reward_infos", infos)

    @property
    def total_liquidity(self) -> int:
        return self.unlocked_liquidity + self.vested_liquidity + self.permanent_locked_liquidity


def init_position_snapshot() -> PositionSnapshot:
    """Zeroed position, as created when a position is opened."""
    return PositionSnapshot(reward_infos=tuple(PositionRewardInfo() for _ in range(NUM_REWARDS)))
