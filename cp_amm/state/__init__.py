"""
Immutable pool / position snapshots consumed by the engine
"""

from .fees import BaseFeeConfig, DynamicFeeConfig, FeeSchedulerMode, PoolFeeState
from .pools import (
    ActivationType,
    CollectFeeMode,
    PoolAccumulators,
    PoolRewardInfo,
    PoolSnapshot,
    mint_to_int,
    normalize_mint,
)
from .positions import PositionRewardInfo, PositionSnapshot, init_position_snapshot

__all__ = [
    "BaseFeeConfig",
    "DynamicFeeConfig",
    "FeeSchedulerMode",
    "PoolFeeState",
    "ActivationType",
    "CollectFeeMode",
    "PoolAccumulators",
    "PoolRewardInfo",
    "PoolSnapshot",
    "mint_to_int",
    "normalize_mint",
    "PositionRewardInfo",
    "PositionSnapshot",
    "init_position_snapshot",
]
