"""
Pool snapshot types.

A `PoolSnapshot` is a point-in-time read of the ledger's pool account. It is
never mutated or cached by the engine: callers re-fetch and pass a fresh one
into every computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Tuple, Union

from ..constants import (
    MAX_SQRT_PRICE,
    MIN_SQRT_PRICE,
    NUM_REWARDS,
    U64_BITS,
    U128_BITS,
    U256_BITS,
)
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import require_uint
from .fees import PoolFeeState

MINT_BYTES = 32

# Mint identifiers are 32-byte keys; canonical form is lower-case `0x`-hex.
Mint = str
MintLike = Union[str, bytes]


def normalize_mint(mint: MintLike) -> Mint:
    """Canonicalize a 32-byte mint given as `bytes` or `0x`-prefixed hex."""
    if isinstance(mint, (bytes, bytearray)):
        raw = bytes(mint)
    elif isinstance(mint, str):
        text = mint.strip().lower()
        if not text.startswith("0x"):
            raise InvalidRangeError(f"mint must be 0x-prefixed hex: {mint!r}")
        try:
            raw = bytes.fromhex(text[2:])
        except ValueError as exc:
            raise InvalidRangeError(f"mint is not valid hex: {mint!r}") from exc
    else:
        raise TypeError("mint must be bytes or a hex string")
    if len(raw) != MINT_BYTES:
        raise InvalidRangeError(f"mint must be {MINT_BYTES} bytes, got {len(raw)}")
    return "0x" + raw.hex()


def mint_to_int(mint: MintLike) -> int:
    """Big-endian integer value of a mint, used for token ordering."""
    return int(normalize_mint(mint), 16)


@unique
class ActivationType(Enum):
    SLOT = 0
    TIMESTAMP = 1


@unique
class CollectFeeMode(Enum):
    BOTH_TOKEN = 0
    ONLY_B = 1


@dataclass(frozen=True)
class PoolAccumulators:
    """Fee-per-liquidity accumulators, scaled by `2**LIQUIDITY_SCALE`, stored as u256."""

    fee_a_per_liquidity: int = 0
    fee_b_per_liquidity: int = 0

    def __post_init__(self) -> None:
        require_uint("fee_a_per_liquidity", self.fee_a_per_liquidity, U256_BITS)
        require_uint("fee_b_per_liquidity", self.fee_b_per_liquidity, U256_BITS)


@dataclass(frozen=True)
class PoolRewardInfo:
    """One reward slot. `reward_rate` is Q64.64 tokens per second."""

    initialized: bool = False
    mint: Mint | None = None
    reward_per_token_stored: int = 0
    reward_rate: int = 0
    reward_duration_end: int = 0
    last_update_time: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.initialized, bool):
            raise TypeError("initialized must be a bool")
        if self.mint is not None:
            object.__setattr__(self, "mint", normalize_mint(self.mint))
        require_uint("reward_per_token_stored", self.reward_per_token_stored, U256_BITS)
        require_uint("reward_rate", self.reward_rate, U128_BITS)
        require_uint("reward_duration_end", self.reward_duration_end, U64_BITS)
        require_uint("last_update_time", self.last_update_time, U64_BITS)


@dataclass(frozen=True)
class PoolSnapshot:
    token_a_mint: Mint
    token_b_mint: Mint
    sqrt_price: int
    liquidity: int
    pool_fees: PoolFeeState
    sqrt_min_price: int = MIN_SQRT_PRICE
    sqrt_max_price: int = MAX_SQRT_PRICE
    activation_type: ActivationType = ActivationType.SLOT
    activation_point: int = 0
    collect_fee_mode: CollectFeeMode = CollectFeeMode.BOTH_TOKEN
    accumulators: PoolAccumulators = PoolAccumulators()
    reward_infos: Tuple[PoolRewardInfo, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "token_a_mint", normalize_mint(self.token_a_mint))
        object.__setattr__(self, "token_b_mint", normalize_mint(self.token_b_mint))
        if self.token_a_mint == self.token_b_mint:
            raise InvalidRangeError("token_a_mint and token_b_mint must differ")
        for name, v in (
            ("sqrt_price", self.sqrt_price),
            ("liquidity", self.liquidity),
            ("sqrt_min_price", self.sqrt_min_price),
            ("sqrt_max_price", self.sqrt_max_price),
        ):
            require_uint(name, v, U128_BITS)
        require_uint("activation_point", self.activation_point, U64_BITS)
        if not (MIN_SQRT_PRICE <= self.sqrt_min_price < self.sqrt_max_price <= MAX_SQRT_PRICE):
            raise InvalidRangeError(
                f"price bounds must satisfy {MIN_SQRT_PRICE} <= min < max <= {MAX_SQRT_PRICE}: "
                f"[{self.sqrt_min_price}, {self.sqrt_max_price}]"
            )
        if not (self.sqrt_min_price <= self.sqrt_price <= self.sqrt_max_price):
            raise InvalidRangeError(
                f"sqrt_price {self.sqrt_price} outside [{self.sqrt_min_price}, {self.sqrt_max_price}]"
            )
        if not isinstance(self.pool_fees, PoolFeeState):
            raise TypeError("pool_fees must be a PoolFeeState")
        if not isinstance(self.activation_type, ActivationType):
            raise TypeError("activation_type must be an ActivationType")
        if not isinstance(self.collect_fee_mode, CollectFeeMode):
            raise TypeError("collect_fee_mode must be a CollectFeeMode")
        if not isinstance(self.accumulators, PoolAccumulators):
            raise TypeError("accumulators must be PoolAccumulators")
        infos = tuple(self.reward_infos)
        if len(infos) > NUM_REWARDS:
            raise InvalidRangeError(f"at most {NUM_REWARDS} reward slots, got {len(infos)}")
        for info in infos:
            if not isinstance(info, PoolRewardInfo):
                raise TypeError("reward_infos must contain PoolRewardInfo")
        object.__setattr__(self, "reward_infos", infos)

    def is_token_a(self, mint: MintLike) -> bool:
        """True for token A, False for token B; InvalidRangeError for any other mint."""
        m = normalize_mint(mint)
        if m == self.token_a_mint:
            return True
        if m == self.token_b_mint:
            return False
        raise InvalidRangeError(f"mint {m} is not part of this pool")
