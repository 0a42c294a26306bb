"""
Decoding pool / position snapshots from JSON-like mappings.

Goals:
- Accept what account readers actually hand over: wide integers as ints,
  decimal strings, `0x` hex strings, or little-endian byte arrays (the
  on-account encoding of u128 / u256 fields).
- Produce the immutable `PoolSnapshot` / `PositionSnapshot` types, so every
  range check lives in one place.
- Never guess: a field of the wrong shape is a TypeError, a value outside
  its width is an InvalidRangeError.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Optional, Type, TypeVar

from ..constants import U64_BITS, U128_BITS, U256_BITS
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import require_uint
from ..state.fees import BaseFeeConfig, DynamicFeeConfig, FeeSchedulerMode, PoolFeeState
from ..state.pools import (
    ActivationType,
    CollectFeeMode,
    Mint,
    PoolAccumulators,
    PoolRewardInfo,
    PoolSnapshot,
    normalize_mint,
)
from ..state.positions import PositionRewardInfo, PositionSnapshot

E = TypeVar("E", bound=Enum)


def _require_mapping(value: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be an object")
    return value


def _require_list(value: Any, *, name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{name} must be a list")
    return list(value)


def _byte_values(value: Any, *, name: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    for b in value:
        if not isinstance(b, int) or isinstance(b, bool) or not (0 <= b <= 0xFF):
            raise InvalidRangeError(f"{name} byte array must hold ints in [0, 255]")
    return bytes(value)


def parse_uint(value: Any, *, name: str, bits: int) -> int:
    """
    Parse an unsigned integer field of width `bits`.

    Accepted encodings: int, decimal string, `0x`-prefixed hex string,
    little-endian byte array (list of ints or bytes).
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, not a bool")
    if isinstance(value, int):
        out = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                out = int(text[2:], 16)
            else:
                out = int(text, 10)
        except ValueError as exc:
            raise InvalidRangeError(f"{name} is not an integer: {value!r}") from exc
    elif isinstance(value, (list, tuple, bytes, bytearray)):
        out = int.from_bytes(_byte_values(value, name=name), "little")
    else:
        raise TypeError(f"{name} must be an int, string or byte array")
    return require_uint(name, out, bits)


def parse_enum(enum_cls: Type[E], value: Any, *, name: str) -> E:
    """Parse an enum from an instance, its integer value, or its name (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an int or a string")
    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError as exc:
            raise InvalidRangeError(f"invalid {name}: {value}") from exc
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError as exc:
            raise InvalidRangeError(f"invalid {name}: {value!r}") from exc
    raise TypeError(f"{name} must be an int or a string")


def parse_mint(value: Any, *, name: str) -> Mint:
    # Byte arrays for mints are the raw key bytes, not a little-endian number.
    if isinstance(value, (list, tuple)):
        value = _byte_values(value, name=name)
    try:
        return normalize_mint(value)
    except InvalidRangeError as exc:
        raise InvalidRangeError(f"{name}: {exc}") from exc


def _flag(value: Any, *, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise TypeError(f"{name} must be a bool or 0/1")


# ---------------------------------------------------------------------------
# Pool fees
# ---------------------------------------------------------------------------

def base_fee_from_mapping(obj: Any) -> BaseFeeConfig:
    obj = _require_mapping(obj, name="base_fee")
    return BaseFeeConfig(
        cliff_fee_numerator=parse_uint(obj.get("cliff_fee_numerator"), name="cliff_fee_numerator", bits=U64_BITS),
        number_of_periods=parse_uint(obj.get("number_of_periods", 0), name="number_of_periods", bits=16),
        period_frequency=parse_uint(obj.get("period_frequency", 0), name="period_frequency", bits=U64_BITS),
        reduction_factor=parse_uint(obj.get("reduction_factor", 0), name="reduction_factor", bits=U64_BITS),
        mode=parse_enum(FeeSchedulerMode, obj.get("mode", FeeSchedulerMode.LINEAR), name="mode"),
    )


def dynamic_fee_from_mapping(obj: Any) -> Optional[DynamicFeeConfig]:
    """Decode a dynamic fee block; None, or `initialized: 0`, means disabled."""
    if obj is None:
        return None
    obj = _require_mapping(obj, name="dynamic_fee")
    if "initialized" in obj and not _flag(obj["initialized"], name="dynamic_fee.initialized"):
        return None
    return DynamicFeeConfig(
        bin_step=parse_uint(obj.get("bin_step", 0), name="bin_step", bits=16),
        filter_period=parse_uint(obj.get("filter_period", 0), name="filter_period", bits=16),
        decay_period=parse_uint(obj.get("decay_period", 0), name="decay_period", bits=16),
        reduction_factor=parse_uint(obj.get("reduction_factor", 0), name="reduction_factor", bits=16),
        max_volatility_accumulator=parse_uint(
            obj.get("max_volatility_accumulator", 0), name="max_volatility_accumulator", bits=32
        ),
        variable_fee_control=parse_uint(obj.get("variable_fee_control", 0), name="variable_fee_control", bits=32),
        volatility_accumulator=parse_uint(
            obj.get("volatility_accumulator", 0), name="volatility_accumulator", bits=U128_BITS
        ),
    )


def pool_fees_from_mapping(obj: Any) -> PoolFeeState:
    obj = _require_mapping(obj, name="pool_fees")
    if "base_fee" not in obj:
        raise InvalidRangeError("pool_fees.base_fee is required")
    return PoolFeeState(
        base_fee=base_fee_from_mapping(obj["base_fee"]),
        protocol_fee_percent=parse_uint(obj.get("protocol_fee_percent", 0), name="protocol_fee_percent", bits=8),
        partner_fee_percent=parse_uint(obj.get("partner_fee_percent", 0), name="partner_fee_percent", bits=8),
        referral_fee_percent=parse_uint(obj.get("referral_fee_percent", 0), name="referral_fee_percent", bits=8),
        dynamic_fee=dynamic_fee_from_mapping(obj.get("dynamic_fee")),
    )


# ---------------------------------------------------------------------------
# Pools and positions
# ---------------------------------------------------------------------------

def _pool_reward_info_from_mapping(obj: Any, *, index: int) -> PoolRewardInfo:
    obj = _require_mapping(obj, name=f"reward_infos[{index}]")
    mint = obj.get("mint")
    return PoolRewardInfo(
        initialized=_flag(obj.get("initialized", False), name=f"reward_infos[{index}].initialized"),
        mint=None if mint is None else parse_mint(mint, name=f"reward_infos[{index}].mint"),
        reward_per_token_stored=parse_uint(
            obj.get("reward_per_token_stored", 0), name="reward_per_token_stored", bits=U256_BITS
        ),
        reward_rate=parse_uint(obj.get("reward_rate", 0), name="reward_rate", bits=U128_BITS),
        reward_duration_end=parse_uint(obj.get("reward_duration_end", 0), name="reward_duration_end", bits=U64_BITS),
        last_update_time=parse_uint(obj.get("last_update_time", 0), name="last_update_time", bits=U64_BITS),
    )


def pool_from_mapping(obj: Any) -> PoolSnapshot:
    obj = _require_mapping(obj, name="pool")
    for key in ("token_a_mint", "token_b_mint", "sqrt_price", "liquidity", "pool_fees"):
        if key not in obj:
            raise InvalidRangeError(f"pool.{key} is required")

    kwargs: dict[str, Any] = {}
    if "sqrt_min_price" in obj:
        kwargs["sqrt_min_price"] = parse_uint(obj["sqrt_min_price"], name="sqrt_min_price", bits=U128_BITS)
    if "sqrt_max_price" in obj:
        kwargs["sqrt_max_price"] = parse_uint(obj["sqrt_max_price"], name="sqrt_max_price", bits=U128_BITS)

    reward_infos = tuple(
        _pool_reward_info_from_mapping(entry, index=i)
        for i, entry in enumerate(_require_list(obj.get("reward_infos"), name="pool.reward_infos"))
    )
    return PoolSnapshot(
        token_a_mint=parse_mint(obj["token_a_mint"], name="token_a_mint"),
        token_b_mint=parse_mint(obj["token_b_mint"], name="token_b_mint"),
        sqrt_price=parse_uint(obj["sqrt_price"], name="sqrt_price", bits=U128_BITS),
        liquidity=parse_uint(obj["liquidity"], name="liquidity", bits=U128_BITS),
        pool_fees=pool_fees_from_mapping(obj["pool_fees"]),
        activation_type=parse_enum(ActivationType, obj.get("activation_type", 0), name="activation_type"),
        activation_point=parse_uint(obj.get("activation_point", 0), name="activation_point", bits=U64_BITS),
        collect_fee_mode=parse_enum(CollectFeeMode, obj.get("collect_fee_mode", 0), name="collect_fee_mode"),
        accumulators=PoolAccumulators(
            fee_a_per_liquidity=parse_uint(obj.get("fee_a_per_liquidity", 0), name="fee_a_per_liquidity", bits=U256_BITS),
            fee_b_per_liquidity=parse_uint(obj.get("fee_b_per_liquidity", 0), name="fee_b_per_liquidity", bits=U256_BITS),
        ),
        reward_infos=reward_infos,
        **kwargs,
    )


def _position_reward_info_from_mapping(obj: Any, *, index: int) -> PositionRewardInfo:
    obj = _require_mapping(obj, name=f"reward_infos[{index}]")
    return PositionRewardInfo(
        reward_per_token_checkpoint=parse_uint(
            obj.get("reward_per_token_checkpoint", 0), name="reward_per_token_checkpoint", bits=U256_BITS
        ),
        reward_pendings=parse_uint(obj.get("reward_pendings", 0), name="reward_pendings", bits=U64_BITS),
    )


def position_from_mapping(obj: Any) -> PositionSnapshot:
    obj = _require_mapping(obj, name="position")

    def u128(key: str) -> int:
        return parse_uint(obj.get(key, 0), name=key, bits=U128_BITS)

    def u256(key: str) -> int:
        return parse_uint(obj.get(key, 0), name=key, bits=U256_BITS)

    def u64(key: str) -> int:
        return parse_uint(obj.get(key, 0), name=key, bits=U64_BITS)

    reward_infos = tuple(
        _position_reward_info_from_mapping(entry, index=i)
        for i, entry in enumerate(_require_list(obj.get("reward_infos"), name="position.reward_infos"))
    )
    return PositionSnapshot(
        unlocked_liquidity=u128("unlocked_liquidity"),
        vested_liquidity=u128("vested_liquidity"),
        permanent_locked_liquidity=u128("permanent_locked_liquidity"),
        fee_a_per_token_checkpoint=u256("fee_a_per_token_checkpoint"),
        fee_b_per_token_checkpoint=u256("fee_b_per_token_checkpoint"),
        fee_a_pending=u64("fee_a_pending"),
        fee_b_pending=u64("fee_b_pending"),
        reward_infos=reward_infos,
    )
