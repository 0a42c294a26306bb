"""
Fixed-point price conversions.

Prices are quoted as token B per token A in whole-token units. On the ledger
the pool stores `sqrt(raw_price) * 2**64` (Q64.64), where raw_price is the
price in base units:

    raw_price = price / 10**(decimals_a - decimals_b)
    sqrt_price = floor(sqrt(raw_price) * 2**64)
    price      = sqrt_price**2 / 2**128 * 10**(decimals_a - decimals_b)

All arithmetic uses `decimal.Decimal` under a local 80-digit context so the
2**64 scale never loses integer digits. Floats are refused outright: a float
price has already been rounded before it reaches us.

Token ordering: the numerically smaller mint is token A. A price given for the
opposite orientation is inverted before conversion.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Context, Decimal, InvalidOperation, localcontext
from typing import Union

from ..constants import MAX_SQRT_PRICE, MAX_TOKEN_DECIMALS, MIN_SQRT_PRICE, ONE_Q64, U128_BITS
from ..errors import InvalidRangeError
from ..kernels.python.q64_math import checked_uint, require_int, require_uint
from ..state.pools import Mint, MintLike, mint_to_int, normalize_mint

PRICE_PRECISION = 80

DecimalLike = Union[Decimal, int, str]

_Q128 = Decimal(1 << 128)
_Q64 = Decimal(ONE_Q64)


def decimal_context() -> Context:
    return Context(prec=PRICE_PRECISION)


def to_decimal(value: DecimalLike, *, name: str = "value") -> Decimal:
    """Parse an exact decimal input. Floats and bools are rejected."""
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"{name} must be a Decimal, int or str (float is not accepted)")
    if isinstance(value, Decimal):
        out = value
    elif isinstance(value, int):
        out = Decimal(value)
    elif isinstance(value, str):
        try:
            out = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidRangeError(f"{name} is not a decimal number: {value!r}") from exc
    else:
        raise TypeError(f"{name} must be a Decimal, int or str")
    if not out.is_finite():
        raise InvalidRangeError(f"{name} must be finite: {value!r}")
    return out


def _require_decimals(name: str, value: int) -> int:
    require_int(name, value)
    if not (0 <= value <= MAX_TOKEN_DECIMALS):
        raise InvalidRangeError(f"{name} must be in [0, {MAX_TOKEN_DECIMALS}]: {value}")
    return value


def price_to_sqrt_price(price: DecimalLike, token_a_decimals: int, token_b_decimals: int) -> int:
    """
    Convert a human price (B per A) into a Q64.64 sqrt price, truncating.

    Raises InvalidRangeError if the price is not positive or the result falls
    outside [MIN_SQRT_PRICE, MAX_SQRT_PRICE].
    """
    p = to_decimal(price, name="price")
    _require_decimals("token_a_decimals", token_a_decimals)
    _require_decimals("token_b_decimals", token_b_decimals)
    if p <= 0:
        raise InvalidRangeError(f"price must be positive: {price}")

    with localcontext(decimal_context()):
        scale = Decimal(10) ** (token_a_decimals - token_b_decimals)
        adjusted = p / scale
        sqrt_value = adjusted.sqrt()
        sqrt_q64 = (sqrt_value * _Q64).to_integral_value(rounding=ROUND_FLOOR)

    sqrt_price = int(sqrt_q64)
    if not (MIN_SQRT_PRICE <= sqrt_price <= MAX_SQRT_PRICE):
        raise InvalidRangeError(
            f"price {price} maps to sqrt_price {sqrt_price} outside [{MIN_SQRT_PRICE}, {MAX_SQRT_PRICE}]"
        )
    return sqrt_price


def sqrt_price_to_price(sqrt_price: int, token_a_decimals: int, token_b_decimals: int) -> Decimal:
    """Inverse of `price_to_sqrt_price` (exact up to the 80-digit context)."""
    require_uint("sqrt_price", sqrt_price, U128_BITS)
    _require_decimals("token_a_decimals", token_a_decimals)
    _require_decimals("token_b_decimals", token_b_decimals)

    with localcontext(decimal_context()):
        d = Decimal(sqrt_price)
        scale = Decimal(10) ** (token_a_decimals - token_b_decimals)
        return d * d * scale / _Q128


def decimal_to_q64(value: DecimalLike) -> int:
    """Floor a non-negative decimal onto the Q64.64 grid (u128)."""
    d = to_decimal(value)
    if d < 0:
        raise InvalidRangeError(f"value must be non-negative: {value}")
    with localcontext(decimal_context()):
        q = (d * _Q64).to_integral_value(rounding=ROUND_FLOOR)
    return checked_uint("q64_value", int(q), U128_BITS)


def q64_to_decimal(value: int) -> Decimal:
    require_uint("value", value, U128_BITS)
    with localcontext(decimal_context()):
        return Decimal(value) / _Q64


@dataclass(frozen=True)
class OrderedPair:
    token_a_mint: Mint
    token_b_mint: Mint
    price: Decimal
    inverted: bool


def order_token_pair(mint_x: MintLike, mint_y: MintLike, price_x_in_y: DecimalLike) -> OrderedPair:
    """
    Order two mints as (A, B) and express the price as B per A.

    `price_x_in_y` is the caller's price of X quoted in Y; it is inverted
    when Y turns out to be token A.
    """
    x = normalize_mint(mint_x)
    y = normalize_mint(mint_y)
    if x == y:
        raise InvalidRangeError("a pool needs two distinct mints")
    price = to_decimal(price_x_in_y, name="price")
    if price <= 0:
        raise InvalidRangeError(f"price must be positive: {price_x_in_y}")

    if mint_to_int(x) > mint_to_int(y):
        with localcontext(decimal_context()):
            inverted_price = Decimal(1) / price
        return OrderedPair(token_a_mint=y, token_b_mint=x, price=inverted_price, inverted=True)
    return OrderedPair(token_a_mint=x, token_b_mint=y, price=price, inverted=False)


@dataclass(frozen=True)
class PoolCreationParams:
    token_a_mint: Mint
    token_b_mint: Mint
    sqrt_price: int
    liquidity: int


def prepare_pool_creation(
    *,
    mint_x: MintLike,
    mint_y: MintLike,
    decimals_x: int,
    decimals_y: int,
    initial_price: DecimalLike,
    liquidity: DecimalLike,
) -> PoolCreationParams:
    """Order the pair and convert the initial price and liquidity to Q64.64."""
    pair = order_token_pair(mint_x, mint_y, initial_price)
    if pair.inverted:
        decimals_a, decimals_b = decimals_y, decimals_x
    else:
        decimals_a, decimals_b = decimals_x, decimals_y
    return PoolCreationParams(
        token_a_mint=pair.token_a_mint,
        token_b_mint=pair.token_b_mint,
        sqrt_price=price_to_sqrt_price(pair.price, decimals_a, decimals_b),
        liquidity=decimal_to_q64(liquidity),
    )
