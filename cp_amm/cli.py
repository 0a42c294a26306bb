"""
`cp-amm` command line front end.

Reads pool / position snapshots as JSON files and prints JSON results.

Usage:
  cp-amm price-to-sqrt 1.5 --decimals-a 9 --decimals-b 6
  cp-amm quote --pool pool.json --input-mint 0x... --amount 1000000 --current-point 250
  cp-amm unclaimed --pool pool.json --position position.json --current-time 1700000000
  cp-amm presets --name linear_1pct

Exit status: 0 on success, 2 on invalid input or a failed computation.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from .config import available_presets, load_preset
from .constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE
from .core.accrual import unclaimed_fees_and_rewards
from .core.liquidity import get_liquidity_delta
from .core.price import price_to_sqrt_price, sqrt_price_to_price
from .core.quote import get_quote
from .errors import CpAmmError
from .integration.snapshot import pool_from_mapping, position_from_mapping


def _uint_arg(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {text!r}")
    return value


def _jsonable(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.name.lower()
    if isinstance(obj, Mapping):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    return obj


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _cmd_price_to_sqrt(args: argparse.Namespace) -> Any:
    return {"sqrt_price": price_to_sqrt_price(args.price, args.decimals_a, args.decimals_b)}


def _cmd_sqrt_to_price(args: argparse.Namespace) -> Any:
    return {"price": sqrt_price_to_price(args.sqrt_price, args.decimals_a, args.decimals_b)}


def _cmd_quote(args: argparse.Namespace) -> Any:
    pool = pool_from_mapping(_load_json(args.pool))
    return get_quote(
        pool,
        input_mint=args.input_mint,
        in_amount=args.amount,
        current_point=args.current_point,
        slippage=args.slippage,
        has_referral=args.referral,
    )


def _cmd_liquidity_delta(args: argparse.Namespace) -> Any:
    liquidity_delta = get_liquidity_delta(
        max_amount_token_a=args.max_amount_a,
        max_amount_token_b=args.max_amount_b,
        sqrt_price=args.sqrt_price,
        sqrt_min_price=args.sqrt_min_price,
        sqrt_max_price=args.sqrt_max_price,
    )
    return {"liquidity_delta": liquidity_delta}


def _cmd_unclaimed(args: argparse.Namespace) -> Any:
    pool = pool_from_mapping(_load_json(args.pool))
    position = position_from_mapping(_load_json(args.position))
    return unclaimed_fees_and_rewards(pool, position, args.current_time)


def _cmd_presets(args: argparse.Namespace) -> Any:
    if args.name is None:
        return {"presets": available_presets()}
    return load_preset(args.name)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cp-amm", description="Bounded constant-product AMM pricing engine.")
    p.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("price-to-sqrt", help="Convert a B-per-A price into a Q64.64 sqrt price")
    s.add_argument("price", help="Decimal price (token B per token A)")
    s.add_argument("--decimals-a", type=int, required=True)
    s.add_argument("--decimals-b", type=int, required=True)
    s.set_defaults(func=_cmd_price_to_sqrt)

    s = sub.add_parser("sqrt-to-price", help="Convert a Q64.64 sqrt price into a B-per-A price")
    s.add_argument("sqrt_price", type=_uint_arg)
    s.add_argument("--decimals-a", type=int, required=True)
    s.add_argument("--decimals-b", type=int, required=True)
    s.set_defaults(func=_cmd_sqrt_to_price)

    s = sub.add_parser("quote", help="Quote an exact-in swap against a pool snapshot")
    s.add_argument("--pool", type=Path, required=True, help="Path to pool snapshot JSON")
    s.add_argument("--input-mint", required=True, help="0x-hex mint of the input token")
    s.add_argument("--amount", type=_uint_arg, required=True, help="Input amount in base units")
    s.add_argument("--current-point", type=_uint_arg, required=True, help="Current slot or timestamp")
    s.add_argument("--slippage", default=None, help="Slippage rate in percent (e.g. 0.5)")
    s.add_argument("--referral", action="store_true", help="Swap carries a referral account")
    s.set_defaults(func=_cmd_quote)

    s = sub.add_parser("liquidity-delta", help="Size a deposit from maximum token amounts")
    s.add_argument("--max-amount-a", type=_uint_arg, required=True)
    s.add_argument("--max-amount-b", type=_uint_arg, required=True)
    s.add_argument("--sqrt-price", type=_uint_arg, required=True)
    s.add_argument("--sqrt-min-price", type=_uint_arg, default=MIN_SQRT_PRICE)
    s.add_argument("--sqrt-max-price", type=_uint_arg, default=MAX_SQRT_PRICE)
    s.set_defaults(func=_cmd_liquidity_delta)

    s = sub.add_parser("unclaimed", help="Unclaimed fees and rewards of a position")
    s.add_argument("--pool", type=Path, required=True, help="Path to pool snapshot JSON")
    s.add_argument("--position", type=Path, required=True, help="Path to position snapshot JSON")
    s.add_argument("--current-time", type=_uint_arg, default=None, help="Project rewards forward to this time")
    s.set_defaults(func=_cmd_unclaimed)

    s = sub.add_parser("presets", help="List bundled fee presets or show one")
    s.add_argument("--name", default=None)
    s.set_defaults(func=_cmd_presets)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        result = args.func(args)
    except (OSError, json.JSONDecodeError, CpAmmError, KeyError, TypeError, ValueError) as exc:
        print(f"cp-amm error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(_jsonable(result), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
