# [TESTER] v1

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from cp_amm.cli import main
from cp_amm.constants import ONE_Q64

MINT_A = "0x" + "01" * 32
MINT_B = "0x" + "02" * 32


def _write_pool(tmp_path: Path, liquidity: int = 1_000_000 << 64) -> Path:
    pool = {
        "token_a_mint": MINT_A,
        "token_b_mint": MINT_B,
        "sqrt_price": str(ONE_Q64),
        "liquidity": str(liquidity),
        "pool_fees": {
            "base_fee": {"cliff_fee_numerator": 10_000_000},
            "protocol_fee_percent": 20,
            "referral_fee_percent": 20,
        },
        "fee_a_per_liquidity": str(2 << 64),
        "reward_infos": [
            {
                "initialized": True,
                "reward_per_token_stored": 0,
                "reward_rate": str(10 << 64),
                "reward_duration_end": 200,
                "last_update_time": 100,
            }
        ],
    }
    path = tmp_path / "pool.json"
    path.write_text(json.dumps(pool), encoding="utf-8")
    return path


def test_price_to_sqrt_and_back(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["price-to-sqrt", "4", "--decimals-a", "0", "--decimals-b", "0"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["sqrt_price"] == 2 * ONE_Q64

    assert main(["sqrt-to-price", hex(2 * ONE_Q64), "--decimals-a", "0", "--decimals-b", "0"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["price"] == "4"


def test_quote_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pool_path = _write_pool(tmp_path)
    rc = main(
        [
            "quote",
            "--pool",
            str(pool_path),
            "--input-mint",
            MINT_A,
            "--amount",
            "1000",
            "--current-point",
            "0",
            "--slippage",
            "1",
        ]
    )
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["actual_amount"] == 990
    assert out["total_fee"] == 9
    assert out["min_out_amount"] == 980
    assert Decimal(out["price_impact"]) == Decimal("0.1")


def test_liquidity_delta_command(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(
        [
            "liquidity-delta",
            "--max-amount-a",
            str(10**9),
            "--max-amount-b",
            str(10**9),
            "--sqrt-price",
            str(ONE_Q64),
            "--sqrt-min-price",
            str(ONE_Q64 >> 1),
            "--sqrt-max-price",
            str(ONE_Q64 << 1),
        ]
    )
    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"liquidity_delta": 10**9 << 65}


def test_unclaimed_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pool_path = _write_pool(tmp_path, liquidity=1_000 << 64)
    position_path = tmp_path / "position.json"
    position_path.write_text(json.dumps({"unlocked_liquidity": str(100 << 64)}), encoding="utf-8")
    rc = main(
        ["unclaimed", "--pool", str(pool_path), "--position", str(position_path), "--current-time", "150"]
    )
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"fee_a": 200, "fee_b": 0, "rewards": [50]}


def test_presets_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["presets"]) == 0
    assert "linear_1pct" in json.loads(capsys.readouterr().out)["presets"]

    assert main(["presets", "--name", "exponential_decay"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["base_fee"]["mode"] == "exponential"
    assert out["dynamic_fee"] is None


def test_errors_exit_with_status_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["price-to-sqrt", "-1", "--decimals-a", "0", "--decimals-b", "0"]) == 2
    assert "cp-amm error" in capsys.readouterr().err

    assert main(["presets", "--name", "nope"]) == 2
    assert main(["unclaimed", "--pool", str(tmp_path / "missing.json"), "--position", str(tmp_path / "x.json")]) == 2

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["unclaimed", "--pool", str(bad), "--position", str(bad)]) == 2
