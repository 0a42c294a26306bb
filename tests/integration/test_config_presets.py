# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from cp_amm.config import available_presets, load_pool_fees, load_preset
from cp_amm.core.fee_scheduler import get_min_base_fee_numerator
from cp_amm.state import FeeSchedulerMode


def test_bundled_presets_are_listed_and_load() -> None:
    names = available_presets()
    assert names == sorted(names)
    assert {"dynamic_fee", "exponential_decay", "linear_1pct", "linear_launch"} <= set(names)
    for name in names:
        load_preset(name)


def test_linear_launch_preset_decays_to_one_percent() -> None:
    fees = load_preset("linear_launch")
    assert fees.base_fee.mode is FeeSchedulerMode.LINEAR
    assert fees.base_fee.cliff_fee_numerator == 500_000_000
    assert get_min_base_fee_numerator(fees.base_fee) == 10_000_000
    assert fees.protocol_fee_percent == 20
    assert fees.dynamic_fee is None


def test_dynamic_fee_preset_enables_surcharge() -> None:
    fees = load_preset("dynamic_fee")
    assert fees.dynamic_fee is not None
    assert fees.dynamic_fee.variable_fee_control == 2_674_000


def test_unknown_preset_raises_key_error() -> None:
    with pytest.raises(KeyError, match="unknown fee preset"):
        load_preset("does_not_exist")


def test_load_pool_fees_from_file(tmp_path: Path) -> None:
    path = tmp_path / "fees.yaml"
    path.write_text(
        "base_fee:\n"
        "  cliff_fee_numerator: 10000000\n"
        "  number_of_periods: 10\n"
        "  period_frequency: 10\n"
        "  reduction_factor: 2\n"
        "  mode: 1\n"
        "protocol_fee_percent: 10\n",
        encoding="utf-8",
    )
    fees = load_pool_fees(path)
    assert fees.base_fee.mode is FeeSchedulerMode.EXPONENTIAL
    assert fees.protocol_fee_percent == 10


def test_malformed_files_are_rejected(tmp_path: Path) -> None:
    bad_yaml = tmp_path / "bad.yaml"
    bad_yaml.write_text("base_fee: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid YAML"):
        load_pool_fees(bad_yaml)

    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError, match="mapping"):
        load_pool_fees(not_mapping)
