"""
YAML pool-fee configurations.

A fee configuration file holds one `PoolFeeState` mapping (see
`cp_amm/presets/*.yaml`). Bundled presets are shipped with the package and
addressed by file stem.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Union

import yaml

from .integration.snapshot import pool_fees_from_mapping
from .state.fees import PoolFeeState

logger = logging.getLogger(__name__)

__all__ = ["available_presets", "load_pool_fees", "load_preset", "pool_fees_from_mapping", "presets_dir"]


def presets_dir() -> Path:
    # cp_amm/config.py -> cp_amm/presets/
    return Path(__file__).resolve().parent / "presets"


def _load_yaml_mapping(path: Path) -> Mapping[str, Any]:
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(obj, Mapping):
        raise TypeError(f"fee config YAML must be a mapping: {path}")
    return obj


def load_pool_fees(path: Union[str, Path]) -> PoolFeeState:
    p = Path(path)
    pool_fees = pool_fees_from_mapping(_load_yaml_mapping(p))
    logger.debug("loaded pool fees from %s", p)
    return pool_fees


def available_presets() -> List[str]:
    return sorted(p.stem for p in presets_dir().glob("*.yaml"))


@lru_cache(maxsize=None)
def load_preset(name: str) -> PoolFeeState:
    """Load a bundled preset by name. Unknown names raise KeyError."""
    if name not in available_presets():
        raise KeyError(f"unknown fee preset: {name!r} (available: {', '.join(available_presets())})")
    return load_pool_fees(presets_dir() / f"{name}.yaml")
