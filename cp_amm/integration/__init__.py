"""
Snapshot decoding for account readers
"""

from .snapshot import (
    parse_uint,
    pool_fees_from_mapping,
    pool_from_mapping,
    position_from_mapping,
)

__all__ = [
    "parse_uint",
    "pool_fees_from_mapping",
    "pool_from_mapping",
    "position_from_mapping",
]
