"""
Kernel layer.

`cp_amm/kernels/python/` holds the integer-only curve and liquidity kernels.
They take and return plain ints and know nothing about pools or positions;
`cp_amm/core/` wraps them with snapshot-level validation.
"""
