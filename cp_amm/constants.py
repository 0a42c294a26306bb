"""Protocol constants shared by the pricing, fee and accrual kernels.

Values mirror the ledger program. Widths are the on-account integer widths;
results that do not fit them are rejected rather than truncated.
"""

from __future__ import annotations

# Fixed-point scales
SCALE_OFFSET: int = 64
ONE_Q64: int = 1 << SCALE_OFFSET
LIQUIDITY_SCALE: int = 128

# Fee scales
BASIS_POINT_MAX: int = 10_000
FEE_DENOMINATOR: int = 1_000_000_000
MAX_FEE_NUMERATOR: int = 500_000_000  # 50%
MIN_FEE_NUMERATOR: int = 100_000  # 1 bps
DYNAMIC_FEE_SCALING_FACTOR: int = 100_000_000_000
PERCENT_MAX: int = 100

# Sqrt-price domain (Q64.64)
MIN_SQRT_PRICE: int = 4_295_048_016
MAX_SQRT_PRICE: int = 79_226_673_521_066_979_257_578_248_091

# Rewards
NUM_REWARDS: int = 2

# Token decimals as stored by the mint account (u8)
MAX_TOKEN_DECIMALS: int = 255

# Integer widths
U64_BITS: int = 64
U128_BITS: int = 128
U256_BITS: int = 256
U64_MAX: int = (1 << U64_BITS) - 1
U128_MAX: int = (1 << U128_BITS) - 1
U256_MAX: int = (1 << U256_BITS) - 1
