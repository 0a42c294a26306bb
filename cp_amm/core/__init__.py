"""
Pricing, fee scheduling and accrual algorithms
"""

from .accrual import (
    UnclaimedAccruals,
    pending_fee,
    pending_reward,
    projected_reward_per_token_stored,
    unclaimed_fees_and_rewards,
)
from .fee_scheduler import (
    FeeRate,
    get_base_fee_numerator,
    get_current_period,
    get_dynamic_fee_numerator,
    get_fee_rate,
    get_min_base_fee_numerator,
)
from .fees import FeeOnAmountResult, apply_fee, compute_trading_fee, get_gross_amount_for_net
from .liquidity import (
    DepositQuote,
    WithdrawQuote,
    get_amounts_for_liquidity,
    get_deposit_quote,
    get_liquidity_delta,
    get_withdraw_quote,
)
from .price import (
    OrderedPair,
    PoolCreationParams,
    decimal_to_q64,
    order_token_pair,
    prepare_pool_creation,
    price_to_sqrt_price,
    q64_to_decimal,
    sqrt_price_to_price,
)
from .quote import QuoteResult, SwapQuote, get_quote, try_get_quote
from .slippage import get_max_amount_with_slippage, get_min_amount_with_slippage, get_price_impact
from .swap import swap_exact_in

__all__ = [
    "UnclaimedAccruals",
    "pending_fee",
    "pending_reward",
    "projected_reward_per_token_stored",
    "unclaimed_fees_and_rewards",
    "FeeRate",
    "get_base_fee_numerator",
    "get_current_period",
    "get_dynamic_fee_numerator",
    "get_fee_rate",
    "get_min_base_fee_numerator",
    "FeeOnAmountResult",
    "apply_fee",
    "compute_trading_fee",
    "get_gross_amount_for_net",
    "DepositQuote",
    "WithdrawQuote",
    "get_amounts_for_liquidity",
    "get_deposit_quote",
    "get_liquidity_delta",
    "get_withdraw_quote",
    "OrderedPair",
    "PoolCreationParams",
    "decimal_to_q64",
    "order_token_pair",
    "prepare_pool_creation",
    "price_to_sqrt_price",
    "q64_to_decimal",
    "sqrt_price_to_price",
    "QuoteResult",
    "SwapQuote",
    "get_quote",
    "try_get_quote",
    "get_max_amount_with_slippage",
    "get_min_amount_with_slippage",
    "get_price_impact",
    "swap_exact_in",
]
