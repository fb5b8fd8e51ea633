"""Pure swap and liquidity math for constant product pools."""

from cpswap.amm.base import Curve, SwapResult, TradeDirection
from cpswap.amm.curve import (
    ConstantProduct,
    SwapQuote,
    constant_product,
    quote_swap_base_input,
    quote_swap_base_output,
)
from cpswap.amm.liquidity import (
    DepositQuote,
    InitialLiquidity,
    RoundDirection,
    TradingTokenResult,
    WithdrawQuote,
    deposit_quote,
    initial_liquidity,
    lp_tokens_to_trading_tokens,
    withdraw_quote,
)

__all__ = [
    # Base classes
    "Curve",
    "SwapResult",
    "TradeDirection",
    # Swap engine
    "ConstantProduct",
    "SwapQuote",
    "constant_product",
    "quote_swap_base_input",
    "quote_swap_base_output",
    # Liquidity engine
    "RoundDirection",
    "TradingTokenResult",
    "InitialLiquidity",
    "DepositQuote",
    "WithdrawQuote",
    "lp_tokens_to_trading_tokens",
    "initial_liquidity",
    "deposit_quote",
    "withdraw_quote",
]
