"""Trade fee arithmetic.

All rates are parts-per-million (FEE_RATE_DENOMINATOR). The trade fee is
rounded up so it never undercharges; protocol and fund carve-outs are
rounded down so their sum never exceeds the trade fee.
"""

from cpswap.constants import FEE_RATE_DENOMINATOR
from cpswap.safe_int import S


def trading_fee(amount: int, trade_fee_rate: int) -> int:
    """Trade fee on ``amount``, rounded up."""
    numerator = (S(amount) * trade_fee_rate).checked_u128()
    return numerator.ceiling_div(FEE_RATE_DENOMINATOR).to_u64()


def protocol_fee(trade_fee: int, protocol_fee_rate: int) -> int:
    """Protocol share of a trade fee, rounded down."""
    return _carve_out(trade_fee, protocol_fee_rate)


def fund_fee(trade_fee: int, fund_fee_rate: int) -> int:
    """Fund share of a trade fee, rounded down."""
    return _carve_out(trade_fee, fund_fee_rate)


def pre_trade_fee_amount(post_fee_amount: int, trade_fee_rate: int) -> int:
    """Smallest input whose amount net of the trade fee covers ``post_fee_amount``.

    Formula: ceil(post_fee_amount * 1e6 / (1e6 - trade_fee_rate))
    """
    if trade_fee_rate == 0:
        return post_fee_amount
    numerator = (S(post_fee_amount) * FEE_RATE_DENOMINATOR).checked_u128()
    denominator = S(FEE_RATE_DENOMINATOR) - trade_fee_rate
    return numerator.ceiling_div(denominator).to_u64()


def _carve_out(trade_fee: int, rate: int) -> int:
    numerator = (S(trade_fee) * rate).checked_u128()
    return (numerator // FEE_RATE_DENOMINATOR).to_u64()
