"""Fee schedules and mint transfer fees.

Usage:
    from cpswap.fees import FeeScheduleRegistry, TransferFeeConfig, transfer_fee

    registry = FeeScheduleRegistry()
    schedule = registry.create(0, trade_fee_rate=2500, protocol_fee_rate=120_000, fund_fee_rate=40_000)

    config = TransferFeeConfig.flat(transfer_fee_basis_points=100, maximum_fee=50_000_000)
    fee = transfer_fee(config.get_epoch_fee(epoch=0), 10_000_000_000)
"""

from cpswap.fees.schedule import FeeSchedule, FeeScheduleRegistry, validate_fee_schedule
from cpswap.fees.transfer_fee import (
    NO_TRANSFER_FEE,
    TransferFeeConfig,
    TransferFeeParameters,
    pre_fee_amount,
    transfer_fee,
    transfer_inverse_fee,
)

__all__ = [
    # Schedules
    "FeeSchedule",
    "FeeScheduleRegistry",
    "validate_fee_schedule",
    # Transfer fees
    "NO_TRANSFER_FEE",
    "TransferFeeConfig",
    "TransferFeeParameters",
    "transfer_fee",
    "transfer_inverse_fee",
    "pre_fee_amount",
]
