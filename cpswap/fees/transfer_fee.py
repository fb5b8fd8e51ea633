"""Transfer fees levied by mints on every transfer.

Some mints withhold part of each transfer: the destination receives
``amount - fee`` where ``fee = min(ceil(amount * bps / 10_000), maximum_fee)``.
The pool consults these helpers whenever value moves in or out of a vault.

A mint carries two parameter sets so a pending change can be scheduled:
the newer set applies from its epoch onward, the older one before that.
Callers pick the set once per operation (see ``TransferFeeConfig.get_epoch_fee``)
and use that snapshot for every computation in the call.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpswap.constants import MAX_FEE_BASIS_POINTS
from cpswap.errors import InvalidAmount
from cpswap.safe_int import S, U64_MAX


@dataclass(frozen=True)
class TransferFeeParameters:
    """Fee parameters in force from ``epoch`` onward.

    Attributes:
        transfer_fee_basis_points: Fee rate in basis points (100 = 1%)
        maximum_fee: Absolute cap on the fee of a single transfer
        epoch: First epoch at which these parameters apply
    """

    transfer_fee_basis_points: int
    maximum_fee: int
    epoch: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.transfer_fee_basis_points <= MAX_FEE_BASIS_POINTS:
            raise InvalidAmount(
                f"Transfer fee must be in [0, {MAX_FEE_BASIS_POINTS}] bps, "
                f"got {self.transfer_fee_basis_points}"
            )
        if not 0 <= self.maximum_fee <= U64_MAX:
            raise InvalidAmount(f"Maximum fee out of range: {self.maximum_fee}")
        if self.epoch < 0:
            raise InvalidAmount(f"Epoch cannot be negative: {self.epoch}")


# Parameters of a mint that withholds nothing
NO_TRANSFER_FEE = TransferFeeParameters(0, 0)


@dataclass(frozen=True)
class TransferFeeConfig:
    """Transfer-fee extension of a mint."""

    older: TransferFeeParameters
    newer: TransferFeeParameters

    @classmethod
    def flat(cls, transfer_fee_basis_points: int, maximum_fee: int) -> TransferFeeConfig:
        """Config whose parameters never change."""
        params = TransferFeeParameters(transfer_fee_basis_points, maximum_fee)
        return cls(older=params, newer=params)

    def get_epoch_fee(self, epoch: int) -> TransferFeeParameters:
        """Parameters in force at ``epoch``."""
        if epoch >= self.newer.epoch:
            return self.newer
        return self.older

    def schedule(self, params: TransferFeeParameters) -> TransferFeeConfig:
        """Return a config whose newer set is ``params``.

        The set currently newest becomes the older one.
        """
        if params.epoch < self.newer.epoch:
            raise InvalidAmount(
                f"Scheduled epoch {params.epoch} precedes current newer epoch {self.newer.epoch}"
            )
        return TransferFeeConfig(older=self.newer, newer=params)


def transfer_fee(params: TransferFeeParameters | None, pre_fee_amount: int) -> int:
    """Fee withheld when transferring ``pre_fee_amount``.

    Args:
        params: Mint fee parameters, or None for mints without a fee model
        pre_fee_amount: Gross amount leaving the source account

    Returns:
        Fee amount, always <= pre_fee_amount
    """
    if params is None or params.transfer_fee_basis_points == 0 or pre_fee_amount == 0:
        return 0

    raw_fee = (S(pre_fee_amount) * params.transfer_fee_basis_points).checked_u128()
    fee = raw_fee.ceiling_div(MAX_FEE_BASIS_POINTS).min(params.maximum_fee)
    return fee.to_u64()


def pre_fee_amount(params: TransferFeeParameters | None, post_fee_amount: int) -> int:
    """Smallest gross amount whose transfer delivers at least ``post_fee_amount``."""
    if params is None:
        return post_fee_amount

    bps = params.transfer_fee_basis_points
    max_fee = params.maximum_fee
    if bps == 0 or max_fee == 0:
        return post_fee_amount
    if bps == MAX_FEE_BASIS_POINTS:
        # At 100% the cap is always hit
        return (S(post_fee_amount) + max_fee).to_u64()

    numerator = (S(post_fee_amount) * MAX_FEE_BASIS_POINTS).checked_u128()
    raw_pre_fee = numerator.ceiling_div(MAX_FEE_BASIS_POINTS - bps)
    if raw_pre_fee - post_fee_amount >= max_fee:
        return (S(post_fee_amount) + max_fee).to_u64()
    return raw_pre_fee.to_u64()


def transfer_inverse_fee(params: TransferFeeParameters | None, post_fee_amount: int) -> int:
    """Fee to add on top of ``post_fee_amount`` so the destination receives it in full.

    Args:
        params: Mint fee parameters, or None for mints without a fee model
        post_fee_amount: Net amount the destination must receive

    Returns:
        Fee amount; ``post_fee_amount + fee`` is the gross amount to send
    """
    if params is None or post_fee_amount == 0:
        return 0
    if params.transfer_fee_basis_points == MAX_FEE_BASIS_POINTS:
        return params.maximum_fee
    return transfer_fee(params, pre_fee_amount(params, post_fee_amount))
