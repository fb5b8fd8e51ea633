"""Liquidity math: pool bootstrap, deposit and withdraw amounts.

LP tokens are claims on a proportional share of both reserves:

    token_i = lp_amount * reserve_i / lp_supply

Deposits round this share up and withdrawals round it down, so repeated
deposit/withdraw cycles can only leave value in the pool. Transfer fees
are applied on top: deposits are grossed up so the vault receives the
full share, withdrawals are netted so the caller bears the outbound fee.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cpswap.constants import LOCKED_LIQUIDITY
from cpswap.errors import InsufficientInitialLiquidity, InvalidAmount, ZeroAmount
from cpswap.fees.transfer_fee import TransferFeeParameters, transfer_fee, transfer_inverse_fee
from cpswap.safe_int import S


class RoundDirection(Enum):
    FLOOR = "floor"
    CEILING = "ceiling"


@dataclass(frozen=True)
class TradingTokenResult:
    """Underlying amounts for a number of LP tokens."""

    token_0_amount: int
    token_1_amount: int


@dataclass(frozen=True)
class InitialLiquidity:
    """Outcome of bootstrapping a pool.

    Attributes:
        token_0_amount: Amount the vault received on side 0 (after transfer fee)
        token_1_amount: Amount the vault received on side 1
        liquidity: Initial LP supply, geometric mean of the two amounts
        creator_lp_amount: LP credited to the creator (liquidity minus the locked part)
    """

    token_0_amount: int
    token_1_amount: int
    liquidity: int
    creator_lp_amount: int


@dataclass(frozen=True)
class DepositQuote:
    """Amounts for minting ``lp_amount`` LP tokens.

    ``token_i_amount`` is what the vault must receive; the depositor sends
    ``token_i_amount + transfer_fee_i``.
    """

    lp_amount: int
    token_0_amount: int
    token_1_amount: int
    transfer_fee_0: int
    transfer_fee_1: int

    @property
    def transfer_token_0_amount(self) -> int:
        return self.token_0_amount + self.transfer_fee_0

    @property
    def transfer_token_1_amount(self) -> int:
        return self.token_1_amount + self.transfer_fee_1


@dataclass(frozen=True)
class WithdrawQuote:
    """Amounts for burning ``lp_amount`` LP tokens.

    ``token_i_amount`` leaves the vault; the owner receives it minus ``transfer_fee_i``.
    """

    lp_amount: int
    token_0_amount: int
    token_1_amount: int
    transfer_fee_0: int
    transfer_fee_1: int

    @property
    def receive_token_0_amount(self) -> int:
        return self.token_0_amount - self.transfer_fee_0

    @property
    def receive_token_1_amount(self) -> int:
        return self.token_1_amount - self.transfer_fee_1


def lp_tokens_to_trading_tokens(
    lp_amount: int,
    lp_supply: int,
    reserve_0: int,
    reserve_1: int,
    round_direction: RoundDirection,
) -> TradingTokenResult:
    """Proportional share of both reserves for ``lp_amount`` LP tokens.

    Raises:
        SafeIntError: If lp_supply is zero or a product exceeds u128
    """
    product_0 = (S(lp_amount) * reserve_0).checked_u128()
    product_1 = (S(lp_amount) * reserve_1).checked_u128()

    if round_direction is RoundDirection.CEILING:
        token_0_amount = product_0.ceiling_div(lp_supply)
        token_1_amount = product_1.ceiling_div(lp_supply)
    else:
        token_0_amount = product_0 // lp_supply
        token_1_amount = product_1 // lp_supply

    return TradingTokenResult(
        token_0_amount=token_0_amount.to_u64(),
        token_1_amount=token_1_amount.to_u64(),
    )


def initial_liquidity(
    amount_0: int,
    amount_1: int,
    fee_0: TransferFeeParameters | None = None,
    fee_1: TransferFeeParameters | None = None,
) -> InitialLiquidity:
    """Bootstrap a pool from the creator's gross deposits.

    Liquidity is floor(sqrt(a0 * a1)) over the amounts the vaults actually
    receive. LOCKED_LIQUIDITY of it is never credited to anyone.

    Raises:
        InvalidAmount: If either amount is not positive
        InsufficientInitialLiquidity: If a side nets to zero or liquidity
            does not exceed the locked amount
    """
    if amount_0 <= 0 or amount_1 <= 0:
        raise InvalidAmount(f"Initial amounts must be positive, got {amount_0} and {amount_1}")

    token_0_amount = amount_0 - transfer_fee(fee_0, amount_0)
    token_1_amount = amount_1 - transfer_fee(fee_1, amount_1)
    if token_0_amount == 0 or token_1_amount == 0:
        raise InsufficientInitialLiquidity(
            f"Initial amounts net to zero after transfer fees: {token_0_amount}, {token_1_amount}"
        )

    liquidity = (S(token_0_amount) * token_1_amount).checked_u128().sqrt().to_u64()
    if liquidity <= LOCKED_LIQUIDITY:
        raise InsufficientInitialLiquidity(
            f"Initial liquidity {liquidity} must exceed the locked {LOCKED_LIQUIDITY}"
        )

    return InitialLiquidity(
        token_0_amount=token_0_amount,
        token_1_amount=token_1_amount,
        liquidity=liquidity,
        creator_lp_amount=liquidity - LOCKED_LIQUIDITY,
    )


def deposit_quote(
    lp_amount: int,
    lp_supply: int,
    reserve_0: int,
    reserve_1: int,
    fee_0: TransferFeeParameters | None = None,
    fee_1: TransferFeeParameters | None = None,
) -> DepositQuote:
    """Amounts required to mint ``lp_amount`` LP tokens.

    Raises:
        InvalidAmount: If lp_amount is not positive
        ZeroAmount: If either side rounds to zero
    """
    if lp_amount <= 0:
        raise InvalidAmount(f"lp_amount must be positive, got {lp_amount}")

    shares = lp_tokens_to_trading_tokens(
        lp_amount, lp_supply, reserve_0, reserve_1, RoundDirection.CEILING
    )
    if shares.token_0_amount == 0 or shares.token_1_amount == 0:
        raise ZeroAmount(f"Deposit of {lp_amount} LP maps to zero tokens on one side")

    return DepositQuote(
        lp_amount=lp_amount,
        token_0_amount=shares.token_0_amount,
        token_1_amount=shares.token_1_amount,
        transfer_fee_0=transfer_inverse_fee(fee_0, shares.token_0_amount),
        transfer_fee_1=transfer_inverse_fee(fee_1, shares.token_1_amount),
    )


def withdraw_quote(
    lp_amount: int,
    lp_supply: int,
    reserve_0: int,
    reserve_1: int,
    fee_0: TransferFeeParameters | None = None,
    fee_1: TransferFeeParameters | None = None,
) -> WithdrawQuote:
    """Amounts released by burning ``lp_amount`` LP tokens.

    Raises:
        InvalidAmount: If lp_amount is not positive
        ZeroAmount: If both sides round to zero
    """
    if lp_amount <= 0:
        raise InvalidAmount(f"lp_amount must be positive, got {lp_amount}")

    shares = lp_tokens_to_trading_tokens(
        lp_amount, lp_supply, reserve_0, reserve_1, RoundDirection.FLOOR
    )
    token_0_amount = min(shares.token_0_amount, reserve_0)
    token_1_amount = min(shares.token_1_amount, reserve_1)
    if token_0_amount == 0 and token_1_amount == 0:
        raise ZeroAmount(f"Withdrawal of {lp_amount} LP maps to zero tokens")

    return WithdrawQuote(
        lp_amount=lp_amount,
        token_0_amount=token_0_amount,
        token_1_amount=token_1_amount,
        transfer_fee_0=transfer_fee(fee_0, token_0_amount),
        transfer_fee_1=transfer_fee(fee_1, token_1_amount),
    )
