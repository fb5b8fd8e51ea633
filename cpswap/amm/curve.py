"""Constant product swap curve.

The pool keeps reserve_in * reserve_out = k. The trade fee is taken from
the input before it enters the curve, so only ``amount_in - trade_fee``
moves the price while the whole input lands in the vault:

    amount_out = reserve_out * (amount_in - fee) / (reserve_in + amount_in - fee)

Protocol and fund fees are carved out of the trade fee and leave the
reserves (they stay in the vault as accrued balances); the rest of the
trade fee remains in the input reserve and grows k for liquidity providers.

Mints with transfer fees shrink what the vault receives on the input leg
and what the trader receives on the output leg. ``quote_swap_base_input``
and ``quote_swap_base_output`` fold both legs in.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpswap.amm.base import Curve, SwapResult
from cpswap.amm.trade_fee import fund_fee, pre_trade_fee_amount, protocol_fee, trading_fee
from cpswap.errors import InsufficientLiquidity, InvalidAmount, InvariantViolation, ZeroAmount
from cpswap.fees.schedule import FeeSchedule
from cpswap.fees.transfer_fee import TransferFeeParameters, transfer_fee, transfer_inverse_fee
from cpswap.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """A swap including the transfer fees of both mints.

    Attributes:
        amount_in: Gross amount debited from the trader
        input_transfer_fee: Withheld by the input mint on the way to the vault
        amount_out: Gross amount leaving the output vault
        output_transfer_fee: Withheld by the output mint on the way to the trader
        result: Curve result on the vault-side amounts
    """

    amount_in: int
    input_transfer_fee: int
    amount_out: int
    output_transfer_fee: int
    result: SwapResult

    @property
    def amount_received(self) -> int:
        """Net amount the trader receives."""
        return self.amount_out - self.output_transfer_fee


class ConstantProduct(Curve):
    """Constant product math with carve-out fees.

    Formula: amount_out = (in * res_out) / (res_in + in)
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount using constant product formula, rounded down.

        Raises:
            SafeIntError: If the reserves are empty or a product exceeds u128
        """
        numerator = (S(amount_in) * reserve_out).checked_u128()
        denominator = (S(reserve_in) + amount_in).checked_u128()
        return (numerator // denominator).to_u64()

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate required input for desired output, rounded up.

        Formula: amount_in = ceil(res_in * out / (res_out - out))

        Raises:
            InsufficientLiquidity: If amount_out would empty the output reserve
        """
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Requested {amount_out} but output reserve is {reserve_out}"
            )
        numerator = (S(reserve_in) * amount_out).checked_u128()
        denominator = S(reserve_out) - amount_out
        return numerator.ceiling_div(denominator).to_u64()

    def swap_base_input(
        self,
        source_amount: int,
        reserve_in: int,
        reserve_out: int,
        schedule: FeeSchedule,
    ) -> SwapResult:
        """Swap an exact amount that has already landed in the input vault.

        Args:
            source_amount: Amount entering the vault, before the trade fee
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            schedule: Fee schedule of the pool
        """
        trade_fee = trading_fee(source_amount, schedule.trade_fee_rate)
        source_amount_less_fees = (S(source_amount) - trade_fee).value
        destination_amount = self.get_amount_out(source_amount_less_fees, reserve_in, reserve_out)

        return self._build_result(
            source_amount=source_amount,
            destination_amount=destination_amount,
            trade_fee=trade_fee,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            schedule=schedule,
        )

    def swap_base_output(
        self,
        destination_amount: int,
        reserve_in: int,
        reserve_out: int,
        schedule: FeeSchedule,
    ) -> SwapResult:
        """Swap for an exact amount leaving the output vault.

        The curve input is rounded up, then grossed up for the trade fee
        (rounded up again), so the trader never pays less than the curve needs.
        """
        source_amount_swapped = self.get_amount_in(destination_amount, reserve_in, reserve_out)
        source_amount = pre_trade_fee_amount(source_amount_swapped, schedule.trade_fee_rate)
        trade_fee = trading_fee(source_amount, schedule.trade_fee_rate)

        return self._build_result(
            source_amount=source_amount,
            destination_amount=destination_amount,
            trade_fee=trade_fee,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            schedule=schedule,
        )

    def check_invariant(self, result: SwapResult, reserve_in: int, reserve_out: int) -> None:
        """Verify k did not decrease, counting only the fee-free part of the input.

        Raises:
            InvariantViolation: If the product after the swap is smaller
        """
        constant_before = (S(reserve_in) * reserve_out).checked_u128()
        source_after = S(result.new_swap_source_amount) - result.trade_fee
        constant_after = (source_after * result.new_swap_destination_amount).checked_u128()
        if constant_after < constant_before:
            raise InvariantViolation(
                f"Constant product decreased: {constant_before.value} -> {constant_after.value}"
            )

    def _build_result(
        self,
        source_amount: int,
        destination_amount: int,
        trade_fee: int,
        reserve_in: int,
        reserve_out: int,
        schedule: FeeSchedule,
    ) -> SwapResult:
        return SwapResult(
            source_amount_swapped=source_amount,
            destination_amount_swapped=destination_amount,
            trade_fee=trade_fee,
            protocol_fee=protocol_fee(trade_fee, schedule.protocol_fee_rate),
            fund_fee=fund_fee(trade_fee, schedule.fund_fee_rate),
            new_swap_source_amount=(S(reserve_in) + source_amount).to_u64(),
            new_swap_destination_amount=(S(reserve_out) - destination_amount).value,
        )


def quote_swap_base_input(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    schedule: FeeSchedule,
    input_fee: TransferFeeParameters | None = None,
    output_fee: TransferFeeParameters | None = None,
) -> SwapQuote:
    """Quote a swap of an exact gross input.

    Args:
        amount_in: Gross amount the trader sends
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        schedule: Fee schedule of the pool
        input_fee: Transfer-fee parameters of the input mint
        output_fee: Transfer-fee parameters of the output mint

    Raises:
        InvalidAmount: If amount_in is zero
        ZeroAmount: If nothing reaches the vault or nothing comes out
    """
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive, got {amount_in}")

    input_transfer_fee = transfer_fee(input_fee, amount_in)
    actual_amount_in = amount_in - input_transfer_fee
    if actual_amount_in == 0:
        raise ZeroAmount(f"amount_in {amount_in} nets to zero after transfer fee")

    result = constant_product.swap_base_input(actual_amount_in, reserve_in, reserve_out, schedule)
    if result.destination_amount_swapped == 0:
        raise ZeroAmount(f"amount_in {amount_in} yields zero output")
    constant_product.check_invariant(result, reserve_in, reserve_out)

    amount_out = result.destination_amount_swapped
    quote = SwapQuote(
        amount_in=amount_in,
        input_transfer_fee=input_transfer_fee,
        amount_out=amount_out,
        output_transfer_fee=transfer_fee(output_fee, amount_out),
        result=result,
    )
    logger.debug(
        "swap_base_input_quoted",
        amount_in=amount_in,
        actual_amount_in=actual_amount_in,
        amount_out=amount_out,
        amount_received=quote.amount_received,
        trade_fee=result.trade_fee,
    )
    return quote


def quote_swap_base_output(
    amount_out_less_fee: int,
    reserve_in: int,
    reserve_out: int,
    schedule: FeeSchedule,
    input_fee: TransferFeeParameters | None = None,
    output_fee: TransferFeeParameters | None = None,
) -> SwapQuote:
    """Quote a swap delivering an exact net output to the trader.

    Args:
        amount_out_less_fee: Net amount the trader must receive
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        schedule: Fee schedule of the pool
        input_fee: Transfer-fee parameters of the input mint
        output_fee: Transfer-fee parameters of the output mint

    Raises:
        InvalidAmount: If the requested amount is zero
        InsufficientLiquidity: If the output would empty the reserve
    """
    if amount_out_less_fee <= 0:
        raise InvalidAmount(f"amount_out must be positive, got {amount_out_less_fee}")

    gross_up = transfer_inverse_fee(output_fee, amount_out_less_fee)
    amount_out = (S(amount_out_less_fee) + gross_up).to_u64()

    result = constant_product.swap_base_output(amount_out, reserve_in, reserve_out, schedule)
    constant_product.check_invariant(result, reserve_in, reserve_out)

    source_amount = result.source_amount_swapped
    amount_in = (S(source_amount) + transfer_inverse_fee(input_fee, source_amount)).to_u64()
    # The grossed-up amounts can deliver a unit more than asked; record the
    # fees actually withheld so received amounts match the ledger
    quote = SwapQuote(
        amount_in=amount_in,
        input_transfer_fee=transfer_fee(input_fee, amount_in),
        amount_out=amount_out,
        output_transfer_fee=transfer_fee(output_fee, amount_out),
        result=result,
    )
    logger.debug(
        "swap_base_output_quoted",
        amount_out_less_fee=amount_out_less_fee,
        amount_out=amount_out,
        source_amount=source_amount,
        amount_in=quote.amount_in,
        trade_fee=result.trade_fee,
    )
    return quote


# Singleton instance
constant_product = ConstantProduct()
