"""Base classes for the swap curve."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class TradeDirection(Enum):
    """Which vault receives the input."""

    ZERO_FOR_ONE = "zero_for_one"
    ONE_FOR_ZERO = "one_for_zero"

    @classmethod
    def from_input_index(cls, index: int) -> "TradeDirection":
        return cls.ZERO_FOR_ONE if index == 0 else cls.ONE_FOR_ZERO


@dataclass(frozen=True)
class SwapResult:
    """Result of running a swap through the curve, before transfer fees.

    Attributes:
        source_amount_swapped: Amount entering the input vault, trade fee included
        destination_amount_swapped: Amount leaving the output vault
        trade_fee: Fee charged on the input, part of source_amount_swapped
        protocol_fee: Share of trade_fee accrued to the protocol
        fund_fee: Share of trade_fee accrued to the fund
        new_swap_source_amount: Input reserve plus source_amount_swapped
        new_swap_destination_amount: Output reserve minus destination_amount_swapped
    """

    source_amount_swapped: int
    destination_amount_swapped: int
    trade_fee: int
    protocol_fee: int
    fund_fee: int
    new_swap_source_amount: int
    new_swap_destination_amount: int

    @property
    def pool_fee(self) -> int:
        """Part of the trade fee retained by liquidity providers."""
        return self.trade_fee - self.protocol_fee - self.fund_fee


class Curve(ABC):
    """Abstract swap curve without fees.

    Implementations add fee handling on top of these two primitives.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Output for a given input, rounded down.

        Args:
            amount_in: Input token amount entering the curve
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
        """
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Input required for a desired output, rounded up.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
        """
        ...
