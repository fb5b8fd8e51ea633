"""Pydantic models for API responses.

Each model has a ``from_*`` constructor taking the engine's own result
type, so endpoints stay thin.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from cpswap.amm.curve import SwapQuote
from cpswap.amm.liquidity import DepositQuote, WithdrawQuote
from cpswap.fees.schedule import FeeSchedule
from cpswap.ledger import Mint
from cpswap.pools.observation import Observation
from cpswap.pools.state import PoolState


class ErrorResponse(BaseModel):
    """Body returned for every rejected operation."""

    error: str = Field(description="Error class name")
    detail: str


class FeeScheduleResponse(BaseModel):
    index: int
    address: str
    trade_fee_rate: int = Field(alias="tradeFeeRate")
    protocol_fee_rate: int = Field(alias="protocolFeeRate")
    fund_fee_rate: int = Field(alias="fundFeeRate")
    create_pool_fee: int = Field(alias="createPoolFee")
    disable_create_pool: bool = Field(alias="disableCreatePool")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_schedule(cls, schedule: FeeSchedule) -> FeeScheduleResponse:
        return cls(
            index=schedule.index,
            address=schedule.address,
            trade_fee_rate=schedule.trade_fee_rate,
            protocol_fee_rate=schedule.protocol_fee_rate,
            fund_fee_rate=schedule.fund_fee_rate,
            create_pool_fee=schedule.create_pool_fee,
            disable_create_pool=schedule.disable_create_pool,
        )


class MintResponse(BaseModel):
    address: str
    decimals: int
    supply: int
    withheld_amount: int = Field(alias="withheldAmount")
    has_transfer_fee: bool = Field(alias="hasTransferFee")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_mint(cls, mint: Mint) -> MintResponse:
        return cls(
            address=mint.address,
            decimals=mint.decimals,
            supply=mint.supply,
            withheld_amount=mint.withheld_amount,
            has_transfer_fee=mint.has_transfer_fee,
        )


class AccountResponse(BaseModel):
    owner: str
    mint: str
    balance: int


class PoolResponse(BaseModel):
    """Pool record with its current reserves.

    ``reserve0``/``reserve1`` are vault balances net of accrued protocol
    and fund fees.
    """

    address: str
    schedule_index: int = Field(alias="scheduleIndex")
    authority: str
    creator: str
    token_0_mint: str = Field(alias="token0Mint")
    token_1_mint: str = Field(alias="token1Mint")
    token_0_vault: str = Field(alias="token0Vault")
    token_1_vault: str = Field(alias="token1Vault")
    lp_mint: str = Field(alias="lpMint")
    observation_key: str = Field(alias="observationKey")
    open_time: int = Field(alias="openTime")
    lp_supply: int = Field(alias="lpSupply")
    reserve_0: int = Field(alias="reserve0")
    reserve_1: int = Field(alias="reserve1")
    protocol_fees_token_0: int = Field(alias="protocolFeesToken0")
    protocol_fees_token_1: int = Field(alias="protocolFeesToken1")
    fund_fees_token_0: int = Field(alias="fundFeesToken0")
    fund_fees_token_1: int = Field(alias="fundFeesToken1")
    status: int

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pool(cls, pool: PoolState, reserves: tuple[int, int]) -> PoolResponse:
        return cls(
            address=pool.address,
            schedule_index=pool.schedule_index,
            authority=pool.authority,
            creator=pool.creator,
            token_0_mint=pool.token_0_mint,
            token_1_mint=pool.token_1_mint,
            token_0_vault=pool.token_0_vault,
            token_1_vault=pool.token_1_vault,
            lp_mint=pool.lp_mint,
            observation_key=pool.observation_key,
            open_time=pool.open_time,
            lp_supply=pool.lp_supply,
            reserve_0=reserves[0],
            reserve_1=reserves[1],
            protocol_fees_token_0=pool.protocol_fees_token_0,
            protocol_fees_token_1=pool.protocol_fees_token_1,
            fund_fees_token_0=pool.fund_fees_token_0,
            fund_fees_token_1=pool.fund_fees_token_1,
            status=int(pool.status),
        )


class DepositResponse(BaseModel):
    lp_amount: int = Field(alias="lpAmount")
    token_0_amount: int = Field(alias="token0Amount", description="Received by vault 0")
    token_1_amount: int = Field(alias="token1Amount", description="Received by vault 1")
    transfer_token_0_amount: int = Field(alias="transferToken0Amount", description="Debited")
    transfer_token_1_amount: int = Field(alias="transferToken1Amount", description="Debited")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: DepositQuote) -> DepositResponse:
        return cls(
            lp_amount=quote.lp_amount,
            token_0_amount=quote.token_0_amount,
            token_1_amount=quote.token_1_amount,
            transfer_token_0_amount=quote.transfer_token_0_amount,
            transfer_token_1_amount=quote.transfer_token_1_amount,
        )


class WithdrawResponse(BaseModel):
    lp_amount: int = Field(alias="lpAmount")
    token_0_amount: int = Field(alias="token0Amount", description="Sent by vault 0")
    token_1_amount: int = Field(alias="token1Amount", description="Sent by vault 1")
    receive_token_0_amount: int = Field(alias="receiveToken0Amount")
    receive_token_1_amount: int = Field(alias="receiveToken1Amount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: WithdrawQuote) -> WithdrawResponse:
        return cls(
            lp_amount=quote.lp_amount,
            token_0_amount=quote.token_0_amount,
            token_1_amount=quote.token_1_amount,
            receive_token_0_amount=quote.receive_token_0_amount,
            receive_token_1_amount=quote.receive_token_1_amount,
        )


class SwapResponse(BaseModel):
    amount_in: int = Field(alias="amountIn", description="Debited from the payer")
    amount_out: int = Field(alias="amountOut", description="Sent by the output vault")
    amount_received: int = Field(alias="amountReceived", description="Credited to the payer")
    trade_fee: int = Field(alias="tradeFee")
    protocol_fee: int = Field(alias="protocolFee")
    fund_fee: int = Field(alias="fundFee")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> SwapResponse:
        return cls(
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            amount_received=quote.amount_received,
            trade_fee=quote.result.trade_fee,
            protocol_fee=quote.result.protocol_fee,
            fund_fee=quote.result.fund_fee,
        )


class ObservationResponse(BaseModel):
    timestamp: int
    reserve_0: int = Field(alias="reserve0")
    reserve_1: int = Field(alias="reserve1")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_observation(cls, observation: Observation) -> ObservationResponse:
        return cls(
            timestamp=observation.timestamp,
            reserve_0=observation.reserve_0,
            reserve_1=observation.reserve_1,
        )


class CollectFeesResponse(BaseModel):
    amount_0: int = Field(alias="amount0")
    amount_1: int = Field(alias="amount1")

    model_config = {"populate_by_name": True}


class EpochResponse(BaseModel):
    epoch: int
