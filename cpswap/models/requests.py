"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field

from cpswap.models.types import U16, U64


class CreateFeeScheduleRequest(BaseModel):
    """Create a fee schedule at ``index``."""

    index: U16
    trade_fee_rate: U64 = Field(alias="tradeFeeRate", description="Parts-per-million of swap input")
    protocol_fee_rate: U64 = Field(
        alias="protocolFeeRate", description="Parts-per-million of the trade fee"
    )
    fund_fee_rate: U64 = Field(alias="fundFeeRate", description="Parts-per-million of the trade fee")
    create_pool_fee: U64 = Field(default=0, alias="createPoolFee")
    caller: str | None = None

    model_config = {"populate_by_name": True}


class UpdateFeeScheduleRequest(BaseModel):
    """Change fields of an existing fee schedule. Omitted fields are kept."""

    trade_fee_rate: U64 | None = Field(default=None, alias="tradeFeeRate")
    protocol_fee_rate: U64 | None = Field(default=None, alias="protocolFeeRate")
    fund_fee_rate: U64 | None = Field(default=None, alias="fundFeeRate")
    create_pool_fee: U64 | None = Field(default=None, alias="createPoolFee")
    disable_create_pool: bool | None = Field(default=None, alias="disableCreatePool")
    caller: str | None = None

    model_config = {"populate_by_name": True}

    def changes(self) -> dict[str, int | bool]:
        """Fields explicitly set in the request."""
        return self.model_dump(exclude_none=True, exclude={"caller"})


class TransferFeeRequest(BaseModel):
    """Transfer-fee parameters for a mint."""

    transfer_fee_basis_points: int = Field(alias="transferFeeBasisPoints", ge=0, le=10_000)
    maximum_fee: U64 = Field(alias="maximumFee")
    epoch: int = Field(default=0, ge=0)

    model_config = {"populate_by_name": True}


class CreateMintRequest(BaseModel):
    """Register a mint, optionally with a transfer fee."""

    address: str = Field(min_length=1)
    decimals: int = Field(default=9, ge=0, le=255)
    transfer_fee: TransferFeeRequest | None = Field(default=None, alias="transferFee")

    model_config = {"populate_by_name": True}


class MintToRequest(BaseModel):
    """Credit new tokens to an owner."""

    owner: str = Field(min_length=1)
    amount: U64


class InitializePoolRequest(BaseModel):
    """Create and seed a pool."""

    creator: str = Field(min_length=1)
    schedule_index: U16 = Field(alias="scheduleIndex")
    mint_a: str = Field(alias="mintA")
    mint_b: str = Field(alias="mintB")
    amount_a: U64 = Field(alias="amountA")
    amount_b: U64 = Field(alias="amountB")
    open_time: int = Field(default=0, ge=0, alias="openTime")

    model_config = {"populate_by_name": True}


class DepositRequest(BaseModel):
    """Mint LP tokens against a proportional deposit."""

    owner: str = Field(min_length=1)
    lp_amount: U64 = Field(alias="lpAmount")
    maximum_token_0_amount: U64 = Field(alias="maximumToken0Amount")
    maximum_token_1_amount: U64 = Field(alias="maximumToken1Amount")

    model_config = {"populate_by_name": True}


class WithdrawRequest(BaseModel):
    """Burn LP tokens for a share of the reserves."""

    owner: str = Field(min_length=1)
    lp_amount: U64 = Field(alias="lpAmount")
    minimum_token_0_amount: U64 = Field(alias="minimumToken0Amount")
    minimum_token_1_amount: U64 = Field(alias="minimumToken1Amount")

    model_config = {"populate_by_name": True}


class SwapBaseInputRequest(BaseModel):
    """Swap an exact input amount."""

    payer: str = Field(min_length=1)
    input_mint: str = Field(alias="inputMint")
    amount_in: U64 = Field(alias="amountIn")
    minimum_amount_out: U64 = Field(alias="minimumAmountOut")

    model_config = {"populate_by_name": True}


class SwapBaseOutputRequest(BaseModel):
    """Swap for an exact net output amount."""

    payer: str = Field(min_length=1)
    input_mint: str = Field(alias="inputMint")
    amount_out_less_fee: U64 = Field(alias="amountOutLessFee")
    max_amount_in: U64 = Field(alias="maxAmountIn")

    model_config = {"populate_by_name": True}


class SetPoolStatusRequest(BaseModel):
    """Replace a pool's pause bits."""

    status: int = Field(ge=0, le=7)
    caller: str | None = None


class CollectFeesRequest(BaseModel):
    """Collect accrued protocol or fund fees."""

    recipient: str = Field(min_length=1)
    amount_0_requested: U64 = Field(alias="amount0Requested")
    amount_1_requested: U64 = Field(alias="amount1Requested")
    caller: str | None = None

    model_config = {"populate_by_name": True}


class AdvanceEpochRequest(BaseModel):
    """Move the ledger to a later epoch."""

    epoch: int = Field(ge=0)
