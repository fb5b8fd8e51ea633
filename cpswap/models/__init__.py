"""Pydantic models for the HTTP API."""

from cpswap.models.requests import (
    AdvanceEpochRequest,
    CollectFeesRequest,
    CreateFeeScheduleRequest,
    CreateMintRequest,
    DepositRequest,
    InitializePoolRequest,
    MintToRequest,
    SetPoolStatusRequest,
    SwapBaseInputRequest,
    SwapBaseOutputRequest,
    TransferFeeRequest,
    UpdateFeeScheduleRequest,
    WithdrawRequest,
)
from cpswap.models.responses import (
    AccountResponse,
    CollectFeesResponse,
    DepositResponse,
    EpochResponse,
    ErrorResponse,
    FeeScheduleResponse,
    MintResponse,
    ObservationResponse,
    PoolResponse,
    SwapResponse,
    WithdrawResponse,
)
from cpswap.models.types import U16, U64, validate_u64

__all__ = [
    # Requests
    "AdvanceEpochRequest",
    "CollectFeesRequest",
    "CreateFeeScheduleRequest",
    "CreateMintRequest",
    "DepositRequest",
    "InitializePoolRequest",
    "MintToRequest",
    "SetPoolStatusRequest",
    "SwapBaseInputRequest",
    "SwapBaseOutputRequest",
    "TransferFeeRequest",
    "UpdateFeeScheduleRequest",
    "WithdrawRequest",
    # Responses
    "AccountResponse",
    "CollectFeesResponse",
    "DepositResponse",
    "EpochResponse",
    "ErrorResponse",
    "FeeScheduleResponse",
    "MintResponse",
    "ObservationResponse",
    "PoolResponse",
    "SwapResponse",
    "WithdrawResponse",
    # Types
    "U16",
    "U64",
    "validate_u64",
]
