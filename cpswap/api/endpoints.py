"""API endpoints for the pool engine."""

from fastapi import APIRouter, Depends, Query

from cpswap.engine import PoolEngine, checked_math, get_default_engine
from cpswap.fees.transfer_fee import NO_TRANSFER_FEE, TransferFeeConfig, TransferFeeParameters
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
    FeeScheduleResponse,
    MintResponse,
    ObservationResponse,
    PoolResponse,
    SwapResponse,
    WithdrawResponse,
)

router = APIRouter()


def get_engine() -> PoolEngine:
    """Dependency provider for the engine instance.

    Override this in tests to inject a fresh engine:
        app.dependency_overrides[get_engine] = lambda: engine

    Returns:
        The engine serving requests.
    """
    return get_default_engine()


def _pool_response(engine: PoolEngine, address: str) -> PoolResponse:
    pool = engine.get_pool(address)
    return PoolResponse.from_pool(pool, engine.reserves(pool))


def _fee_parameters(request: TransferFeeRequest) -> TransferFeeParameters:
    return TransferFeeParameters(
        request.transfer_fee_basis_points, request.maximum_fee, request.epoch
    )


# --- Fee schedules ---


@router.post("/fee-schedules", status_code=201)
def create_fee_schedule(
    request: CreateFeeScheduleRequest,
    engine: PoolEngine = Depends(get_engine),
) -> FeeScheduleResponse:
    schedule = engine.create_fee_schedule(
        request.index,
        trade_fee_rate=request.trade_fee_rate,
        protocol_fee_rate=request.protocol_fee_rate,
        fund_fee_rate=request.fund_fee_rate,
        create_pool_fee=request.create_pool_fee,
        caller=request.caller,
    )
    return FeeScheduleResponse.from_schedule(schedule)


@router.get("/fee-schedules")
def list_fee_schedules(engine: PoolEngine = Depends(get_engine)) -> list[FeeScheduleResponse]:
    return [FeeScheduleResponse.from_schedule(s) for s in engine.fee_schedules.all()]


@router.get("/fee-schedules/by-address/{address}")
def get_fee_schedule_by_address(
    address: str, engine: PoolEngine = Depends(get_engine)
) -> FeeScheduleResponse:
    return FeeScheduleResponse.from_schedule(engine.fee_schedules.get_by_address(address))


@router.get("/fee-schedules/{index}")
def get_fee_schedule(index: int, engine: PoolEngine = Depends(get_engine)) -> FeeScheduleResponse:
    return FeeScheduleResponse.from_schedule(engine.get_fee_schedule(index))


@router.patch("/fee-schedules/{index}")
def update_fee_schedule(
    index: int,
    request: UpdateFeeScheduleRequest,
    engine: PoolEngine = Depends(get_engine),
) -> FeeScheduleResponse:
    schedule = engine.update_fee_schedule(index, caller=request.caller, **request.changes())
    return FeeScheduleResponse.from_schedule(schedule)


# --- Mints and accounts ---


@router.post("/mints", status_code=201)
def create_mint(
    request: CreateMintRequest,
    engine: PoolEngine = Depends(get_engine),
) -> MintResponse:
    """Register a mint.

    A transfer fee with a non-zero epoch is pending: the mint charges
    nothing before that epoch.
    """
    config = None
    if request.transfer_fee is not None:
        config = TransferFeeConfig(
            older=NO_TRANSFER_FEE, newer=_fee_parameters(request.transfer_fee)
        )
    mint = engine.ledger.create_mint(
        request.address, decimals=request.decimals, transfer_fee_config=config
    )
    return MintResponse.from_mint(mint)


@router.get("/mints/{mint}")
def get_mint(mint: str, engine: PoolEngine = Depends(get_engine)) -> MintResponse:
    return MintResponse.from_mint(engine.ledger.get_mint(mint))


@router.put("/mints/{mint}/transfer-fee")
def schedule_transfer_fee(
    mint: str,
    request: TransferFeeRequest,
    engine: PoolEngine = Depends(get_engine),
) -> MintResponse:
    """Schedule new transfer-fee parameters from a future epoch onward."""
    return MintResponse.from_mint(
        engine.ledger.schedule_transfer_fee(mint, _fee_parameters(request))
    )


@router.post("/mints/{mint}/mint-to")
def mint_to(
    mint: str,
    request: MintToRequest,
    engine: PoolEngine = Depends(get_engine),
) -> AccountResponse:
    with checked_math():
        engine.ledger.mint_to(mint, request.owner, request.amount)
    return AccountResponse(
        owner=request.owner, mint=mint, balance=engine.ledger.balance(request.owner, mint)
    )


@router.get("/accounts/{owner}")
def get_balances(owner: str, engine: PoolEngine = Depends(get_engine)) -> list[AccountResponse]:
    """Every non-zero balance of ``owner``, LP positions included."""
    return [
        AccountResponse(owner=owner, mint=mint, balance=balance)
        for mint, balance in sorted(engine.ledger.balances_of(owner).items())
    ]


@router.get("/accounts/{owner}/{mint}")
def get_account(owner: str, mint: str, engine: PoolEngine = Depends(get_engine)) -> AccountResponse:
    engine.ledger.get_mint(mint)
    return AccountResponse(owner=owner, mint=mint, balance=engine.ledger.balance(owner, mint))


@router.get("/epoch")
def get_epoch(engine: PoolEngine = Depends(get_engine)) -> EpochResponse:
    return EpochResponse(epoch=engine.ledger.epoch)


@router.put("/epoch")
def advance_epoch(
    request: AdvanceEpochRequest,
    engine: PoolEngine = Depends(get_engine),
) -> EpochResponse:
    engine.ledger.advance_epoch(request.epoch)
    return EpochResponse(epoch=engine.ledger.epoch)


# --- Pools ---


@router.post("/pools", status_code=201)
def initialize_pool(
    request: InitializePoolRequest,
    engine: PoolEngine = Depends(get_engine),
) -> PoolResponse:
    pool = engine.initialize(
        request.creator,
        request.schedule_index,
        request.mint_a,
        request.mint_b,
        request.amount_a,
        request.amount_b,
        open_time=request.open_time,
    )
    return PoolResponse.from_pool(pool, engine.reserves(pool))


@router.get("/pools")
def list_pools(
    schedule_index: int | None = Query(default=None, alias="scheduleIndex"),
    mint_a: str | None = Query(default=None, alias="mintA"),
    mint_b: str | None = Query(default=None, alias="mintB"),
    engine: PoolEngine = Depends(get_engine),
) -> list[PoolResponse]:
    """List pools, or look one up by schedule index and mint pair."""
    if schedule_index is not None and mint_a is not None and mint_b is not None:
        pools = [engine.find_pool(schedule_index, mint_a, mint_b)]
    else:
        pools = engine.pools()
    return [PoolResponse.from_pool(pool, engine.reserves(pool)) for pool in pools]


@router.get("/pools/{address}")
def get_pool(address: str, engine: PoolEngine = Depends(get_engine)) -> PoolResponse:
    return _pool_response(engine, address)


@router.get("/pools/{address}/observations")
def get_observations(
    address: str, engine: PoolEngine = Depends(get_engine)
) -> list[ObservationResponse]:
    return [ObservationResponse.from_observation(o) for o in engine.observations(address)]


@router.post("/pools/{address}/deposit")
def deposit(
    address: str,
    request: DepositRequest,
    engine: PoolEngine = Depends(get_engine),
) -> DepositResponse:
    quote = engine.deposit(
        request.owner,
        address,
        request.lp_amount,
        request.maximum_token_0_amount,
        request.maximum_token_1_amount,
    )
    return DepositResponse.from_quote(quote)


@router.post("/pools/{address}/withdraw")
def withdraw(
    address: str,
    request: WithdrawRequest,
    engine: PoolEngine = Depends(get_engine),
) -> WithdrawResponse:
    quote = engine.withdraw(
        request.owner,
        address,
        request.lp_amount,
        request.minimum_token_0_amount,
        request.minimum_token_1_amount,
    )
    return WithdrawResponse.from_quote(quote)


@router.post("/pools/{address}/swap-base-input")
def swap_base_input(
    address: str,
    request: SwapBaseInputRequest,
    engine: PoolEngine = Depends(get_engine),
) -> SwapResponse:
    quote = engine.swap_base_input(
        request.payer,
        address,
        request.input_mint,
        request.amount_in,
        request.minimum_amount_out,
    )
    return SwapResponse.from_quote(quote)


@router.post("/pools/{address}/swap-base-output")
def swap_base_output(
    address: str,
    request: SwapBaseOutputRequest,
    engine: PoolEngine = Depends(get_engine),
) -> SwapResponse:
    quote = engine.swap_base_output(
        request.payer,
        address,
        request.input_mint,
        request.amount_out_less_fee,
        request.max_amount_in,
    )
    return SwapResponse.from_quote(quote)


@router.put("/pools/{address}/status")
def set_pool_status(
    address: str,
    request: SetPoolStatusRequest,
    engine: PoolEngine = Depends(get_engine),
) -> PoolResponse:
    engine.set_pool_status(address, request.status, caller=request.caller)
    return _pool_response(engine, address)


@router.post("/pools/{address}/collect-protocol-fee")
def collect_protocol_fee(
    address: str,
    request: CollectFeesRequest,
    engine: PoolEngine = Depends(get_engine),
) -> CollectFeesResponse:
    amount_0, amount_1 = engine.collect_protocol_fee(
        address,
        request.recipient,
        request.amount_0_requested,
        request.amount_1_requested,
        caller=request.caller,
    )
    return CollectFeesResponse(amount_0=amount_0, amount_1=amount_1)


@router.post("/pools/{address}/collect-fund-fee")
def collect_fund_fee(
    address: str,
    request: CollectFeesRequest,
    engine: PoolEngine = Depends(get_engine),
) -> CollectFeesResponse:
    amount_0, amount_1 = engine.collect_fund_fee(
        address,
        request.recipient,
        request.amount_0_requested,
        request.amount_1_requested,
        caller=request.caller,
    )
    return CollectFeesResponse(amount_0=amount_0, amount_1=amount_1)
