"""Pool engine: the state machine behind every pool.

The PoolEngine owns the fee schedule registry, the pools and a token
ledger holding their vaults. Each state-changing call follows the same
shape:

1. Lock the pool and read one snapshot (reserves, supply, epoch, clock)
2. Quote the operation with the pure math in ``cpswap.amm``
3. Check the caller's limits (slippage, pause flags, balances)
4. Move tokens inside a ledger transaction, rolled back on any failure
5. Update the pool record and append an observation

Nothing is written to the pool record before step 5, so a failed call
leaves no trace.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from cpswap.amm.base import TradeDirection
from cpswap.amm.curve import SwapQuote, quote_swap_base_input, quote_swap_base_output
from cpswap.amm.liquidity import DepositQuote, WithdrawQuote, deposit_quote, initial_liquidity
from cpswap.amm.liquidity import withdraw_quote
from cpswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from cpswap.constants import LOCKED_LIQUIDITY, LP_MINT_DECIMALS
from cpswap.errors import (
    ArithmeticOverflow,
    InsufficientSupply,
    InvalidAmount,
    InvariantViolation,
    NotFound,
    PoolCreationDisabled,
    PoolExists,
    PoolNotOpen,
    PoolPaused,
    SlippageExceeded,
    Unauthorized,
)
from cpswap.fees.schedule import FeeSchedule, FeeScheduleRegistry
from cpswap.fees.transfer_fee import NO_TRANSFER_FEE, TransferFeeParameters
from cpswap.ledger import TokenLedger, TransferReceipt
from cpswap.pools.addresses import (
    authority_address,
    lp_mint_address,
    observation_address,
    pool_address,
    sort_mints,
    vault_address,
)
from cpswap.pools.observation import Observation, ObservationBuffer
from cpswap.pools.state import PoolState, PoolStatus
from cpswap.safe_int import S, SafeIntError

logger = structlog.get_logger()


@contextmanager
def checked_math() -> Iterator[None]:
    """Report SafeInt failures as ArithmeticOverflow."""
    try:
        yield
    except SafeIntError as err:
        raise ArithmeticOverflow(str(err)) from err


def _check_received(receipt: TransferReceipt, expected: int, mint: str) -> None:
    """Fail the enclosing transaction if a leg delivered less than was quoted."""
    if receipt.received < expected:
        raise InvariantViolation(
            f"Transfer of {mint} delivered {receipt.received}, quoted {expected}"
        )


class PoolEngine:
    """Constant-product pools over a token ledger.

    Args:
        config: Engine configuration. Uses DEFAULT_ENGINE_CONFIG if not provided.
        ledger: Token ledger holding mints, vaults and LP balances.
        fee_schedules: Fee schedule registry.
        clock: Returns the current unix timestamp. Defaults to wall time.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        ledger: TokenLedger | None = None,
        fee_schedules: FeeScheduleRegistry | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.config = config or DEFAULT_ENGINE_CONFIG
        self.ledger = ledger or TokenLedger()
        self.fee_schedules = fee_schedules or FeeScheduleRegistry()
        self._clock = clock or (lambda: int(time.time()))
        self._pools: dict[str, PoolState] = {}
        self._pool_locks: dict[str, threading.Lock] = {}
        self._pools_lock = threading.Lock()

        if not self.ledger.has_mint(self.config.fee_currency):
            self.ledger.create_mint(self.config.fee_currency)

    # --- Fee schedules ---

    def create_fee_schedule(
        self,
        index: int,
        trade_fee_rate: int,
        protocol_fee_rate: int,
        fund_fee_rate: int,
        create_pool_fee: int = 0,
        caller: str | None = None,
    ) -> FeeSchedule:
        """Create the fee schedule at ``index``.

        Raises:
            AlreadyExists: If ``index`` is taken
            InvalidFeeSplit: If the rates are invalid
            Unauthorized: If an admin is configured and caller is not it
        """
        self._authorize(caller)
        return self.fee_schedules.create(
            index,
            trade_fee_rate=trade_fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            fund_fee_rate=fund_fee_rate,
            create_pool_fee=create_pool_fee,
        )

    def update_fee_schedule(
        self, index: int, caller: str | None = None, **changes: int | bool
    ) -> FeeSchedule:
        """Privileged update of an existing schedule's fields."""
        self._authorize(caller)
        return self.fee_schedules.update(index, **changes)

    def get_fee_schedule(self, index: int) -> FeeSchedule:
        return self.fee_schedules.get(index)

    # --- Pool lifecycle ---

    def initialize(
        self,
        creator: str,
        schedule_index: int,
        mint_a: str,
        mint_b: str,
        amount_a: int,
        amount_b: int,
        open_time: int = 0,
    ) -> PoolState:
        """Create a pool for a mint pair and seed it with the creator's deposit.

        Args:
            creator: Owner paying the creation fee and the initial amounts
            schedule_index: Fee schedule the pool uses
            mint_a: One mint of the pair (order does not matter)
            mint_b: The other mint
            amount_a: Gross amount of mint_a sent by the creator
            amount_b: Gross amount of mint_b sent by the creator
            open_time: Earliest timestamp at which swaps are accepted

        Returns:
            The initialized pool

        Raises:
            InvalidAmount: If the mints are equal or an amount is not positive
            PoolExists: If the pool for this schedule and pair exists
            PoolCreationDisabled: If the schedule does not allow new pools
            InsufficientInitialLiquidity: If the deposit is too small
            InsufficientFunds: If the creator cannot pay
        """
        if mint_a == mint_b:
            raise InvalidAmount(f"Pool mints must differ, got {mint_a} twice")
        if amount_a <= 0 or amount_b <= 0:
            raise InvalidAmount(f"Initial amounts must be positive, got {amount_a} and {amount_b}")

        schedule = self.fee_schedules.get(schedule_index)
        if schedule.disable_create_pool:
            raise PoolCreationDisabled(f"Fee schedule {schedule_index} does not allow new pools")

        mint_0, mint_1 = sort_mints(mint_a, mint_b)
        amount_0, amount_1 = (amount_a, amount_b) if mint_0 == mint_a else (amount_b, amount_a)
        address = pool_address(schedule.address, mint_0, mint_1)

        with self._pools_lock:
            if address in self._pools:
                raise PoolExists(f"Pool {address} already exists")
            if self.ledger.has_mint(lp_mint_address(address)):
                raise PoolExists(f"LP mint of pool {address} already exists")

            epoch = self.ledger.epoch
            now = self._now()
            fee_0 = self._fee_parameters(mint_0, epoch)
            fee_1 = self._fee_parameters(mint_1, epoch)
            with checked_math():
                bootstrap = initial_liquidity(amount_0, amount_1, fee_0, fee_1)

            pool = PoolState(
                address=address,
                schedule_index=schedule.index,
                authority=authority_address(),
                creator=creator,
                token_0_mint=mint_0,
                token_1_mint=mint_1,
                token_0_vault=vault_address(address, mint_0),
                token_1_vault=vault_address(address, mint_1),
                lp_mint=lp_mint_address(address),
                observation_key=observation_address(address),
                open_time=max(open_time, now),
                observations=ObservationBuffer(self.config.observation_capacity),
            )

            with checked_math(), self.ledger.transaction() as journal:
                if schedule.create_pool_fee:
                    self.ledger.transfer(
                        self.config.fee_currency,
                        creator,
                        self.config.fee_collector,
                        schedule.create_pool_fee,
                        epoch=epoch,
                        journal=journal,
                    )
                receipt_0 = self.ledger.transfer(
                    mint_0, creator, pool.token_0_vault, amount_0, journal=journal, fee_params=fee_0
                )
                _check_received(receipt_0, bootstrap.token_0_amount, mint_0)
                receipt_1 = self.ledger.transfer(
                    mint_1, creator, pool.token_1_vault, amount_1, journal=journal, fee_params=fee_1
                )
                _check_received(receipt_1, bootstrap.token_1_amount, mint_1)
                self.ledger.create_mint(pool.lp_mint, decimals=LP_MINT_DECIMALS)
                self.ledger.mint_to(
                    pool.lp_mint, creator, bootstrap.creator_lp_amount, journal=journal
                )
                self.ledger.mint_to(pool.lp_mint, pool.authority, LOCKED_LIQUIDITY, journal=journal)

            pool.lp_supply = bootstrap.liquidity
            self._observe(pool, now)

            # Publish last: other operations look pools up without _pools_lock
            self._pool_locks[address] = threading.Lock()
            self._pools[address] = pool

        logger.info(
            "pool_initialized",
            pool=address,
            schedule_index=schedule.index,
            token_0_mint=mint_0,
            token_1_mint=mint_1,
            token_0_amount=bootstrap.token_0_amount,
            token_1_amount=bootstrap.token_1_amount,
            lp_supply=bootstrap.liquidity,
            create_pool_fee=schedule.create_pool_fee,
        )
        return pool

    def deposit(
        self,
        owner: str,
        pool: str,
        lp_amount: int,
        maximum_token_0_amount: int,
        maximum_token_1_amount: int,
    ) -> DepositQuote:
        """Mint ``lp_amount`` LP tokens against a proportional deposit.

        Raises:
            PoolPaused: If deposits are disabled
            InvalidAmount: If lp_amount is zero
            SlippageExceeded: If either side needs more than the caller's maximum
        """
        with self._locked_pool(pool) as state:
            if not state.status.allows_deposit():
                raise PoolPaused(f"Deposits are disabled on pool {pool}")
            if lp_amount <= 0:
                raise InvalidAmount(f"lp_amount must be positive, got {lp_amount}")

            epoch = self.ledger.epoch
            now = self._now()
            fee_0 = self._fee_parameters(state.token_0_mint, epoch)
            fee_1 = self._fee_parameters(state.token_1_mint, epoch)
            reserve_0, reserve_1 = self._reserves(state)
            with checked_math():
                quote = deposit_quote(
                    lp_amount, state.lp_supply, reserve_0, reserve_1, fee_0, fee_1
                )
                new_lp_supply = (S(state.lp_supply) + lp_amount).to_u64()

            if (
                quote.transfer_token_0_amount > maximum_token_0_amount
                or quote.transfer_token_1_amount > maximum_token_1_amount
            ):
                raise SlippageExceeded(
                    f"Deposit needs ({quote.transfer_token_0_amount}, "
                    f"{quote.transfer_token_1_amount}), maximum is "
                    f"({maximum_token_0_amount}, {maximum_token_1_amount})"
                )

            with checked_math(), self.ledger.transaction() as journal:
                receipt_0 = self.ledger.transfer(
                    state.token_0_mint,
                    owner,
                    state.token_0_vault,
                    quote.transfer_token_0_amount,
                    journal=journal,
                    fee_params=fee_0,
                )
                _check_received(receipt_0, quote.token_0_amount, state.token_0_mint)
                receipt_1 = self.ledger.transfer(
                    state.token_1_mint,
                    owner,
                    state.token_1_vault,
                    quote.transfer_token_1_amount,
                    journal=journal,
                    fee_params=fee_1,
                )
                _check_received(receipt_1, quote.token_1_amount, state.token_1_mint)
                self.ledger.mint_to(state.lp_mint, owner, lp_amount, journal=journal)

            state.lp_supply = new_lp_supply
            self._observe(state, now)

        logger.info(
            "deposit",
            pool=pool,
            owner=owner,
            lp_amount=lp_amount,
            token_0_amount=quote.token_0_amount,
            token_1_amount=quote.token_1_amount,
            transfer_fee_0=quote.transfer_fee_0,
            transfer_fee_1=quote.transfer_fee_1,
        )
        return quote

    def withdraw(
        self,
        owner: str,
        pool: str,
        lp_amount: int,
        minimum_token_0_amount: int,
        minimum_token_1_amount: int,
    ) -> WithdrawQuote:
        """Burn ``lp_amount`` LP tokens for a proportional share of the reserves.

        Raises:
            PoolPaused: If withdrawals are disabled
            InvalidAmount: If lp_amount is zero
            InsufficientSupply: If lp_amount exceeds the owner's balance or the supply
            SlippageExceeded: If either received amount is below the caller's minimum
        """
        with self._locked_pool(pool) as state:
            if not state.status.allows_withdraw():
                raise PoolPaused(f"Withdrawals are disabled on pool {pool}")
            if lp_amount <= 0:
                raise InvalidAmount(f"lp_amount must be positive, got {lp_amount}")

            lp_balance = self.ledger.balance(owner, state.lp_mint)
            if lp_amount > lp_balance:
                raise InsufficientSupply(f"{owner} holds {lp_balance} LP, asked to burn {lp_amount}")
            if lp_amount >= state.lp_supply:
                raise InsufficientSupply(
                    f"Cannot burn {lp_amount} LP out of a supply of {state.lp_supply}"
                )

            epoch = self.ledger.epoch
            now = self._now()
            fee_0 = self._fee_parameters(state.token_0_mint, epoch)
            fee_1 = self._fee_parameters(state.token_1_mint, epoch)
            reserve_0, reserve_1 = self._reserves(state)
            with checked_math():
                quote = withdraw_quote(
                    lp_amount, state.lp_supply, reserve_0, reserve_1, fee_0, fee_1
                )

            if (
                quote.receive_token_0_amount < minimum_token_0_amount
                or quote.receive_token_1_amount < minimum_token_1_amount
            ):
                raise SlippageExceeded(
                    f"Withdrawal yields ({quote.receive_token_0_amount}, "
                    f"{quote.receive_token_1_amount}), minimum is "
                    f"({minimum_token_0_amount}, {minimum_token_1_amount})"
                )

            with checked_math(), self.ledger.transaction() as journal:
                self.ledger.burn(state.lp_mint, owner, lp_amount, journal=journal)
                receipt_0 = self.ledger.transfer(
                    state.token_0_mint,
                    state.token_0_vault,
                    owner,
                    quote.token_0_amount,
                    journal=journal,
                    fee_params=fee_0,
                )
                _check_received(receipt_0, quote.receive_token_0_amount, state.token_0_mint)
                receipt_1 = self.ledger.transfer(
                    state.token_1_mint,
                    state.token_1_vault,
                    owner,
                    quote.token_1_amount,
                    journal=journal,
                    fee_params=fee_1,
                )
                _check_received(receipt_1, quote.receive_token_1_amount, state.token_1_mint)

            state.lp_supply -= lp_amount
            self._observe(state, now)

        logger.info(
            "withdraw",
            pool=pool,
            owner=owner,
            lp_amount=lp_amount,
            token_0_amount=quote.token_0_amount,
            token_1_amount=quote.token_1_amount,
            transfer_fee_0=quote.transfer_fee_0,
            transfer_fee_1=quote.transfer_fee_1,
        )
        return quote

    def swap_base_input(
        self,
        payer: str,
        pool: str,
        input_mint: str,
        amount_in: int,
        minimum_amount_out: int,
    ) -> SwapQuote:
        """Swap an exact gross input for as much output as the curve gives.

        Raises:
            PoolPaused: If swaps are disabled
            PoolNotOpen: If the pool's open time has not been reached
            ZeroAmount: If the input nets to zero or yields nothing
            SlippageExceeded: If the net output is below minimum_amount_out
        """
        with self._locked_pool(pool) as state:
            input_index, epoch, now, schedule = self._prepare_swap(state, input_mint)
            output_index = 1 - input_index
            input_fee = self._fee_parameters(state.mint(input_index), epoch)
            output_fee = self._fee_parameters(state.mint(output_index), epoch)
            reserves = self._reserves(state)
            with checked_math():
                quote = quote_swap_base_input(
                    amount_in,
                    reserves[input_index],
                    reserves[output_index],
                    schedule,
                    input_fee,
                    output_fee,
                )

            if quote.amount_received < minimum_amount_out:
                raise SlippageExceeded(
                    f"Swap yields {quote.amount_received}, minimum is {minimum_amount_out}"
                )

            self._settle_swap(state, payer, input_index, quote, (input_fee, output_fee), now)

        self._log_swap("swap_base_input", pool, payer, input_index, quote)
        return quote

    def swap_base_output(
        self,
        payer: str,
        pool: str,
        input_mint: str,
        amount_out_less_fee: int,
        max_amount_in: int,
    ) -> SwapQuote:
        """Swap for an exact net output, paying whatever input the curve needs.

        Raises:
            PoolPaused: If swaps are disabled
            PoolNotOpen: If the pool's open time has not been reached
            InsufficientLiquidity: If the output would empty the reserve
            SlippageExceeded: If the gross input exceeds max_amount_in
        """
        with self._locked_pool(pool) as state:
            input_index, epoch, now, schedule = self._prepare_swap(state, input_mint)
            output_index = 1 - input_index
            input_fee = self._fee_parameters(state.mint(input_index), epoch)
            output_fee = self._fee_parameters(state.mint(output_index), epoch)
            reserves = self._reserves(state)
            with checked_math():
                quote = quote_swap_base_output(
                    amount_out_less_fee,
                    reserves[input_index],
                    reserves[output_index],
                    schedule,
                    input_fee,
                    output_fee,
                )

            if quote.amount_in > max_amount_in:
                raise SlippageExceeded(
                    f"Swap needs {quote.amount_in}, maximum is {max_amount_in}"
                )

            self._settle_swap(state, payer, input_index, quote, (input_fee, output_fee), now)

        self._log_swap("swap_base_output", pool, payer, input_index, quote)
        return quote

    # --- Privileged pool management ---

    def set_pool_status(self, pool: str, status: PoolStatus | int, caller: str | None = None) -> None:
        """Replace the pool's pause bits."""
        self._authorize(caller)
        new_status = PoolStatus.from_bits(int(status))
        with self._locked_pool(pool) as state:
            state.status = new_status
        logger.info("pool_status_updated", pool=pool, status=int(new_status))

    def collect_protocol_fee(
        self,
        pool: str,
        recipient: str,
        amount_0_requested: int,
        amount_1_requested: int,
        caller: str | None = None,
    ) -> tuple[int, int]:
        """Send accrued protocol fees to ``recipient``.

        Returns:
            Amounts taken out of the vaults, capped at what has accrued
        """
        return self._collect_fees(
            "protocol", pool, recipient, amount_0_requested, amount_1_requested, caller
        )

    def collect_fund_fee(
        self,
        pool: str,
        recipient: str,
        amount_0_requested: int,
        amount_1_requested: int,
        caller: str | None = None,
    ) -> tuple[int, int]:
        """Send accrued fund fees to ``recipient``."""
        return self._collect_fees(
            "fund", pool, recipient, amount_0_requested, amount_1_requested, caller
        )

    # --- Queries ---

    def get_pool(self, address: str) -> PoolState:
        """Look up a pool by address.

        Raises:
            NotFound: If no pool exists at ``address``
        """
        pool = self._pools.get(address)
        if pool is None:
            raise NotFound(f"Pool {address} not found")
        return pool

    def find_pool(self, schedule_index: int, mint_a: str, mint_b: str) -> PoolState:
        """Locate a pool by its identity tuple (mint order does not matter)."""
        schedule = self.fee_schedules.get(schedule_index)
        return self.get_pool(pool_address(schedule.address, mint_a, mint_b))

    def pools(self) -> list[PoolState]:
        return list(self._pools.values())

    def vault_balances(self, pool: PoolState) -> tuple[int, int]:
        return (
            self.ledger.balance(pool.token_0_vault, pool.token_0_mint),
            self.ledger.balance(pool.token_1_vault, pool.token_1_mint),
        )

    def reserves(self, pool: PoolState) -> tuple[int, int]:
        """Vault balances net of accrued protocol and fund fees."""
        return self._reserves(pool)

    def observations(self, pool: str) -> list[Observation]:
        return self.get_pool(pool).observations.entries()

    def lp_balance(self, owner: str, pool: str) -> int:
        return self.ledger.balance(owner, self.get_pool(pool).lp_mint)

    # --- Internals ---

    def _now(self) -> int:
        return int(self._clock())

    def _authorize(self, caller: str | None) -> None:
        admin = self.config.admin
        if admin is not None and caller != admin:
            raise Unauthorized(f"Caller {caller} is not the engine admin")

    def _fee_parameters(self, mint: str, epoch: int) -> TransferFeeParameters:
        params = self.ledger.get_mint(mint).fee_parameters(epoch)
        return NO_TRANSFER_FEE if params is None else params

    def _reserves(self, pool: PoolState) -> tuple[int, int]:
        vault_0, vault_1 = self.vault_balances(pool)
        with checked_math():
            return (
                (S(vault_0) - pool.accrued_fees(0)).value,
                (S(vault_1) - pool.accrued_fees(1)).value,
            )

    def _observe(self, pool: PoolState, now: int) -> None:
        reserve_0, reserve_1 = self._reserves(pool)
        pool.observations.append(now, reserve_0, reserve_1)

    @contextmanager
    def _locked_pool(self, address: str) -> Iterator[PoolState]:
        """Hold the pool's lock for the duration of one operation."""
        pool = self.get_pool(address)
        with self._pool_locks[address]:
            yield pool

    def _prepare_swap(
        self, pool: PoolState, input_mint: str
    ) -> tuple[int, int, int, FeeSchedule]:
        """Gate a swap and snapshot what it computes against."""
        if not pool.status.allows_swap():
            raise PoolPaused(f"Swaps are disabled on pool {pool.address}")
        now = self._now()
        if now < pool.open_time:
            raise PoolNotOpen(f"Pool {pool.address} opens at {pool.open_time}, now is {now}")
        input_index = pool.token_index(input_mint)
        schedule = self.fee_schedules.get(pool.schedule_index)
        return input_index, self.ledger.epoch, now, schedule

    def _settle_swap(
        self,
        pool: PoolState,
        payer: str,
        input_index: int,
        quote: SwapQuote,
        fee_params: tuple[TransferFeeParameters, TransferFeeParameters],
        now: int,
    ) -> None:
        """Move both legs with the fee parameters the quote was priced on."""
        output_index = 1 - input_index
        input_fee, output_fee = fee_params
        with checked_math(), self.ledger.transaction() as journal:
            receipt_in = self.ledger.transfer(
                pool.mint(input_index),
                payer,
                pool.vault(input_index),
                quote.amount_in,
                journal=journal,
                fee_params=input_fee,
            )
            _check_received(
                receipt_in, quote.result.source_amount_swapped, pool.mint(input_index)
            )
            receipt_out = self.ledger.transfer(
                pool.mint(output_index),
                pool.vault(output_index),
                payer,
                quote.amount_out,
                journal=journal,
                fee_params=output_fee,
            )
            _check_received(receipt_out, quote.amount_received, pool.mint(output_index))

        pool.accrue_fees(input_index, quote.result.protocol_fee, quote.result.fund_fee)
        self._observe(pool, now)

    def _collect_fees(
        self,
        bucket: str,
        pool: str,
        recipient: str,
        amount_0_requested: int,
        amount_1_requested: int,
        caller: str | None,
    ) -> tuple[int, int]:
        self._authorize(caller)
        with self._locked_pool(pool) as state:
            accrued_0 = getattr(state, f"{bucket}_fees_token_0")
            accrued_1 = getattr(state, f"{bucket}_fees_token_1")
            amount_0 = min(max(amount_0_requested, 0), accrued_0)
            amount_1 = min(max(amount_1_requested, 0), accrued_1)

            with checked_math(), self.ledger.transaction() as journal:
                self.ledger.transfer(
                    state.token_0_mint, state.token_0_vault, recipient, amount_0, journal=journal
                )
                self.ledger.transfer(
                    state.token_1_mint, state.token_1_vault, recipient, amount_1, journal=journal
                )

            setattr(state, f"{bucket}_fees_token_0", accrued_0 - amount_0)
            setattr(state, f"{bucket}_fees_token_1", accrued_1 - amount_1)

        logger.info(
            f"{bucket}_fee_collected",
            pool=pool,
            recipient=recipient,
            amount_0=amount_0,
            amount_1=amount_1,
        )
        return amount_0, amount_1

    def _log_swap(
        self, event: str, pool: str, payer: str, input_index: int, quote: SwapQuote
    ) -> None:
        logger.info(
            event,
            pool=pool,
            payer=payer,
            direction=TradeDirection.from_input_index(input_index).value,
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            amount_received=quote.amount_received,
            trade_fee=quote.result.trade_fee,
            protocol_fee=quote.result.protocol_fee,
            fund_fee=quote.result.fund_fee,
            pool_fee=quote.result.pool_fee,
        )


def _create_default_engine() -> PoolEngine:
    """Create the process-wide engine used by the API.

    Configuration via environment variables:
    - CPSWAP_ADMIN: Owner allowed to run privileged operations (default: unrestricted)
    - CPSWAP_FEE_COLLECTOR: Account receiving pool creation fees
    """
    config = EngineConfig(
        admin=os.environ.get("CPSWAP_ADMIN") or None,
        fee_collector=os.environ.get("CPSWAP_FEE_COLLECTOR", DEFAULT_ENGINE_CONFIG.fee_collector),
    )
    logger.info("engine_created", admin=config.admin, fee_collector=config.fee_collector)
    return PoolEngine(config=config)


_default_engine: PoolEngine | None = None


def get_default_engine() -> PoolEngine:
    """Process-wide engine, created on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = _create_default_engine()
    return _default_engine
