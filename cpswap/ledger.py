"""In-memory token ledger.

Holds mints and the balances of every (owner, mint) account. Pools keep
their reserves in vault accounts here, LP positions are balances of the
pool's LP mint, and mints with a transfer-fee extension withhold their
fee on every transfer.

Mutations can be grouped in a journal so a failing multi-transfer
operation leaves every balance as it found it:

    with ledger.transaction() as journal:
        ledger.transfer(mint, payer, vault, amount, journal=journal)
        ledger.transfer(other_mint, vault_out, payer, amount_out, journal=journal)
    # any exception inside the block undoes both transfers
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from cpswap.errors import AlreadyExists, InsufficientFunds, InvalidAmount, NotFound
from cpswap.fees.transfer_fee import NO_TRANSFER_FEE, TransferFeeConfig, TransferFeeParameters
from cpswap.fees.transfer_fee import transfer_fee
from cpswap.safe_int import S

logger = structlog.get_logger()


@dataclass
class Mint:
    """A token mint.

    Attributes:
        address: Mint address
        decimals: Display decimals
        transfer_fee_config: Transfer-fee extension, None for plain mints
        supply: Outstanding supply
        withheld_amount: Transfer fees withheld so far
    """

    address: str
    decimals: int = 9
    transfer_fee_config: TransferFeeConfig | None = None
    supply: int = 0
    withheld_amount: int = 0

    @property
    def has_transfer_fee(self) -> bool:
        return self.transfer_fee_config is not None

    def fee_parameters(self, epoch: int) -> TransferFeeParameters | None:
        """Transfer-fee parameters in force at ``epoch``, None if the mint has none."""
        if self.transfer_fee_config is None:
            return None
        return self.transfer_fee_config.get_epoch_fee(epoch)


@dataclass(frozen=True)
class TransferReceipt:
    """Outcome of a transfer: ``amount`` left the source, ``received`` arrived."""

    amount: int
    fee: int
    received: int


class LedgerJournal:
    """Undo log for a group of ledger mutations."""

    def __init__(self) -> None:
        self._balance_deltas: list[tuple[str, str, int]] = []
        self._supply_deltas: list[tuple[str, int]] = []
        self._withheld_deltas: list[tuple[str, int]] = []

    def record_balance(self, owner: str, mint: str, delta: int) -> None:
        self._balance_deltas.append((owner, mint, delta))

    def record_supply(self, mint: str, delta: int) -> None:
        self._supply_deltas.append((mint, delta))

    def record_withheld(self, mint: str, delta: int) -> None:
        self._withheld_deltas.append((mint, delta))

    def __len__(self) -> int:
        return len(self._balance_deltas) + len(self._supply_deltas) + len(self._withheld_deltas)


class TokenLedger:
    """Mints and balances.

    Attributes:
        epoch: Current epoch, selects the transfer-fee parameters in force
    """

    def __init__(self, epoch: int = 0) -> None:
        self.epoch = epoch
        self._mints: dict[str, Mint] = {}
        self._balances: dict[tuple[str, str], int] = {}
        self._lock = threading.RLock()

    # --- Mints ---

    def create_mint(
        self,
        address: str,
        decimals: int = 9,
        transfer_fee_config: TransferFeeConfig | None = None,
    ) -> Mint:
        """Register a new mint.

        Raises:
            AlreadyExists: If a mint with this address exists
            InvalidAmount: If decimals is out of range
        """
        if not 0 <= decimals <= 255:
            raise InvalidAmount(f"Decimals out of range: {decimals}")
        with self._lock:
            if address in self._mints:
                raise AlreadyExists(f"Mint {address} already exists")
            mint = Mint(address=address, decimals=decimals, transfer_fee_config=transfer_fee_config)
            self._mints[address] = mint
        logger.debug(
            "mint_created",
            mint=address,
            decimals=decimals,
            transfer_fee=transfer_fee_config is not None,
        )
        return mint

    def has_mint(self, address: str) -> bool:
        return address in self._mints

    def get_mint(self, address: str) -> Mint:
        """Look up a mint.

        Raises:
            NotFound: If the mint does not exist
        """
        mint = self._mints.get(address)
        if mint is None:
            raise NotFound(f"Mint {address} not found")
        return mint

    def schedule_transfer_fee(self, address: str, params: TransferFeeParameters) -> Mint:
        """Make ``params`` the mint's newer fee set.

        A mint without a transfer fee gets a zero older set, so nothing is
        charged before ``params.epoch``. Operations already running keep the
        parameters of the epoch they started in.

        Raises:
            InvalidAmount: If params.epoch is not after the current epoch or
                precedes the pending newer set
        """
        with self._lock:
            if params.epoch <= self.epoch:
                raise InvalidAmount(
                    f"Transfer fee must be scheduled after epoch {self.epoch}, got {params.epoch}"
                )
            mint = self.get_mint(address)
            if mint.transfer_fee_config is None:
                config = TransferFeeConfig(older=NO_TRANSFER_FEE, newer=params)
            else:
                config = mint.transfer_fee_config.schedule(params)
            mint.transfer_fee_config = config
        logger.info(
            "transfer_fee_scheduled",
            mint=address,
            basis_points=params.transfer_fee_basis_points,
            maximum_fee=params.maximum_fee,
            epoch=params.epoch,
        )
        return mint

    def advance_epoch(self, epoch: int) -> None:
        """Move the ledger to ``epoch``.

        Raises:
            InvalidAmount: If epoch is before the current one
        """
        with self._lock:
            if epoch < self.epoch:
                raise InvalidAmount(f"Epoch cannot go back from {self.epoch} to {epoch}")
            self.epoch = epoch
        logger.info("epoch_advanced", epoch=epoch)

    # --- Balances ---

    def balance(self, owner: str, mint: str) -> int:
        return self._balances.get((owner, mint), 0)

    def balances_of(self, owner: str) -> dict[str, int]:
        """Non-zero balances of ``owner`` keyed by mint."""
        with self._lock:
            accounts = list(self._balances.items())
        return {
            mint: amount for (holder, mint), amount in accounts if holder == owner and amount > 0
        }

    def mint_to(
        self,
        mint: str,
        owner: str,
        amount: int,
        journal: LedgerJournal | None = None,
    ) -> None:
        """Create ``amount`` new tokens in ``owner``'s account.

        Raises:
            NotFound: If the mint does not exist
            InvalidAmount: If amount is negative
            ArithmeticError: If the supply would exceed u64
        """
        if amount < 0:
            raise InvalidAmount(f"Cannot mint a negative amount: {amount}")
        with self._lock:
            token = self.get_mint(mint)
            new_supply = (S(token.supply) + amount).to_u64()
            token.supply = new_supply
            self._adjust(owner, mint, amount, journal)
            if journal is not None:
                journal.record_supply(mint, amount)

    def burn(
        self,
        mint: str,
        owner: str,
        amount: int,
        journal: LedgerJournal | None = None,
    ) -> None:
        """Destroy ``amount`` tokens from ``owner``'s account.

        Raises:
            InsufficientFunds: If the balance is too low
        """
        if amount < 0:
            raise InvalidAmount(f"Cannot burn a negative amount: {amount}")
        with self._lock:
            token = self.get_mint(mint)
            self._require_balance(owner, mint, amount)
            self._adjust(owner, mint, -amount, journal)
            token.supply -= amount
            if journal is not None:
                journal.record_supply(mint, -amount)

    def transfer(
        self,
        mint: str,
        source: str,
        destination: str,
        amount: int,
        epoch: int | None = None,
        journal: LedgerJournal | None = None,
        fee_params: TransferFeeParameters | None = None,
    ) -> TransferReceipt:
        """Move ``amount`` from source to destination, withholding the mint's fee.

        Args:
            mint: Mint being transferred
            source: Owner debited with the full amount
            destination: Owner credited with amount minus fee
            amount: Gross amount
            epoch: Epoch selecting the fee parameters (default: current epoch)
            journal: Undo log to record into
            fee_params: Fee parameters snapshotted by the caller, used instead
                of looking up the mint's parameters at ``epoch``

        Raises:
            InsufficientFunds: If the source balance is too low
        """
        if amount < 0:
            raise InvalidAmount(f"Cannot transfer a negative amount: {amount}")
        with self._lock:
            token = self.get_mint(mint)
            if fee_params is None:
                fee_params = token.fee_parameters(self.epoch if epoch is None else epoch)
            fee = transfer_fee(fee_params, amount)
            self._require_balance(source, mint, amount)

            self._adjust(source, mint, -amount, journal)
            self._adjust(destination, mint, amount - fee, journal)
            if fee:
                token.withheld_amount += fee
                if journal is not None:
                    journal.record_withheld(mint, fee)

        return TransferReceipt(amount=amount, fee=fee, received=amount - fee)

    # --- Transactions ---

    @contextmanager
    def transaction(self) -> Iterator[LedgerJournal]:
        """Group mutations; undo all of them if the block raises."""
        journal = LedgerJournal()
        try:
            yield journal
        except BaseException:
            self.rollback(journal)
            raise

    def rollback(self, journal: LedgerJournal) -> None:
        """Undo every mutation recorded in ``journal``, newest first."""
        with self._lock:
            for owner, mint, delta in reversed(journal._balance_deltas):
                key = (owner, mint)
                self._balances[key] = self._balances.get(key, 0) - delta
            for mint, delta in reversed(journal._supply_deltas):
                self._mints[mint].supply -= delta
            for mint, delta in reversed(journal._withheld_deltas):
                self._mints[mint].withheld_amount -= delta
        if len(journal):
            logger.debug("ledger_rolled_back", mutations=len(journal))

    # --- Internals ---

    def _require_balance(self, owner: str, mint: str, amount: int) -> None:
        available = self.balance(owner, mint)
        if available < amount:
            raise InsufficientFunds(
                f"Account {owner} holds {available} of {mint}, needs {amount}"
            )

    def _adjust(self, owner: str, mint: str, delta: int, journal: LedgerJournal | None) -> None:
        key = (owner, mint)
        self._balances[key] = (S(self._balances.get(key, 0)) + delta).to_u64()
        if journal is not None:
            journal.record_balance(owner, mint, delta)
