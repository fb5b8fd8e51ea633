"""Tests for PoolEngine.deposit and PoolEngine.withdraw."""

import pytest

from cpswap.constants import LOCKED_LIQUIDITY
from cpswap.errors import (
    InsufficientFunds,
    InsufficientSupply,
    InvalidAmount,
    NotFound,
    PoolPaused,
    SlippageExceeded,
)
from cpswap.fees.transfer_fee import transfer_fee
from cpswap.pools.state import PoolStatus
from tests.helpers import ALICE, BOB, FEE_TOKEN, FUNDING, INIT_AMOUNT, TOKEN_A, TOKEN_B

MAX = 2**64 - 1


class TestDeposit:
    """Tests for minting LP against a proportional deposit."""

    def test_proportional_deposit(self, engine, pool):
        quote = engine.deposit(BOB, pool.address, 1_000_000, MAX, MAX)

        assert (quote.token_0_amount, quote.token_1_amount) == (1_000_000, 1_000_000)
        assert engine.vault_balances(pool) == (INIT_AMOUNT + 1_000_000, INIT_AMOUNT + 1_000_000)
        assert pool.lp_supply == INIT_AMOUNT + 1_000_000
        assert engine.lp_balance(BOB, pool.address) == 1_000_000
        assert engine.ledger.balance(BOB, TOKEN_A) == FUNDING - 1_000_000

    def test_rounds_up_against_depositor(self, engine, pool):
        """After a swap moves the reserves, one LP unit still costs a full unit per side."""
        engine.swap_base_input(BOB, pool.address, TOKEN_A, 123_456_789, 0)
        quote = engine.deposit(BOB, pool.address, 1, MAX, MAX)
        assert quote.token_0_amount >= 1
        assert quote.token_1_amount >= 1

    def test_slippage(self, engine, pool):
        """A maximum one unit short rejects the deposit and changes nothing."""
        with pytest.raises(SlippageExceeded):
            engine.deposit(BOB, pool.address, 1_000_000, MAX, 999_999)
        assert pool.lp_supply == INIT_AMOUNT
        assert engine.vault_balances(pool) == (INIT_AMOUNT, INIT_AMOUNT)
        assert len(engine.observations(pool.address)) == 1

    def test_zero_lp(self, engine, pool):
        with pytest.raises(InvalidAmount):
            engine.deposit(BOB, pool.address, 0, MAX, MAX)

    def test_paused(self, engine, pool):
        engine.set_pool_status(pool.address, PoolStatus.DEPOSIT_DISABLED)
        with pytest.raises(PoolPaused):
            engine.deposit(BOB, pool.address, 1_000_000, MAX, MAX)

    def test_unknown_pool(self, engine, pool):
        with pytest.raises(NotFound):
            engine.deposit(BOB, "0xdead", 1_000_000, MAX, MAX)

    def test_depositor_without_funds(self, engine, pool):
        """Nothing is minted when the second leg cannot be paid."""
        engine.ledger.mint_to(TOKEN_A, "carol", 1_000_000)
        with pytest.raises(InsufficientFunds):
            engine.deposit("carol", pool.address, 1_000_000, MAX, MAX)
        assert engine.ledger.balance("carol", TOKEN_A) == 1_000_000
        assert engine.lp_balance("carol", pool.address) == 0
        assert pool.lp_supply == INIT_AMOUNT

    def test_transfer_fee_grossed_up(self, engine, fee_pool):
        """The fee mint's vault receives at least the proportional share."""
        vault_before = engine.vault_balances(fee_pool)[1]
        quote = engine.deposit(BOB, fee_pool.address, 1_000_000, MAX, MAX)
        vault_after = engine.vault_balances(fee_pool)[1]

        assert quote.transfer_fee_1 > 0
        assert quote.transfer_token_1_amount == quote.token_1_amount + quote.transfer_fee_1
        assert vault_after - vault_before >= quote.token_1_amount
        assert engine.ledger.balance(BOB, FEE_TOKEN) == FUNDING - quote.transfer_token_1_amount

    def test_observation_appended(self, engine, pool, clock):
        clock.advance(60)
        engine.deposit(BOB, pool.address, 1_000_000, MAX, MAX)
        latest = engine.observations(pool.address)[-1]
        assert latest.timestamp == clock.now
        assert (latest.reserve_0, latest.reserve_1) == engine.reserves(pool)


class TestWithdraw:
    """Tests for burning LP for a share of the reserves."""

    def test_proportional_withdraw(self, engine, pool):
        alice_a = engine.ledger.balance(ALICE, TOKEN_A)
        quote = engine.withdraw(ALICE, pool.address, 1_000_000, 0, 0)

        assert (quote.token_0_amount, quote.token_1_amount) == (1_000_000, 1_000_000)
        assert engine.vault_balances(pool) == (INIT_AMOUNT - 1_000_000, INIT_AMOUNT - 1_000_000)
        assert pool.lp_supply == INIT_AMOUNT - 1_000_000
        assert engine.ledger.balance(ALICE, TOKEN_A) == alice_a + 1_000_000
        assert engine.ledger.get_mint(pool.lp_mint).supply == pool.lp_supply

    def test_locked_liquidity_survives_full_exit(self, engine, pool):
        """Burning every creator LP leaves the locked share's reserves behind."""
        engine.withdraw(ALICE, pool.address, INIT_AMOUNT - LOCKED_LIQUIDITY, 0, 0)
        assert pool.lp_supply == LOCKED_LIQUIDITY
        assert engine.reserves(pool) == (LOCKED_LIQUIDITY, LOCKED_LIQUIDITY)

    def test_more_than_balance(self, engine, pool):
        with pytest.raises(InsufficientSupply):
            engine.withdraw(ALICE, pool.address, INIT_AMOUNT - LOCKED_LIQUIDITY + 1, 0, 0)

    def test_without_position(self, engine, pool):
        with pytest.raises(InsufficientSupply):
            engine.withdraw(BOB, pool.address, 1, 0, 0)

    def test_zero_lp(self, engine, pool):
        with pytest.raises(InvalidAmount):
            engine.withdraw(ALICE, pool.address, 0, 0, 0)

    def test_slippage(self, engine, pool):
        with pytest.raises(SlippageExceeded):
            engine.withdraw(ALICE, pool.address, 1_000_000, 1_000_001, 0)
        assert pool.lp_supply == INIT_AMOUNT
        assert engine.lp_balance(ALICE, pool.address) == INIT_AMOUNT - LOCKED_LIQUIDITY

    def test_paused(self, engine, pool):
        engine.set_pool_status(pool.address, PoolStatus.WITHDRAW_DISABLED)
        with pytest.raises(PoolPaused):
            engine.withdraw(ALICE, pool.address, 1_000_000, 0, 0)

    def test_other_operations_unaffected_by_withdraw_pause(self, engine, pool):
        engine.set_pool_status(pool.address, PoolStatus.WITHDRAW_DISABLED)
        engine.deposit(BOB, pool.address, 1_000, MAX, MAX)
        engine.swap_base_input(BOB, pool.address, TOKEN_B, 1_000_000, 0)

    def test_transfer_fee_borne_by_owner(self, engine, fee_pool):
        fee_before = engine.ledger.balance(ALICE, FEE_TOKEN)
        quote = engine.withdraw(ALICE, fee_pool.address, 1_000_000, 0, 0)
        params = engine.ledger.get_mint(FEE_TOKEN).fee_parameters(engine.ledger.epoch)

        assert quote.transfer_fee_1 == transfer_fee(params, quote.token_1_amount)
        assert engine.ledger.balance(ALICE, FEE_TOKEN) - fee_before == quote.receive_token_1_amount

    def test_slippage_checks_received_amount(self, engine, fee_pool):
        """The minimum applies to what arrives, after the transfer fee."""
        quote = engine.withdraw(ALICE, fee_pool.address, 1_000_000, 0, 0)
        with pytest.raises(SlippageExceeded):
            engine.withdraw(ALICE, fee_pool.address, 1_000_000, 0, quote.token_1_amount)


class TestRoundTrip:
    """Deposit followed by withdraw of the same LP amount."""

    @pytest.mark.parametrize("lp_amount", [1, 777, 1_000_000, 123_456_789])
    def test_never_profits(self, engine, pool, lp_amount):
        engine.swap_base_input(BOB, pool.address, TOKEN_A, 987_654_321, 0)
        start_a = engine.ledger.balance(BOB, TOKEN_A)
        start_b = engine.ledger.balance(BOB, TOKEN_B)

        engine.deposit(BOB, pool.address, lp_amount, MAX, MAX)
        engine.withdraw(BOB, pool.address, lp_amount, 0, 0)

        assert engine.ledger.balance(BOB, TOKEN_A) <= start_a
        assert engine.ledger.balance(BOB, TOKEN_B) <= start_b
        assert engine.lp_balance(BOB, pool.address) == 0
