"""Tests for privileged engine operations and observations."""

import pytest

from cpswap.errors import AlreadyExists, ArithmeticOverflow, InvalidAmount, PoolPaused, Unauthorized
from cpswap.engine import checked_math
from cpswap.pools.state import PoolStatus
from cpswap.safe_int import S
from tests.helpers import ADMIN, ALICE, BOB, TOKEN_A, TOKEN_B, TREASURY, fund, make_engine
from tests.helpers import make_pool, make_schedule

MAX = 2**64 - 1


@pytest.fixture
def admin_engine(clock):
    """Engine restricting privileged operations to ADMIN."""
    return make_engine(admin=ADMIN, clock=clock)


class TestAuthorization:
    """Tests for the optional admin check."""

    def test_open_engine_accepts_any_caller(self, engine):
        make_schedule(engine, caller="anyone")
        engine.update_fee_schedule(0, caller="anyone", trade_fee_rate=20)

    def test_create_schedule_requires_admin(self, admin_engine):
        with pytest.raises(Unauthorized):
            make_schedule(admin_engine, caller=ALICE)
        with pytest.raises(Unauthorized):
            make_schedule(admin_engine)
        assert len(admin_engine.fee_schedules) == 0

    def test_admin_creates_schedule(self, admin_engine):
        make_schedule(admin_engine, caller=ADMIN)
        assert admin_engine.get_fee_schedule(0).trade_fee_rate == 10

    def test_update_requires_admin(self, admin_engine):
        make_schedule(admin_engine, caller=ADMIN)
        with pytest.raises(Unauthorized):
            admin_engine.update_fee_schedule(0, caller=ALICE, disable_create_pool=True)
        assert not admin_engine.get_fee_schedule(0).disable_create_pool

    def test_pool_operations_need_no_admin(self, admin_engine):
        """Anyone may create pools and trade on an admin-restricted engine."""
        make_schedule(admin_engine, caller=ADMIN)
        pool = make_pool(admin_engine)
        fund(admin_engine, BOB, TOKEN_A)
        admin_engine.swap_base_input(BOB, pool.address, TOKEN_A, 1_000_000, 0)

    def test_status_requires_admin(self, admin_engine):
        make_schedule(admin_engine, caller=ADMIN)
        pool = make_pool(admin_engine)
        with pytest.raises(Unauthorized):
            admin_engine.set_pool_status(pool.address, PoolStatus.SWAP_DISABLED, caller=ALICE)
        admin_engine.set_pool_status(pool.address, PoolStatus.SWAP_DISABLED, caller=ADMIN)
        assert pool.status == PoolStatus.SWAP_DISABLED

    def test_collect_requires_admin(self, admin_engine):
        make_schedule(admin_engine, caller=ADMIN)
        pool = make_pool(admin_engine)
        with pytest.raises(Unauthorized):
            admin_engine.collect_protocol_fee(pool.address, ALICE, MAX, MAX, caller=ALICE)
        with pytest.raises(Unauthorized):
            admin_engine.collect_fund_fee(pool.address, ALICE, MAX, MAX, caller=ALICE)


class TestFeeSchedules:
    """Tests for schedule management through the engine."""

    def test_duplicate_index(self, engine, schedule):
        with pytest.raises(AlreadyExists):
            make_schedule(engine, index=schedule.index, trade_fee_rate=99)
        assert engine.get_fee_schedule(schedule.index) == schedule


class TestPoolStatus:
    """Tests for set_pool_status."""

    def test_combined_flags(self, engine, pool):
        engine.set_pool_status(pool.address, 3)
        assert not pool.status.allows_deposit()
        assert not pool.status.allows_withdraw()
        assert pool.status.allows_swap()

    @pytest.mark.parametrize("bits", [8, -1, 15])
    def test_unknown_bits_rejected(self, engine, pool, bits):
        with pytest.raises(InvalidAmount):
            engine.set_pool_status(pool.address, bits)
        assert pool.status == PoolStatus.NORMAL


class TestFeeCollection:
    """Tests for collecting accrued protocol and fund fees."""

    @pytest.fixture
    def traded_pool(self, engine, pool):
        """Pool after one 1e9 swap in each direction."""
        engine.swap_base_input(BOB, pool.address, TOKEN_A, 1_000_000_000, 0)
        engine.swap_base_input(BOB, pool.address, TOKEN_B, 1_000_000_000, 0)
        return pool

    def test_collect_protocol_fee(self, engine, traded_pool):
        reserves_before = engine.reserves(traded_pool)
        accrued = (traded_pool.protocol_fees_token_0, traded_pool.protocol_fees_token_1)

        collected = engine.collect_protocol_fee(traded_pool.address, TREASURY, MAX, MAX)

        assert collected == accrued
        assert engine.ledger.balance(TREASURY, TOKEN_A) == accrued[0]
        assert traded_pool.protocol_fees_token_0 == 0
        assert traded_pool.protocol_fees_token_1 == 0
        assert engine.reserves(traded_pool) == reserves_before

    def test_collect_fund_fee_partial(self, engine, traded_pool):
        fund_0 = traded_pool.fund_fees_token_0
        collected = engine.collect_fund_fee(traded_pool.address, TREASURY, 50, 0)
        assert collected == (50, 0)
        assert traded_pool.fund_fees_token_0 == fund_0 - 50
        assert engine.ledger.balance(TREASURY, TOKEN_A) == 50

    def test_collect_nothing_accrued(self, engine, pool):
        assert engine.collect_protocol_fee(pool.address, TREASURY, MAX, MAX) == (0, 0)
        assert engine.vault_balances(pool) == engine.reserves(pool)


class TestObservations:
    """Tests for the per-pool observation ring."""

    def test_written_on_every_operation(self, engine, pool, clock):
        for _ in range(3):
            clock.advance(15)
            engine.swap_base_input(BOB, pool.address, TOKEN_A, 1_000_000, 0)
        engine.deposit(BOB, pool.address, 1_000, MAX, MAX)
        engine.withdraw(ALICE, pool.address, 1_000, 0, 0)

        observations = engine.observations(pool.address)
        assert len(observations) == 6
        assert [o.timestamp for o in observations][-3:] == [clock.now] * 3
        assert (observations[-1].reserve_0, observations[-1].reserve_1) == engine.reserves(pool)

    def test_failed_operation_writes_nothing(self, engine, pool):
        engine.set_pool_status(pool.address, PoolStatus.SWAP_DISABLED)
        with pytest.raises(PoolPaused):
            engine.swap_base_input(BOB, pool.address, TOKEN_A, 1_000_000, 0)
        assert len(engine.observations(pool.address)) == 1

    def test_capacity(self, clock):
        engine = make_engine(clock=clock, observation_capacity=3)
        make_schedule(engine)
        pool = make_pool(engine)
        fund(engine, BOB, TOKEN_A)
        for _ in range(5):
            clock.advance(1)
            engine.swap_base_input(BOB, pool.address, TOKEN_A, 1_000_000, 0)

        observations = engine.observations(pool.address)
        assert len(observations) == 3
        assert [o.timestamp for o in observations] == [clock.now - 2, clock.now - 1, clock.now]


class TestCheckedMath:
    """Tests for mapping arithmetic failures to engine errors."""

    def test_safe_int_error_becomes_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            with checked_math():
                S(1) - 2

    def test_other_errors_pass_through(self):
        with pytest.raises(KeyError):
            with checked_math():
                raise KeyError("x")
