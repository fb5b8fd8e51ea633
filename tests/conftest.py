"""Pytest configuration and fixtures."""

import pytest

from cpswap.engine import PoolEngine
from cpswap.fees.schedule import FeeSchedule
from cpswap.pools.state import PoolState
from tests.helpers import ALICE, BOB, FEE_TOKEN, TOKEN_A, TOKEN_B, fund
from tests.helpers.factories import FixedClock, make_engine, make_pool, make_schedule


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed at START_TIME, advanced explicitly by tests."""
    return FixedClock()


@pytest.fixture
def engine(clock: FixedClock) -> PoolEngine:
    """Engine with TOKEN_A, TOKEN_B and FEE_TOKEN registered."""
    return make_engine(clock=clock)


@pytest.fixture
def schedule(engine: PoolEngine) -> FeeSchedule:
    """Fee schedule 0 with the default test rates."""
    return make_schedule(engine)


@pytest.fixture
def pool(engine: PoolEngine, schedule: FeeSchedule) -> PoolState:
    """TOKEN_A/TOKEN_B pool seeded with 1e10 of each by ALICE; BOB funded."""
    created = make_pool(engine, TOKEN_A, TOKEN_B)
    fund(engine, BOB, TOKEN_A, TOKEN_B)
    fund(engine, ALICE, TOKEN_A, TOKEN_B)
    return created


@pytest.fixture
def fee_pool(engine: PoolEngine, schedule: FeeSchedule) -> PoolState:
    """TOKEN_A/FEE_TOKEN pool seeded with 1e10 of each by ALICE; BOB funded."""
    created = make_pool(engine, TOKEN_A, FEE_TOKEN)
    fund(engine, BOB, TOKEN_A, FEE_TOKEN)
    fund(engine, ALICE, TOKEN_A, FEE_TOKEN)
    return created
