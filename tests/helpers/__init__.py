"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Mints, owners and common amounts
- factories: Engine, schedule and pool factory functions
"""

from tests.helpers.constants import (
    ADMIN,
    ALICE,
    BOB,
    FEE_TOKEN,
    FUNDING,
    INIT_AMOUNT,
    START_TIME,
    TOKEN_A,
    TOKEN_B,
    TREASURY,
)
from tests.helpers.factories import FixedClock, fund, make_engine, make_pool, make_schedule

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "FEE_TOKEN",
    "ALICE",
    "BOB",
    "ADMIN",
    "TREASURY",
    "INIT_AMOUNT",
    "FUNDING",
    "START_TIME",
    # Factories
    "FixedClock",
    "fund",
    "make_engine",
    "make_pool",
    "make_schedule",
]
