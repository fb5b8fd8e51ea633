"""Pool records, observations and deterministic addresses."""

from .addresses import (
    authority_address,
    derive_address,
    fee_schedule_address,
    lp_mint_address,
    observation_address,
    pool_address,
    sort_mints,
    vault_address,
)
from .observation import Observation, ObservationBuffer
from .state import PoolState, PoolStatus

__all__ = [
    "PoolState",
    "PoolStatus",
    "Observation",
    "ObservationBuffer",
    "derive_address",
    "sort_mints",
    "fee_schedule_address",
    "authority_address",
    "pool_address",
    "vault_address",
    "lp_mint_address",
    "observation_address",
]
