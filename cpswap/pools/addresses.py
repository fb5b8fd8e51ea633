"""Deterministic addresses for engine-owned accounts.

Every account the engine owns is addressed by a pure function of the
program identity and a list of seeds, so callers can locate a schedule,
a pool or a vault without querying anything:

    schedule    = derive(AMM_CONFIG_SEED, index)
    pool        = derive(POOL_SEED, schedule, mint0, mint1)   # mint0 < mint1
    vault       = derive(POOL_VAULT_SEED, pool, mint)
    lp mint     = derive(POOL_LP_MINT_SEED, pool)
    observation = derive(OBSERVATION_SEED, pool)
    authority   = derive(AUTH_SEED)
"""

from __future__ import annotations

import hashlib

from cpswap.constants import (
    AMM_CONFIG_SEED,
    AUTH_SEED,
    OBSERVATION_SEED,
    POOL_LP_MINT_SEED,
    POOL_SEED,
    POOL_VAULT_SEED,
    PROGRAM_ID,
)


def derive_address(*seeds: bytes | str, program_id: str = PROGRAM_ID) -> str:
    """Hash the program id and length-prefixed seeds into a 0x-prefixed address."""
    hasher = hashlib.sha256()
    hasher.update(program_id.encode())
    for seed in seeds:
        raw = seed.encode() if isinstance(seed, str) else seed
        hasher.update(len(raw).to_bytes(4, "big"))
        hasher.update(raw)
    return "0x" + hasher.hexdigest()


def sort_mints(mint_a: str, mint_b: str) -> tuple[str, str]:
    """Canonical (mint0, mint1) order of a pair."""
    if mint_a <= mint_b:
        return mint_a, mint_b
    return mint_b, mint_a


def fee_schedule_address(index: int) -> str:
    return derive_address(AMM_CONFIG_SEED, index.to_bytes(2, "big"))


def authority_address() -> str:
    """Single authority owning every vault and LP mint."""
    return derive_address(AUTH_SEED)


def pool_address(schedule_address: str, mint_a: str, mint_b: str) -> str:
    """Pool address for a mint pair; (A, B) and (B, A) resolve to the same pool."""
    mint0, mint1 = sort_mints(mint_a, mint_b)
    return derive_address(POOL_SEED, schedule_address, mint0, mint1)


def vault_address(pool: str, mint: str) -> str:
    return derive_address(POOL_VAULT_SEED, pool, mint)


def lp_mint_address(pool: str) -> str:
    return derive_address(POOL_LP_MINT_SEED, pool)


def observation_address(pool: str) -> str:
    return derive_address(OBSERVATION_SEED, pool)
