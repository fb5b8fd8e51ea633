"""Protocol constants for the constant-product swap engine.

Centralizes fee denominators, seeds for deterministic addresses and
pool bootstrap parameters.
"""

from cpswap.safe_int import U64_MAX

# Fee rates (trade, protocol, fund) are parts-per-million.
# trade_fee_rate is a fraction of the swapped input; protocol_fee_rate and
# fund_fee_rate are fractions of the collected trade fee.
FEE_RATE_DENOMINATOR = 1_000_000

# Transfer fees configured on a mint are expressed in basis points
MAX_FEE_BASIS_POINTS = 10_000

# LP tokens minted at initialize that are never credited to anyone,
# so the pool can never be withdrawn down to empty reserves
LOCKED_LIQUIDITY = 100

# Number of reserve snapshots kept per pool
OBSERVATION_CAPACITY = 100

# Fee schedule indices are u16
MAX_SCHEDULE_INDEX = 2**16 - 1

MAX_AMOUNT = U64_MAX

# Seeds for deterministic address derivation
AMM_CONFIG_SEED = b"amm_config"
POOL_SEED = b"pool"
POOL_VAULT_SEED = b"pool_vault"
POOL_LP_MINT_SEED = b"pool_lp_mint"
OBSERVATION_SEED = b"observation"
AUTH_SEED = b"vault_and_lp_mint_auth_seed"

# Identity of the program that owns every derived address
PROGRAM_ID = "cpswap11111111111111111111111111111111111111"

# Decimals of every pool LP mint
LP_MINT_DECIMALS = 9

# Native currency used to pay the pool creation fee
NATIVE_MINT = "native"
