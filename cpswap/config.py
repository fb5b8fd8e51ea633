"""Engine configuration."""

from dataclasses import dataclass

from cpswap.constants import NATIVE_MINT, OBSERVATION_CAPACITY


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for the pool engine.

    Attributes:
        admin: Owner allowed to manage fee schedules, pool status and fee
            collection. If None, privileged operations are open to any caller.
        fee_collector: Account credited with pool creation fees.
        fee_currency: Mint in which pool creation fees are charged.
        observation_capacity: Number of reserve snapshots kept per pool.
    """

    admin: str | None = None
    fee_collector: str = "DqVhQLWUjQ1HistJLuC5D6fgPs5nFHeKjpohPDzRUJb4"
    fee_currency: str = NATIVE_MINT
    observation_capacity: int = OBSERVATION_CAPACITY


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
