"""Pool record and status flags."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag

from cpswap.errors import InvalidAmount
from cpswap.pools.observation import ObservationBuffer


class PoolStatus(IntFlag):
    """Per-operation pause bits. A set bit disables that operation class."""

    NORMAL = 0
    DEPOSIT_DISABLED = 1
    WITHDRAW_DISABLED = 2
    SWAP_DISABLED = 4

    @classmethod
    def from_bits(cls, bits: int) -> "PoolStatus":
        """Status from a raw bit set.

        Raises:
            InvalidAmount: If ``bits`` is negative or sets an unknown flag
        """
        known = int(cls.DEPOSIT_DISABLED | cls.WITHDRAW_DISABLED | cls.SWAP_DISABLED)
        if bits < 0 or bits & ~known:
            raise InvalidAmount(f"Invalid pool status bits: {bits}")
        return cls(bits)

    def allows_deposit(self) -> bool:
        return not self & PoolStatus.DEPOSIT_DISABLED

    def allows_withdraw(self) -> bool:
        return not self & PoolStatus.WITHDRAW_DISABLED

    def allows_swap(self) -> bool:
        return not self & PoolStatus.SWAP_DISABLED


@dataclass
class PoolState:
    """Constant-product pool over an ordered mint pair.

    Vault balances live in the token ledger. Reserves are the vault
    balances minus the protocol and fund fees accrued on that side, which
    stay in custody until collected but no longer belong to the pool.
    """

    address: str
    schedule_index: int
    authority: str
    creator: str
    token_0_mint: str
    token_1_mint: str
    token_0_vault: str
    token_1_vault: str
    lp_mint: str
    observation_key: str
    open_time: int
    lp_supply: int = 0
    protocol_fees_token_0: int = 0
    protocol_fees_token_1: int = 0
    fund_fees_token_0: int = 0
    fund_fees_token_1: int = 0
    status: PoolStatus = PoolStatus.NORMAL
    observations: ObservationBuffer = field(default_factory=ObservationBuffer)

    def token_index(self, mint: str) -> int:
        """0 or 1 depending on which side ``mint`` is."""
        if mint == self.token_0_mint:
            return 0
        if mint == self.token_1_mint:
            return 1
        raise InvalidAmount(f"Mint {mint} not in pool {self.address}")

    def mint(self, index: int) -> str:
        return self.token_0_mint if index == 0 else self.token_1_mint

    def vault(self, index: int) -> str:
        return self.token_0_vault if index == 0 else self.token_1_vault

    def accrued_fees(self, index: int) -> int:
        """Protocol plus fund fees held in the vault on this side."""
        if index == 0:
            return self.protocol_fees_token_0 + self.fund_fees_token_0
        return self.protocol_fees_token_1 + self.fund_fees_token_1

    def accrue_fees(self, index: int, protocol_fee: int, fund_fee: int) -> None:
        if index == 0:
            self.protocol_fees_token_0 += protocol_fee
            self.fund_fees_token_0 += fund_fee
        else:
            self.protocol_fees_token_1 += protocol_fee
            self.fund_fees_token_1 += fund_fee
