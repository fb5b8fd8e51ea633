"""Fee schedules and their registry.

A fee schedule is addressed by a u16 index. Its trade fee is charged on
every swap input; the protocol and fund rates carve their share out of
that trade fee rather than adding to it. Whatever is not carved out stays
in the pool and accrues to liquidity providers.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace

import structlog

from cpswap.constants import FEE_RATE_DENOMINATOR, MAX_AMOUNT, MAX_SCHEDULE_INDEX
from cpswap.errors import AlreadyExists, InvalidAmount, InvalidFeeSplit, NotFound
from cpswap.pools.addresses import fee_schedule_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeeSchedule:
    """Fee configuration shared by every pool created against it.

    Attributes:
        index: Registry index (0..65535)
        trade_fee_rate: Fee on swap input, parts-per-million
        protocol_fee_rate: Share of the trade fee accrued to the protocol, ppm
        fund_fee_rate: Share of the trade fee accrued to the fund, ppm
        create_pool_fee: Flat amount charged once per initialized pool
        disable_create_pool: If True, no new pools may reference this schedule
    """

    index: int
    trade_fee_rate: int
    protocol_fee_rate: int
    fund_fee_rate: int
    create_pool_fee: int = 0
    disable_create_pool: bool = False

    @property
    def address(self) -> str:
        return fee_schedule_address(self.index)


def validate_fee_schedule(schedule: FeeSchedule) -> None:
    """Check index, rate ranges and the carve-out split.

    Raises:
        InvalidAmount: If the index or the creation fee is out of range
        InvalidFeeSplit: If a rate is out of range or the carve-outs
            add up to more than the whole trade fee
    """
    if not 0 <= schedule.index <= MAX_SCHEDULE_INDEX:
        raise InvalidAmount(f"Schedule index out of range: {schedule.index}")
    if not 0 <= schedule.create_pool_fee <= MAX_AMOUNT:
        raise InvalidAmount(f"Create pool fee out of range: {schedule.create_pool_fee}")

    rates = {
        "trade_fee_rate": schedule.trade_fee_rate,
        "protocol_fee_rate": schedule.protocol_fee_rate,
        "fund_fee_rate": schedule.fund_fee_rate,
    }
    for name, rate in rates.items():
        if rate < 0:
            raise InvalidFeeSplit(f"{name} cannot be negative: {rate}")

    if schedule.trade_fee_rate >= FEE_RATE_DENOMINATOR:
        raise InvalidFeeSplit(
            f"trade_fee_rate must be below {FEE_RATE_DENOMINATOR}, got {schedule.trade_fee_rate}"
        )
    if schedule.protocol_fee_rate + schedule.fund_fee_rate > FEE_RATE_DENOMINATOR:
        raise InvalidFeeSplit(
            f"protocol_fee_rate + fund_fee_rate exceeds {FEE_RATE_DENOMINATOR}: "
            f"{schedule.protocol_fee_rate} + {schedule.fund_fee_rate}"
        )


class FeeScheduleRegistry:
    """Fee schedules keyed by index.

    Schedules are created once per index. ``update`` is the privileged
    path for changing one afterwards; access control is the engine's job.
    """

    def __init__(self) -> None:
        self._schedules: dict[int, FeeSchedule] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._schedules)

    def __contains__(self, index: object) -> bool:
        return index in self._schedules

    def create(
        self,
        index: int,
        trade_fee_rate: int,
        protocol_fee_rate: int,
        fund_fee_rate: int,
        create_pool_fee: int = 0,
    ) -> FeeSchedule:
        """Create the schedule at ``index``.

        Raises:
            AlreadyExists: If ``index`` is taken (the existing schedule is kept)
            InvalidFeeSplit: If the rates are invalid
            InvalidAmount: If the index or creation fee is out of range
        """
        schedule = FeeSchedule(
            index=index,
            trade_fee_rate=trade_fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            fund_fee_rate=fund_fee_rate,
            create_pool_fee=create_pool_fee,
        )
        validate_fee_schedule(schedule)

        with self._lock:
            if index in self._schedules:
                raise AlreadyExists(f"Fee schedule {index} already exists")
            self._schedules[index] = schedule

        logger.info(
            "fee_schedule_created",
            index=index,
            address=schedule.address,
            trade_fee_rate=trade_fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            fund_fee_rate=fund_fee_rate,
            create_pool_fee=create_pool_fee,
        )
        return schedule

    def update(self, index: int, **changes: int | bool) -> FeeSchedule:
        """Replace fields of an existing schedule.

        Args:
            index: Schedule to update
            **changes: Any of trade_fee_rate, protocol_fee_rate, fund_fee_rate,
                create_pool_fee, disable_create_pool

        Raises:
            NotFound: If no schedule exists at ``index``
            InvalidAmount: If an unknown field is given
        """
        allowed = {
            "trade_fee_rate",
            "protocol_fee_rate",
            "fund_fee_rate",
            "create_pool_fee",
            "disable_create_pool",
        }
        unknown = set(changes) - allowed
        if unknown:
            raise InvalidAmount(f"Unknown fee schedule fields: {sorted(unknown)}")

        with self._lock:
            current = self.get(index)
            updated = replace(current, **changes)  # type: ignore[arg-type]
            validate_fee_schedule(updated)
            self._schedules[index] = updated

        logger.info("fee_schedule_updated", index=index, changes=changes)
        return updated

    def get(self, index: int) -> FeeSchedule:
        """Look up a schedule by index.

        Raises:
            NotFound: If no schedule exists at ``index``
        """
        schedule = self._schedules.get(index)
        if schedule is None:
            raise NotFound(f"Fee schedule {index} not found")
        return schedule

    def get_by_address(self, address: str) -> FeeSchedule:
        """Look up a schedule by its derived address."""
        for schedule in self._schedules.values():
            if schedule.address == address:
                return schedule
        raise NotFound(f"Fee schedule at {address} not found")

    def all(self) -> list[FeeSchedule]:
        return [self._schedules[index] for index in sorted(self._schedules)]
