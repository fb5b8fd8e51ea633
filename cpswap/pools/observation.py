"""Bounded history of pool reserves.

Each pool owns one ObservationBuffer. The engine appends a snapshot after
every state-changing operation; once the buffer is full the oldest entry
is overwritten. Price consumers only read.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpswap.constants import OBSERVATION_CAPACITY


@dataclass(frozen=True)
class Observation:
    """Reserves of a pool at a point in time."""

    timestamp: int
    reserve_0: int
    reserve_1: int


class ObservationBuffer:
    """Fixed-capacity ring of observations."""

    def __init__(self, capacity: int = OBSERVATION_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"Observation capacity must be positive, got {capacity}")
        self._capacity = capacity
        # Grows to capacity, then wraps; _next is the slot written next
        self._entries: list[Observation] = []
        self._next = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, timestamp: int, reserve_0: int, reserve_1: int) -> Observation:
        """Record a snapshot, overwriting the oldest one when full."""
        observation = Observation(timestamp=timestamp, reserve_0=reserve_0, reserve_1=reserve_1)
        if len(self._entries) < self._capacity:
            self._entries.append(observation)
        else:
            self._entries[self._next] = observation
        self._next = (self._next + 1) % self._capacity
        return observation

    def latest(self) -> Observation | None:
        if not self._entries:
            return None
        return self._entries[self._next - 1]

    def entries(self) -> list[Observation]:
        """Observations from oldest to newest."""
        return self._entries[self._next :] + self._entries[: self._next]
