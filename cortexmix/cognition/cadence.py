"""Tick cadences for background cognition (memory consolidation).

The host owns the tick counter; cadences only answer "is this tick due?".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


DEFAULT_OFFSET = 1
"""Default tick offset so cadence aligns with tick=1 runs."""


@dataclass(frozen=True)
class TickInterval:
    """Represents an ``every N ticks`` cadence with an optional offset."""

    every: int = 1
    offset: int = DEFAULT_OFFSET

    def is_due(self, *, tick: int, last_run_tick: Optional[int]) -> bool:
        """Return ``True`` when the cadence fires on this tick."""

        if self.every <= 0:
            return True

        if last_run_tick is not None and tick <= last_run_tick:
            return False

        return ((tick - self.offset) % self.every) == 0


@dataclass(frozen=True)
class ConsolidationCadence:
    """When the dreamer should collapse a hippocampus into a summary."""

    interval: TickInterval = field(default_factory=lambda: TickInterval(every=10))
    # Skip consolidation until the memory list holds at least this many entries
    min_memories: int = 3

    def should_consolidate(
        self,
        *,
        tick: int,
        last_run_tick: Optional[int],
        memory_count: int,
    ) -> bool:
        if memory_count < self.min_memories:
            return False
        return self.interval.is_due(tick=tick, last_run_tick=last_run_tick)
