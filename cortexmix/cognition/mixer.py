"""Context mixer: relevance routing and token-budget packing across shards.

The mixer decides which shards make it into a prompt for a given trigger:

1. Ask every registered shard for ``(name, render(), relevance(trigger))``.
2. Drop shards scoring below the relevance threshold, or rendering blank text.
3. Order the rest by relevance, highest first (stable on ties, so
   registration order breaks them).
4. Greedily pack whole sections into the token budget and stop at the first
   section that doesn't fit. A shard is included whole or not at all.
5. Join sections as ``## NAME`` blocks separated by blank lines.

This is a greedy 0/1 knapsack ordered by relevance, not an optimal packing.
Prompt assembly runs on the agent's update path, and a single sort + scan
keeps it cheap and predictable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from cortexmix.config import Config
from cortexmix.logging_utils import debug_enabled, log_deterministic
from cortexmix.oracle import SpatialOracle
from cortexmix.schemas import Trigger

from .shards import (
    AmygdalaShard,
    ContextShard,
    FrontalShard,
    HippocampusShard,
    SocialShard,
    SpatialShard,
    VisualCortexShard,
)


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


@dataclass(frozen=True)
class ShardContribution:
    name: str
    content: str
    relevance: float

    @property
    def tokens(self) -> int:
        return estimate_tokens(self.content)

    def section(self) -> str:
        return f"## {self.name}\n{self.content}"


@dataclass
class RoutingReport:
    """Full record of one routing pass, kept for debugging and tests."""

    trigger: Trigger
    token_budget: int
    included: List[ShardContribution] = field(default_factory=list)
    below_threshold: List[ShardContribution] = field(default_factory=list)
    empty: List[ShardContribution] = field(default_factory=list)
    over_budget: List[ShardContribution] = field(default_factory=list)

    @property
    def tokens_used(self) -> int:
        return sum(contribution.tokens for contribution in self.included)

    def render(self) -> str:
        return "\n\n".join(contribution.section() for contribution in self.included)

    def summary(self) -> str:
        def _names(items: List[ShardContribution]) -> str:
            return ", ".join(f"{c.name}({c.relevance:.2f})" for c in items) or "-"

        return (
            f"trigger={self.trigger.value} tokens={self.tokens_used}/{self.token_budget} "
            f"included=[{_names(self.included)}] "
            f"below_threshold=[{_names(self.below_threshold)}] "
            f"empty=[{_names(self.empty)}] "
            f"over_budget=[{_names(self.over_budget)}]"
        )


class ContextMixer:
    """Owns an agent's six default shards and routes across them per trigger."""

    def __init__(
        self,
        agent_id: str,
        oracle: SpatialOracle,
        *,
        token_budget: Optional[int] = None,
        relevance_threshold: Optional[float] = None,
    ) -> None:
        self.agent_id = agent_id
        self.token_budget = token_budget if token_budget is not None else Config.CONTEXT_TOKEN_BUDGET
        self.relevance_threshold = (
            relevance_threshold
            if relevance_threshold is not None
            else Config.CONTEXT_RELEVANCE_THRESHOLD
        )

        self.visual_cortex = VisualCortexShard()
        self.spatial = SpatialShard(agent_id, oracle)
        self.hippocampus = HippocampusShard()
        self.social = SocialShard()
        self.amygdala = AmygdalaShard()
        self.frontal = FrontalShard()

        # Registration order is the tie-break order for equal relevance
        self._shards: List[ContextShard] = [
            self.visual_cortex,
            self.spatial,
            self.hippocampus,
            self.social,
            self.amygdala,
            self.frontal,
        ]

    def register(self, shard: ContextShard) -> None:
        """Add a custom shard after the built-in ones."""
        if any(existing.name == shard.name for existing in self._shards):
            raise ValueError(f"A shard named '{shard.name}' is already registered")
        self._shards.append(shard)

    def __iter__(self) -> Iterator[ContextShard]:
        return iter(self._shards)

    def route(self, trigger: Trigger, *, spatial_override: Optional[str] = None) -> RoutingReport:
        """Run the routing algorithm and return the full decision record."""
        report = RoutingReport(trigger=trigger, token_budget=self.token_budget)

        candidates: List[ShardContribution] = []
        for shard in self._shards:
            if shard is self.spatial and spatial_override:
                content = spatial_override
            else:
                content = shard.render()
            contribution = ShardContribution(
                name=shard.name,
                content=content,
                relevance=shard.relevance(trigger),
            )
            if contribution.relevance < self.relevance_threshold:
                report.below_threshold.append(contribution)
            elif not contribution.content.strip():
                report.empty.append(contribution)
            else:
                candidates.append(contribution)

        candidates.sort(key=lambda contribution: contribution.relevance, reverse=True)

        used = 0
        for index, contribution in enumerate(candidates):
            if used + contribution.tokens > self.token_budget:
                # Stop at the first section that doesn't fit
                report.over_budget.extend(candidates[index:])
                break
            report.included.append(contribution)
            used += contribution.tokens

        if debug_enabled("DEBUG_CONTEXT"):
            log_deterministic(f"[ContextMixer:{self.agent_id}] {report.summary()}")

        return report

    def build_context(self, trigger: Trigger, *, spatial_override: Optional[str] = None) -> str:
        """Assemble the prompt context for ``trigger``."""
        return self.route(trigger, spatial_override=spatial_override).render()
