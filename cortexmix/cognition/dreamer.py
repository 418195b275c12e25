"""Dreamer: the external process that consolidates short-term memory.

The hippocampus never decides when to consolidate. The dreamer does, on a
tick cadence: it reads the current memories, asks a summarizer (normally the
reasoning model) for one sentence, and replaces the list with that summary.

Consolidation spends a token from the shared rate limiter like any other
reasoning call, and is skipped silently when the bucket is empty. Summarizer
failures are logged and leave the memories untouched.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol

from cortexmix.logging_utils import log_error, log_llm, log_success
from cortexmix.rate_limiter import RateLimiter
from cortexmix.schemas import MemoryEntry

from .cadence import ConsolidationCadence
from .prompts import DEFAULT_PROMPTS, PromptTemplate
from .shards import HippocampusShard


class MemorySummarizer(Protocol):
    async def summarize(self, system_prompt: str, user_prompt: str) -> str:
        ...


class Dreamer:
    """Periodically collapses agents' hippocampi into summary entries."""

    def __init__(
        self,
        summarizer: MemorySummarizer,
        *,
        rate_limiter: Optional[RateLimiter] = None,
        cadence: Optional[ConsolidationCadence] = None,
        template: Optional[PromptTemplate] = None,
    ) -> None:
        self.summarizer = summarizer
        self.rate_limiter = rate_limiter
        self.cadence = cadence or ConsolidationCadence()
        self.template = template or DEFAULT_PROMPTS.get("consolidate")
        # agent_id -> last tick a consolidation ran
        self._last_run: Dict[str, int] = {}

    def last_run_tick(self, agent_id: str) -> Optional[int]:
        return self._last_run.get(agent_id)

    async def maybe_consolidate(
        self,
        agent_id: str,
        hippocampus: HippocampusShard,
        *,
        tick: int,
    ) -> Optional[MemoryEntry]:
        """Consolidate ``hippocampus`` if the cadence says this tick is due."""
        if not self.cadence.should_consolidate(
            tick=tick,
            last_run_tick=self._last_run.get(agent_id),
            memory_count=len(hippocampus),
        ):
            return None
        if self.rate_limiter is not None and not self.rate_limiter.try_consume():
            return None
        return await self.consolidate(agent_id, hippocampus, tick=tick)

    async def consolidate(
        self,
        agent_id: str,
        hippocampus: HippocampusShard,
        *,
        tick: int,
    ) -> Optional[MemoryEntry]:
        """Summarize and replace the memories now, ignoring the cadence."""
        memories = hippocampus.memories()
        if not memories:
            return None

        listing = "\n".join(f"- [{memory.kind.value}] {memory.content}" for memory in memories)
        prompt = self.template.render(memories=listing)
        log_llm(f"[Dreamer:{agent_id}] Consolidating {len(memories)} memories...")
        try:
            summary = (await self.summarizer.summarize(prompt.system, prompt.user)).strip()
        except Exception as exc:
            log_error(f"[Dreamer:{agent_id}] Consolidation failed: {exc}")
            return None

        if not summary:
            log_error(f"[Dreamer:{agent_id}] Summarizer returned nothing; memories kept")
            return None

        self._last_run[agent_id] = tick
        entry = hippocampus.consolidate(summary)
        log_success(f"[Dreamer:{agent_id}] Memories consolidated at tick {tick}")
        return entry
