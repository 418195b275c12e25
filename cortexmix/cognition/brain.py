"""Per-agent brain: the orchestrator of one cognition cycle.

A cycle runs: guard -> assemble context -> reasoning call -> parse -> feed
back into the agent's own shards. The brain is a two-state machine:

    IDLE      no call in flight; ``update`` may start one
    AWAITING  a call is in flight; ``update`` returns None immediately

Every failure resolves to "no decision this cycle":
- rate limiter empty        silent skip (not an error)
- call already in flight    silent skip (reentrancy guard)
- transport/empty response  logged, state reset to IDLE, None returned
- unparseable response      WAIT decision carrying the raw text

The brain never schedules its own retry. Hosts call ``update`` on their own
cadence and a skipped cycle is simply retried on the next one.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

from cortexmix.errors import EmptyResponseError
from cortexmix.logging_utils import debug_enabled, log_error, log_llm, log_success, log_warning
from cortexmix.rate_limiter import RateLimiter
from cortexmix.schemas import Decision, DecisionAction, MemoryKind, PerceivedEntity, Trigger, Vec3

from .mixer import ContextMixer
from .parsing import Structured, parse_response, to_decision
from .prompts import DEFAULT_PROMPTS, PromptTemplate


# Decisions that physically move the agent raise arousal slightly
_MOVEMENT_ACTIONS = {DecisionAction.MOVE_TO, DecisionAction.FOLLOW, DecisionAction.WANDER}


class DecisionGenerator(Protocol):
    """The external reasoning call, treated as a black box returning text."""

    async def generate_decision(self, system_prompt: str, user_prompt: str) -> str:
        ...


class BrainPhase(str, Enum):
    IDLE = "IDLE"
    AWAITING = "AWAITING"


@dataclass
class BrainState:
    thought: str = "Initializing neural pathways..."
    phase: BrainPhase = BrainPhase.IDLE
    last_thought_time: float = 0.0
    memo: Optional[str] = None
    # Advanced by the host whenever behavior changes outside the brain
    epoch: int = 0


def format_position(position: Vec3) -> str:
    return f"{{x: {position.x:.1f}, y: {position.y:.1f}, z: {position.z:.1f}}}"


class Brain:
    """Rate-limited, reentrancy-guarded decision loop for a single agent."""

    def __init__(
        self,
        agent_id: str,
        *,
        mixer: ContextMixer,
        rate_limiter: RateLimiter,
        generator: DecisionGenerator,
        template: Optional[PromptTemplate] = None,
        clock: Optional[Callable[[], float]] = None,
        drop_stale: bool = True,
    ) -> None:
        self.agent_id = agent_id
        self.mixer = mixer
        self.rate_limiter = rate_limiter
        self.generator = generator
        self.template = template or DEFAULT_PROMPTS.get("decide")
        self.drop_stale = drop_stale
        self._clock = clock or time.time
        self.state = BrainState()

    @property
    def is_thinking(self) -> bool:
        return self.state.phase is BrainPhase.AWAITING

    def advance_epoch(self) -> int:
        """Mark the agent's behavior as changed; in-flight decisions become stale."""
        self.state.epoch += 1
        return self.state.epoch

    async def update(
        self,
        position: Vec3,
        nearby_entities: Sequence[PerceivedEntity],
        current_behavior: str,
        *,
        forward: Optional[Vec3] = None,
        trigger: Trigger = Trigger.PERCEPTION,
    ) -> Optional[Decision]:
        """Run one cognition cycle.

        The visual cortex is refreshed from ``nearby_entities`` first. With a
        ``forward`` vector the field-of-view cone applies; without one only
        the range limit does.
        """

        # Reentrancy + backpressure guard. Must run before the first await so
        # a second call scheduled in the same loop iteration sees AWAITING.
        if self.state.phase is BrainPhase.AWAITING or not self.rate_limiter.try_consume():
            return None

        self.state.phase = BrainPhase.AWAITING
        issued_epoch = self.state.epoch
        try:
            self.mixer.visual_cortex.update(nearby_entities, forward)
            context = self.mixer.build_context(trigger)
            prompt = self.template.render(
                position=format_position(position),
                behavior=current_behavior,
                context=context,
            )

            log_llm(
                f"[Brain:{self.agent_id}] Thinking... "
                f"(trigger={trigger.value}, tokens left: {self.rate_limiter.get_tokens_remaining()})"
            )
            if debug_enabled("DEBUG_LLM"):
                print(f"\n{'='*80}\n[BRAIN PROMPT] Agent: {self.agent_id}\n{'-'*80}")
                print(prompt.user)
                print(f"{'='*80}\n")

            raw = await self.generator.generate_decision(prompt.system, prompt.user)
            if not raw or not raw.strip():
                raise EmptyResponseError("Empty response from reasoning call")
        except Exception as exc:
            log_error(f"[Brain:{self.agent_id}] Failed to think: {exc}")
            return None
        finally:
            # Never leave the guard stuck in AWAITING
            self.state.phase = BrainPhase.IDLE

        parsed = parse_response(raw)
        decision = to_decision(parsed)
        if not isinstance(parsed, Structured):
            log_warning(f"[Brain:{self.agent_id}] Failed to parse JSON, raw text used.")

        if self.drop_stale and self.state.epoch != issued_epoch:
            log_warning(
                f"[Brain:{self.agent_id}] Discarding stale {decision.action.value} decision "
                f"(issued at epoch {issued_epoch}, now {self.state.epoch})"
            )
            return None

        self._absorb(decision, structured=isinstance(parsed, Structured))
        log_success(f"[Brain:{self.agent_id}] Decided: {decision.action.value} ({decision.thought[:80]})")
        return decision

    def _absorb(self, decision: Decision, *, structured: bool) -> None:
        """Copy the decision's thought/memo into brain state and shards."""
        self.state.thought = decision.thought or "Processing..."
        self.state.last_thought_time = self._clock()
        if decision.memo:
            self.state.memo = decision.memo

        if structured:
            summary = f"I decided to {decision.action.value}"
            if decision.target_id:
                summary += f" ({decision.target_id})"
            if decision.thought:
                summary += f": {decision.thought}"
            self.mixer.hippocampus.add_memory(summary, MemoryKind.ACTION, importance=0.4)
            arousal = 0.02 if decision.action in _MOVEMENT_ACTIONS else -0.01
            self.mixer.amygdala.update(0.0, arousal)
        else:
            # Confused replies sour the mood a little
            self.mixer.amygdala.update(-0.02, 0.0)
