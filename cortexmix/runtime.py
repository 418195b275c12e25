"""
Per-agent runtime: wires a Brain to a CapabilityEngine on the host's tick.

The host calls ``tick`` from its frame/update loop. The reasoning call is
never awaited inline; it runs as an asyncio task and its decision is applied
through a done-callback, so a slow provider never stalls the frame.

Lifecycle:
- ``dispose()`` marks the runtime dead. Decisions that land afterwards are
  dropped instead of driving a mover the host has already torn down.
- Pending tasks are kept referenced until they finish so the event loop
  doesn't garbage-collect them mid-flight.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence, Set

from cortexmix.capabilities import CapabilityCommand, CapabilityEngine, Posture, command_from_decision
from cortexmix.cognition import Brain, Dreamer
from cortexmix.logging_utils import log_error, log_info, log_warning
from cortexmix.schemas import Decision, PerceivedEntity, Trigger, Vec3


class AgentRuntime:
    """Owns one agent's brain/engine pair and the tasks between them."""

    def __init__(
        self,
        brain: Brain,
        engine: CapabilityEngine,
        *,
        dreamer: Optional[Dreamer] = None,
        posture: Optional[Posture] = None,
    ) -> None:
        self.brain = brain
        self.engine = engine
        self.dreamer = dreamer
        self.posture = posture
        self.alive = True
        self.last_decision: Optional[Decision] = None
        self.last_command: Optional[CapabilityCommand] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def agent_id(self) -> str:
        return self.brain.agent_id

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def tick(
        self,
        position: Vec3,
        nearby_entities: Sequence[PerceivedEntity],
        current_behavior: str,
        *,
        forward: Optional[Vec3] = None,
        trigger: Trigger = Trigger.PERCEPTION,
    ) -> Optional[asyncio.Task]:
        """Start a cognition cycle in the background.

        Must be called from inside a running event loop. Returns the task, or
        None when the runtime is disposed or the brain is already thinking.
        """
        if not self.alive or self.brain.is_thinking:
            return None

        task = asyncio.get_running_loop().create_task(
            self.brain.update(
                position,
                nearby_entities,
                current_behavior,
                forward=forward,
                trigger=trigger,
            )
        )
        self._track(task)
        task.add_done_callback(self._on_decision)
        return task

    def dream(self, tick: int) -> Optional[asyncio.Task]:
        """Let the dreamer consolidate this agent's memories if it is due."""
        if not self.alive or self.dreamer is None:
            return None
        task = asyncio.get_running_loop().create_task(
            self.dreamer.maybe_consolidate(self.agent_id, self.brain.mixer.hippocampus, tick=tick)
        )
        self._track(task)
        task.add_done_callback(self._on_dream)
        return task

    def frame(self, delta: float) -> None:
        """Per-frame engine update (follow tracking)."""
        if self.alive:
            self.engine.update(delta)

    def dispose(self) -> None:
        """Stop applying decisions. In-flight calls are left to finish and be dropped."""
        self.alive = False
        log_info(f"[Runtime:{self.agent_id}] Disposed with {self.pending} task(s) in flight")

    # ------------------------------------------------------------------
    # Task plumbing
    # ------------------------------------------------------------------

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_decision(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log_error(f"[Runtime:{self.agent_id}] Cognition cycle crashed: {exc}")
            return

        decision: Optional[Decision] = task.result()
        if decision is None:
            return
        if not self.alive:
            log_warning(f"[Runtime:{self.agent_id}] Disposed; ignoring late {decision.action.value} decision")
            return

        command = command_from_decision(decision, posture=self.posture)
        self.last_decision = decision
        self.last_command = command
        self.engine.execute(command)

    def _on_dream(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log_error(f"[Runtime:{self.agent_id}] Consolidation crashed: {exc}")
