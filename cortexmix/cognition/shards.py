"""Context shards: independent, stateful providers of prompt context.

Each shard owns its own state, renders itself to text, and scores its own
relevance for a trigger. The mixer only ever reads ``render()`` and
``relevance()``; it never reaches into shard internals.

Shard names double as section headers in the assembled prompt:

    PERCEPTION  VisualCortexShard  what the agent can currently see
    LOCATION    SpatialShard       grounded facts from the spatial oracle
    MEMORY      HippocampusShard   bounded recent-memory list
    SOCIAL      SocialShard        relationship ledger + current focus
    EMOTIONAL   AmygdalaShard      valence/arousal with passive decay
    GOALS       FrontalShard       priority-ordered goal list

Rendering never reads the clock or a random source, so a fixed shard state
always renders to the same text.
"""

from __future__ import annotations

import itertools
import math
import time
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from cortexmix.oracle import SpatialOracle
from cortexmix.schemas import (
    ActiveGoal,
    EmotionalState,
    MemoryEntry,
    MemoryKind,
    PerceivedEntity,
    Relationship,
    Trigger,
    Vec3,
)


Clock = Callable[[], float]


@runtime_checkable
class ContextShard(Protocol):
    """Anything the mixer can route: a name, a rendering and a relevance score."""

    name: str

    def render(self) -> str:
        ...

    def relevance(self, trigger: Trigger) -> float:
        """Score in [0, 1]. Must be a pure function of shard state + trigger."""
        ...


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _lookup(table: Mapping[Trigger, float], trigger: Trigger, default: float) -> float:
    return table.get(trigger, default)


# ============================================================================
# PERCEPTION
# ============================================================================


class VisualCortexShard:
    """Nearby entities inside the agent's field of view and range."""

    name = "PERCEPTION"
    EMPTY_TEXT = "No entities in sight."
    RELEVANCE: Dict[Trigger, float] = {
        Trigger.PERCEPTION: 1.0,
        Trigger.SOCIAL: 0.8,
    }
    DEFAULT_RELEVANCE = 0.1

    def __init__(
        self,
        *,
        max_entities: int = 5,
        fov_degrees: float = 120.0,
        max_range: float = 20.0,
    ) -> None:
        self.max_entities = max_entities
        self.fov_degrees = fov_degrees
        self.max_range = max_range
        self._entities: List[PerceivedEntity] = []

    @property
    def entities(self) -> List[PerceivedEntity]:
        return list(self._entities)

    def update(self, entities: Iterable[PerceivedEntity], forward: Optional[Vec3] = None) -> None:
        """Replace the visible set from this tick's perception pass.

        Without ``forward`` only the range limit applies.
        """
        visible = [entity for entity in entities if entity.distance <= self.max_range]
        if forward is not None:
            fov_cos = math.cos(math.radians(self.fov_degrees / 2))
            facing = forward.normalized()
            visible = [entity for entity in visible if facing.dot(entity.direction.normalized()) >= fov_cos]
        # sorted() is stable: equal distances keep the host's order
        visible = sorted(visible, key=lambda entity: entity.distance)
        self._entities = visible[: self.max_entities]

    def render(self) -> str:
        if not self._entities:
            return self.EMPTY_TEXT
        rows = [
            f"| {entity.kind.value} | {entity.name or entity.id} | {entity.distance:.1f}m |"
            for entity in self._entities
        ]
        return "| Type | Name | Dist |\n|---|---|---|\n" + "\n".join(rows)

    def relevance(self, trigger: Trigger) -> float:
        return _lookup(self.RELEVANCE, trigger, self.DEFAULT_RELEVANCE)


# ============================================================================
# MEMORY
# ============================================================================


class HippocampusShard:
    """Bounded most-recent-first memory list.

    The list never exceeds ``capacity``: new entries are prepended and the
    oldest falls off. ``consolidate`` collapses the list into a single
    summary entry; the decision of *when* to consolidate belongs to an
    external process (see ``cortexmix.cognition.dreamer``).
    """

    name = "MEMORY"
    EMPTY_TEXT = "No recent memories."
    SUMMARY_IMPORTANCE = 0.8
    RELEVANCE: Dict[Trigger, float] = {
        Trigger.MEMORY_RECALL: 1.0,
        Trigger.SOCIAL: 0.7,
        Trigger.GOAL_CHECK: 0.5,
    }
    DEFAULT_RELEVANCE = 0.3

    def __init__(self, *, capacity: int = 5, clock: Optional[Clock] = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._clock = clock or time.time
        self._memories: List[MemoryEntry] = []
        # Monotonic counter keeps ids unique even when the clock doesn't move
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._memories)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    def add_memory(
        self,
        content: str,
        kind: MemoryKind = MemoryKind.OBSERVATION,
        importance: float = 0.5,
    ) -> MemoryEntry:
        entry = MemoryEntry(
            id=self._next_id("mem"),
            timestamp=self._clock(),
            content=content,
            importance=_clamp(importance, 0.0, 1.0),
            kind=kind,
        )
        self._memories.insert(0, entry)
        del self._memories[self.capacity:]
        return entry

    def memories(self) -> List[MemoryEntry]:
        """Copy of the current list, most recent first."""
        return list(self._memories)

    def consolidate(self, summary: str) -> Optional[MemoryEntry]:
        """Replace every entry with one summary. No-op when there is nothing to summarize."""
        if not self._memories:
            return None
        entry = MemoryEntry(
            id=self._next_id("summary"),
            timestamp=self._clock(),
            content=summary,
            importance=self.SUMMARY_IMPORTANCE,
            kind=MemoryKind.SUMMARY,
        )
        self._memories = [entry]
        return entry

    def render(self) -> str:
        if not self._memories:
            return self.EMPTY_TEXT
        return "\n".join(f"- {memory.content}" for memory in self._memories)

    def relevance(self, trigger: Trigger) -> float:
        return _lookup(self.RELEVANCE, trigger, self.DEFAULT_RELEVANCE)


# ============================================================================
# SOCIAL
# ============================================================================


class SocialShard:
    """Relationship ledger plus the entity the agent is currently engaged with.

    Renders nothing (and scores zero) unless an interaction focus is set, so
    social context never leaks into unrelated triggers.
    """

    name = "SOCIAL"
    NEW_FAMILIARITY = 0.1
    NEUTRAL_SENTIMENT = 0.5
    FAMILIARITY_STEP = 0.05

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock = clock or time.time
        self._relationships: Dict[str, Relationship] = {}
        self.current_interaction: Optional[str] = None

    def set_current_interaction(self, entity_id: Optional[str]) -> None:
        self.current_interaction = entity_id

    def get_relationship(self, entity_id: str) -> Optional[Relationship]:
        relationship = self._relationships.get(entity_id)
        return relationship.model_copy() if relationship is not None else None

    def update_relationship(
        self,
        entity_id: str,
        name: str,
        sentiment_delta: float = 0.0,
    ) -> Relationship:
        now = self._clock()
        existing = self._relationships.get(entity_id)
        if existing is None:
            relationship = Relationship(
                entity_id=entity_id,
                name=name,
                familiarity=self.NEW_FAMILIARITY,
                sentiment=_clamp(self.NEUTRAL_SENTIMENT + sentiment_delta, -1.0, 1.0),
                last_interaction=now,
                interaction_count=1,
            )
        else:
            relationship = existing.model_copy(
                update={
                    "sentiment": _clamp(existing.sentiment + sentiment_delta, -1.0, 1.0),
                    "familiarity": min(1.0, existing.familiarity + self.FAMILIARITY_STEP),
                    "last_interaction": now,
                    "interaction_count": existing.interaction_count + 1,
                }
            )
        self._relationships[entity_id] = relationship
        return relationship.model_copy()

    def render(self) -> str:
        if not self.current_interaction:
            return ""
        relationship = self._relationships.get(self.current_interaction)
        if relationship is None:
            return "Speaking with: Unknown entity."

        if relationship.familiarity > 0.7:
            familiarity = "close friend"
        elif relationship.familiarity > 0.3:
            familiarity = "acquaintance"
        else:
            familiarity = "stranger"

        if relationship.sentiment > 0.5:
            sentiment = "friendly"
        elif relationship.sentiment > 0:
            sentiment = "neutral"
        else:
            sentiment = "unfriendly"

        return (
            f"Speaking with: {relationship.name} ({familiarity}, {sentiment}). "
            f"Met {relationship.interaction_count} times."
        )

    def relevance(self, trigger: Trigger) -> float:
        if not self.current_interaction:
            return 0.0
        return 1.0 if trigger is Trigger.SOCIAL else 0.4


# ============================================================================
# EMOTIONAL
# ============================================================================


class AmygdalaShard:
    """Valence/arousal mood that drifts back toward neutral on every update."""

    name = "EMOTIONAL"
    NEUTRAL_VALENCE = 0.5
    NEUTRAL_AROUSAL = 0.3
    VALENCE_DECAY = 0.01
    AROUSAL_DECAY = 0.02

    def __init__(self, state: Optional[EmotionalState] = None) -> None:
        initial = state or EmotionalState()
        self._valence = initial.valence
        self._arousal = initial.arousal

    @property
    def state(self) -> EmotionalState:
        return EmotionalState(valence=self._valence, arousal=self._arousal)

    def update(self, valence_delta: float = 0.0, arousal_delta: float = 0.0) -> EmotionalState:
        self._valence = _clamp(self._valence + valence_delta, 0.0, 1.0)
        self._arousal = _clamp(self._arousal + arousal_delta, 0.0, 1.0)
        # Passive decay toward neutral; stays inside [0, 1] since it interpolates
        self._valence += (self.NEUTRAL_VALENCE - self._valence) * self.VALENCE_DECAY
        self._arousal += (self.NEUTRAL_AROUSAL - self._arousal) * self.AROUSAL_DECAY
        return self.state

    def render(self) -> str:
        if self._valence > 0.6:
            mood = "content"
        elif self._valence < 0.4:
            mood = "uneasy"
        else:
            mood = "neutral"

        if self._arousal > 0.6:
            energy = "alert"
        elif self._arousal < 0.3:
            energy = "calm"
        else:
            energy = "relaxed"

        return f"Mood: {mood}, Energy: {energy}"

    def relevance(self, trigger: Trigger) -> float:
        return 0.2


# ============================================================================
# GOALS
# ============================================================================


class FrontalShard:
    """Priority-ordered goals. Only the top goal is rendered."""

    name = "GOALS"
    EMPTY_TEXT = "No active goals."
    RELEVANCE: Dict[Trigger, float] = {
        Trigger.GOAL_CHECK: 1.0,
        Trigger.IDLE_THOUGHT: 0.6,
    }
    DEFAULT_RELEVANCE = 0.3

    def __init__(self) -> None:
        self._goals: List[ActiveGoal] = []
        self._ids = itertools.count(1)

    @property
    def goals(self) -> List[ActiveGoal]:
        return [goal.model_copy() for goal in self._goals]

    def _sort(self) -> None:
        # Stable: equal priorities keep insertion order
        self._goals.sort(key=lambda goal: goal.priority, reverse=True)

    def set_goals(self, goals: Iterable[ActiveGoal]) -> None:
        self._goals = [goal.model_copy() for goal in goals]
        self._sort()

    def add_goal(self, description: str, priority: float = 0.5) -> ActiveGoal:
        goal = ActiveGoal(id=f"goal_{next(self._ids)}", description=description, priority=priority)
        self._goals.append(goal)
        self._sort()
        return goal.model_copy()

    def update_progress(self, goal_id: str, progress: float) -> None:
        for index, goal in enumerate(self._goals):
            if goal.id == goal_id:
                self._goals[index] = goal.model_copy(update={"progress": _clamp(progress, 0.0, 1.0)})
                return

    def complete_goal(self, goal_id: str) -> None:
        self._goals = [goal for goal in self._goals if goal.id != goal_id]

    def render(self) -> str:
        if not self._goals:
            return self.EMPTY_TEXT
        top = self._goals[0]
        return f"Current Goal: {top.description} ({round(top.progress * 100)}% complete)"

    def relevance(self, trigger: Trigger) -> float:
        return _lookup(self.RELEVANCE, trigger, self.DEFAULT_RELEVANCE)


# ============================================================================
# LOCATION
# ============================================================================


class SpatialShard:
    """Pure delegate to the spatial oracle for the owning agent."""

    name = "LOCATION"
    RELEVANCE: Dict[Trigger, float] = {
        Trigger.PERCEPTION: 0.9,
        Trigger.GOAL_CHECK: 0.8,
        Trigger.IDLE_THOUGHT: 0.4,
    }
    DEFAULT_RELEVANCE = 0.2

    def __init__(self, agent_id: str, oracle: SpatialOracle) -> None:
        self.agent_id = agent_id
        self.oracle = oracle

    def render(self) -> str:
        return self.oracle.generate_spatial_context(self.agent_id)

    def relevance(self, trigger: Trigger) -> float:
        return _lookup(self.RELEVANCE, trigger, self.DEFAULT_RELEVANCE)
