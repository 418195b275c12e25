"""
Pydantic schemas for the cortexmix cognition pipeline.

All value objects that cross a component boundary are defined here:
perception inputs, shard state records, and the Decision produced by the
reasoning call.

Design Philosophy:
- Immutable geometry (Vec3) so positions handed out by the registry can't be
  mutated by callers
- Range constraints declared on the model (familiarity, sentiment, importance)
  so invalid records fail at construction rather than deep inside a shard
- Decision tolerates extra keys from the model output; the LLM often adds
  commentary fields we don't care about
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Geometry
# ============================================================================


class Vec3(BaseModel):
    """Immutable 3D vector used for positions and directions."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def scaled(self, factor: float) -> "Vec3":
        return Vec3(x=self.x * factor, y=self.y * factor, z=self.z * factor)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vec3":
        """Return a unit vector. The zero vector normalizes to itself."""
        length = self.length()
        if length == 0:
            return self
        return self.scaled(1.0 / length)

    def distance_to(self, other: "Vec3") -> float:
        return (self - other).length()

    def distance_squared_to(self, other: "Vec3") -> float:
        delta = self - other
        return delta.dot(delta)

    @classmethod
    def zero(cls) -> "Vec3":
        return cls()


# ============================================================================
# Triggers and shard records
# ============================================================================


class Trigger(str, Enum):
    """Event kinds that cause the context mixer to assemble a prompt."""

    PERCEPTION = "PERCEPTION"        # Something entered visual range
    SOCIAL = "SOCIAL"                # Player/agent interaction
    GOAL_CHECK = "GOAL_CHECK"        # Periodic goal re-evaluation
    IDLE_THOUGHT = "IDLE_THOUGHT"    # Background ambient thinking
    MEMORY_RECALL = "MEMORY_RECALL"  # Explicit memory query


class MemoryKind(str, Enum):
    ACTION = "action"
    OBSERVATION = "observation"
    CONVERSATION = "conversation"
    SUMMARY = "summary"


class MemoryEntry(BaseModel):
    """A single short-term memory held by the hippocampus shard."""

    id: str
    timestamp: float = Field(..., description="Wall-clock seconds when the memory was formed")
    content: str
    importance: float = Field(0.5, ge=0.0, le=1.0)
    kind: MemoryKind


class EntityKind(str, Enum):
    PLAYER = "PLAYER"
    AGENT = "AGENT"
    OBJECT = "OBJECT"
    LANDMARK = "LANDMARK"


class PerceivedEntity(BaseModel):
    """Something the host's perception pass saw this tick. Rebuilt every tick."""

    id: str
    kind: EntityKind
    name: Optional[str] = None
    distance: float = Field(..., ge=0.0)
    # Direction from the observer to the entity; need not be normalized
    direction: Vec3
    last_seen: float = 0.0


class Relationship(BaseModel):
    """Per-entity social ledger entry."""

    entity_id: str
    name: str
    familiarity: float = Field(0.1, ge=0.0, le=1.0)
    sentiment: float = Field(0.5, ge=-1.0, le=1.0)
    last_interaction: float = 0.0
    interaction_count: int = Field(1, ge=0)


class ActiveGoal(BaseModel):
    id: str
    description: str
    priority: float = 0.5
    progress: float = Field(0.0, ge=0.0, le=1.0)


class EmotionalState(BaseModel):
    """Two-scalar mood held by the amygdala shard."""

    valence: float = Field(0.6, ge=0.0, le=1.0)
    arousal: float = Field(0.3, ge=0.0, le=1.0)


# ============================================================================
# Decision (reasoning call output)
# ============================================================================


class DecisionAction(str, Enum):
    MOVE_TO = "MOVE_TO"
    WAIT = "WAIT"
    WANDER = "WANDER"
    FOLLOW = "FOLLOW"
    CHAT = "CHAT"


class Decision(BaseModel):
    """Parsed output of one reasoning call.

    Consumed immediately by the capability engine; only ``thought`` and
    ``memo`` survive the cycle (copied into the brain state and memory shard).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    action: DecisionAction
    # The model is prompted with camelCase keys; accept both spellings
    target_id: Optional[str] = Field(None, alias="targetId")
    target: Optional[Vec3] = None
    thought: str = ""
    memo: Optional[str] = None

    @classmethod
    def wait(cls, thought: str) -> "Decision":
        """Canonical fallback decision used when a response can't be parsed."""
        return cls(action=DecisionAction.WAIT, thought=thought)
