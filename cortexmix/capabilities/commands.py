"""
Capability command vocabulary.

A CapabilityCommand is the closed set of high-level actions the reasoning
layer may request. Each CapabilityType has its own pydantic model carrying
only the fields it needs, and the union is discriminated on ``type`` so a
raw mapping validates straight to the right variant:

    parse_command({"type": "NAVIGATE_TO_ANCHOR", "target": "desk"})
    -> NavigateToAnchor(target="desk")

``command_from_decision`` is the single place where a brain Decision is
translated into a command.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from cortexmix.schemas import Decision, DecisionAction, Vec3


class Posture(str, Enum):
    RUN = "RUN"
    WALK = "WALK"
    SNEAK = "SNEAK"
    ALERT = "ALERT"


POSTURE_SPEEDS: Dict[Posture, float] = {
    Posture.RUN: 10.0,
    Posture.WALK: 3.5,
    Posture.SNEAK: 2.0,
    Posture.ALERT: 4.5,
}


class CapabilityType(str, Enum):
    IDLE = "IDLE"                              # Stand still
    NAVIGATE_TO_ANCHOR = "NAVIGATE_TO_ANCHOR"  # Go to named location from registry
    NAVIGATE_TO_COORD = "NAVIGATE_TO_COORD"    # Go to raw XYZ
    SOCIAL_INTERACT = "SOCIAL_INTERACT"        # Approach and face for dialog
    GESTURE_WAVE = "GESTURE_WAVE"              # Stop and wave
    FOLLOW_ENTITY = "FOLLOW_ENTITY"            # Follow a moving target
    HOLD_POSITION = "HOLD_POSITION"            # Stop, keep looking
    SQUAD_ORDER = "SQUAD_ORDER"                # Broadcast a command to others
    INTERNAL_THOUGHT = "INTERNAL_THOUGHT"      # Thinking only, no movement
    WANDER = "WANDER"                          # Explore with the wander behavior


class _Command(BaseModel):
    # Subclasses pin ``type`` to their CapabilityType value
    model_config = ConfigDict(frozen=True, extra="forbid")

    posture: Optional[Posture] = None


class Idle(_Command):
    type: Literal["IDLE"] = "IDLE"


class HoldPosition(_Command):
    type: Literal["HOLD_POSITION"] = "HOLD_POSITION"


class NavigateToAnchor(_Command):
    type: Literal["NAVIGATE_TO_ANCHOR"] = "NAVIGATE_TO_ANCHOR"
    target: str = Field(..., min_length=1)


class NavigateToCoord(_Command):
    type: Literal["NAVIGATE_TO_COORD"] = "NAVIGATE_TO_COORD"
    x: float
    y: float = 0.0
    z: float

    @property
    def position(self) -> Vec3:
        return Vec3(x=self.x, y=self.y, z=self.z)


class FollowEntity(_Command):
    type: Literal["FOLLOW_ENTITY"] = "FOLLOW_ENTITY"
    target: str = Field(..., min_length=1)


class SocialInteract(_Command):
    type: Literal["SOCIAL_INTERACT"] = "SOCIAL_INTERACT"
    target: str = Field(..., min_length=1)


class GestureWave(_Command):
    type: Literal["GESTURE_WAVE"] = "GESTURE_WAVE"
    target: Optional[str] = None


class SquadOrder(_Command):
    type: Literal["SQUAD_ORDER"] = "SQUAD_ORDER"
    order: str
    recipients: List[str] = Field(default_factory=list)


class InternalThought(_Command):
    type: Literal["INTERNAL_THOUGHT"] = "INTERNAL_THOUGHT"
    thought: str = ""


class Wander(_Command):
    type: Literal["WANDER"] = "WANDER"


CapabilityCommand = Annotated[
    Union[
        Idle,
        HoldPosition,
        NavigateToAnchor,
        NavigateToCoord,
        FollowEntity,
        SocialInteract,
        GestureWave,
        SquadOrder,
        InternalThought,
        Wander,
    ],
    Field(discriminator="type"),
]

_COMMAND_ADAPTER: TypeAdapter[Any] = TypeAdapter(CapabilityCommand)


def parse_command(payload: Mapping[str, Any]) -> CapabilityCommand:
    """Validate a raw mapping into a command variant.

    Raises:
        pydantic.ValidationError: unknown ``type`` or missing/invalid fields
    """
    return _COMMAND_ADAPTER.validate_python(dict(payload))


def command_from_decision(
    decision: Decision,
    *,
    posture: Optional[Posture] = None,
) -> CapabilityCommand:
    """Translate a brain Decision into the capability it asks for.

    Decisions that need a target but arrived without one degrade to an
    InternalThought so the agent keeps doing what it was doing.
    """
    action = decision.action

    if action is DecisionAction.MOVE_TO:
        if decision.target is not None:
            return NavigateToCoord(
                x=decision.target.x,
                y=decision.target.y,
                z=decision.target.z,
                posture=posture,
            )
        if decision.target_id:
            return NavigateToAnchor(target=decision.target_id, posture=posture)
    elif action is DecisionAction.WAIT:
        return HoldPosition(posture=posture)
    elif action is DecisionAction.WANDER:
        return Wander(posture=posture)
    elif action is DecisionAction.FOLLOW:
        if decision.target_id:
            return FollowEntity(target=decision.target_id, posture=posture)
    elif action is DecisionAction.CHAT:
        if decision.target_id:
            return SocialInteract(target=decision.target_id, posture=posture)

    return InternalThought(thought=decision.thought)
