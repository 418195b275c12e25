"""Capability layer: command vocabulary, steering protocols and the engine."""

from .commands import (
    POSTURE_SPEEDS,
    CapabilityCommand,
    CapabilityType,
    FollowEntity,
    GestureWave,
    HoldPosition,
    Idle,
    InternalThought,
    NavigateToAnchor,
    NavigateToCoord,
    Posture,
    SocialInteract,
    SquadOrder,
    Wander,
    command_from_decision,
    parse_command,
)
from .engine import CapabilityEngine, SquadChannel
from .steering import Mover, ReferenceMover, SteeringBehavior, ToggleBehavior

__all__ = [
    "POSTURE_SPEEDS",
    "CapabilityCommand",
    "CapabilityType",
    "FollowEntity",
    "GestureWave",
    "HoldPosition",
    "Idle",
    "InternalThought",
    "NavigateToAnchor",
    "NavigateToCoord",
    "Posture",
    "SocialInteract",
    "SquadOrder",
    "Wander",
    "command_from_decision",
    "parse_command",
    "CapabilityEngine",
    "SquadChannel",
    "Mover",
    "ReferenceMover",
    "SteeringBehavior",
    "ToggleBehavior",
]
