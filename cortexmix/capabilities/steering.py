"""Steering substrate the capability engine drives.

The engine never integrates motion itself. It toggles behaviors and sets the
speed cap on a ``Mover``; whatever physics or steering library the host runs
does the rest. ``ReferenceMover`` is a plain in-memory mover for tests and
headless simulations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from cortexmix.schemas import Vec3


@runtime_checkable
class SteeringBehavior(Protocol):
    active: bool
    target: Optional[Vec3]


@runtime_checkable
class Mover(Protocol):
    max_speed: float
    position: Vec3
    velocity: Vec3

    arrive: SteeringBehavior
    seek: SteeringBehavior
    wander: SteeringBehavior
    separation: SteeringBehavior
    obstacle_avoidance: SteeringBehavior

    def stop(self) -> None:
        ...


@dataclass
class ToggleBehavior:
    """A behavior reduced to its on/off switch, target and weight."""

    active: bool = False
    target: Optional[Vec3] = None
    weight: float = 1.0


@dataclass
class ReferenceMover:
    position: Vec3 = field(default_factory=Vec3.zero)
    velocity: Vec3 = field(default_factory=Vec3.zero)
    max_speed: float = 3.5

    arrive: ToggleBehavior = field(default_factory=ToggleBehavior)
    seek: ToggleBehavior = field(default_factory=ToggleBehavior)
    wander: ToggleBehavior = field(default_factory=ToggleBehavior)
    # Personal space and walls are always respected
    separation: ToggleBehavior = field(default_factory=lambda: ToggleBehavior(active=True, weight=3.0))
    obstacle_avoidance: ToggleBehavior = field(
        default_factory=lambda: ToggleBehavior(active=True, weight=5.0)
    )

    def stop(self) -> None:
        self.velocity = Vec3.zero()
