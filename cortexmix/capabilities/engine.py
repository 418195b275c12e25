"""
Capability engine: turns capability commands into steering state.

The reasoning layer speaks in CapabilityCommands ("go to the desk", "follow
the player"); the engine resolves names through the world registry and
toggles behaviors on the mover. It holds no reasoning state of its own
beyond the current action, posture and follow target.

Per-frame work happens in ``update(delta)``, which keeps the arrive target
glued to a moving entity and throttles speed on approach so the mover comes
to a clean stop instead of orbiting its target.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from cortexmix.logging_utils import log_deterministic, log_warning
from cortexmix.oracle import SpatialOracle, WorldRegistry
from cortexmix.schemas import Vec3

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
    parse_command,
)
from .steering import Mover


SquadChannel = Callable[[SquadOrder], None]

FOLLOW_STOP_RADIUS = 2.5
SOCIAL_STOP_RADIUS = 2.0
# Distance beyond the stop radius where slowing starts
SLOW_BAND = 5.0
MIN_APPROACH_SPEED = 0.5


class CapabilityEngine:
    """Executes capability commands against a single mover."""

    def __init__(
        self,
        mover: Mover,
        world: Union[WorldRegistry, SpatialOracle],
        *,
        squad_channel: Optional[SquadChannel] = None,
        posture: Posture = Posture.WALK,
    ) -> None:
        self.mover = mover
        self.registry: WorldRegistry = world.registry if isinstance(world, SpatialOracle) else world
        self.squad_channel = squad_channel

        self.posture = posture
        self.current_action: CapabilityType = CapabilityType.IDLE
        self.active_target_id: Optional[str] = None
        # Host reads this to play the wave animation toward someone
        self.last_gesture: Optional[GestureWave] = None

        self._handlers: dict[CapabilityType, Callable[[Any], None]] = {
            CapabilityType.IDLE: self._execute_idle,
            CapabilityType.HOLD_POSITION: self._execute_hold,
            CapabilityType.NAVIGATE_TO_ANCHOR: self._execute_navigate_to_anchor,
            CapabilityType.NAVIGATE_TO_COORD: self._execute_navigate_to_coord,
            CapabilityType.FOLLOW_ENTITY: self._execute_follow,
            CapabilityType.SOCIAL_INTERACT: self._execute_social_interact,
            CapabilityType.WANDER: self._execute_wander,
            CapabilityType.GESTURE_WAVE: self._execute_gesture_wave,
            CapabilityType.SQUAD_ORDER: self._execute_squad_order,
            CapabilityType.INTERNAL_THOUGHT: self._execute_internal_thought,
        }

    @property
    def posture_speed(self) -> float:
        return POSTURE_SPEEDS[self.posture]

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def execute(self, command: CapabilityCommand) -> None:
        """Apply ``command`` to the mover. Unknown commands are ignored."""
        raw_type = getattr(command, "type", None)
        try:
            command_type = CapabilityType(raw_type)
        except ValueError:
            log_warning(f"[CapabilityEngine] Unknown capability: {raw_type or command!r}")
            return
        handler = self._handlers[command_type]

        log_deterministic(f"[CapabilityEngine] Executing: {command_type.value}")
        self.current_action = command_type
        self.active_target_id = None

        if command.posture is not None:
            self.posture = command.posture
        self._reset_tactical_behaviors()
        self.mover.max_speed = self.posture_speed

        handler(command)

    def execute_raw(self, payload: Mapping[str, Any]) -> bool:
        """Validate a raw mapping and execute it.

        Returns False (after logging) when the payload is not a known command.
        """
        try:
            command = parse_command(payload)
        except ValidationError as exc:
            log_warning(
                f"[CapabilityEngine] Ignoring invalid command {payload.get('type')!r}: "
                f"{exc.error_count()} validation error(s)"
            )
            return False
        self.execute(command)
        return True

    def update(self, delta: float) -> None:
        """Per-frame tracking of the follow/social target.

        ``delta`` is the frame time in seconds, passed by the host loop like
        every per-frame update. Braking is distance-based and reads only
        positions.
        """
        if self.active_target_id is None:
            return
        if self.current_action not in (CapabilityType.FOLLOW_ENTITY, CapabilityType.SOCIAL_INTERACT):
            return

        target = self.registry.get_position(self.active_target_id)
        if target is None:
            log_warning(f"[CapabilityEngine] Lost track of {self.active_target_id}; stopping")
            self.active_target_id = None
            self._reset_tactical_behaviors()
            self.mover.stop()
            return

        self.mover.arrive.target = target
        self.mover.arrive.active = True

        stop_radius = (
            SOCIAL_STOP_RADIUS
            if self.current_action is CapabilityType.SOCIAL_INTERACT
            else FOLLOW_STOP_RADIUS
        )
        slow_radius = stop_radius + SLOW_BAND
        dist = self.mover.position.distance_to(target)

        if dist < stop_radius:
            self.mover.max_speed = 0.0
            self.mover.stop()
        elif dist < slow_radius:
            factor = (dist - stop_radius) / (slow_radius - stop_radius)
            self.mover.max_speed = max(MIN_APPROACH_SPEED, self.posture_speed * factor)
        else:
            self.mover.max_speed = self.posture_speed

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _reset_tactical_behaviors(self) -> None:
        # Separation and obstacle avoidance stay on regardless of command
        self.mover.seek.active = False
        self.mover.arrive.active = False
        self.mover.wander.active = False

    def _arrive_at(self, position: Vec3) -> None:
        self.mover.arrive.target = position
        self.mover.arrive.active = True

    def _resolve(self, name: str) -> Optional[Vec3]:
        position = self.registry.get_position(name)
        if position is None:
            log_warning(f"[CapabilityEngine] Unknown anchor: {name}")
            self.mover.stop()
        return position

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _execute_idle(self, command: Idle) -> None:
        self.mover.stop()

    def _execute_hold(self, command: HoldPosition) -> None:
        self.mover.stop()

    def _execute_navigate_to_anchor(self, command: NavigateToAnchor) -> None:
        position = self._resolve(command.target)
        if position is not None:
            self._arrive_at(position)

    def _execute_navigate_to_coord(self, command: NavigateToCoord) -> None:
        self._arrive_at(command.position)

    def _execute_follow(self, command: FollowEntity) -> None:
        self.active_target_id = command.target
        position = self._resolve(command.target)
        if position is not None:
            self._arrive_at(position)

    def _execute_social_interact(self, command: SocialInteract) -> None:
        self.active_target_id = command.target
        position = self._resolve(command.target)
        if position is not None:
            self._arrive_at(position)

    def _execute_wander(self, command: Wander) -> None:
        self.mover.wander.active = True

    def _execute_gesture_wave(self, command: GestureWave) -> None:
        self.mover.stop()
        self.last_gesture = command

    def _execute_squad_order(self, command: SquadOrder) -> None:
        if self.squad_channel is None:
            log_warning(f"[CapabilityEngine] No squad channel; dropping order '{command.order}'")
            return
        self.squad_channel(command)

    def _execute_internal_thought(self, command: InternalThought) -> None:
        pass
