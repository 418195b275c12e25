"""
World registry and spatial oracle.

The registry maps stable names ("Office_Desk", "player") to positions so the
reasoning layer can talk about places by name while the capability engine
resolves them to coordinates. The oracle turns registry lookups into short
grounded facts ("Nearest Landmark: desk (3.2m away)") for the spatial shard.

Ownership model:
- One ``WorldRegistry`` is created by the host's root context and injected
  into every oracle and capability engine. No module-level instance exists.
- Static anchors (furniture, rooms, exits) are registered once with a zone
  and tags.
- Dynamic entries (player, other agents) register a zero-argument position
  getter, or are tracked through a weak reference so a collected entity
  disappears from the registry on its own.
- Owners still call ``unregister`` on teardown. Missing or dead entries
  resolve to ``None``; lookups never raise.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from .schemas import Vec3


PositionGetter = Callable[[], Optional[Vec3]]
PositionProvider = Union[Vec3, PositionGetter]

DEFAULT_ZONE = "Unknown Zone"
# Straight-line reachability cutoff until a navmesh query replaces it
MAX_REACHABLE_DISTANCE = 50.0


@dataclass(frozen=True)
class SpatialAnchor:
    """A static, named landmark."""

    id: str
    position: Vec3
    zone: str = DEFAULT_ZONE
    tags: tuple[str, ...] = field(default_factory=tuple)


class PathQuery(BaseModel):
    """Result of a reachability check between two registered names."""

    can_reach: bool
    distance: float = Field(..., description="Straight-line distance in meters, -1 if unknown")
    estimated_time: float = Field(..., description="Seconds at the given speed, -1 if unknown")
    obstacles: List[str] = Field(default_factory=list)


class WorldRegistry:
    """Authoritative name -> position mapping (last writer wins per key)."""

    def __init__(self) -> None:
        self._anchors: Dict[str, SpatialAnchor] = {}
        self._dynamic: Dict[str, PositionGetter] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str, provider: PositionProvider) -> None:
        """Register a constant position or a position getter under ``name``."""
        if isinstance(provider, Vec3):
            self.register_static(name, provider)
        elif callable(provider):
            self.register_dynamic(name, provider)
        else:
            raise TypeError(
                f"Provider for '{name}' must be a Vec3 or a zero-argument callable, "
                f"got {type(provider).__name__}"
            )

    def register_static(
        self,
        anchor_id: str,
        position: Vec3,
        zone: str = DEFAULT_ZONE,
        tags: Iterable[str] = (),
    ) -> SpatialAnchor:
        """Register a static landmark (furniture, rooms, exits)."""
        anchor = SpatialAnchor(id=anchor_id, position=position, zone=zone, tags=tuple(tags))
        # A name is either static or dynamic, never both
        self._dynamic.pop(anchor_id, None)
        self._anchors[anchor_id] = anchor
        return anchor

    def register_dynamic(self, entity_id: str, getter: PositionGetter) -> None:
        """Register a moving entity by its position getter."""
        self._anchors.pop(entity_id, None)
        self._dynamic[entity_id] = getter

    def track(self, entity_id: str, obj: object) -> None:
        """Track ``obj.position`` through a weak reference.

        Once ``obj`` is garbage collected the entry behaves as if it had been
        unregistered and is purged on the next lookup.
        """
        ref = weakref.ref(obj)

        def _getter() -> Optional[Vec3]:
            target = ref()
            if target is None:
                return None
            return getattr(target, "position", None)

        self.register_dynamic(entity_id, _getter)

    def unregister(self, name: str) -> None:
        """Remove ``name``. Safe to call for names that were never registered."""
        self._anchors.pop(name, None)
        self._dynamic.pop(name, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_position(name) is not None

    def get_position(self, name: str) -> Optional[Vec3]:
        """Current position of any registered name, or None."""
        # Dynamic entries first: they are the ones that move
        getter = self._dynamic.get(name)
        if getter is not None:
            position = getter()
            if position is None:
                # Dead weak reference or an owner reporting itself gone
                self._dynamic.pop(name, None)
            return position

        anchor = self._anchors.get(name)
        return anchor.position if anchor is not None else None

    def get_anchor(self, anchor_id: str) -> Optional[SpatialAnchor]:
        return self._anchors.get(anchor_id)

    def get_nearest_anchor(
        self,
        position: Vec3,
        filter_tags: Optional[Iterable[str]] = None,
    ) -> Optional[SpatialAnchor]:
        """Closest static anchor, optionally restricted to anchors sharing a tag."""
        wanted = set(filter_tags) if filter_tags is not None else None
        nearest: Optional[SpatialAnchor] = None
        best = float("inf")
        for anchor in self._anchors.values():
            if wanted is not None and not wanted.intersection(anchor.tags):
                continue
            dist = position.distance_squared_to(anchor.position)
            if dist < best:
                best = dist
                nearest = anchor
        return nearest

    def get_in_zone(self, zone: str) -> List[str]:
        return [anchor.id for anchor in self._anchors.values() if anchor.zone == zone]

    def names(self) -> List[str]:
        return list(self._anchors) + [name for name in self._dynamic if name not in self._anchors]


class SpatialOracle:
    """Turns registry geometry into text the reasoning layer can use."""

    def __init__(self, registry: WorldRegistry) -> None:
        self.registry = registry

    def check_path(self, start_id: str, target_id: str, move_speed: float = 1.5) -> PathQuery:
        """Approximate reachability using straight-line distance."""
        start = self.registry.get_position(start_id)
        target = self.registry.get_position(target_id)
        if start is None or target is None:
            return PathQuery(
                can_reach=False,
                distance=-1,
                estimated_time=-1,
                obstacles=["Unknown location"],
            )

        dist = start.distance_to(target)
        can_reach = dist < MAX_REACHABLE_DISTANCE
        return PathQuery(
            can_reach=can_reach,
            distance=dist,
            estimated_time=dist / move_speed if move_speed > 0 else -1,
            obstacles=[] if can_reach else ["Path too long/complex"],
        )

    def generate_spatial_context(self, agent_id: str) -> str:
        """Compose a short block of grounded facts about ``agent_id``'s surroundings.

        Output depends only on registry state, so repeated calls for a
        stationary world are byte-identical.
        """
        agent_pos = self.registry.get_position(agent_id)
        if agent_pos is None:
            return "Location: Unknown"

        current = self.registry.get_nearest_anchor(agent_pos)
        zone = current.zone if current is not None else DEFAULT_ZONE
        if current is not None:
            landmark = f"{current.id} ({agent_pos.distance_to(current.position):.1f}m away)"
        else:
            landmark = "None (-m away)"

        lines = [
            "Physical State",
            f"- **Zone**: {zone}",
            f"- **Nearest Landmark**: {landmark}",
        ]

        nearest_exit = self.registry.get_nearest_anchor(agent_pos, ["Exit"])
        if nearest_exit is not None:
            lines.append(
                f"- **Escape Route**: {nearest_exit.id} is "
                f"{agent_pos.distance_to(nearest_exit.position):.0f}m away."
            )
        nearest_cover = self.registry.get_nearest_anchor(agent_pos, ["Cover"])
        if nearest_cover is not None:
            lines.append(f"- **Cover**: {nearest_cover.id} is nearby.")

        return "\n".join(lines)
