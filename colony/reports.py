"""Report objects returned by engine operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from colony.buildings import BUILDING_SPECS, BuildingKind
from colony.state import ColonySnapshot


@dataclass(frozen=True)
class BuildReport:
    """Outcome of a build attempt.

    ``snapshot`` is always the post-attempt state: unchanged on failure,
    updated on success.
    """

    success: bool
    message: str
    kind: Optional[BuildingKind]
    snapshot: ColonySnapshot
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "buildingType": self.kind.name if self.kind is not None else None,
            "error": self.error,
            "colonyState": self.snapshot.to_dict(),
        }


@dataclass(frozen=True)
class TickReport:
    """Outcome of one tick.

    Attributes:
        tick: Tick counter after the tick was processed.
        events: Human-readable summary line.
        snapshot: Colony state after the tick.
        alerts: The individual events that fired, in order.
    """

    tick: int
    events: str
    snapshot: ColonySnapshot
    alerts: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "events": self.events,
            "alerts": list(self.alerts),
            "colonyState": self.snapshot.to_dict(),
        }


@dataclass(frozen=True)
class BuildingInfo:
    """Static description of a building kind for catalog listings."""

    id: str
    display_name: str
    description: str
    cost: Dict[str, int]
    produces: Dict[str, int]
    consumes: Dict[str, int]

    @classmethod
    def from_kind(cls, kind: BuildingKind) -> "BuildingInfo":
        spec = BUILDING_SPECS[kind]
        return cls(
            id=kind.name,
            display_name=spec.display_name,
            description=spec.description,
            cost={r.key: amount for r, amount in spec.cost.items()},
            produces={r.key: amount for r, amount in spec.produces.items()},
            consumes={r.key: amount for r, amount in spec.consumes.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "description": self.description,
            "cost": dict(self.cost),
            "produces": dict(self.produces),
            "consumes": dict(self.consumes),
        }


@dataclass(frozen=True)
class CatalogInfo:
    """Grid dimensions plus every building kind. Independent of live state."""

    grid_width: int
    grid_height: int
    buildings: List[BuildingInfo]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gridWidth": self.grid_width,
            "gridHeight": self.grid_height,
            "buildings": [b.to_dict() for b in self.buildings],
        }
