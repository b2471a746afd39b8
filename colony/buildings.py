"""Building catalog: costs, per-tick production and consumption."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping

from colony.exceptions import UnknownBuildingKindError
from colony.resources import ResourceKind


class BuildingKind(Enum):
    """Types of buildings that can be placed on the grid."""

    SOLAR_PANEL = "SOLAR_PANEL"
    HYDROPONIC_FARM = "HYDROPONIC_FARM"
    WATER_EXTRACTOR = "WATER_EXTRACTOR"
    MINE = "MINE"
    HABITAT = "HABITAT"

    @property
    def spec(self) -> "BuildingSpec":
        return BUILDING_SPECS[self]

    @property
    def key(self) -> str:
        """Lower-case name used in payloads (e.g. ``"solar_panel"``)."""
        return self.name.lower()


def _frozen(amounts: Mapping[ResourceKind, int]) -> Mapping[ResourceKind, int]:
    return MappingProxyType(dict(amounts))


@dataclass(frozen=True)
class BuildingSpec:
    """Immutable definition of a building kind.

    Attributes:
        display_name: Human-readable name.
        description: Short flavour text.
        cost: Resources debited once at placement.
        produces: Resources added per tick per building.
        consumes: Resources removed per tick per building.
        capacity_bonus: Population capacity granted on placement.
    """

    display_name: str
    description: str
    cost: Mapping[ResourceKind, int] = field(default_factory=dict)
    produces: Mapping[ResourceKind, int] = field(default_factory=dict)
    consumes: Mapping[ResourceKind, int] = field(default_factory=dict)
    capacity_bonus: int = 0

    def __post_init__(self) -> None:
        if not self.display_name:
            raise ValueError("BuildingSpec display_name must be non-empty")
        if self.capacity_bonus < 0:
            raise ValueError(f"capacity_bonus must be >= 0, got {self.capacity_bonus}")
        for label in ("cost", "produces", "consumes"):
            amounts = getattr(self, label)
            for resource, amount in amounts.items():
                if not isinstance(resource, ResourceKind):
                    raise TypeError(f"{label} key must be a ResourceKind, got {resource!r}")
                if amount < 0:
                    raise ValueError(f"{label}[{resource.name}] must be >= 0, got {amount}")
            object.__setattr__(self, label, _frozen(amounts))

    def net_per_tick(self) -> Dict[ResourceKind, int]:
        """Production minus consumption for one building, per resource."""
        net: Dict[ResourceKind, int] = {}
        for resource, amount in self.produces.items():
            net[resource] = net.get(resource, 0) + amount
        for resource, amount in self.consumes.items():
            net[resource] = net.get(resource, 0) - amount
        return net


BUILDING_SPECS: Mapping[BuildingKind, BuildingSpec] = MappingProxyType({
    BuildingKind.SOLAR_PANEL: BuildingSpec(
        display_name="Solar Panel",
        description="Generates energy from sunlight",
        cost={ResourceKind.MINERALS: 10},
        produces={ResourceKind.ENERGY: 5},
    ),
    BuildingKind.HYDROPONIC_FARM: BuildingSpec(
        display_name="Hydroponic Farm",
        description="Grows food using water and energy",
        cost={ResourceKind.MINERALS: 15, ResourceKind.ENERGY: 5},
        produces={ResourceKind.FOOD: 3},
        consumes={ResourceKind.WATER: 1, ResourceKind.ENERGY: 1},
    ),
    BuildingKind.WATER_EXTRACTOR: BuildingSpec(
        display_name="Water Extractor",
        description="Extracts water from the Martian ice",
        cost={ResourceKind.MINERALS: 12},
        produces={ResourceKind.WATER: 4},
        consumes={ResourceKind.ENERGY: 2},
    ),
    BuildingKind.MINE: BuildingSpec(
        display_name="Mining Facility",
        description="Extracts minerals from the ground",
        cost={ResourceKind.MINERALS: 8},
        produces={ResourceKind.MINERALS: 2},
        consumes={ResourceKind.ENERGY: 3},
    ),
    BuildingKind.HABITAT: BuildingSpec(
        display_name="Living Habitat",
        description="Houses colonists, increases population capacity by 5",
        cost={ResourceKind.MINERALS: 25, ResourceKind.WATER: 10},
        consumes={ResourceKind.ENERGY: 2},
        capacity_bonus=5,
    ),
})


def valid_kind_names() -> List[str]:
    return [kind.name for kind in BuildingKind]


def parse_building_kind(name: str) -> BuildingKind:
    """Look up a building kind by name, case-insensitively.

    Raises:
        UnknownBuildingKindError: If ``name`` is not a known kind.
    """
    try:
        return BuildingKind[name.strip().upper()]
    except (KeyError, AttributeError):
        raise UnknownBuildingKindError(str(name), valid_kind_names()) from None
