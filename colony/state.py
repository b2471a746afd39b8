"""Colony state: the aggregate root mutated by the simulation engine."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Set, Tuple

from colony.buildings import BuildingKind
from colony.config import (
    DEFAULT_COLONY_NAME,
    STARTING_POPULATION,
    STARTING_POPULATION_CAPACITY,
    ColonyConfig,
)
from colony.resources import ResourceKind

Cell = Tuple[int, int]


@dataclass(frozen=True)
class PlacedBuilding:
    """A building instance on the grid. Immutable once created."""

    id: int
    kind: BuildingKind
    x: int
    y: int

    @property
    def cell(self) -> Cell:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.kind.name, "x": self.x, "y": self.y}


@dataclass(frozen=True)
class ColonySnapshot:
    """Read-only copy of colony state, safe to hand to external callers."""

    name: str
    resources: Mapping[str, int]
    buildings: Mapping[str, int]
    population: int
    population_capacity: int
    tick_count: int
    alive: bool
    placed_buildings: Tuple[PlacedBuilding, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "resources": dict(self.resources),
            "buildings": dict(self.buildings),
            "population": self.population,
            "populationCapacity": self.population_capacity,
            "tickCount": self.tick_count,
            "alive": self.alive,
            "placedBuildings": [p.to_dict() for p in self.placed_buildings],
        }


class ColonyState:
    """Mutable colony state.

    All mutation goes through the methods below; only
    :class:`colony.engine.SimulationEngine` calls them. The class itself is
    not thread-safe: callers serialize access (see ``ColonyManager``).

    Invariants kept by the mutators:
        - ``building_counts[k]`` equals the number of placed buildings of kind ``k``
        - ``occupied_cells`` equals the set of placed building cells
        - ``0 <= population <= population_capacity``
    """

    def __init__(
        self,
        name: str = DEFAULT_COLONY_NAME,
        resources: Mapping[ResourceKind, int] | None = None,
    ) -> None:
        self.name = name
        self._resources: Dict[ResourceKind, int] = {kind: 0 for kind in ResourceKind}
        for kind, amount in (resources or {}).items():
            self._resources[kind] = max(0, int(amount))
        self._building_counts: Dict[BuildingKind, int] = {kind: 0 for kind in BuildingKind}
        self._placed: List[PlacedBuilding] = []
        self._occupied: Set[Cell] = set()
        self._next_building_id = 1
        self.population = STARTING_POPULATION
        self.population_capacity = STARTING_POPULATION_CAPACITY
        self.tick_count = 0
        self.alive = True

    @classmethod
    def seeded(cls, config: ColonyConfig) -> "ColonyState":
        """Create a fresh colony with the configured starting resources."""
        return cls(name=config.name, resources=config.starting_resources())

    # Resources

    def resource(self, kind: ResourceKind) -> int:
        return self._resources[kind]

    def add_resource(self, kind: ResourceKind, amount: int) -> None:
        """Add (or subtract, for negative ``amount``) without clamping."""
        self._resources[kind] += amount

    def set_resource(self, kind: ResourceKind, amount: int) -> None:
        self._resources[kind] = amount

    def has_resources(self, required: Mapping[ResourceKind, int]) -> bool:
        return all(self._resources[kind] >= amount for kind, amount in required.items())

    def debit(self, costs: Mapping[ResourceKind, int]) -> None:
        for kind, amount in costs.items():
            self._resources[kind] -= amount

    @property
    def resources(self) -> Dict[ResourceKind, int]:
        return dict(self._resources)

    # Buildings

    def building_count(self, kind: BuildingKind) -> int:
        return self._building_counts[kind]

    @property
    def building_counts(self) -> Dict[BuildingKind, int]:
        return dict(self._building_counts)

    @property
    def placed_buildings(self) -> Tuple[PlacedBuilding, ...]:
        return tuple(self._placed)

    @property
    def occupied_cells(self) -> frozenset:
        return frozenset(self._occupied)

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self._occupied

    def place(self, kind: BuildingKind, x: int, y: int) -> PlacedBuilding:
        """Record a new building. Callers validate the cell and cost first."""
        placed = PlacedBuilding(id=self._next_building_id, kind=kind, x=x, y=y)
        self._next_building_id += 1
        self._placed.append(placed)
        self._occupied.add(placed.cell)
        self._building_counts[kind] += 1
        self.population_capacity += kind.spec.capacity_bonus
        return placed

    def active_buildings(self) -> Iterable[Tuple[BuildingKind, int]]:
        """Yield ``(kind, count)`` for every kind with at least one building."""
        for kind in BuildingKind:
            count = self._building_counts[kind]
            if count > 0:
                yield kind, count

    # Lifecycle

    def advance_tick(self) -> int:
        self.tick_count += 1
        return self.tick_count

    def collapse(self) -> None:
        self.alive = False

    def grow_population(self) -> bool:
        """Add one colonist if below capacity. Returns True if it grew."""
        if self.population >= self.population_capacity:
            return False
        self.population += 1
        return True

    def snapshot(self) -> ColonySnapshot:
        return ColonySnapshot(
            name=self.name,
            resources=MappingProxyType(
                {kind.key: self._resources[kind] for kind in ResourceKind}
            ),
            buildings=MappingProxyType(
                {kind.key: self._building_counts[kind] for kind in BuildingKind}
            ),
            population=self.population,
            population_capacity=self.population_capacity,
            tick_count=self.tick_count,
            alive=self.alive,
            placed_buildings=tuple(self._placed),
        )
