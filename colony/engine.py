"""Simulation engine - build validation and tick processing.

The engine owns the rules and nothing else. It mutates the
:class:`~colony.state.ColonyState` it was given and returns report objects;
locking, scheduling and broadcasting live in ``colony_server``.

Tick phases run in a fixed order:

1. tick counter
2. building production and consumption
3. population metabolism
4. collapse checks (starvation, dehydration, power shortage)
5. population growth
"""

import logging
from typing import Dict, List, Optional

from colony.buildings import BUILDING_SPECS, BuildingKind
from colony.exceptions import (
    BuildError,
    CellOccupiedError,
    InsufficientResourcesError,
    OutOfBoundsError,
)
from colony.reports import BuildReport, BuildingInfo, CatalogInfo, TickReport
from colony.resources import ResourceKind
from colony.result import Err, Result, ok
from colony.state import ColonyState

logger = logging.getLogger(__name__)

# Population metabolism: one unit per N colonists (integer division)
FOOD_PER_COLONISTS = 2
WATER_PER_COLONISTS = 3

# Growth needs strictly more than this much food and water
GROWTH_THRESHOLD = 20

STARVATION_EVENT = "COLONY COLLAPSED: Starvation!"
DEHYDRATION_EVENT = "COLONY COLLAPSED: Dehydration!"
POWER_SHORTAGE_EVENT = "WARNING: Power shortage!"
GROWTH_EVENT = "Population grew!"


class SimulationEngine:
    """Applies build requests and ticks to a colony.

    Args:
        state: The colony to operate on.
        grid_width: Number of columns; valid x is ``0 <= x < grid_width``.
        grid_height: Number of rows; valid y is ``0 <= y < grid_height``.
    """

    def __init__(self, state: ColonyState, grid_width: int, grid_height: int) -> None:
        self.state = state
        self.grid_width = grid_width
        self.grid_height = grid_height

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def validate_build(self, kind: BuildingKind, x: int, y: int) -> Result[None, BuildError]:
        """Run the build checks in order; the first failure wins."""
        return (
            self._check_bounds(x, y)
            .and_then(lambda _: self._check_cell(x, y))
            .and_then(lambda _: self._check_cost(kind))
        )

    def _check_bounds(self, x: int, y: int) -> Result[None, BuildError]:
        if 0 <= x < self.grid_width and 0 <= y < self.grid_height:
            return ok()
        return Err(
            OutOfBoundsError(
                f"Invalid coordinates ({x},{y}). Grid is {self.grid_width}x{self.grid_height}"
            )
        )

    def _check_cell(self, x: int, y: int) -> Result[None, BuildError]:
        if self.state.is_occupied(x, y):
            return Err(CellOccupiedError(f"Cell ({x},{y}) is already occupied"))
        return ok()

    def _check_cost(self, kind: BuildingKind) -> Result[None, BuildError]:
        if self.state.has_resources(kind.spec.cost):
            return ok()
        return Err(
            InsufficientResourcesError(f"Not enough resources to build {kind.spec.display_name}")
        )

    def build(self, kind: BuildingKind, x: int, y: int) -> BuildReport:
        """Place a building if the checks pass; no side effects otherwise."""
        result = self.validate_build(kind, x, y)
        if result.is_err():
            error = result.error
            logger.debug("Build of %s at (%d,%d) rejected: %s", kind.name, x, y, error)
            return self.failed_build(error, kind)

        spec = kind.spec
        self.state.debit(spec.cost)
        placed = self.state.place(kind, x, y)
        logger.info("Built %s #%d at (%d,%d)", kind.name, placed.id, x, y)
        return BuildReport(
            success=True,
            message=f"Successfully built {spec.display_name} at ({x},{y})",
            kind=kind,
            snapshot=self.state.snapshot(),
        )

    def failed_build(self, error: BuildError, kind: Optional[BuildingKind] = None) -> BuildReport:
        """Wrap a rejection in a report carrying the current snapshot."""
        return BuildReport(
            success=False,
            message=str(error),
            kind=kind,
            snapshot=self.state.snapshot(),
            error=error.code,
        )

    def can_afford(self, kind: BuildingKind) -> bool:
        return self.state.has_resources(kind.spec.cost)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> TickReport:
        """Advance the colony by exactly one tick."""
        state = self.state
        if not state.alive:
            tick = state.advance_tick()
            return TickReport(
                tick=tick,
                events=f"Tick {tick}: colony has already collapsed.",
                snapshot=state.snapshot(),
            )

        tick = state.advance_tick()
        alerts: List[str] = []

        self._phase_production()
        self._phase_metabolism()

        alert = self._phase_collapse_check()
        if alert is not None:
            alerts.append(alert)

        if self._phase_growth():
            alerts.append(GROWTH_EVENT)

        summary = " ".join([f"Tick {tick} processed."] + alerts)
        return TickReport(
            tick=tick,
            events=summary,
            snapshot=state.snapshot(),
            alerts=tuple(alerts),
        )

    def _phase_production(self) -> None:
        # Counts are read once up front; building effects are additive and commute.
        for kind, count in list(self.state.active_buildings()):
            spec = kind.spec
            for resource, amount in spec.produces.items():
                self.state.add_resource(resource, amount * count)
            for resource, amount in spec.consumes.items():
                self.state.add_resource(resource, -(amount * count))

    def _phase_metabolism(self) -> None:
        population = self.state.population
        self.state.add_resource(ResourceKind.FOOD, -(population // FOOD_PER_COLONISTS))
        self.state.add_resource(ResourceKind.WATER, -(population // WATER_PER_COLONISTS))

    def _phase_collapse_check(self) -> Optional[str]:
        state = self.state
        if state.resource(ResourceKind.FOOD) <= 0:
            state.collapse()
            logger.warning("Colony %r collapsed at tick %d: starvation", state.name, state.tick_count)
            return STARVATION_EVENT
        if state.resource(ResourceKind.WATER) <= 0:
            state.collapse()
            logger.warning("Colony %r collapsed at tick %d: dehydration", state.name, state.tick_count)
            return DEHYDRATION_EVENT
        if state.resource(ResourceKind.ENERGY) < 0:
            state.set_resource(ResourceKind.ENERGY, 0)
            return POWER_SHORTAGE_EVENT
        return None

    def _phase_growth(self) -> bool:
        state = self.state
        if not state.alive:
            return False
        if (
            state.resource(ResourceKind.FOOD) > GROWTH_THRESHOLD
            and state.resource(ResourceKind.WATER) > GROWTH_THRESHOLD
        ):
            return state.grow_population()
        return False

    # ------------------------------------------------------------------
    # Read-only helpers
    # ------------------------------------------------------------------

    def projected_deltas(self) -> Dict[str, int]:
        """Net change per resource the next tick would apply, before clamping."""
        deltas = {resource: 0 for resource in ResourceKind}
        for kind, count in self.state.active_buildings():
            for resource, amount in kind.spec.net_per_tick().items():
                deltas[resource] += amount * count
        population = self.state.population
        deltas[ResourceKind.FOOD] -= population // FOOD_PER_COLONISTS
        deltas[ResourceKind.WATER] -= population // WATER_PER_COLONISTS
        return {resource.key: amount for resource, amount in deltas.items()}

    def catalog(self) -> CatalogInfo:
        return CatalogInfo(
            grid_width=self.grid_width,
            grid_height=self.grid_height,
            buildings=[BuildingInfo.from_kind(kind) for kind in BUILDING_SPECS],
        )
