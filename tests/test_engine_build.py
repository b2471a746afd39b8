"""Tests for build validation and placement."""

import pytest

from colony.buildings import BuildingKind
from colony.engine import SimulationEngine
from colony.resources import ResourceKind
from colony.state import ColonyState


def _fingerprint(state: ColonyState):
    return (
        state.resources,
        state.occupied_cells,
        state.building_counts,
        state.placed_buildings,
        state.population_capacity,
    )


def test_build_mine_on_fresh_colony(engine, state):
    report = engine.build(BuildingKind.MINE, 0, 0)

    assert report.success is True
    assert report.error is None
    assert report.kind is BuildingKind.MINE
    assert report.message == "Successfully built Mining Facility at (0,0)"
    assert state.resource(ResourceKind.MINERALS) == 22
    assert state.population_capacity == 10
    assert state.occupied_cells == {(0, 0)}
    assert report.snapshot.resources["minerals"] == 22


def test_second_build_on_same_cell_is_rejected(engine, state):
    engine.build(BuildingKind.MINE, 0, 0)
    report = engine.build(BuildingKind.MINE, 0, 0)

    assert report.success is False
    assert report.error == "CELL_OCCUPIED"
    assert report.message == "Cell (0,0) is already occupied"
    assert state.resource(ResourceKind.MINERALS) == 22
    assert len(state.placed_buildings) == 1


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (32, 0), (0, 32), (100, 100)])
def test_out_of_bounds(engine, x, y):
    report = engine.build(BuildingKind.SOLAR_PANEL, x, y)

    assert report.success is False
    assert report.error == "OUT_OF_BOUNDS"
    assert report.message == f"Invalid coordinates ({x},{y}). Grid is 32x32"


def test_grid_edges_are_inside(engine):
    assert engine.build(BuildingKind.SOLAR_PANEL, 31, 31).success
    assert engine.build(BuildingKind.SOLAR_PANEL, 0, 31).success


def test_insufficient_resources(engine, state):
    engine.build(BuildingKind.MINE, 0, 0)  # minerals 30 -> 22
    report = engine.build(BuildingKind.HABITAT, 1, 1)

    assert report.success is False
    assert report.error == "INSUFFICIENT_RESOURCES"
    assert report.message == "Not enough resources to build Living Habitat"
    assert state.population_capacity == 10


def test_bounds_checked_before_cost(engine, state):
    state.set_resource(ResourceKind.MINERALS, 0)
    report = engine.build(BuildingKind.HABITAT, 40, 40)
    assert report.error == "OUT_OF_BOUNDS"


def test_occupancy_checked_before_cost(engine, state):
    engine.build(BuildingKind.MINE, 3, 3)
    state.set_resource(ResourceKind.MINERALS, 0)
    report = engine.build(BuildingKind.HABITAT, 3, 3)
    assert report.error == "CELL_OCCUPIED"


@pytest.mark.parametrize(
    "setup, kind, x, y",
    [
        (lambda e: None, BuildingKind.MINE, 32, 0),
        (lambda e: e.build(BuildingKind.MINE, 4, 4), BuildingKind.SOLAR_PANEL, 4, 4),
        (lambda e: e.build(BuildingKind.MINE, 4, 4), BuildingKind.HABITAT, 5, 5),
    ],
    ids=["out-of-bounds", "occupied", "unaffordable"],
)
def test_failed_build_changes_nothing(engine, state, setup, kind, x, y):
    setup(engine)
    before = _fingerprint(state)

    report = engine.build(kind, x, y)

    assert report.success is False
    assert _fingerprint(state) == before
    assert report.snapshot == state.snapshot()


def test_cost_conservation_for_every_kind(config):
    for kind in BuildingKind:
        state = ColonyState(resources={r: 1000 for r in ResourceKind})
        engine = SimulationEngine(state, config.grid_width, config.grid_height)
        before = state.resources

        assert engine.build(kind, 7, 7).success

        after = state.resources
        for resource in ResourceKind:
            assert after[resource] == before[resource] - kind.spec.cost.get(resource, 0)


def test_build_can_spend_down_to_exactly_zero(engine, state):
    state.set_resource(ResourceKind.MINERALS, 10)
    report = engine.build(BuildingKind.SOLAR_PANEL, 0, 0)

    assert report.success
    assert state.resource(ResourceKind.MINERALS) == 0


def test_habitat_adds_capacity(engine, state):
    report = engine.build(BuildingKind.HABITAT, 2, 2)

    assert report.success
    assert state.population_capacity == 15
    assert state.resource(ResourceKind.MINERALS) == 5
    assert state.resource(ResourceKind.WATER) == 40


def test_validate_build_reports_first_failure(engine):
    result = engine.validate_build(BuildingKind.HABITAT, -1, -1)
    assert result.is_err()
    assert result.error.code == "OUT_OF_BOUNDS"

    assert engine.validate_build(BuildingKind.MINE, 0, 0).is_ok()


def test_can_afford(engine, state):
    assert engine.can_afford(BuildingKind.HABITAT)
    state.set_resource(ResourceKind.WATER, 9)
    assert not engine.can_afford(BuildingKind.HABITAT)
