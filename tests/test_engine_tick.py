"""Tests for tick processing: production, metabolism, collapse and growth."""

import pytest

from colony.buildings import BuildingKind
from colony.engine import (
    DEHYDRATION_EVENT,
    GROWTH_EVENT,
    POWER_SHORTAGE_EVENT,
    STARVATION_EVENT,
)
from colony.resources import ResourceKind

E, F, W, M = (
    ResourceKind.ENERGY,
    ResourceKind.FOOD,
    ResourceKind.WATER,
    ResourceKind.MINERALS,
)


def test_solar_panel_tick(engine, state):
    engine.build(BuildingKind.SOLAR_PANEL, 0, 0)

    report = engine.tick()

    assert report.tick == 1
    assert state.resource(E) == 105
    assert state.resource(F) == 48
    assert state.resource(W) == 49
    assert state.resource(M) == 20
    assert state.population == 6
    assert report.alerts == (GROWTH_EVENT,)
    assert report.events == "Tick 1 processed. Population grew!"
    assert report.snapshot.tick_count == 1


def test_empty_colony_only_metabolises(engine, state):
    engine.tick()
    assert state.resources == {E: 100, F: 48, W: 49, M: 30}


def test_production_scales_with_building_count(engine, state):
    state.set_resource(M, 100)
    for x in range(3):
        engine.build(BuildingKind.WATER_EXTRACTOR, x, 0)

    engine.tick()

    # 3 extractors: +12 water, -6 energy; 5 colonists drink 1
    assert state.resource(W) == 50 + 12 - 1
    assert state.resource(E) == 100 - 6


def test_starvation_collapses_and_freezes(engine, state):
    state.set_resource(F, 0)

    report = engine.tick()

    assert state.alive is False
    assert report.alerts == (STARVATION_EVENT,)
    assert "Starvation" in report.events
    assert report.snapshot.alive is False

    frozen = state.resources
    population = state.population
    later = engine.tick()

    assert state.resources == frozen
    assert state.population == population
    assert later.tick == 2
    assert later.events == "Tick 2: colony has already collapsed."
    assert later.alerts == ()


def test_dehydration(engine, state):
    state.set_resource(W, 1)

    report = engine.tick()

    assert state.alive is False
    assert report.alerts == (DEHYDRATION_EVENT,)
    assert state.resource(W) == 0


def test_starvation_wins_over_dehydration(engine, state):
    state.set_resource(F, 0)
    state.set_resource(W, 0)

    report = engine.tick()

    assert report.alerts == (STARVATION_EVENT,)


def test_collapse_leaves_negative_values_unclamped(engine, state):
    state.set_resource(F, 1)
    engine.tick()
    assert state.resource(F) == -1


def test_power_shortage_clamps_energy(engine, state):
    engine.build(BuildingKind.MINE, 0, 0)
    state.set_resource(E, 0)

    report = engine.tick()

    assert state.alive is True
    assert state.resource(E) == 0
    assert report.alerts == (POWER_SHORTAGE_EVENT, GROWTH_EVENT)
    assert report.events == "Tick 1 processed. WARNING: Power shortage! Population grew!"


def test_zero_energy_is_not_a_shortage(engine, state):
    state.set_resource(E, 0)
    report = engine.tick()
    assert POWER_SHORTAGE_EVENT not in report.alerts


def test_no_growth_at_threshold(engine, state):
    # 5 colonists eat 2, leaving exactly 20
    state.set_resource(F, 22)

    report = engine.tick()

    assert state.resource(F) == 20
    assert state.population == 5
    assert report.alerts == ()
    assert report.events == "Tick 1 processed."


def test_population_never_exceeds_capacity(engine, state):
    state.set_resource(F, 10_000)
    state.set_resource(W, 10_000)

    for _ in range(20):
        engine.tick()
        assert 0 <= state.population <= state.population_capacity

    assert state.population == 10


def test_habitat_lets_population_keep_growing(engine, state):
    state.set_resource(F, 10_000)
    state.set_resource(W, 10_000)
    engine.build(BuildingKind.HABITAT, 0, 0)

    for _ in range(20):
        engine.tick()

    assert state.population == 15


def test_tick_count_is_monotonic(engine, state):
    state.set_resource(F, 3)
    ticks = [engine.tick().tick for _ in range(6)]
    assert ticks == [1, 2, 3, 4, 5, 6]
    assert state.alive is False


def test_projected_deltas(engine, state):
    state.set_resource(M, 100)
    engine.build(BuildingKind.SOLAR_PANEL, 0, 0)
    engine.build(BuildingKind.HYDROPONIC_FARM, 1, 0)

    deltas = engine.projected_deltas()

    assert deltas == {"energy": 5 - 1, "food": 3 - 2, "water": -1 - 1, "minerals": 0}


def test_projected_deltas_match_the_next_tick(engine, state):
    state.set_resource(M, 100)
    engine.build(BuildingKind.MINE, 0, 0)
    engine.build(BuildingKind.WATER_EXTRACTOR, 1, 0)
    before = state.resources

    deltas = engine.projected_deltas()
    engine.tick()

    for resource in ResourceKind:
        assert state.resource(resource) - before[resource] == deltas[resource.key]


@pytest.mark.parametrize("population, food_used, water_used", [(1, 0, 0), (2, 1, 0), (3, 1, 1), (7, 3, 2)])
def test_metabolism_uses_integer_division(engine, state, population, food_used, water_used):
    state.population = population
    state.population_capacity = population

    engine.tick()

    assert state.resource(F) == 50 - food_used
    assert state.resource(W) == 50 - water_used


def test_report_payload(engine):
    data = engine.tick().to_dict()
    assert data["tick"] == 1
    assert data["events"] == "Tick 1 processed. Population grew!"
    assert data["alerts"] == ["Population grew!"]
    assert data["colonyState"]["tickCount"] == 1
