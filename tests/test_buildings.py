"""Tests for the building and resource catalogs."""

import pytest

from colony.buildings import (
    BUILDING_SPECS,
    BuildingKind,
    BuildingSpec,
    parse_building_kind,
    valid_kind_names,
)
from colony.exceptions import UnknownBuildingKindError
from colony.resources import ResourceKind


def test_every_kind_has_a_spec():
    assert set(BUILDING_SPECS) == set(BuildingKind)


def test_only_habitat_grants_capacity():
    bonuses = {kind: spec.capacity_bonus for kind, spec in BUILDING_SPECS.items()}
    assert bonuses.pop(BuildingKind.HABITAT) == 5
    assert set(bonuses.values()) == {0}


def test_solar_panel_table():
    spec = BuildingKind.SOLAR_PANEL.spec
    assert spec.display_name == "Solar Panel"
    assert dict(spec.cost) == {ResourceKind.MINERALS: 10}
    assert dict(spec.produces) == {ResourceKind.ENERGY: 5}
    assert dict(spec.consumes) == {}


def test_hydroponic_farm_net_effect():
    net = BuildingKind.HYDROPONIC_FARM.spec.net_per_tick()
    assert net == {ResourceKind.FOOD: 3, ResourceKind.WATER: -1, ResourceKind.ENERGY: -1}


def test_mine_produces_and_consumes():
    net = BuildingKind.MINE.spec.net_per_tick()
    assert net == {ResourceKind.MINERALS: 2, ResourceKind.ENERGY: -3}


def test_spec_tables_are_read_only():
    with pytest.raises(TypeError):
        BuildingKind.MINE.spec.cost[ResourceKind.MINERALS] = 0  # type: ignore[index]
    with pytest.raises(TypeError):
        BUILDING_SPECS[BuildingKind.MINE] = BUILDING_SPECS[BuildingKind.HABITAT]  # type: ignore[index]


def test_spec_rejects_negative_amounts():
    with pytest.raises(ValueError):
        BuildingSpec("Broken", "", cost={ResourceKind.FOOD: -1})
    with pytest.raises(ValueError):
        BuildingSpec("Broken", "", capacity_bonus=-5)


def test_spec_rejects_non_resource_keys():
    with pytest.raises(TypeError):
        BuildingSpec("Broken", "", produces={"energy": 1})  # type: ignore[dict-item]


@pytest.mark.parametrize("name", ["MINE", "mine", " Mine "])
def test_parse_is_case_insensitive(name):
    assert parse_building_kind(name) is BuildingKind.MINE


def test_parse_unknown_lists_valid_kinds():
    with pytest.raises(UnknownBuildingKindError) as exc_info:
        parse_building_kind("castle")

    err = exc_info.value
    assert err.code == "UNKNOWN_BUILDING_KIND"
    assert err.valid_kinds == valid_kind_names()
    assert "SOLAR_PANEL" in str(err)
    assert "castle" in str(err)


def test_resource_metadata():
    assert ResourceKind.WATER.display_name == "Water"
    assert ResourceKind.WATER.description == "Essential for survival"
    assert ResourceKind.MINERALS.key == "minerals"
