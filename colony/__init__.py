"""colony - resource-economy colony simulation engine."""

from colony.buildings import BUILDING_SPECS, BuildingKind, BuildingSpec, parse_building_kind
from colony.config import ColonyConfig, clamp_interval
from colony.engine import SimulationEngine
from colony.exceptions import (
    BuildError,
    CellOccupiedError,
    ColonyError,
    ConfigurationError,
    InsufficientResourcesError,
    OutOfBoundsError,
    UnknownBuildingKindError,
)
from colony.reports import BuildingInfo, BuildReport, CatalogInfo, TickReport
from colony.resources import ResourceKind
from colony.state import ColonySnapshot, ColonyState, PlacedBuilding

__all__ = [
    "BUILDING_SPECS",
    "BuildError",
    "BuildReport",
    "BuildingInfo",
    "BuildingKind",
    "BuildingSpec",
    "CatalogInfo",
    "CellOccupiedError",
    "ColonyConfig",
    "ColonyError",
    "ColonySnapshot",
    "ColonyState",
    "ConfigurationError",
    "InsufficientResourcesError",
    "OutOfBoundsError",
    "PlacedBuilding",
    "ResourceKind",
    "SimulationEngine",
    "TickReport",
    "UnknownBuildingKindError",
    "clamp_interval",
    "parse_building_kind",
]
