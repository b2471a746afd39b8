"""Pytest configuration and fixtures for colony engine tests."""

import pytest

from colony.config import ColonyConfig
from colony.engine import SimulationEngine
from colony.state import ColonyState


def make_config(**overrides) -> ColonyConfig:
    """Default starting conditions, independent of the environment."""
    values = dict(
        name="Test Colony",
        start_energy=100,
        start_food=50,
        start_water=50,
        start_minerals=30,
        grid_width=32,
        grid_height=32,
        tick_interval_ms=5000,
    )
    values.update(overrides)
    return ColonyConfig(**values)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def state(config):
    """A freshly seeded colony."""
    return ColonyState.seeded(config)


@pytest.fixture
def engine(state, config):
    """Engine over a fresh colony on the default 32x32 grid."""
    return SimulationEngine(state, config.grid_width, config.grid_height)
