"""Colony configuration read from the environment."""

import os
from dataclasses import dataclass, field

from colony.exceptions import ConfigurationError
from colony.resources import ResourceKind

DEFAULT_COLONY_NAME = "Life Support"

# Tick cadence bounds (milliseconds)
MIN_TICK_INTERVAL_MS = 200
MAX_TICK_INTERVAL_MS = 30000
DEFAULT_TICK_INTERVAL_MS = 5000

# Colony starting conditions
STARTING_POPULATION = 5
STARTING_POPULATION_CAPACITY = 10


def clamp_interval(interval_ms: int) -> int:
    """Clamp a tick interval to the supported range."""
    return max(MIN_TICK_INTERVAL_MS, min(MAX_TICK_INTERVAL_MS, int(interval_ms)))


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class ColonyConfig:
    """Starting conditions and grid size for a colony.

    Every field falls back to a ``COLONY_*`` environment variable and then
    to the built-in default. Values are read when the config is created,
    so a reset picks up the config the manager was built with.
    """

    name: str = field(default_factory=lambda: os.getenv("COLONY_NAME", DEFAULT_COLONY_NAME))
    start_energy: int = field(default_factory=lambda: _env_int("COLONY_START_ENERGY", 100))
    start_food: int = field(default_factory=lambda: _env_int("COLONY_START_FOOD", 50))
    start_water: int = field(default_factory=lambda: _env_int("COLONY_START_WATER", 50))
    start_minerals: int = field(default_factory=lambda: _env_int("COLONY_START_MINERALS", 30))
    grid_width: int = field(default_factory=lambda: _env_int("COLONY_GRID_WIDTH", 32))
    grid_height: int = field(default_factory=lambda: _env_int("COLONY_GRID_HEIGHT", 32))
    tick_interval_ms: int = field(
        default_factory=lambda: _env_int("COLONY_TICK_INTERVAL_MS", DEFAULT_TICK_INTERVAL_MS)
    )

    def __post_init__(self) -> None:
        for label in ("start_energy", "start_food", "start_water", "start_minerals"):
            if getattr(self, label) < 0:
                raise ConfigurationError(f"{label} must be >= 0, got {getattr(self, label)}")
        if self.grid_width <= 0 or self.grid_height <= 0:
            raise ConfigurationError(
                f"grid must be at least 1x1, got {self.grid_width}x{self.grid_height}"
            )
        self.tick_interval_ms = clamp_interval(self.tick_interval_ms)

    def starting_resources(self) -> dict:
        """Seed quantities keyed by resource kind."""
        return {
            ResourceKind.ENERGY: self.start_energy,
            ResourceKind.FOOD: self.start_food,
            ResourceKind.WATER: self.start_water,
            ResourceKind.MINERALS: self.start_minerals,
        }
