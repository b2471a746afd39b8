"""Colony exception hierarchy.

Build rejections are recoverable: the engine turns them into a failed
:class:`colony.reports.BuildReport` instead of letting them escape.
"""

from typing import List, Sequence


class ColonyError(Exception):
    """Root of all colony domain exceptions."""


class BuildError(ColonyError):
    """A build request was rejected. No state was changed."""

    code = "BUILD_ERROR"


class OutOfBoundsError(BuildError):
    """Build coordinates fall outside the grid."""

    code = "OUT_OF_BOUNDS"


class CellOccupiedError(BuildError):
    """The target cell already holds a building."""

    code = "CELL_OCCUPIED"


class InsufficientResourcesError(BuildError):
    """The colony cannot afford the build cost."""

    code = "INSUFFICIENT_RESOURCES"


class UnknownBuildingKindError(BuildError):
    """A caller named a building kind that does not exist."""

    code = "UNKNOWN_BUILDING_KIND"

    def __init__(self, name: str, valid_kinds: Sequence[str]) -> None:
        self.name = name
        self.valid_kinds: List[str] = list(valid_kinds)
        super().__init__(
            f"Unknown building type: {name}. Valid types: [{', '.join(self.valid_kinds)}]"
        )


class ConfigurationError(ColonyError):
    """Invalid or missing configuration."""
