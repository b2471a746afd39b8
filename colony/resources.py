"""Resource kinds tracked by the colony."""

from enum import Enum


class ResourceKind(Enum):
    """Types of resources in the colony economy.

    Each member carries only display metadata; quantities live on
    :class:`colony.state.ColonyState`.
    """

    ENERGY = ("Energy", "Powers all colony operations")
    FOOD = ("Food", "Feeds the colonists")
    WATER = ("Water", "Essential for survival")
    MINERALS = ("Minerals", "Used for construction")

    def __init__(self, display_name: str, description: str) -> None:
        self.display_name = display_name
        self.description = description

    @property
    def key(self) -> str:
        """Lower-case name used in payloads (e.g. ``"energy"``)."""
        return self.name.lower()
