"""Lock-guarded access to the colony engine.

Every operation that reads or writes colony state goes through one
``threading.Lock``, so a build can never observe a half-applied tick and a
snapshot can never show building counts out of sync with placements.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from colony.buildings import parse_building_kind
from colony.config import ColonyConfig
from colony.engine import SimulationEngine
from colony.exceptions import UnknownBuildingKindError
from colony.reports import BuildReport, CatalogInfo, TickReport
from colony.state import ColonySnapshot, ColonyState

logger = logging.getLogger(__name__)

TickPublisher = Callable[[TickReport], Any]


class ColonyManager:
    """Owns the single colony and serializes access to it.

    Args:
        config: Starting conditions and grid size. Defaults to a config
            read from the environment.
    """

    def __init__(self, config: Optional[ColonyConfig] = None) -> None:
        self.config = config or ColonyConfig()
        self.lock = threading.Lock()
        self._engine = self._create_engine()
        logger.info(
            "Colony %r created (%dx%d grid)",
            self.config.name,
            self.config.grid_width,
            self.config.grid_height,
        )

    def _create_engine(self) -> SimulationEngine:
        return SimulationEngine(
            ColonyState.seeded(self.config),
            grid_width=self.config.grid_width,
            grid_height=self.config.grid_height,
        )

    @property
    def state(self) -> ColonyState:
        """The live state. Callers must hold ``lock`` while touching it."""
        return self._engine.state

    def get_snapshot(self) -> ColonySnapshot:
        with self.lock:
            return self._engine.state.snapshot()

    def get_catalog(self) -> CatalogInfo:
        # Static data; no lock needed.
        return self._engine.catalog()

    def build(self, kind_name: str, x: int, y: int) -> BuildReport:
        """Build ``kind_name`` at ``(x, y)``.

        An unknown kind name yields a failed report listing the valid kinds;
        the state is not touched.
        """
        try:
            kind = parse_building_kind(kind_name)
        except UnknownBuildingKindError as e:
            logger.warning("Rejected build of unknown kind %r", kind_name)
            with self.lock:
                return self._engine.failed_build(e)

        with self.lock:
            return self._engine.build(kind, x, y)

    def can_afford(self, kind_name: str) -> bool:
        kind = parse_building_kind(kind_name)
        with self.lock:
            return self._engine.can_afford(kind)

    def tick(self, publish: Optional[TickPublisher] = None) -> TickReport:
        """Advance one tick.

        ``publish`` runs inside the lock, so reports are handed out in the
        same order the ticks happened.
        """
        with self.lock:
            report = self._engine.tick()
            if publish is not None:
                publish(report)
        return report

    def reset(self) -> ColonySnapshot:
        """Replace the colony with a freshly seeded one."""
        with self.lock:
            self._engine = self._create_engine()
            snapshot = self._engine.state.snapshot()
        logger.info("Colony %r reset", self.config.name)
        return snapshot

    def projected_deltas(self) -> Dict[str, int]:
        with self.lock:
            return self._engine.projected_deltas()
