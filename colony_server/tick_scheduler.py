"""Periodic tick driver with a runtime-adjustable cadence.

The scheduler owns one cancellable ``asyncio.TimerHandle``. Each firing runs
a tick through the :class:`ColonyManager` (publishing inside the manager's
lock) and then re-arms the timer at whatever interval is current at that
moment. ``set_speed`` cancels the pending handle and re-arms it; it never
touches a tick that is already running.
"""

import asyncio
import logging
import threading
from typing import Optional

from colony.config import DEFAULT_TICK_INTERVAL_MS, clamp_interval
from colony.reports import TickReport
from colony_server.broadcast import Subscription, TickBroadcaster
from colony_server.colony_manager import ColonyManager

logger = logging.getLogger(__name__)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class TickScheduler:
    """Drives ``ColonyManager.tick`` on a timer and broadcasts every report.

    Args:
        manager: The colony to tick.
        broadcaster: Receives each report, in tick order.
        interval_ms: Initial cadence, clamped to the supported range.
    """

    def __init__(
        self,
        manager: ColonyManager,
        broadcaster: Optional[TickBroadcaster] = None,
        interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
    ) -> None:
        self.manager = manager
        self.broadcaster = broadcaster or TickBroadcaster()
        self._interval_ms = clamp_interval(interval_ms)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._timer_lock = threading.Lock()
        self._running = False

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def running(self) -> bool:
        return self._running

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Begin ticking every ``interval_ms``. Calling twice is a no-op."""
        if self._running:
            return
        self._loop = loop or asyncio.get_running_loop()
        self._running = True
        self._arm()
        logger.info("Tick scheduler started (interval %d ms)", self._interval_ms)

    def stop(self) -> None:
        """Cancel future firings and release every subscriber stream."""
        with self._timer_lock:
            self._running = False
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
        self.broadcaster.close()
        logger.info("Tick scheduler stopped")

    def _arm(self) -> None:
        """Schedule the next firing. Must run on the scheduler's loop."""
        with self._timer_lock:
            if not self._running or self._loop is None:
                return
            if self._handle is not None:
                self._handle.cancel()
            self._handle = self._loop.call_later(self._interval_ms / 1000, self._fire)

    def _fire(self) -> None:
        with self._timer_lock:
            self._handle = None
        try:
            self._run_tick()
        except Exception as e:
            logger.error("Scheduled tick failed: %s", e, exc_info=True)
        finally:
            self._arm()

    def _run_tick(self) -> TickReport:
        report = self.manager.tick(publish=self.broadcaster.publish)
        logger.info("Game tick %d: %s", report.tick, report.events)
        return report

    def manual_tick(self) -> TickReport:
        """Tick once now, outside the cadence, and publish like a scheduled tick."""
        return self._run_tick()

    def set_speed(self, interval_ms: int) -> int:
        """Change the cadence and reschedule the next firing.

        Returns:
            The effective interval after clamping.
        """
        effective = clamp_interval(interval_ms)
        previous = self._interval_ms
        self._interval_ms = effective
        if self._running and self._loop is not None:
            if _running_loop() is self._loop:
                self._arm()
            else:
                self._loop.call_soon_threadsafe(self._arm)
        logger.info("Tick interval changed %d ms -> %d ms", previous, effective)
        return effective

    def subscribe(self) -> Subscription:
        """Stream every report published from now on."""
        return self.broadcaster.subscribe()
