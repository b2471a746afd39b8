"""colony_server - live scheduling, broadcast and HTTP adapter for the colony engine."""

from colony_server.broadcast import Subscription, TickBroadcaster
from colony_server.colony_manager import ColonyManager
from colony_server.tick_scheduler import TickScheduler

__all__ = ["ColonyManager", "Subscription", "TickBroadcaster", "TickScheduler"]
