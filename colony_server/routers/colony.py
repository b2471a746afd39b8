"""Colony REST and Server-Sent-Events endpoints."""

from __future__ import annotations

import logging
from typing import AsyncIterator

import orjson
from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from colony.exceptions import UnknownBuildingKindError
from colony_server.broadcast import Subscription
from colony_server.colony_manager import ColonyManager
from colony_server.models import BuildRequest, SpeedRequest, SpeedResponse
from colony_server.tick_scheduler import TickScheduler

logger = logging.getLogger(__name__)

HELP_TEXT = """\
=== LIFE SUPPORT ===

ENDPOINTS:
  GET  /colony              - View colony status
  GET  /colony/config       - Get game configuration
  GET  /colony/buildings    - List available buildings
  GET  /colony/projection   - Net resource change expected next tick
  POST /colony/build/{type} - Build a structure (body: {"x":0,"y":0})
  POST /colony/reset        - Reset the game
  POST /colony/tick         - Advance one tick immediately
  GET  /colony/speed        - Current tick interval
  POST /colony/speed        - Change tick interval (body: {"intervalMs":1000})
  GET  /colony/events       - SSE stream of game ticks

BUILDING TYPES:
  SOLAR_PANEL     - Generates energy
  HYDROPONIC_FARM - Grows food (needs water & energy)
  WATER_EXTRACTOR - Extracts water (needs energy)
  MINE            - Extracts minerals (needs energy)
  HABITAT         - Houses colonists (increases capacity)

GOAL: Grow your colony without running out of resources!
"""


async def sse_events(subscription: Subscription) -> AsyncIterator[bytes]:
    """Render a subscription as Server-Sent-Events frames."""
    try:
        async for report in subscription:
            yield b"data: " + orjson.dumps(report.to_dict()) + b"\n\n"
    finally:
        subscription.close()


def setup_router(manager: ColonyManager, scheduler: TickScheduler) -> APIRouter:
    """Create the colony router bound to a manager and scheduler."""

    router = APIRouter(prefix="/colony", tags=["colony"])

    @router.get("")
    async def get_status():
        return JSONResponse(manager.get_snapshot().to_dict())

    @router.get("/config")
    async def get_config():
        return JSONResponse(manager.get_catalog().to_dict())

    @router.get("/buildings")
    async def get_buildings():
        return JSONResponse(manager.get_catalog().to_dict()["buildings"])

    @router.get("/projection")
    async def get_projection():
        return JSONResponse(manager.projected_deltas())

    @router.get("/buildings/{building}/affordable")
    async def get_affordable(building: str):
        try:
            affordable = manager.can_afford(building)
        except UnknownBuildingKindError as e:
            return JSONResponse(
                {"error": str(e), "validTypes": e.valid_kinds}, status_code=404
            )
        return JSONResponse({"building": building.upper(), "affordable": affordable})

    @router.post("/build/{building}")
    async def build(building: str, request: BuildRequest):
        report = manager.build(building, request.x, request.y)
        return JSONResponse(report.to_dict(), status_code=200 if report.success else 400)

    @router.post("/reset")
    async def reset():
        return JSONResponse(manager.reset().to_dict())

    @router.post("/tick")
    async def manual_tick():
        return JSONResponse(scheduler.manual_tick().to_dict())

    @router.get("/speed", response_model=SpeedResponse)
    async def get_speed():
        return SpeedResponse(intervalMs=scheduler.interval_ms)

    @router.post("/speed", response_model=SpeedResponse)
    async def set_speed(request: SpeedRequest):
        return SpeedResponse(intervalMs=scheduler.set_speed(request.intervalMs))

    @router.get("/events")
    async def stream_events():
        subscription = scheduler.subscribe()
        return StreamingResponse(
            sse_events(subscription),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    @router.get("/help", response_class=PlainTextResponse)
    async def help_text():
        return HELP_TEXT

    return router
