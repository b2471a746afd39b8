"""Application factory and context for the colony API.

All runtime state lives in an :class:`AppContext` attached to
``app.state.context`` instead of module-level globals, so each test can
build an app around a fresh colony.

Usage:
------
    # Production (settings from the environment)
    app = create_app()

    # Testing (custom colony)
    app = create_app(context=AppContext(config=ColonyConfig(start_food=0)))
"""

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from colony.config import ColonyConfig
from colony_server.broadcast import TickBroadcaster
from colony_server.colony_manager import ColonyManager
from colony_server.logging_config import configure_logging
from colony_server.tick_scheduler import TickScheduler

DEFAULT_API_PORT = 8000


@dataclass
class AppContext:
    """Runtime context holding the colony, its scheduler and server settings."""

    config: ColonyConfig = field(default_factory=ColonyConfig)
    api_port: int = field(
        default_factory=lambda: int(os.getenv("COLONY_API_PORT", str(DEFAULT_API_PORT)))
    )
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: list = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )
    autostart: bool = True

    # Created in __post_init__ unless supplied
    manager: Optional[ColonyManager] = None
    broadcaster: Optional[TickBroadcaster] = None
    scheduler: Optional[TickScheduler] = None

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("colony_server"))

    def __post_init__(self) -> None:
        if self.manager is None:
            self.manager = ColonyManager(self.config)
        if self.broadcaster is None:
            self.broadcaster = TickBroadcaster()
        if self.scheduler is None:
            self.scheduler = TickScheduler(
                self.manager,
                self.broadcaster,
                interval_ms=self.config.tick_interval_ms,
            )


def create_app(
    *,
    production_mode: Optional[bool] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        production_mode: Override production mode (default: from PRODUCTION env var)
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    logger = configure_logging()

    if context is None:
        context = AppContext()
    if production_mode is not None:
        context.production_mode = production_mode
    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx: AppContext = app.state.context
        try:
            if ctx.autostart:
                ctx.scheduler.start()
            ctx.logger.info("LIFESPAN: Startup complete - yielding control to app")
            yield
            ctx.logger.info("LIFESPAN: Received shutdown signal")
        except Exception as e:
            ctx.logger.error(f"Exception in lifespan: {e}", exc_info=True)
            raise
        finally:
            ctx.scheduler.stop()

    app = FastAPI(
        title="Life Support Colony API",
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    _setup_routers(app, context)
    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Include all API routers."""
    from colony_server.routers import colony

    app.include_router(colony.setup_router(ctx.manager, ctx.scheduler))
