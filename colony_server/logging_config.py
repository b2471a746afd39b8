"""Logging setup for the colony server and the engine it drives."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

SERVER_LOGGER = "colony_server"
ENGINE_LOGGER = "colony"


def _resolve(explicit: str | None, env_var: str, fallback: str) -> str:
    raw = explicit if explicit is not None else os.getenv(env_var)
    return (raw or fallback).upper()


def configure_logging(
    *,
    level: str | None = None,
    engine_level: str | None = None,
    include_uvicorn: bool = True,
) -> logging.Logger:
    """Configure logging for the server and the engine.

    The server level comes from ``level``, then ``COLONY_LOG_LEVEL``, then
    INFO. The engine level comes from ``engine_level``, then
    ``COLONY_ENGINE_LOG_LEVEL``, then the server level.

    Args:
        level: Explicit server log level.
        engine_level: Explicit engine log level.
        include_uvicorn: Whether to align uvicorn loggers with the server level.

    Returns:
        The server logger (``colony_server``).
    """
    server_level = _resolve(level, "COLONY_LOG_LEVEL", "INFO")
    colony_level = _resolve(engine_level, "COLONY_ENGINE_LOG_LEVEL", server_level)

    logging.basicConfig(level=server_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    app_logger = logging.getLogger(SERVER_LOGGER)
    app_logger.setLevel(server_level)
    logging.getLogger(ENGINE_LOGGER).setLevel(colony_level)

    if include_uvicorn:
        for uvicorn_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(uvicorn_logger).setLevel(server_level)

    app_logger.debug("Logging configured (server %s, engine %s)", server_level, colony_level)
    return app_logger
