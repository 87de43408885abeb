from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

from snapvars.config.model import EngineConfig

LOG_FORMAT_ENV = "SNAPVARS_LOG_FORMAT"
FORMATS = ("json", "plain")


def _select_format(force_format: Optional[str], config: Optional[EngineConfig]) -> str:
    if force_format is not None:
        mode = force_format
    elif os.getenv(LOG_FORMAT_ENV):
        mode = os.environ[LOG_FORMAT_ENV]
    elif config is not None:
        mode = config.log_format
    else:
        mode = "json"

    mode = mode.lower()
    if mode not in FORMATS:
        raise ValueError(f"Unknown log format {mode!r}, expected one of {FORMATS}")
    return mode


def _build_formatter(mode: str) -> logging.Formatter:
    if mode == "plain":
        return logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    # extra={...} payloads of the engine's log calls become top-level JSON keys
    return jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "name": "logger"},
    )


def configure_logging(
        level: int = logging.INFO,
        force_format: Optional[str] = None,
        config: Optional[EngineConfig] = None,
        logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the root logger (or to `logger_name`,
    e.g. "snapvars", when embedding in an application that owns the root).

    Format selection order:
        1) force_format argument ("json" or "plain")
        2) env var SNAPVARS_LOG_FORMAT
        3) config.log_format from snapvars.json
        4) "json"

    :raises ValueError: if the selected format is neither json nor plain
    """
    mode = _select_format(force_format, config)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(mode))

    # Replace any existing handlers to avoid duplicate logs
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger
