from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Tuple

from snapvars.config.model import EngineConfig, GridExtent, SnapshotInfo
from snapvars.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENGINE_CONFIG_FILE = "snapvars.json"


def _resolve_path(path: Path) -> Path:
    """
    Resolve a relative path against SNAPVARS_CONFIG_ROOT if it is set.
    """
    if path.is_absolute():
        return path
    config_root = os.environ.get("SNAPVARS_CONFIG_ROOT")
    if config_root:
        return Path(config_root) / path
    return path


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found at {path}")
    try:
        with path.open() as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(raw).__name__}")
    return raw


def load_snapshot_info(path: str | Path) -> Tuple[SnapshotInfo, GridExtent]:
    """
    Load snapshot metadata written by an external reader.

    Expected keys (all optional except the three code units):

        {
          "unit_l": 3.08e21, "unit_d": 6.77e-23, "unit_t": 3.08e15,
          "gamma": 1.6667, "time": 0.25,
          "boxlen": 48.0, "levelmin": 3, "levelmax": 10
        }

    :param path: JSON file path; relative paths honour SNAPVARS_CONFIG_ROOT
    :return: (SnapshotInfo, GridExtent)
    :raises ConfigError: if the file is missing, malformed or lacks code units
    """
    path = _resolve_path(Path(path))
    logger.info("Loading snapshot metadata", extra={"path": str(path)})

    raw = _read_json(path)

    missing = [k for k in ("unit_l", "unit_d", "unit_t") if k not in raw]
    if missing:
        raise ConfigError(f"Snapshot metadata {path} is missing {missing}")

    try:
        info = SnapshotInfo(
            gamma=float(raw.get("gamma", 5.0 / 3.0)),
            time=float(raw.get("time", 0.0)),
            unit_l=float(raw["unit_l"]),
            unit_d=float(raw["unit_d"]),
            unit_t=float(raw["unit_t"]),
        )
        extent = GridExtent(
            boxlen=float(raw.get("boxlen", 1.0)),
            levelmin=int(raw.get("levelmin", 0)),
            levelmax=int(raw.get("levelmax", raw.get("levelmin", 0))),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in snapshot metadata {path}: {e}") from e

    if extent.levelmax < extent.levelmin:
        raise ConfigError(
            f"levelmax={extent.levelmax} is below levelmin={extent.levelmin} in {path}"
        )

    logger.info(
        "Snapshot metadata loaded",
        extra={
            "path": str(path),
            "boxlen": extent.boxlen,
            "levelmin": extent.levelmin,
            "levelmax": extent.levelmax,
            "n_units": len(info.scale),
        },
    )
    return info, extent


def load_engine_config(root: str | Path) -> EngineConfig:
    """
    Load engine defaults from `root/snapvars.json`; defaults if the file is absent.
    """
    root = _resolve_path(Path(root))
    path = root / ENGINE_CONFIG_FILE
    if not path.is_file():
        logger.info("No engine config found, using defaults", extra={"config_root": str(root)})
        return EngineConfig()

    # imported here: snapvars.core imports this package while it initialises
    from snapvars.core.coordinates import normalize_center

    raw = _read_json(path)
    try:
        cfg = EngineConfig.from_raw(raw)
    except TypeError as e:
        raise ConfigError(f"Invalid engine config in {path}: {e}") from e
    if cfg.default_direction not in ("x", "y", "z"):
        raise ConfigError(f"default_direction must be x, y or z, got {cfg.default_direction!r}")
    try:
        normalize_center(cfg.default_center, boxlen=1.0)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid default_center in {path}: {e}") from e
    return cfg
