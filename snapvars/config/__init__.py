"""
Config package for snapvars.

Responsible for:
- config models (SnapshotInfo, GridExtent, EngineConfig)
- config I/O helpers (load_snapshot_info / load_engine_config)
"""

from .model import EngineConfig, GridExtent, SnapshotInfo
from .loader import load_engine_config, load_snapshot_info

__all__ = [
    "EngineConfig",
    "GridExtent",
    "SnapshotInfo",
    "load_engine_config",
    "load_snapshot_info",
]
