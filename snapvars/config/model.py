from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from snapvars.core.units import PhysicalConstants, UnitScaleTable


@dataclass(frozen=True)
class SnapshotInfo:
    """
    Physical reference scales and constants of one simulation snapshot.

    unit_l / unit_d / unit_t are the cgs values of one code unit of length,
    density and time. If no scale table is given one is derived from them.
    """

    gamma: float = 5.0 / 3.0
    time: float = 0.0
    unit_l: float = 1.0
    unit_d: float = 1.0
    unit_t: float = 1.0
    constants: PhysicalConstants = field(default_factory=PhysicalConstants)
    scale: Optional[UnitScaleTable] = None

    def __post_init__(self) -> None:
        if self.scale is None:
            # frozen dataclass: bypass __setattr__ for the derived default
            object.__setattr__(
                self,
                "scale",
                UnitScaleTable.from_code_units(
                    self.unit_l, self.unit_d, self.unit_t, self.constants
                ),
            )

    @property
    def unit_v(self) -> float:
        return self.unit_l / self.unit_t

    @property
    def grav_const(self) -> float:
        """Gravitational constant expressed in code units."""
        return self.constants.G * self.unit_d * self.unit_t ** 2

    @property
    def light_speed(self) -> float:
        """Speed of light expressed in code units."""
        return self.constants.c / self.unit_v


@dataclass(frozen=True)
class GridExtent:
    """
    Box size and refinement range read alongside a snapshot's units.
    """

    boxlen: float = 1.0
    levelmin: int = 0
    levelmax: int = 0


@dataclass(frozen=True)
class EngineConfig:
    """
    Defaults applied by the variable service when the caller does not pass
    them explicitly.
    """

    default_direction: str = "z"
    default_center: Tuple[Any, ...] = (0.0, 0.0, 0.0)
    log_format: str = "json"

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> EngineConfig:
        center = raw.get("default_center", cls.default_center)
        # "bc" on its own means the box center on every axis
        if isinstance(center, str):
            center = (center,)
        return cls(
            default_direction=raw.get("default_direction", cls.default_direction),
            default_center=tuple(center),
            log_format=raw.get("log_format", cls.log_format),
        )
