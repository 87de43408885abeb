from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from snapvars.core.dataset import DatasetKind, FilteredDataset
from snapvars.core.exceptions import MissingField
from snapvars.core.units import STANDARD_UNIT, UnitScaleTable

BOX_CENTER_SYMBOLS = ("bc", "boxcenter")
LABELS = ("x", "y", "z")
VIEW_AXES = ("a", "b", "c")

Center = Tuple[float, float, float]


class Direction(str, Enum):
    """
    Line of sight of a directional view.

    `axes` names the physical axes labelled (a, b, c): the in-plane pair first,
    the out-of-plane axis last. Requested x/y/z positions and cx/cy/cz grid
    coordinates read the a/b/c axis; raw vector columns (vx, ax, ...) do not.
    """

    X = "x"
    Y = "y"
    Z = "z"

    @property
    def axes(self) -> Tuple[str, str, str]:
        return _AXES[self]

    @classmethod
    def parse(cls, value: Any) -> Direction:
        if isinstance(value, Direction):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"direction must be one of x, y, z, got {value!r}") from None


_AXES: Dict[Direction, Tuple[str, str, str]] = {
    Direction.Z: ("x", "y", "z"),
    Direction.Y: ("z", "x", "y"),
    Direction.X: ("z", "y", "x"),
}


def safe_ratio(numerator, denominator) -> np.ndarray:
    """
    Elementwise numerator / denominator, exactly 0.0 wherever the denominator is 0.

    No division is performed at those rows, so no warnings and no NaN.
    """
    num = np.asarray(numerator, dtype=np.float64)
    den = np.asarray(denominator, dtype=np.float64)
    out = np.zeros(np.broadcast(num, den).shape, dtype=np.float64)
    np.divide(num, den, out=out, where=den != 0)
    return out


def normalize_center(
    center: Optional[Sequence[Any]],
    boxlen: float,
    center_unit: str = STANDARD_UNIT,
    scale: Optional[UnitScaleTable] = None,
) -> Center:
    """
    Turn a user-facing center into domain fractions.

    - None -> (0, 0, 0)
    - "bc" / "boxcenter" (alone or as a one-element list) -> (0.5, 0.5, 0.5)
    - elements equal to "bc"/"boxcenter" -> 0.5
    - numeric elements are domain fractions for center_unit "standard",
      otherwise physical lengths in center_unit

    :raises ValueError: if the center does not have three components
    :raises UnknownUnit: if center_unit is not in the scale table
    """
    if center is None:
        return (0.0, 0.0, 0.0)

    if isinstance(center, str):
        center = [center]
    values = list(center)

    if len(values) == 1 and _is_box_center(values[0]):
        return (0.5, 0.5, 0.5)

    if len(values) != 3:
        raise ValueError(f"center must have 3 components, got {len(values)}: {values!r}")

    factor = 1.0
    if center_unit != STANDARD_UNIT:
        factor = (scale or UnitScaleTable()).factor(center_unit)

    out = []
    for v in values:
        if _is_box_center(v):
            out.append(0.5)
        elif center_unit != STANDARD_UNIT:
            out.append(float(v) / factor / boxlen)
        else:
            out.append(float(v))
    return (out[0], out[1], out[2])


def _is_box_center(value: Any) -> bool:
    return isinstance(value, str) and value.lower() in BOX_CENTER_SYMBOLS


# Names served by the transformer instead of the raw column, per dataset kind.
# v_a, v_b, v_c (a_a, a_b, a_c on fields) are the vector components along the
# view axes; the raw vx, vy, vz columns stay in their physical frame.
_COORDINATE_NAMES: Dict[DatasetKind, Tuple[str, ...]] = {
    DatasetKind.CELL: ("x", "y", "z", "cx", "cy", "cz", "v_a", "v_b", "v_c"),
    DatasetKind.PARTICLE: ("x", "y", "z", "v_a", "v_b", "v_c"),
    DatasetKind.FIELD: ("x", "y", "z", "cx", "cy", "cz", "a_a", "a_b", "a_c"),
}


def coordinate_names(kind: DatasetKind) -> Tuple[str, ...]:
    return _COORDINATE_NAMES[kind]


class CoordinateTransformer:
    """
    Decodes per-row positions, grid coordinates and vector components of a
    FilteredDataset relative to a center and under a view direction.

    All outputs are in code units; unit scaling happens in the resolver.
    """

    def __init__(
        self,
        filtered: FilteredDataset,
        center: Center = (0.0, 0.0, 0.0),
        direction: Direction | str = Direction.Z,
    ) -> None:
        self.filtered = filtered
        self.center = tuple(float(c) for c in center)
        self.direction = Direction.parse(direction)
        self._levels: Optional[np.ndarray] = None

    @property
    def kind(self) -> DatasetKind:
        return self.filtered.kind

    @property
    def boxlen(self) -> float:
        return self.filtered.boxlen

    def handles(self, name: str) -> bool:
        return name in _COORDINATE_NAMES[self.kind]

    def levels(self) -> np.ndarray:
        if self._levels is None:
            self._levels = self.filtered.levels()
        return self._levels

    def cells_per_side(self) -> np.ndarray:
        """2**level per row (2**lmax for uniform grids)."""
        return np.exp2(self.levels().astype(np.float64))

    def cellsize(self) -> np.ndarray:
        return self.boxlen / self.cells_per_side()

    def resolve(self, name: str) -> np.ndarray:
        """
        Native value of a coordinate name (position, grid index or vector).

        :raises MissingField: if the underlying columns are absent
        :raises KeyError: if the name is not a coordinate of this kind
        """
        if not self.handles(name):
            raise KeyError(name)

        if name in LABELS:
            return self.position(LABELS.index(name))
        if name[0] == "c":
            return self.grid(LABELS.index(name[-1]))
        return self.vector(name[0], VIEW_AXES.index(name[-1]))

    def _axis_column(self, name: str, source: str) -> np.ndarray:
        if not self.filtered.has_column(source):
            raise MissingField(name, [source])
        return self.filtered.column(source)

    def position(self, idx: int) -> np.ndarray:
        """Position along label idx (0 = a, 1 = b, 2 = c) relative to center."""
        axis = self.direction.axes[idx]
        label = LABELS[idx]
        if self.kind is DatasetKind.PARTICLE:
            raw = self._axis_column(label, axis)
            return (raw - self.center[idx]) * self.boxlen

        grid = self._axis_column(label, "c" + axis)
        return (grid / self.cells_per_side() - self.center[idx]) * self.boxlen

    def grid(self, idx: int) -> np.ndarray:
        """Integer grid coordinate along label idx, shifted by the center."""
        axis = self.direction.axes[idx]
        name = "c" + LABELS[idx]
        grid = self._axis_column(name, "c" + axis)
        return grid - self.cells_per_side() * self.center[idx]

    def vector(self, prefix: str, idx: int) -> np.ndarray:
        """Component of a vector column family (v* or a*) along view axis idx (0 = a)."""
        axis = self.direction.axes[idx]
        return self._axis_column(f"{prefix}_{VIEW_AXES[idx]}", prefix + axis).copy()

    def positions(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.position(0), self.position(1), self.position(2)
