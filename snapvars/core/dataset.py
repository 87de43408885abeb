from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np
import pandas as pd

from snapvars.config.model import SnapshotInfo


class DatasetKind(str, Enum):
    CELL = "cell"
    PARTICLE = "particle"
    FIELD = "field"

    def __str__(self) -> str:
        return self.value


# Integer grid coordinates (Cell, Field) and float positions (Particle)
GRID_COLUMNS = ("cx", "cy", "cz")
POSITION_COLUMNS = ("x", "y", "z")
LEVEL_COLUMN = "level"

# Columns a snapshot reader is expected to deliver per kind. Formula rules may
# depend on these without a rule of their own.
PRIMITIVE_COLUMNS = {
    DatasetKind.CELL: (
        LEVEL_COLUMN, *GRID_COLUMNS, "rho", "vx", "vy", "vz", "p", "bx", "by", "bz",
    ),
    DatasetKind.PARTICLE: (
        LEVEL_COLUMN, *POSITION_COLUMNS, "vx", "vy", "vz", "mass", "birth", "id", "family", "tag",
    ),
    DatasetKind.FIELD: (
        LEVEL_COLUMN, *GRID_COLUMNS, "epot", "ax", "ay", "az",
    ),
}

# Bookkeeping columns returned without unit scaling
UNSCALED_COLUMNS = (LEVEL_COLUMN, "id", "cpu", "family", "tag")


class Dataset:
    """
    Column table for one slice of a simulation snapshot.

    Wraps a pandas DataFrame whose rows are grid cells, particles or gravity
    field cells. The engine treats the frame as read-only: every derived
    quantity is computed into new arrays.

    - boxlen: size of the cubic domain in code units
    - lmin / lmax: refinement range; a dataset without a `level` column (or
      with lmin == lmax) is uniform and decoded at lmax
    - info: the snapshot's code units and constants
    """

    def __init__(
        self,
        frame: pd.DataFrame,
        kind: DatasetKind | str,
        boxlen: float = 1.0,
        info: Optional[SnapshotInfo] = None,
        lmin: int = 0,
        lmax: Optional[int] = None,
        name: str = "snapshot",
    ) -> None:
        self.frame = frame
        self.kind = DatasetKind(kind)
        self.boxlen = float(boxlen)
        self.info = info if info is not None else SnapshotInfo()
        self.lmin = int(lmin)
        self.lmax = int(lmax) if lmax is not None else self._infer_lmax()
        self.name = name

    def _infer_lmax(self) -> int:
        if LEVEL_COLUMN in self.frame.columns and len(self.frame):
            return int(self.frame[LEVEL_COLUMN].max())
        return self.lmin

    def __len__(self) -> int:
        return len(self.frame)

    def __repr__(self) -> str:
        return (
            f"Dataset(name={self.name!r}, kind={self.kind.value}, rows={len(self)}, "
            f"boxlen={self.boxlen}, levels=[{self.lmin}, {self.lmax}])"
        )

    @property
    def columns(self) -> List[str]:
        return list(self.frame.columns)

    @property
    def is_uniform(self) -> bool:
        """True for fixed-resolution grids (no level column or lmin == lmax)."""
        return LEVEL_COLUMN not in self.frame.columns or self.lmin == self.lmax

    def has_columns(self, *names: str) -> bool:
        return all(n in self.frame.columns for n in names)

    def levels(self) -> np.ndarray:
        """Refinement level per row; lmax everywhere for uniform grids."""
        if self.is_uniform:
            return np.full(len(self), self.lmax, dtype=np.int64)
        return self.frame[LEVEL_COLUMN].to_numpy(dtype=np.int64)


@dataclass(frozen=True, eq=False)
class FilteredDataset:
    """
    Rows of a Dataset selected by a mask, ready for resolution.

    When produced with a mask the frame is an independent copy with a fresh
    RangeIndex. With NO_MASK it is the source frame itself, which the
    resolver never writes to.
    """

    frame: pd.DataFrame
    kind: DatasetKind
    boxlen: float
    info: SnapshotInfo
    lmin: int
    lmax: int
    name: str = "snapshot"
    is_uniform: bool = False
    source_rows: int = 0
    columns: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_dataset(cls, dataset: Dataset, frame: pd.DataFrame) -> FilteredDataset:
        return cls(
            frame=frame,
            kind=dataset.kind,
            boxlen=dataset.boxlen,
            info=dataset.info,
            lmin=dataset.lmin,
            lmax=dataset.lmax,
            name=dataset.name,
            is_uniform=dataset.is_uniform,
            source_rows=len(dataset),
            columns=frozenset(frame.columns),
        )

    def __len__(self) -> int:
        return len(self.frame)

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def column(self, name: str) -> np.ndarray:
        return self.frame[name].to_numpy(dtype=np.float64)

    def levels(self) -> np.ndarray:
        if self.is_uniform:
            return np.full(len(self), self.lmax, dtype=np.int64)
        return self.frame[LEVEL_COLUMN].to_numpy(dtype=np.int64)
