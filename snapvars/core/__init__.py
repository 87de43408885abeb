"""
Core domain layer: dataset abstraction, mask filter, units, coordinate
decoding and the variable resolver
"""

from .dataset import Dataset, DatasetKind, FilteredDataset
from .mask import NO_MASK, apply_mask
from .units import PhysicalConstants, UnitScaleTable

__all__ = [
    "Dataset",
    "DatasetKind",
    "FilteredDataset",
    "NO_MASK",
    "apply_mask",
    "PhysicalConstants",
    "UnitScaleTable",
]
