"""
Top-level package for snapvars, a derived-quantity resolver for simulation
snapshots.

Most code only needs:
    snapvars.getvar
    snapvars.available_variables
    snapvars.Dataset / snapvars.DatasetKind
"""

from snapvars.core.assembler import VariableRequest
from snapvars.core.dataset import Dataset, DatasetKind
from snapvars.core.mask import NO_MASK
from snapvars.services.variable_service import available_variables, getvar

__all__ = [
    "Dataset",
    "DatasetKind",
    "NO_MASK",
    "VariableRequest",
    "available_variables",
    "getvar",
]
