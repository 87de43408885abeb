from __future__ import annotations

import logging
from typing import Any, Union

import numpy as np

from snapvars.core.dataset import Dataset, FilteredDataset
from snapvars.core.exceptions import ShapeMismatch

logger = logging.getLogger(__name__)


class _NoMask:
    """Sentinel type: resolve over every row of the dataset."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_MASK"

    def __bool__(self) -> bool:
        return False


NO_MASK = _NoMask()

Mask = Union[_NoMask, np.ndarray, Any]


def is_no_mask(mask: Mask) -> bool:
    return mask is None or mask is NO_MASK


def apply_mask(dataset: Dataset, mask: Mask = NO_MASK) -> FilteredDataset:
    """
    Materialise the rows of `dataset` selected by `mask`.

    NO_MASK (or None) selects every row and does not copy the frame. Any other
    value is treated as a boolean row selection of exactly the dataset's length;
    the selected rows are copied in their original order.

    :param dataset: source dataset (not modified)
    :param mask: NO_MASK or a boolean array-like, one flag per row
    :return: FilteredDataset owning its rows
    :raises ShapeMismatch: if the mask length differs from the dataset length
    """
    if is_no_mask(mask):
        logger.debug(
            "No mask applied",
            extra={"dataset": dataset.name, "kind": dataset.kind.value, "n_rows": len(dataset)},
        )
        return FilteredDataset.from_dataset(dataset, dataset.frame)

    flags = np.asarray(mask, dtype=bool).reshape(-1)
    if flags.shape[0] != len(dataset):
        raise ShapeMismatch(expected=len(dataset), actual=flags.shape[0], what="mask")

    frame = dataset.frame.loc[flags].reset_index(drop=True).copy()

    logger.debug(
        "Mask applied",
        extra={
            "dataset": dataset.name,
            "kind": dataset.kind.value,
            "n_rows": len(dataset),
            "n_selected": len(frame),
        },
    )
    return FilteredDataset.from_dataset(dataset, frame)
