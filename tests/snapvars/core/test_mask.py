import numpy as np
import pandas as pd
import pytest

from snapvars.core.dataset import Dataset, DatasetKind
from snapvars.core.exceptions import ShapeMismatch
from snapvars.core.mask import NO_MASK, apply_mask


def _make_dataset(n=4):
    frame = pd.DataFrame(
        {
            "level": [3] * n,
            "cx": np.arange(n) + 1,
            "cy": np.arange(n) + 2,
            "cz": np.arange(n) + 3,
            "rho": np.linspace(1.0, 2.0, n),
        }
    )
    return Dataset(frame, DatasetKind.CELL, boxlen=48.0, lmin=3, lmax=3, name="masktest")


def test_no_mask_returns_source_frame():
    ds = _make_dataset()

    filtered = apply_mask(ds, NO_MASK)

    assert filtered.frame is ds.frame
    assert len(filtered) == 4
    assert filtered.kind is DatasetKind.CELL


def test_mask_selects_rows_in_order():
    ds = _make_dataset()

    filtered = apply_mask(ds, [False, True, False, True])

    assert len(filtered) == 2
    assert list(filtered.frame["cx"]) == [2, 4]
    assert list(filtered.frame.index) == [0, 1]


def test_filtered_frame_is_independent_copy():
    ds = _make_dataset()
    before = ds.frame.copy()

    filtered = apply_mask(ds, np.array([True, True, False, False]))
    filtered.frame.loc[0, "rho"] = -99.0

    pd.testing.assert_frame_equal(ds.frame, before)


def test_mask_length_mismatch():
    ds = _make_dataset()

    with pytest.raises(ShapeMismatch, match="expected 4"):
        apply_mask(ds, [True, False, True])


def test_one_element_mask_is_not_a_sentinel():
    ds = _make_dataset()

    with pytest.raises(ShapeMismatch):
        apply_mask(ds, [False])

    single = _make_dataset(n=1)
    assert len(apply_mask(single, [False])) == 0
    assert len(apply_mask(single, [True])) == 1


def test_no_mask_is_falsy_singleton():
    assert not NO_MASK
    assert repr(NO_MASK) == "NO_MASK"
    assert type(NO_MASK)() is NO_MASK
