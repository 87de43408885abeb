import pandas as pd
import pytest

from snapvars.core.dataset import Dataset, DatasetKind
from snapvars.validation import ValidationError
from snapvars.validation.dataset_validation import validate_dataset


def _make_cells(**overrides):
    frame = pd.DataFrame(
        {"level": [2, 3], "cx": [1, 2], "cy": [1, 2], "cz": [1, 2], "rho": [1.0, 2.0]}
    )
    kwargs = {"boxlen": 1.0, "lmin": 2, "lmax": 3}
    kwargs.update(overrides)
    return Dataset(frame, DatasetKind.CELL, **kwargs)


def _codes(ds):
    with pytest.raises(ValidationError) as exc:
        validate_dataset(ds)
    return {i.code for i in exc.value.issues}


def test_valid_cell_dataset():
    validate_dataset(_make_cells())


def test_valid_particle_dataset():
    frame = pd.DataFrame({"x": [0.1], "y": [0.2], "z": [0.3], "mass": [1.0]})
    validate_dataset(Dataset(frame, "particle"))


def test_particles_need_float_positions():
    frame = pd.DataFrame({"cx": [1], "cy": [1], "cz": [1], "mass": [1.0]})
    assert _codes(Dataset(frame, "particle")) == {"DATASET_POSITION_COLUMNS"}


def test_boxlen_must_be_positive():
    assert _codes(_make_cells(boxlen=0.0)) == {"DATASET_BOXLEN"}


def test_level_range():
    assert _codes(_make_cells(lmin=4, lmax=3)) == {"DATASET_LEVEL_RANGE"}
    assert _codes(_make_cells(lmin=3, lmax=3)) == {"DATASET_LEVEL_BOUNDS"}


def test_duplicate_columns():
    frame = pd.DataFrame([[1, 1, 1, 1.0, 2.0]], columns=["cx", "cy", "cz", "rho", "rho"])
    assert _codes(Dataset(frame, "cell")) == {"DATASET_DUPLICATE_COLUMNS"}


def test_issues_are_collected():
    frame = pd.DataFrame({"level": [1], "rho": [1.0]})
    codes = _codes(Dataset(frame, "cell", boxlen=-1.0, lmin=2, lmax=2))
    assert codes == {"DATASET_POSITION_COLUMNS", "DATASET_BOXLEN", "DATASET_LEVEL_BOUNDS"}


def test_issues_name_the_dataset():
    ds = _make_cells(boxlen=0.0)
    ds.name = "output_00042"

    with pytest.raises(ValidationError) as exc:
        validate_dataset(ds)

    assert exc.value.codes == ["DATASET_BOXLEN"]
    assert exc.value.issues[0].subject == "output_00042"
    assert "DATASET_BOXLEN [output_00042]" in str(exc.value)
