import numpy as np
import pandas as pd
import pytest

from snapvars import getvar
from snapvars.core.dataset import Dataset, DatasetKind
from snapvars.core.exceptions import MissingField

GAMMA = 5.0 / 3.0


def _make_dataset(magnetic=True):
    data = {
        "level": [3, 3, 3, 3],
        "cx": [1, 4, 5, 6],
        "cy": [2, 4, 4, 7],
        "cz": [3, 4, 4, 2],
        "rho": [1.0, 2.0, 0.5, 4.0],
        "vx": [1.0, 0.0, 2.0, -1.0],
        "vy": [0.0, 3.0, 2.0, 0.0],
        "vz": [0.0, 4.0, 1.0, 0.0],
        "p": [1.0, 2.0, 0.5, 3.0],
    }
    if magnetic:
        data.update({"bx": [1.0, 0.0, 0.0, 2.0], "by": [0.0, 2.0, 0.0, 0.0], "bz": [0.0, 0.0, 1.0, 0.0]})
    return Dataset(pd.DataFrame(data), DatasetKind.CELL, boxlen=48.0, lmin=3, lmax=3)


def test_kinetic_mach_numbers():
    out = getvar(_make_dataset(), ["mach", "machx", "machy", "machz", "v", "vx", "cs"], center="bc")

    np.testing.assert_allclose(out["mach"], out["v"] / out["cs"])
    np.testing.assert_allclose(out["machx"], out["vx"] / out["cs"])
    np.testing.assert_allclose(out["machy"] ** 2 + out["machz"] ** 2 + out["machx"] ** 2, out["mach"] ** 2)


def test_component_mach_numbers():
    out = getvar(
        _make_dataset(),
        ["mach_r_sphere", "vr_sphere", "mach_phi_cylinder", "vphi_cylinder", "cs"],
        center="bc",
    )

    np.testing.assert_allclose(out["mach_r_sphere"], out["vr_sphere"] / out["cs"])
    np.testing.assert_allclose(out["mach_phi_cylinder"], out["vphi_cylinder"] / out["cs"])


def test_magnetic_mach_numbers():
    out = getvar(_make_dataset(), ["mach_alfven", "mach_fast", "mach_slow", "v", "cs"])

    rho = np.array([1.0, 2.0, 0.5, 4.0])
    b = np.array([1.0, 2.0, 1.0, 2.0])
    va = b / np.sqrt(rho)
    cs = out["cs"]

    np.testing.assert_allclose(out["mach_alfven"], out["v"] / va)
    np.testing.assert_allclose(out["mach_fast"], out["v"] / np.sqrt(cs ** 2 + va ** 2))
    np.testing.assert_allclose(out["mach_slow"], out["v"] / (cs * va / np.sqrt(cs ** 2 + va ** 2)))
    # fast magnetosonic speed exceeds the slow one
    assert (out["mach_fast"] <= out["mach_slow"]).all()


@pytest.mark.parametrize("name", ["mach_alfven", "mach_fast", "mach_slow"])
def test_magnetic_mach_needs_field_columns(name):
    with pytest.raises(MissingField) as exc:
        getvar(_make_dataset(magnetic=False), name)

    assert set(exc.value.columns) == {"bx", "by", "bz"}
    assert "bx, by, bz" in str(exc.value)


def test_mach_is_dimensionless():
    ds = _make_dataset()

    np.testing.assert_allclose(getvar(ds, "mach", "km_s"), getvar(ds, "mach"))
