import numpy as np
import pandas as pd
import pytest

from snapvars import getvar
from snapvars.core.dataset import Dataset, DatasetKind

RADIUS_NORMALISED = [
    "vr_cylinder",
    "vphi_cylinder",
    "vr_sphere",
    "vtheta_sphere",
    "vphi_sphere",
    "mach_r_cylinder",
    "mach_phi_cylinder",
    "mach_r_sphere",
    "mach_theta_sphere",
    "mach_phi_sphere",
]


def _make_dataset():
    # row 1 sits exactly on the box center, row 4 on the c-axis above it
    frame = pd.DataFrame(
        {
            "level": [3, 3, 3, 3, 3],
            "cx": [1, 4, 5, 6, 4],
            "cy": [2, 4, 4, 7, 4],
            "cz": [3, 4, 4, 2, 6],
            "rho": [1.0, 2.0, 0.5, 4.0, 1.0],
            "vx": [1.0, 0.0, 2.0, -1.0, 1.0],
            "vy": [0.0, 3.0, 2.0, 0.0, 1.0],
            "vz": [0.0, 4.0, 1.0, 0.0, 1.0],
            "p": [1.0, 2.0, 0.5, 3.0, 1.0],
        }
    )
    return Dataset(frame, DatasetKind.CELL, boxlen=48.0, lmin=3, lmax=3, name="cells")


def test_cellsize_volume_mass():
    out = getvar(_make_dataset(), ["cellsize", "volume", "mass"], center="bc")

    np.testing.assert_allclose(out["cellsize"], [6.0] * 5)
    np.testing.assert_allclose(out["volume"], [216.0] * 5)
    np.testing.assert_allclose(out["mass"], [216.0, 432.0, 108.0, 864.0, 216.0])


def test_radii_and_azimuth():
    out = getvar(_make_dataset(), ["r_cylinder", "r_sphere", "phi"], center="bc")

    np.testing.assert_allclose(out["r_cylinder"], [np.sqrt(468.0), 0.0, 6.0, np.sqrt(468.0), 0.0])
    np.testing.assert_allclose(
        out["r_sphere"], [np.sqrt(504.0), 0.0, 6.0, np.sqrt(612.0), 12.0]
    )
    np.testing.assert_allclose(out["phi"][2], 0.0)
    np.testing.assert_allclose(out["phi"][3], np.arctan2(18.0, 12.0))


@pytest.mark.parametrize("name", RADIUS_NORMALISED)
def test_zero_radius_gives_zero(name):
    out = getvar(_make_dataset(), name, center="bc")

    assert not np.isnan(out).any()
    assert out[1] == 0.0
    if "cylinder" in name or "theta" in name or "phi" in name:
        # on the c-axis the cylindrical radius vanishes too
        assert out[4] == 0.0


def test_velocity_components():
    out = getvar(
        _make_dataset(),
        ["v", "v2", "vx2", "vr_cylinder", "vphi_cylinder", "vr_sphere"],
        center="bc",
    )

    np.testing.assert_allclose(out["v"], [1.0, 5.0, 3.0, 1.0, np.sqrt(3.0)])
    np.testing.assert_allclose(out["v2"], out["v"] ** 2)
    np.testing.assert_allclose(out["vx2"], [1.0, 0.0, 4.0, 1.0, 1.0])
    # row 3: position (6, 0, 0), velocity (2, 2, 1)
    assert out["vr_cylinder"][2] == pytest.approx(2.0)
    assert out["vphi_cylinder"][2] == pytest.approx(2.0)
    assert out["vr_sphere"][2] == pytest.approx(2.0)
    # row 5: position (0, 0, 12) moving with vz = 1
    assert out["vr_sphere"][4] == pytest.approx(1.0)


def test_spherical_components_recompose_speed():
    ds = _make_dataset()
    out = getvar(ds, ["v2", "vr_sphere", "vtheta_sphere", "vphi_sphere"], center="bc")

    # rows 1, 3, 4 are off the c-axis: v^2 = vr^2 + vtheta^2 + vphi^2
    rows = [0, 2, 3]
    recomposed = out["vr_sphere"] ** 2 + out["vtheta_sphere"] ** 2 + out["vphi_sphere"] ** 2
    np.testing.assert_allclose(recomposed[rows], out["v2"][rows])


def test_angular_momentum_consistency():
    names = ["mass", "hx", "hy", "hz", "h", "lx", "ly", "lz", "l"]
    out = getvar(_make_dataset(), names, center="bc")

    np.testing.assert_allclose(out["l"], out["mass"] * out["h"])
    np.testing.assert_allclose(out["h"] ** 2, out["hx"] ** 2 + out["hy"] ** 2 + out["hz"] ** 2)
    np.testing.assert_allclose(out["lx"], out["mass"] * out["hx"])
    np.testing.assert_allclose(out["lz"], out["mass"] * out["hz"])


def test_angular_momentum_components():
    out = getvar(
        _make_dataset(),
        ["lz", "lr_cylinder", "lx", "lphi_cylinder", "lr_sphere", "ltheta_sphere", "lphi_sphere"],
        center="bc",
    )

    np.testing.assert_allclose(out["lr_cylinder"], out["lx"])
    # around the c-axis: m r vphi == lz
    np.testing.assert_allclose(out["lphi_cylinder"], out["lz"], atol=1e-9)
    np.testing.assert_allclose(out["lphi_sphere"], out["lphi_cylinder"])
    assert out["lr_sphere"][1] == 0.0
    assert out["ltheta_sphere"][1] == 0.0


def test_unicode_aliases():
    ds = _make_dataset()

    np.testing.assert_allclose(
        getvar(ds, "vϕ_cylinder", center="bc"), getvar(ds, "vphi_cylinder", center="bc")
    )
    np.testing.assert_allclose(getvar(ds, "ϕ", center="bc"), getvar(ds, "phi", center="bc"))


def test_kinetic_energy():
    out = getvar(_make_dataset(), ["ekin", "mass", "v"], center="bc")

    np.testing.assert_allclose(out["ekin"], 0.5 * out["mass"] * out["v"] ** 2)


def test_squared_velocity_scales_with_unit_squared():
    ds = _make_dataset()
    km_s = ds.info.scale["km_s"]

    out = getvar(ds, ["v2", "v"], units=["km_s", "km_s"], center="bc")

    np.testing.assert_allclose(out["v2"], out["v"] ** 2)
    np.testing.assert_allclose(out["v"], np.array([1.0, 5.0, 3.0, 1.0, np.sqrt(3.0)]) * km_s)
