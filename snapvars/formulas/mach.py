"""
Dimensionless Mach numbers.

Kinetic Mach numbers divide a velocity (component) by the sound speed.
Magnetic Mach numbers use the Alfven speed |B| / sqrt(rho) of code units and
need the bx, by, bz columns; on a gravity field dataset they read the gas
quantities from the auxiliary cell dataset.
"""
from __future__ import annotations

import numpy as np

from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

CELL = (DatasetKind.CELL,)
FIELD = (DatasetKind.FIELD,)
MAGNETIC_COLUMNS = ("bx", "by", "bz")


def _kinetic(name, velocity, aliases=()):
    @formula(
        name,
        kinds=CELL,
        depends_on=(velocity, "cs"),
        unit_power=0,
        family="mach",
        aliases=aliases,
        description=f"{velocity} / cs",
    )
    def compute(ctx):
        return ctx.get(velocity) / ctx.get("cs")

    return compute


mach = _kinetic("mach", "v")
machx = _kinetic("machx", "vx")
machy = _kinetic("machy", "vy")
machz = _kinetic("machz", "vz")
mach_r_cylinder = _kinetic("mach_r_cylinder", "vr_cylinder")
mach_phi_cylinder = _kinetic("mach_phi_cylinder", "vphi_cylinder")
mach_r_sphere = _kinetic("mach_r_sphere", "vr_sphere")
mach_theta_sphere = _kinetic("mach_theta_sphere", "vtheta_sphere")
mach_phi_sphere = _kinetic("mach_phi_sphere", "vphi_sphere")


def _alfven_speed(ctx) -> np.ndarray:
    bx, by, bz = (ctx.column(c) for c in MAGNETIC_COLUMNS)
    return np.sqrt(bx ** 2 + by ** 2 + bz ** 2) / np.sqrt(ctx.column("rho"))


def _alfven(v, cs, va):
    return v / va


def _fast(v, cs, va):
    return v / np.sqrt(cs ** 2 + va ** 2)


def _slow(v, cs, va):
    return v / (cs * va / np.sqrt(cs ** 2 + va ** 2))


def _magnetic(name, wave, description):
    """
    Build the Cell rule and the cross-domain Field rule for one magnetic Mach number.
    """

    @formula(
        name,
        kinds=CELL,
        depends_on=("v", "cs", "rho"),
        requires=MAGNETIC_COLUMNS + ("rho",),
        unit_power=0,
        family="mach",
        description=description,
    )
    def on_cells(ctx):
        return wave(ctx.get("v"), ctx.get("cs"), _alfven_speed(ctx))

    @formula(
        name,
        kinds=FIELD,
        requires=MAGNETIC_COLUMNS,
        unit_power=0,
        auxiliary_kind=DatasetKind.CELL,
        auxiliary_depends_on=("v", "cs", "rho"),
        family="mach",
        description=description,
    )
    def on_field(ctx):
        return wave(ctx.aux("v"), ctx.aux("cs"), _alfven_speed(ctx))

    return on_cells, on_field


mach_alfven, mach_alfven_field = _magnetic(
    "mach_alfven", _alfven, "v / v_A with v_A = |B| / sqrt(rho)"
)
mach_fast, mach_fast_field = _magnetic(
    "mach_fast", _fast, "v / sqrt(cs**2 + v_A**2)"
)
mach_slow, mach_slow_field = _magnetic(
    "mach_slow", _slow, "v / (cs v_A / sqrt(cs**2 + v_A**2))"
)


FORMULAS = [
    mach, machx, machy, machz,
    mach_r_cylinder, mach_phi_cylinder,
    mach_r_sphere, mach_theta_sphere, mach_phi_sphere,
    mach_alfven, mach_fast, mach_slow,
    mach_alfven_field, mach_fast_field, mach_slow_field,
]
