"""
Velocity decompositions and angular momentum.

Positions come from the coordinate transformer (relative to the center,
permuted by the view direction), velocities are permuted the same way, so
every quantity here is expressed in the (a, b, c) frame of the view.
"""
from __future__ import annotations

import numpy as np

from snapvars.core.coordinates import safe_ratio
from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

MOVING_KINDS = (DatasetKind.CELL, DatasetKind.PARTICLE)


def _kinematic(name, *, depends_on, unit_power=1, aliases=(), kinds=MOVING_KINDS):
    return formula(
        name,
        kinds=kinds,
        depends_on=depends_on,
        unit_power=unit_power,
        family="kinematics",
        aliases=aliases,
    )


@formula(
    "mass",
    kinds=(DatasetKind.CELL,),
    depends_on=("rho", "volume"),
    requires=("rho",),
    family="kinematics",
)
def mass(ctx):
    """Cell mass: rho * volume."""
    return ctx.get("rho") * ctx.get("volume")


# --------------------------------------------------------------------------
# Velocity magnitudes
# --------------------------------------------------------------------------

@_kinematic("v", depends_on=("v2",), aliases=("velocity_magnitude",))
def v(ctx):
    """Velocity magnitude."""
    return np.sqrt(ctx.get("v2"))


@_kinematic("v2", depends_on=("vx", "vy", "vz"), unit_power=2)
def v2(ctx):
    """Squared velocity magnitude."""
    return ctx.get("vx") ** 2 + ctx.get("vy") ** 2 + ctx.get("vz") ** 2


@_kinematic("vx2", depends_on=("vx",), unit_power=2)
def vx2(ctx):
    return ctx.get("vx") ** 2


@_kinematic("vy2", depends_on=("vy",), unit_power=2)
def vy2(ctx):
    return ctx.get("vy") ** 2


@_kinematic("vz2", depends_on=("vz",), unit_power=2)
def vz2(ctx):
    return ctx.get("vz") ** 2


# --------------------------------------------------------------------------
# Cylindrical / spherical velocity components
# --------------------------------------------------------------------------

@_kinematic("vr_cylinder", depends_on=("x", "y", "v_a", "v_b", "r_cylinder"))
def vr_cylinder(ctx):
    """Radial velocity away from the out-of-plane axis."""
    x, y = ctx.get("x"), ctx.get("y")
    return safe_ratio(x * ctx.get("v_a") + y * ctx.get("v_b"), ctx.get("r_cylinder"))


@_kinematic(
    "vphi_cylinder",
    depends_on=("x", "y", "v_a", "v_b", "r_cylinder"),
    aliases=("vϕ_cylinder",),
)
def vphi_cylinder(ctx):
    """Azimuthal velocity around the out-of-plane axis."""
    x, y = ctx.get("x"), ctx.get("y")
    return safe_ratio(x * ctx.get("v_b") - y * ctx.get("v_a"), ctx.get("r_cylinder"))


@_kinematic("vr_cylinder2", depends_on=("vr_cylinder",), unit_power=2)
def vr_cylinder2(ctx):
    return ctx.get("vr_cylinder") ** 2


@_kinematic(
    "vphi_cylinder2",
    depends_on=("vphi_cylinder",),
    unit_power=2,
    aliases=("vϕ_cylinder2",),
)
def vphi_cylinder2(ctx):
    return ctx.get("vphi_cylinder") ** 2


@_kinematic("vr_sphere", depends_on=("x", "y", "z", "v_a", "v_b", "v_c", "r_sphere"))
def vr_sphere(ctx):
    """Radial velocity away from the center."""
    x, y, z = ctx.get("x"), ctx.get("y"), ctx.get("z")
    radial = x * ctx.get("v_a") + y * ctx.get("v_b") + z * ctx.get("v_c")
    return safe_ratio(radial, ctx.get("r_sphere"))


@_kinematic(
    "vtheta_sphere",
    depends_on=("x", "y", "z", "v_a", "v_b", "v_c", "r_sphere", "r_cylinder"),
    aliases=("vθ_sphere",),
)
def vtheta_sphere(ctx):
    """Polar velocity component."""
    x, y, z = ctx.get("x"), ctx.get("y"), ctx.get("z")
    num = z * (x * ctx.get("v_a") + y * ctx.get("v_b")) - (x ** 2 + y ** 2) * ctx.get("v_c")
    return safe_ratio(num, ctx.get("r_sphere") * ctx.get("r_cylinder"))


@_kinematic("vphi_sphere", depends_on=("vphi_cylinder",), aliases=("vϕ_sphere",))
def vphi_sphere(ctx):
    """Azimuthal velocity; identical to the cylindrical one."""
    return ctx.get("vphi_cylinder")


# --------------------------------------------------------------------------
# Specific angular momentum h = r x v
# --------------------------------------------------------------------------

@_kinematic("hx", depends_on=("y", "z", "v_b", "v_c"))
def hx(ctx):
    return ctx.get("y") * ctx.get("v_c") - ctx.get("z") * ctx.get("v_b")


@_kinematic("hy", depends_on=("x", "z", "v_a", "v_c"))
def hy(ctx):
    return ctx.get("z") * ctx.get("v_a") - ctx.get("x") * ctx.get("v_c")


@_kinematic("hz", depends_on=("x", "y", "v_a", "v_b"))
def hz(ctx):
    return ctx.get("x") * ctx.get("v_b") - ctx.get("y") * ctx.get("v_a")


@_kinematic("h", depends_on=("hx", "hy", "hz"))
def h(ctx):
    """Magnitude of the specific angular momentum."""
    return np.sqrt(ctx.get("hx") ** 2 + ctx.get("hy") ** 2 + ctx.get("hz") ** 2)


# --------------------------------------------------------------------------
# Angular momentum l = mass * h
# --------------------------------------------------------------------------

@_kinematic("lx", depends_on=("mass", "hx"))
def lx(ctx):
    return ctx.get("mass") * ctx.get("hx")


@_kinematic("ly", depends_on=("mass", "hy"))
def ly(ctx):
    return ctx.get("mass") * ctx.get("hy")


@_kinematic("lz", depends_on=("mass", "hz"))
def lz(ctx):
    return ctx.get("mass") * ctx.get("hz")


@_kinematic("l", depends_on=("mass", "h"))
def l(ctx):  # noqa: E743
    """Magnitude of the angular momentum."""
    return ctx.get("mass") * ctx.get("h")


@_kinematic("lr_cylinder", depends_on=("lx",))
def lr_cylinder(ctx):
    """Radial (cylindrical) angular momentum, taken as the a-axis component."""
    return ctx.get("lx")


@_kinematic(
    "lphi_cylinder",
    depends_on=("mass", "r_cylinder", "vphi_cylinder"),
    aliases=("lϕ_cylinder",),
)
def lphi_cylinder(ctx):
    return ctx.get("mass") * ctx.get("r_cylinder") * ctx.get("vphi_cylinder")


@_kinematic("lr_sphere", depends_on=("mass", "r_sphere", "vr_sphere"))
def lr_sphere(ctx):
    return ctx.get("mass") * ctx.get("r_sphere") * ctx.get("vr_sphere")


@_kinematic(
    "ltheta_sphere",
    depends_on=("mass", "r_sphere", "vtheta_sphere"),
    aliases=("lθ_sphere",),
)
def ltheta_sphere(ctx):
    return ctx.get("mass") * ctx.get("r_sphere") * ctx.get("vtheta_sphere")


@_kinematic(
    "lphi_sphere",
    depends_on=("mass", "r_cylinder", "vphi_sphere"),
    aliases=("lϕ_sphere",),
)
def lphi_sphere(ctx):
    return ctx.get("mass") * ctx.get("r_cylinder") * ctx.get("vphi_sphere")


@_kinematic("ekin", depends_on=("mass", "v2"))
def ekin(ctx):
    """Kinetic energy: 0.5 * mass * v**2."""
    return 0.5 * ctx.get("mass") * ctx.get("v2")


FORMULAS = [
    mass,
    v, v2, vx2, vy2, vz2,
    vr_cylinder, vphi_cylinder, vr_cylinder2, vphi_cylinder2,
    vr_sphere, vtheta_sphere, vphi_sphere,
    hx, hy, hz, h,
    lx, ly, lz, l,
    lr_cylinder, lphi_cylinder, lr_sphere, ltheta_sphere, lphi_sphere,
    ekin,
]
