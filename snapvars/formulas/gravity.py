from __future__ import annotations

import numpy as np

from snapvars.core.coordinates import safe_ratio
from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

FIELD = (DatasetKind.FIELD,)


@formula("a_magnitude", kinds=FIELD, depends_on=("ax", "ay", "az"), family="gravity")
def a_magnitude(ctx):
    """Magnitude of the gravitational acceleration."""
    return np.sqrt(ctx.get("ax") ** 2 + ctx.get("ay") ** 2 + ctx.get("az") ** 2)


@formula("escape_speed", kinds=FIELD, depends_on=("epot",), requires=("epot",), family="gravity")
def escape_speed(ctx):
    """sqrt(-2 epot); NaN where the potential is positive."""
    with np.errstate(invalid="ignore"):
        return np.sqrt(-2.0 * ctx.get("epot"))


@formula(
    "gravitational_redshift",
    kinds=FIELD,
    depends_on=("epot",),
    requires=("epot",),
    unit_power=0,
    family="gravity",
)
def gravitational_redshift(ctx):
    """Weak-field redshift epot / c**2."""
    return ctx.get("epot") / ctx.info.light_speed ** 2


@formula(
    "specific_gravitational_energy",
    kinds=FIELD,
    depends_on=("epot",),
    requires=("epot",),
    family="gravity",
)
def specific_gravitational_energy(ctx):
    return ctx.get("epot").copy()


@formula("ar_cylinder", kinds=FIELD, depends_on=("x", "y", "a_a", "a_b", "r_cylinder"), family="gravity")
def ar_cylinder(ctx):
    x, y = ctx.get("x"), ctx.get("y")
    return safe_ratio(x * ctx.get("a_a") + y * ctx.get("a_b"), ctx.get("r_cylinder"))


@formula(
    "aphi_cylinder",
    kinds=FIELD,
    depends_on=("x", "y", "a_a", "a_b", "r_cylinder"),
    family="gravity",
    aliases=("aϕ_cylinder",),
)
def aphi_cylinder(ctx):
    x, y = ctx.get("x"), ctx.get("y")
    return safe_ratio(x * ctx.get("a_b") - y * ctx.get("a_a"), ctx.get("r_cylinder"))


@formula(
    "ar_sphere",
    kinds=FIELD,
    depends_on=("x", "y", "z", "a_a", "a_b", "a_c", "r_sphere"),
    family="gravity",
)
def ar_sphere(ctx):
    x, y, z = ctx.get("x"), ctx.get("y"), ctx.get("z")
    radial = x * ctx.get("a_a") + y * ctx.get("a_b") + z * ctx.get("a_c")
    return safe_ratio(radial, ctx.get("r_sphere"))


@formula(
    "atheta_sphere",
    kinds=FIELD,
    depends_on=("x", "y", "z", "a_a", "a_b", "a_c", "r_sphere", "r_cylinder"),
    family="gravity",
    aliases=("aθ_sphere",),
)
def atheta_sphere(ctx):
    x, y, z = ctx.get("x"), ctx.get("y"), ctx.get("z")
    num = z * (x * ctx.get("a_a") + y * ctx.get("a_b")) - (x ** 2 + y ** 2) * ctx.get("a_c")
    return safe_ratio(num, ctx.get("r_sphere") * ctx.get("r_cylinder"))


@formula("aphi_sphere", kinds=FIELD, depends_on=("aphi_cylinder",), family="gravity", aliases=("aϕ_sphere",))
def aphi_sphere(ctx):
    return ctx.get("aphi_cylinder")


FORMULAS = [
    a_magnitude,
    escape_speed,
    gravitational_redshift,
    specific_gravitational_energy,
    ar_cylinder,
    aphi_cylinder,
    ar_sphere,
    atheta_sphere,
    aphi_sphere,
]
