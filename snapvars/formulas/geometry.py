from __future__ import annotations

import numpy as np

from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

GRID_KINDS = (DatasetKind.CELL, DatasetKind.FIELD)
ALL_KINDS = (DatasetKind.CELL, DatasetKind.PARTICLE, DatasetKind.FIELD)


@formula("cellsize", kinds=GRID_KINDS, family="geometry")
def cellsize(ctx):
    """Edge length of a cell: boxlen / 2**level."""
    return ctx.transformer.cellsize()


@formula("volume", kinds=GRID_KINDS, depends_on=("cellsize",), family="geometry")
def volume(ctx):
    """Cell volume: cellsize**3."""
    return ctx.get("cellsize") ** 3


@formula(
    "r_cylinder",
    kinds=ALL_KINDS,
    depends_on=("x", "y"),
    family="geometry",
    aliases=("radius_cylinder",),
)
def r_cylinder(ctx):
    """Distance from the out-of-plane axis through the center."""
    x, y = ctx.get("x"), ctx.get("y")
    return np.sqrt(x ** 2 + y ** 2)


@formula(
    "r_sphere",
    kinds=ALL_KINDS,
    depends_on=("x", "y", "z"),
    family="geometry",
    aliases=("radius_sphere",),
)
def r_sphere(ctx):
    """Distance from the center."""
    x, y, z = ctx.get("x"), ctx.get("y"), ctx.get("z")
    return np.sqrt(x ** 2 + y ** 2 + z ** 2)


@formula(
    "phi",
    kinds=ALL_KINDS,
    depends_on=("x", "y"),
    unit_power=0,
    family="geometry",
    aliases=("ϕ",),
)
def phi(ctx):
    """Azimuth angle in the a-b plane, radians in (-pi, pi]."""
    return np.arctan2(ctx.get("y"), ctx.get("x"))


FORMULAS = [cellsize, volume, r_cylinder, r_sphere, phi]
