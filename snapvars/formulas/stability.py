from __future__ import annotations

import math

import numpy as np

from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

CELL = (DatasetKind.CELL,)


def _freefall(ctx) -> np.ndarray:
    G = ctx.info.grav_const
    return np.sqrt(3.0 * math.pi / (32.0 * G * ctx.get("rho")))


@formula("jeanslength", kinds=CELL, depends_on=("cs", "rho"), family="stability")
def jeanslength(ctx):
    """Jeans length: cs * sqrt(3 pi / (32 G rho))."""
    return ctx.get("cs") * _freefall(ctx)


@formula(
    "jeansnumber",
    kinds=CELL,
    depends_on=("jeanslength", "cellsize"),
    unit_power=0,
    family="stability",
)
def jeansnumber(ctx):
    """Number of cells resolving the Jeans length."""
    return ctx.get("jeanslength") / ctx.get("cellsize")


@formula("jeansmass", kinds=CELL, depends_on=("jeanslength", "rho"), family="stability")
def jeansmass(ctx):
    """Mass of a sphere of diameter jeanslength: (4 pi / 3) (lambda_J / 2)**3 rho."""
    return (4.0 * math.pi / 3.0) * (ctx.get("jeanslength") / 2.0) ** 3 * ctx.get("rho")


@formula("freefall_time", kinds=CELL, depends_on=("rho",), family="stability")
def freefall_time(ctx):
    return _freefall(ctx)


@formula(
    "virial_parameter_local",
    kinds=CELL,
    depends_on=("cs", "cellsize", "mass"),
    unit_power=0,
    family="stability",
)
def virial_parameter_local(ctx):
    """5 cs**2 R / (G M) with R the cell size."""
    G = ctx.info.grav_const
    return 5.0 * ctx.get("cs") ** 2 * ctx.get("cellsize") / (G * ctx.get("mass"))


FORMULAS = [jeanslength, jeansnumber, jeansmass, freefall_time, virial_parameter_local]
