"""
Cross-domain energetics of a gravity field dataset.

Every rule here needs the hydro cells of the same region as an auxiliary
dataset (row-aligned with the field cells) to supply density and mass.
"""
from __future__ import annotations

import math

from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

FIELD = (DatasetKind.FIELD,)


def _energetic(name, *, depends_on=(), requires=(), auxiliary_depends_on=(), aliases=()):
    return formula(
        name,
        kinds=FIELD,
        depends_on=depends_on,
        requires=requires,
        auxiliary_kind=DatasetKind.CELL,
        auxiliary_depends_on=auxiliary_depends_on,
        family="energetics",
        aliases=aliases,
    )


@_energetic("ekin", auxiliary_depends_on=("mass", "v2"))
def ekin(ctx):
    """Kinetic energy of the gas in each field cell."""
    return 0.5 * ctx.aux("mass") * ctx.aux("v2")


@_energetic("etherm", auxiliary_depends_on=("etherm",))
def etherm(ctx):
    """Thermal energy of the gas in each field cell."""
    return ctx.aux("etherm")


@_energetic(
    "gravitational_energy_density",
    depends_on=("epot",),
    requires=("epot",),
    auxiliary_depends_on=("rho",),
)
def gravitational_energy_density(ctx):
    """rho * epot"""
    return ctx.aux("rho") * ctx.get("epot")


@_energetic(
    "gravitational_binding_energy",
    depends_on=("epot",),
    requires=("epot",),
    auxiliary_depends_on=("rho",),
)
def gravitational_binding_energy(ctx):
    """Binding energy density rho * epot."""
    return ctx.aux("rho") * ctx.get("epot")


@_energetic(
    "total_binding_energy",
    depends_on=("epot", "volume"),
    requires=("epot",),
    auxiliary_depends_on=("rho",),
)
def total_binding_energy(ctx):
    """Binding energy per cell: rho * epot * volume."""
    return ctx.aux("rho") * ctx.get("epot") * ctx.get("volume")


@_energetic(
    "gravitational_potential_energy",
    depends_on=("epot",),
    requires=("epot",),
    auxiliary_depends_on=("mass",),
)
def gravitational_potential_energy(ctx):
    """Potential energy per cell: mass * epot."""
    return ctx.aux("mass") * ctx.get("epot")


@_energetic(
    "gravitational_work",
    depends_on=("a_magnitude", "cellsize"),
    auxiliary_depends_on=("mass",),
)
def gravitational_work(ctx):
    """mass * |a| * cellsize"""
    return ctx.aux("mass") * ctx.get("a_magnitude") * ctx.get("cellsize")


@_energetic("Fg", depends_on=("a_magnitude",), auxiliary_depends_on=("mass",))
def Fg(ctx):
    """Gravitational force magnitude: mass * |a|."""
    return ctx.aux("mass") * ctx.get("a_magnitude")


@_energetic("poisson_source", auxiliary_depends_on=("rho",))
def poisson_source(ctx):
    """Right-hand side of the Poisson equation: 4 pi G rho."""
    return 4.0 * math.pi * ctx.info.grav_const * ctx.aux("rho")


FORMULAS = [
    ekin,
    etherm,
    gravitational_energy_density,
    gravitational_binding_energy,
    total_binding_energy,
    gravitational_potential_energy,
    gravitational_work,
    Fg,
    poisson_source,
]
