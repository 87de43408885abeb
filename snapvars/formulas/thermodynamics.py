from __future__ import annotations

import numpy as np

from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula

CELL = (DatasetKind.CELL,)


@formula("cs", kinds=CELL, depends_on=("p", "rho"), requires=("p", "rho"), family="thermodynamics")
def cs(ctx):
    """Adiabatic sound speed: sqrt(gamma * p / rho)."""
    return np.sqrt(ctx.info.gamma * ctx.get("p") / ctx.get("rho"))


@formula(
    "T",
    kinds=CELL,
    depends_on=("p", "rho"),
    requires=("p", "rho"),
    family="thermodynamics",
    aliases=("Temp", "Temperature"),
)
def temperature(ctx):
    """Temperature as p / rho; the K and T_mu units carry the mu and k_B factors."""
    return ctx.get("p") / ctx.get("rho")


def _specific_entropy(ctx) -> np.ndarray:
    info = ctx.info
    gamma = info.gamma
    k_B, m_u = info.constants.k_B, info.constants.m_u
    return (k_B / m_u) * np.log(ctx.get("p") / ctx.get("rho") ** gamma) / (gamma - 1.0)


@formula(
    "entropy_specific",
    kinds=CELL,
    depends_on=("p", "rho"),
    requires=("p", "rho"),
    family="thermodynamics",
)
def entropy_specific(ctx):
    """Entropy per unit mass: (k_B / m_u) * ln(p / rho**gamma) / (gamma - 1)."""
    return _specific_entropy(ctx)


@formula(
    "entropy_index",
    kinds=CELL,
    depends_on=("p", "rho"),
    requires=("p", "rho"),
    unit_power=0,
    family="thermodynamics",
)
def entropy_index(ctx):
    """Adiabatic constant p / rho**gamma."""
    return ctx.get("p") / ctx.get("rho") ** ctx.info.gamma


@formula(
    "entropy_density",
    kinds=CELL,
    depends_on=("rho", "entropy_specific"),
    family="thermodynamics",
)
def entropy_density(ctx):
    """Entropy per unit volume."""
    return ctx.get("rho") * ctx.get("entropy_specific")


@formula(
    "entropy_per_particle",
    kinds=CELL,
    depends_on=("entropy_specific",),
    family="thermodynamics",
)
def entropy_per_particle(ctx):
    """Entropy per atomic mass unit."""
    return ctx.get("entropy_specific") * ctx.info.constants.m_u


@formula(
    "entropy_total",
    kinds=CELL,
    depends_on=("entropy_specific", "mass"),
    family="thermodynamics",
)
def entropy_total(ctx):
    """Entropy contained in a cell."""
    return ctx.get("entropy_specific") * ctx.get("mass")


@formula(
    "etherm",
    kinds=CELL,
    depends_on=("p", "volume"),
    requires=("p",),
    family="thermodynamics",
)
def etherm(ctx):
    """Thermal energy of a cell: p * volume."""
    return ctx.get("p") * ctx.get("volume")


FORMULAS = [
    cs,
    temperature,
    entropy_specific,
    entropy_index,
    entropy_density,
    entropy_per_particle,
    entropy_total,
    etherm,
]
