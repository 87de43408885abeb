from __future__ import annotations

from snapvars.core.dataset import DatasetKind
from snapvars.formulas.base import formula


@formula(
    "age",
    kinds=(DatasetKind.PARTICLE,),
    depends_on=("birth",),
    requires=("birth",),
    family="particles",
)
def age(ctx):
    """Time since birth, measured at ref_time (the snapshot time by default)."""
    return ctx.ref_time - ctx.get("birth")


FORMULAS = [age]
