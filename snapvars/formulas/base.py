from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Tuple

import numpy as np

from snapvars.core.dataset import DatasetKind

if TYPE_CHECKING:
    from snapvars.core.resolver import FormulaContext


ComputeFn = Callable[["FormulaContext"], np.ndarray]


@dataclass(frozen=True)
class Formula:
    """
    One derived-quantity rule.

    - depends_on: names resolved on the same dataset (for static validation
      and the catalogue; evaluation itself goes through ctx.get)
    - requires: primitive columns that must exist in the dataset or its
      auxiliary, checked before evaluation
    - auxiliary_kind / auxiliary_depends_on: cross-domain rules read these
      names from a companion dataset of that kind
    - unit_power: exponent applied to the requested unit's factor
      (1 ordinary, 2 squared velocities, 0 dimensionless)
    """

    name: str
    compute: ComputeFn
    kinds: Tuple[DatasetKind, ...] = (DatasetKind.CELL,)
    depends_on: Tuple[str, ...] = ()
    requires: Tuple[str, ...] = ()
    unit_power: int = 1
    auxiliary_kind: Optional[DatasetKind] = None
    auxiliary_depends_on: Tuple[str, ...] = ()
    family: str = ""
    description: str = ""
    aliases: Tuple[str, ...] = ()

    @property
    def cross_domain(self) -> bool:
        return self.auxiliary_kind is not None

    @property
    def dimensionless(self) -> bool:
        return self.unit_power == 0


def formula(
    name: str,
    *,
    kinds: Iterable[DatasetKind] = (DatasetKind.CELL,),
    depends_on: Iterable[str] = (),
    requires: Iterable[str] = (),
    unit_power: int = 1,
    auxiliary_kind: Optional[DatasetKind] = None,
    auxiliary_depends_on: Iterable[str] = (),
    family: str = "",
    description: str = "",
    aliases: Iterable[str] = (),
) -> Callable[[ComputeFn], Formula]:
    """
    Decorator turning a compute function into a Formula.

    The function's docstring is used as description when none is given.
    """

    def wrap(fn: ComputeFn) -> Formula:
        return Formula(
            name=name,
            compute=fn,
            kinds=tuple(kinds),
            depends_on=tuple(depends_on),
            requires=tuple(requires),
            unit_power=unit_power,
            auxiliary_kind=auxiliary_kind,
            auxiliary_depends_on=tuple(auxiliary_depends_on),
            family=family,
            description=description or (fn.__doc__ or "").strip(),
            aliases=tuple(aliases),
        )

    return wrap
