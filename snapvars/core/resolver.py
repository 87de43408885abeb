from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Set

import numpy as np

from snapvars.config.model import SnapshotInfo
from snapvars.core.coordinates import Center, CoordinateTransformer, Direction
from snapvars.core.dataset import PRIMITIVE_COLUMNS, UNSCALED_COLUMNS, DatasetKind, FilteredDataset
from snapvars.core.exceptions import (
    FormulaCycleError,
    MissingAuxiliaryDataset,
    MissingField,
    ShapeMismatch,
    UnknownVariable,
)
from snapvars.core.units import STANDARD_UNIT

if TYPE_CHECKING:
    from snapvars.formulas.base import Formula
    from snapvars.formulas.registry import FormulaRegistry

logger = logging.getLogger(__name__)

GRID_NAMES = ("cx", "cy", "cz")


class FormulaContext:
    """
    What a formula sees while it is evaluated: its own dataset (through the
    resolver, in native units) and, for cross-domain rules, the auxiliary one.
    """

    def __init__(self, resolver: VariableResolver, formula: Formula) -> None:
        self._resolver = resolver
        self._formula = formula

    def get(self, name: str) -> np.ndarray:
        """Native value of `name` on the same filtered rows."""
        return self._resolver.native(name)

    def aux(self, name: str) -> np.ndarray:
        """Native value of `name` on the auxiliary dataset."""
        auxiliary = self._resolver.auxiliary
        if auxiliary is None:
            raise MissingAuxiliaryDataset(
                self._formula.name, self._formula.auxiliary_kind or "auxiliary"
            )
        return auxiliary.native(name)

    def column(self, name: str) -> np.ndarray:
        """Raw column from the dataset, falling back to the auxiliary dataset."""
        return self._resolver.column(name)

    @property
    def info(self) -> SnapshotInfo:
        return self._resolver.info

    @property
    def transformer(self) -> CoordinateTransformer:
        return self._resolver.transformer

    @property
    def ref_time(self) -> float:
        return self._resolver.ref_time

    @property
    def n_rows(self) -> int:
        return len(self._resolver.filtered)


class VariableResolver:
    """
    Resolves variable names to arrays for one FilteredDataset.

    Resolution order for a name:
        1) coordinate names (positions, grid indices, vectors) via the transformer
        2) a column of the dataset
        3) a formula rule for the dataset's kind, evaluated recursively
        4) the auxiliary dataset's resolver, if one is attached

    Native values are memoised per resolver, so shared sub-expressions are
    computed once per request. Units are applied only in `resolve`.
    """

    def __init__(
        self,
        filtered: FilteredDataset,
        registry: FormulaRegistry,
        center: Center = (0.0, 0.0, 0.0),
        direction: Direction | str = Direction.Z,
        auxiliary: Optional[FilteredDataset] = None,
        ref_time: Optional[float] = None,
    ) -> None:
        self.filtered = filtered
        self.registry = registry
        self.transformer = CoordinateTransformer(filtered, center, direction)
        self.ref_time = float(ref_time) if ref_time is not None else filtered.info.time

        self.auxiliary: Optional[VariableResolver] = None
        if auxiliary is not None:
            if auxiliary.kind is filtered.kind:
                raise ValueError(
                    f"Auxiliary dataset must be of a different kind than {filtered.kind}"
                )
            if len(auxiliary) != len(filtered):
                raise ShapeMismatch(
                    expected=len(filtered), actual=len(auxiliary), what="auxiliary dataset"
                )
            self.auxiliary = VariableResolver(
                auxiliary,
                registry,
                center=self.transformer.center,
                direction=self.transformer.direction,
                ref_time=self.ref_time,
            )

        self._cache: Dict[str, np.ndarray] = {}
        self._in_progress: List[str] = []
        self._delegated: Set[str] = set()

    @property
    def kind(self) -> DatasetKind:
        return self.filtered.kind

    @property
    def info(self) -> SnapshotInfo:
        return self.filtered.info

    # ------------------------------------------------------------------
    # Native resolution
    # ------------------------------------------------------------------
    def native(self, name: str) -> np.ndarray:
        """
        Value of `name` in code units. The returned array is shared with the
        memo and must not be modified in place.

        :raises UnknownVariable, MissingField, MissingAuxiliaryDataset, FormulaCycleError
        """
        key = self.registry.canonical(self.kind, name)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if key in self._in_progress:
            start = self._in_progress.index(key)
            raise FormulaCycleError(self._in_progress[start:] + [key])

        self._in_progress.append(key)
        try:
            value = self._compute(key)
        finally:
            self._in_progress.pop()

        self._cache[key] = value
        return value

    def _compute(self, name: str) -> np.ndarray:
        if self.transformer.handles(name):
            return self.transformer.resolve(name)

        if self.filtered.has_column(name):
            return self.filtered.column(name)

        formula = self.registry.get(self.kind, name)
        if formula is not None:
            return self._evaluate(formula)

        if self.auxiliary is not None:
            try:
                value = self.auxiliary.native(name)
            except UnknownVariable as e:
                if e.variable != name:
                    raise
                raise UnknownVariable(name, self.kind) from None
            self._delegated.add(name)
            logger.debug(
                "Variable delegated to auxiliary dataset",
                extra={"variable": name, "kind": self.kind.value, "auxiliary_kind": self.auxiliary.kind.value},
            )
            return value

        if name in PRIMITIVE_COLUMNS[self.kind]:
            raise MissingField(name, [name])

        raise UnknownVariable(name, self.kind)

    def _evaluate(self, formula: Formula) -> np.ndarray:
        missing = [c for c in formula.requires if not self._has_column(c)]
        if missing:
            raise MissingField(formula.name, missing)

        if formula.auxiliary_kind is not None:
            if self.auxiliary is None:
                raise MissingAuxiliaryDataset(formula.name, formula.auxiliary_kind)
            if self.auxiliary.kind is not formula.auxiliary_kind:
                raise MissingAuxiliaryDataset(
                    formula.name, formula.auxiliary_kind, self.auxiliary.kind
                )

        value = np.asarray(formula.compute(FormulaContext(self, formula)), dtype=np.float64)
        n = len(self.filtered)
        if value.ndim == 0:
            value = np.full(n, float(value))
        elif value.shape != (n,):
            raise ShapeMismatch(expected=n, actual=value.shape[0], what=f"formula '{formula.name}'")

        logger.debug(
            "Formula evaluated",
            extra={"variable": formula.name, "kind": self.kind.value, "n_rows": n},
        )
        return value

    def _has_column(self, name: str) -> bool:
        if self.filtered.has_column(name):
            return True
        return self.auxiliary is not None and self.auxiliary.filtered.has_column(name)

    def column(self, name: str) -> np.ndarray:
        if self.filtered.has_column(name):
            return self.filtered.column(name)
        if self.auxiliary is not None and self.auxiliary.filtered.has_column(name):
            return self.auxiliary.filtered.column(name)
        raise MissingField(name, [name])

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------
    def unit_power(self, name: str) -> int:
        """Exponent applied to a unit factor for `name`."""
        key = self.registry.canonical(self.kind, name)
        if self.transformer.handles(key):
            return 0 if key in GRID_NAMES else 1
        if self.filtered.has_column(key):
            return 0 if key in UNSCALED_COLUMNS else 1
        formula = self.registry.get(self.kind, key)
        if formula is not None:
            return formula.unit_power
        if key in self._delegated and self.auxiliary is not None:
            return self.auxiliary.unit_power(key)
        return 1

    def resolve(self, name: str, unit: Optional[str] = STANDARD_UNIT) -> np.ndarray:
        """
        Value of `name` converted to `unit`, as a new array.

        :raises UnknownUnit: if unit is not in the snapshot's scale table
        """
        native = self.native(name)
        power = self.unit_power(name)

        if power == 0:
            if unit not in (None, STANDARD_UNIT):
                self.info.scale.factor(unit)
                logger.warning(
                    "Unit ignored for dimensionless quantity",
                    extra={"variable": name, "unit": unit},
                )
            return native.copy()

        factor = self.info.scale.factor(unit)
        return native * factor ** power
