from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

from snapvars.core.dataset import DatasetKind
from snapvars.formulas import (
    energetics,
    geometry,
    gravity,
    kinematics,
    mach,
    particles,
    stability,
    thermodynamics,
)
from snapvars.formulas.base import Formula
from snapvars.validation.formula_validation import validate_registry

logger = logging.getLogger(__name__)

FAMILY_MODULES = (
    geometry,
    kinematics,
    thermodynamics,
    stability,
    mach,
    gravity,
    energetics,
    particles,
)


class FormulaRegistry:
    """
    Formula tables per dataset kind.

    One Formula may serve several kinds; a (kind, name) pair maps to exactly
    one Formula. Aliases are per kind and resolve to a canonical rule name.

    Enforces:
        * only Formula instances can be registered
        * names and aliases are unique within a kind
    """

    def __init__(self) -> None:
        self._formulas: Dict[Tuple[DatasetKind, str], Formula] = {}
        self._aliases: Dict[Tuple[DatasetKind, str], str] = {}

    def register(self, formula: Formula) -> None:
        """
        :param formula: the rule to add for each of its kinds
        :raises TypeError: if formula is not a Formula
        :raises ValueError: if the name or an alias is already taken for a kind
        """
        if not isinstance(formula, Formula):
            raise TypeError(f"Expected a Formula, got {type(formula).__name__}")

        for kind in formula.kinds:
            key = (kind, formula.name)
            if key in self._formulas or key in self._aliases:
                raise ValueError(f"Formula '{formula.name}' already registered for {kind}")
            for alias in formula.aliases:
                if (kind, alias) in self._formulas or (kind, alias) in self._aliases:
                    raise ValueError(f"Alias '{alias}' already registered for {kind}")

            self._formulas[key] = formula
            for alias in formula.aliases:
                self._aliases[(kind, alias)] = formula.name

    def register_all(self, formulas: Iterable[Formula]) -> None:
        for f in formulas:
            self.register(f)

    def canonical(self, kind: DatasetKind, name: str) -> str:
        """Rule name behind an alias; other names are returned unchanged."""
        return self._aliases.get((kind, name), name)

    def get(self, kind: DatasetKind, name: str) -> Optional[Formula]:
        return self._formulas.get((kind, self.canonical(kind, name)))

    def has(self, kind: DatasetKind, name: str) -> bool:
        return self.get(kind, name) is not None

    def formulas_for(self, kind: DatasetKind) -> List[Formula]:
        return [f for (k, _), f in self._formulas.items() if k is kind]

    def aliases_for(self, kind: DatasetKind) -> Dict[str, str]:
        return {alias: target for (k, alias), target in self._aliases.items() if k is kind}

    def kinds(self) -> List[DatasetKind]:
        return sorted({k for k, _ in self._formulas}, key=lambda k: k.value)

    def __len__(self) -> int:
        return len(self._formulas)


def create_default_registry() -> FormulaRegistry:
    """
    Builds a registry with every built-in formula family and validates it.
    """
    registry = FormulaRegistry()
    for module in FAMILY_MODULES:
        registry.register_all(module.FORMULAS)
    validate_registry(registry)
    logger.debug(
        "Formula registry built",
        extra={"n_rules": len(registry), "families": [m.__name__.rsplit(".", 1)[-1] for m in FAMILY_MODULES]},
    )
    return registry


@lru_cache(maxsize=1)
def default_registry() -> FormulaRegistry:
    """Shared, validated built-in registry."""
    return create_default_registry()
