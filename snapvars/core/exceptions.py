from __future__ import annotations

from typing import Dict, Iterable, Optional


class SnapvarsError(Exception):
    """Base exception for all snapvars errors"""
    pass


class ConfigError(SnapvarsError):
    """Invalid or inconsistent snapshot metadata / engine config"""
    pass


class ShapeMismatch(SnapvarsError, ValueError):
    """
    A mask (or auxiliary dataset) does not line up with the rows it is applied to
    """

    def __init__(self, expected: int, actual: int, what: str = "mask"):
        self.expected = expected
        self.actual = actual
        self.what = what
        super().__init__(f"{what} has {actual} rows, expected {expected}")


class UnknownVariable(SnapvarsError, KeyError):
    """Symbol is neither a column nor a formula rule for this dataset kind"""

    def __init__(self, variable: str, kind: object):
        self.variable = variable
        self.kind = kind
        super().__init__(f"Variable '{variable}' is not defined for {kind} datasets")

    def __str__(self) -> str:
        return self.args[0]


class MissingField(SnapvarsError, KeyError):
    """A formula needs primitive columns that the dataset does not carry"""

    def __init__(self, variable: str, columns: Iterable[str]):
        self.variable = variable
        self.columns = tuple(columns)
        super().__init__(
            f"Variable '{variable}' requires missing column(s): {', '.join(self.columns)}"
        )

    def __str__(self) -> str:
        return self.args[0]


class MissingAuxiliaryDataset(SnapvarsError):
    """A cross-domain formula was invoked without its companion dataset"""

    def __init__(self, variable: str, required_kind: object, supplied_kind: Optional[object] = None):
        self.variable = variable
        self.required_kind = required_kind
        self.supplied_kind = supplied_kind
        if supplied_kind is None:
            msg = f"Variable '{variable}' requires an auxiliary {required_kind} dataset"
        else:
            msg = (
                f"Variable '{variable}' requires an auxiliary {required_kind} dataset, "
                f"got {supplied_kind}"
            )
        super().__init__(msg)


class UnknownUnit(SnapvarsError, KeyError):
    """Unit symbol not present in the UnitScaleTable"""

    def __init__(self, unit: str):
        self.unit = unit
        super().__init__(f"Unknown unit '{unit}'")

    def __str__(self) -> str:
        return self.args[0]


class FormulaCycleError(SnapvarsError):
    """A formula references itself directly or transitively"""

    def __init__(self, cycle: Iterable[str]):
        self.cycle = tuple(cycle)
        super().__init__(f"Formula dependency cycle: {' -> '.join(self.cycle)}")


class UnresolvedVariablesError(SnapvarsError):
    """
    Aggregate failure of a multi-variable request.
    Holds every individual error keyed by the requested variable name.
    """

    def __init__(self, errors: Dict[str, SnapvarsError]):
        self.errors = dict(errors)
        lines = [f"{name}: {err}" for name, err in self.errors.items()]
        super().__init__(
            f"{len(self.errors)} variable(s) could not be resolved:\n" + "\n".join(lines)
        )
