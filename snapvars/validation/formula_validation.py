from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Set, Tuple

from snapvars.core.coordinates import coordinate_names
from snapvars.core.dataset import PRIMITIVE_COLUMNS, DatasetKind
from snapvars.core.exceptions import FormulaCycleError
from snapvars.validation.errors import ValidationError, ValidationIssue

if TYPE_CHECKING:
    from snapvars.formulas.registry import FormulaRegistry

Node = Tuple[DatasetKind, str]


def _known_names(registry: FormulaRegistry, kind: DatasetKind) -> Set[str]:
    names = {f.name for f in registry.formulas_for(kind)}
    names.update(registry.aliases_for(kind))
    names.update(coordinate_names(kind))
    names.update(PRIMITIVE_COLUMNS[kind])
    return names


def validate_registry(registry: FormulaRegistry) -> None:
    """
    Static check of the formula tables.

    Every dependency must name a rule, an alias, a coordinate or a declared
    primitive column of the kind it is resolved on, and the dependency graph
    must be acyclic.

    :raises ValidationError: listing every unknown dependency
    :raises FormulaCycleError: on the first cycle found
    """
    issues: List[ValidationIssue] = []
    known = {kind: _known_names(registry, kind) for kind in DatasetKind}

    for kind in DatasetKind:
        for f in registry.formulas_for(kind):
            for dep in f.depends_on:
                if dep not in known[kind]:
                    issues.append(
                        ValidationIssue(
                            "FORMULA_UNKNOWN_DEPENDENCY",
                            f"{kind}:{f.name} depends on unknown '{dep}'",
                        )
                    )

            allowed_columns = set(PRIMITIVE_COLUMNS[kind])
            if f.auxiliary_kind is not None:
                allowed_columns.update(PRIMITIVE_COLUMNS[f.auxiliary_kind])
            for col in f.requires:
                if col not in allowed_columns:
                    issues.append(
                        ValidationIssue(
                            "FORMULA_UNKNOWN_COLUMN",
                            f"{kind}:{f.name} requires undeclared column '{col}'",
                        )
                    )

            if f.auxiliary_depends_on and f.auxiliary_kind is None:
                issues.append(
                    ValidationIssue(
                        "FORMULA_AUXILIARY_KIND",
                        f"{kind}:{f.name} has auxiliary dependencies but no auxiliary kind",
                    )
                )
            elif f.auxiliary_kind is not None:
                if f.auxiliary_kind is kind:
                    issues.append(
                        ValidationIssue(
                            "FORMULA_AUXILIARY_KIND",
                            f"{kind}:{f.name} uses its own kind as auxiliary",
                        )
                    )
                for dep in f.auxiliary_depends_on:
                    if dep not in known[f.auxiliary_kind]:
                        issues.append(
                            ValidationIssue(
                                "FORMULA_UNKNOWN_DEPENDENCY",
                                f"{kind}:{f.name} depends on unknown auxiliary "
                                f"'{f.auxiliary_kind}:{dep}'",
                            )
                        )

    if issues:
        raise ValidationError(issues)

    _check_acyclic(registry)


def _edges(registry: FormulaRegistry, node: Node) -> List[Node]:
    kind, name = node
    f = registry.get(kind, name)
    if f is None:
        return []
    out = [(kind, registry.canonical(kind, d)) for d in f.depends_on]
    if f.auxiliary_kind is not None:
        aux = f.auxiliary_kind
        out.extend((aux, registry.canonical(aux, d)) for d in f.auxiliary_depends_on)
    return out


def _check_acyclic(registry: FormulaRegistry) -> None:
    WHITE, GREY, BLACK = 0, 1, 2
    state: Dict[Node, int] = {}

    def visit(node: Node, path: List[Node]) -> None:
        state[node] = GREY
        path.append(node)
        for nxt in _edges(registry, node):
            s = state.get(nxt, WHITE)
            if s == GREY:
                start = path.index(nxt)
                raise FormulaCycleError([n for _, n in path[start:]] + [nxt[1]])
            if s == WHITE:
                visit(nxt, path)
        path.pop()
        state[node] = BLACK

    for kind in DatasetKind:
        for f in registry.formulas_for(kind):
            node = (kind, f.name)
            if state.get(node, WHITE) == WHITE:
                visit(node, [])
