from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from snapvars.config.model import EngineConfig
from snapvars.core.assembler import VariableSpec, assemble, build_requests
from snapvars.core.coordinates import Direction, normalize_center
from snapvars.core.dataset import Dataset, DatasetKind, FilteredDataset
from snapvars.core.exceptions import ShapeMismatch, SnapvarsError, UnresolvedVariablesError
from snapvars.core.mask import NO_MASK, Mask, apply_mask
from snapvars.core.resolver import VariableResolver
from snapvars.core.units import STANDARD_UNIT
from snapvars.formulas.registry import FormulaRegistry, default_registry
from snapvars.validation.dataset_validation import validate_dataset

logger = logging.getLogger(__name__)


def _align_auxiliary(
    dataset: Dataset,
    filtered: FilteredDataset,
    auxiliary: Optional[Dataset],
    mask: Mask,
) -> Optional[FilteredDataset]:
    """
    Bring the auxiliary dataset onto the filtered rows.

    An auxiliary aligned with the full dataset gets the same mask; one that
    already matches the filtered rows is used as is.
    """
    if auxiliary is None:
        return None
    if not isinstance(auxiliary, Dataset):
        raise TypeError(f"auxiliary must be a Dataset, got {type(auxiliary).__name__}")

    if len(auxiliary) == len(dataset):
        return apply_mask(auxiliary, mask)
    if len(auxiliary) == len(filtered):
        return apply_mask(auxiliary, NO_MASK)
    raise ShapeMismatch(expected=len(filtered), actual=len(auxiliary), what="auxiliary dataset")


def getvar(
    dataset: Dataset,
    variables: Union[VariableSpec, Sequence[VariableSpec]],
    units: Union[None, str, Sequence[Optional[str]]] = None,
    *,
    center: Optional[Sequence[Any]] = None,
    center_unit: str = STANDARD_UNIT,
    direction: Optional[Union[Direction, str]] = None,
    mask: Mask = NO_MASK,
    auxiliary: Optional[Dataset] = None,
    ref_time: Optional[float] = None,
    registry: Optional[FormulaRegistry] = None,
    config: Optional[EngineConfig] = None,
    validate: bool = False,
) -> Union[np.ndarray, Dict[str, np.ndarray]]:
    """
    Resolve one or several variables of a dataset.

    :param dataset: the snapshot slice (never modified)
    :param variables: a name, a VariableRequest, or a sequence of them
    :param units: None, one unit for all, or units paired by position
    :param center: domain fractions, "bc"/"boxcenter", or lengths in center_unit;
        falls back to config.default_center, then (0, 0, 0)
    :param center_unit: unit of numeric center components
    :param direction: x, y or z; falls back to config.default_direction, then z
    :param mask: NO_MASK or a boolean row selection of len(dataset)
    :param auxiliary: companion dataset of another kind for cross-domain rules
    :param ref_time: reference time for particle ages (default: snapshot time)
    :param registry: formula tables (default: built-in)
    :param config: engine defaults
    :param validate: run validate_dataset on the dataset (and auxiliary) first
    :return: one array for a single variable, else a dict keyed by name
    :raises ShapeMismatch: mask or auxiliary do not line up with the dataset
    :raises UnresolvedVariablesError: several variables requested and some failed
    :raises ValidationError: validate=True and the dataset is malformed
    """
    requests = build_requests(variables, units)
    if validate:
        validate_dataset(dataset)
        if auxiliary is not None:
            validate_dataset(auxiliary)

    registry = registry if registry is not None else default_registry()

    if center is None and config is not None:
        center = config.default_center
    if direction is None:
        direction = config.default_direction if config is not None else Direction.Z

    center_frac = normalize_center(center, dataset.boxlen, center_unit, dataset.info.scale)

    filtered = apply_mask(dataset, mask)
    aux_filtered = _align_auxiliary(dataset, filtered, auxiliary, mask)

    resolver = VariableResolver(
        filtered,
        registry,
        center=center_frac,
        direction=direction,
        auxiliary=aux_filtered,
        ref_time=ref_time,
    )

    logger.debug(
        "Resolving variables",
        extra={
            "dataset": dataset.name,
            "kind": dataset.kind.value,
            "variables": [r.name for r in requests],
            "n_rows": len(dataset),
            "n_selected": len(filtered),
            "auxiliary": aux_filtered.kind.value if aux_filtered is not None else None,
        },
    )

    values: Dict[str, np.ndarray] = {}
    errors: Dict[str, SnapvarsError] = {}
    for req in requests:
        try:
            values[req.name] = resolver.resolve(req.name, req.unit)
        except SnapvarsError as e:
            if len(requests) == 1:
                raise
            errors[req.name] = e

    if errors:
        logger.warning(
            "Variables could not be resolved",
            extra={"dataset": dataset.name, "variables": list(errors)},
        )
        raise UnresolvedVariablesError(errors)

    return assemble(requests, values)


def available_variables(
    kind: Union[DatasetKind, str],
    registry: Optional[FormulaRegistry] = None,
) -> pd.DataFrame:
    """
    Catalogue of the derived variables defined for a dataset kind.

    One row per rule: name, family, unit_power, cross_domain, auxiliary_kind,
    aliases, depends_on, description. Sorted by family, then name.
    """
    kind = DatasetKind(kind)
    registry = registry if registry is not None else default_registry()

    rows = []
    for f in registry.formulas_for(kind):
        rows.append(
            {
                "name": f.name,
                "family": f.family,
                "unit_power": f.unit_power,
                "cross_domain": f.cross_domain,
                "auxiliary_kind": f.auxiliary_kind.value if f.auxiliary_kind is not None else None,
                "aliases": ", ".join(f.aliases),
                "depends_on": ", ".join(f.depends_on + f.auxiliary_depends_on),
                "description": f.description,
            }
        )

    columns = [
        "name", "family", "unit_power", "cross_domain",
        "auxiliary_kind", "aliases", "depends_on", "description",
    ]
    df = pd.DataFrame(rows, columns=columns)
    return df.sort_values(["family", "name"]).reset_index(drop=True)
