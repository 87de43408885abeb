from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from snapvars.core.units import STANDARD_UNIT


@dataclass(frozen=True)
class VariableRequest:
    name: str
    unit: str = STANDARD_UNIT


VariableSpec = Union[str, VariableRequest]


def build_requests(
    variables: Union[VariableSpec, Sequence[VariableSpec]],
    units: Union[None, str, Sequence[Optional[str]]] = None,
) -> List[VariableRequest]:
    """
    Normalise the caller's variables/units into a list of VariableRequests.

    - units None: every plain name uses "standard"
    - units a string: applied to every plain name
    - units a sequence: paired with the variables by position; variables past
      the end of the list use "standard"

    A VariableRequest keeps its own unit.

    :raises ValueError: if no variable is requested or a name is requested twice
    :raises TypeError: if a variable is neither a string nor a VariableRequest
    """
    if isinstance(variables, (str, VariableRequest)):
        items: List[VariableSpec] = [variables]
    else:
        items = list(variables)

    if not items:
        raise ValueError("At least one variable must be requested")

    if units is None:
        unit_list: List[Optional[str]] = []
    elif isinstance(units, str):
        unit_list = [units] * len(items)
    else:
        unit_list = list(units)

    requests: List[VariableRequest] = []
    for i, item in enumerate(items):
        if isinstance(item, VariableRequest):
            requests.append(item)
            continue
        if not isinstance(item, str):
            raise TypeError(f"Variable must be a str or VariableRequest, got {type(item).__name__}")
        unit = unit_list[i] if i < len(unit_list) and unit_list[i] is not None else STANDARD_UNIT
        requests.append(VariableRequest(item, unit))

    seen = set()
    for req in requests:
        if req.name in seen:
            raise ValueError(f"Variable '{req.name}' requested more than once")
        seen.add(req.name)
    return requests


def assemble(
    requests: Sequence[VariableRequest],
    values: Mapping[str, np.ndarray],
) -> Union[np.ndarray, Dict[str, np.ndarray]]:
    """
    Shape adapter over resolved values.

    One request gives the array itself; several give a dict keyed by the
    requested names, in request order.
    """
    if len(requests) == 1:
        return values[requests[0].name]
    return {req.name: values[req.name] for req in requests}
