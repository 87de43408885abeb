from __future__ import annotations

import pandas as pd

from snapvars.core.dataset import (
    GRID_COLUMNS,
    LEVEL_COLUMN,
    POSITION_COLUMNS,
    Dataset,
    DatasetKind,
)
from snapvars.validation.errors import ValidationError, ValidationIssue


def validate_dataset(ds: Dataset) -> None:
    """
    Schema checks a snapshot reader's output must pass before resolution.

    :raises ValidationError: with every issue found
    """
    issues: list[ValidationIssue] = []

    def issue(code: str, message: str) -> None:
        issues.append(ValidationIssue(code, message, subject=ds.name))

    frame = ds.frame
    if not isinstance(frame, pd.DataFrame):
        issue("DATASET_TYPE", "Dataset frame must be a pandas DataFrame.")
        raise ValidationError(issues)

    if frame.columns.duplicated().any():
        dupes = sorted(set(frame.columns[frame.columns.duplicated()]))
        issue("DATASET_DUPLICATE_COLUMNS", f"Duplicate columns: {dupes}.")

    # position columns per kind
    expected = POSITION_COLUMNS if ds.kind is DatasetKind.PARTICLE else GRID_COLUMNS
    missing = [c for c in expected if c not in frame.columns]
    if missing:
        issue("DATASET_POSITION_COLUMNS", f"{ds.kind} dataset is missing {missing}.")

    if not ds.boxlen > 0:
        issue("DATASET_BOXLEN", f"boxlen must be positive, got {ds.boxlen}.")

    if ds.lmin > ds.lmax:
        issue("DATASET_LEVEL_RANGE", f"lmin={ds.lmin} is above lmax={ds.lmax}.")
    elif LEVEL_COLUMN in frame.columns and len(frame):
        levels = frame[LEVEL_COLUMN]
        out_of_range = int(((levels < ds.lmin) | (levels > ds.lmax)).sum())
        if out_of_range:
            issue(
                "DATASET_LEVEL_BOUNDS",
                f"{out_of_range} row(s) have a level outside [{ds.lmin}, {ds.lmax}].",
            )

    if issues:
        raise ValidationError(issues)
