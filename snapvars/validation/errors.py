from __future__ import annotations

from dataclasses import dataclass
from typing import List

from snapvars.core.exceptions import SnapvarsError


@dataclass(frozen=True)
class ValidationIssue:
    """
    One problem found by a validator.

    code is a stable identifier (e.g. DATASET_BOXLEN); subject names the
    dataset or formula the issue is about, when there is one.
    """

    code: str
    message: str
    subject: str = ""

    def __str__(self) -> str:
        where = f" [{self.subject}]" if self.subject else ""
        return f"{self.code}{where}: {self.message}"


class ValidationError(SnapvarsError):
    """Raised with every issue a validator collected, not just the first."""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(
            f"{len(self.issues)} validation issue(s):\n" + "\n".join(str(i) for i in self.issues)
        )

    @property
    def codes(self) -> List[str]:
        return [i.code for i in self.issues]
