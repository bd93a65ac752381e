"""Core validation data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

from ..models import DocIndexError

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """Represents a single integrity problem found in sidebar data."""

    category: str
    name: Optional[str]
    code: str
    severity: str
    detail: str

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def describe(self) -> str:
        location = self.category if self.name is None else f"{self.category}/{self.name}"
        return f"{self.severity}: [{self.code}] {location}: {self.detail}"


class ValidationError(DocIndexError):
    """Raised when sidebar data contains one or more error-severity issues."""

    def __init__(self, message: str, issues: Sequence[ValidationIssue]) -> None:
        super().__init__(message)
        self.issues = list(issues)


class Validator(Protocol):
    """Protocol implemented by sidebar data validators."""

    name: str

    def validate(self, mapping: Any) -> List[ValidationIssue]:
        """Run validation and return any issues."""
