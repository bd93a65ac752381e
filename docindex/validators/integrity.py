"""Validator for the ``{category: [[name, summary], ...]}`` data contract."""

from __future__ import annotations

from typing import Any, Collection, List, Mapping, Optional

from ..logging import get_logger
from ..models import KNOWN_CATEGORIES
from .base import ERROR, WARNING, ValidationError, ValidationIssue, Validator

_LOGGER = get_logger("validators.integrity")


class IndexValidator(Validator):
    """Reports shape, uniqueness and ordering problems in raw sidebar data."""

    name = "integrity"

    def __init__(
        self,
        *,
        allow_unknown_categories: bool = False,
        extra_categories: Collection[str] = (),
    ) -> None:
        self._allow_unknown = allow_unknown_categories
        self._known = frozenset(KNOWN_CATEGORIES) | frozenset(extra_categories)

    def validate(
        self, mapping: Any, *, duplicate_categories: Collection[str] = ()
    ) -> List[ValidationIssue]:
        if not isinstance(mapping, Mapping):
            return [
                ValidationIssue(
                    category="<root>",
                    name=None,
                    code="shape",
                    severity=ERROR,
                    detail="sidebar data must be a mapping of category to entries",
                )
            ]

        issues: List[ValidationIssue] = []
        for category in duplicate_categories:
            issues.append(
                _issue(category, None, "duplicate-category", ERROR, "category key appears more than once")
            )
        for category, raw_entries in mapping.items():
            category_name = str(category)
            if not isinstance(category, str):
                issues.append(_issue(category_name, None, "shape", ERROR, "category key is not a string"))
                continue
            if not self._allow_unknown and category not in self._known:
                issues.append(
                    _issue(category, None, "unknown-category", WARNING, "category is not a known kind")
                )
            if not isinstance(raw_entries, (list, tuple)):
                issues.append(_issue(category, None, "shape", ERROR, "entries are not a list"))
                continue
            if not raw_entries:
                issues.append(_issue(category, None, "empty-category", WARNING, "category has no entries"))
                continue
            issues.extend(self._validate_entries(category, raw_entries))
        return issues

    def check(
        self, mapping: Any, *, duplicate_categories: Collection[str] = ()
    ) -> List[ValidationIssue]:
        """Validate and raise :class:`ValidationError` when any error is found.

        Warnings are returned to the caller.
        """
        issues = self.validate(mapping, duplicate_categories=duplicate_categories)
        errors = [issue for issue in issues if issue.is_error]
        if errors:
            for issue in errors:
                _LOGGER.warning("%s", issue.describe())
            raise ValidationError(f"sidebar data failed {len(errors)} integrity check(s)", errors)
        return issues

    def _validate_entries(self, category: str, raw_entries: Any) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        seen: set[str] = set()
        previous: Optional[str] = None
        for raw in raw_entries:
            if (
                not isinstance(raw, (list, tuple))
                or len(raw) != 2
                or not all(isinstance(part, str) for part in raw)
            ):
                issues.append(
                    _issue(category, None, "shape", ERROR, f"entry {raw!r} is not a [name, summary] pair")
                )
                continue
            name, summary = raw
            if not name.strip():
                issues.append(_issue(category, name, "empty-name", ERROR, "entry name is blank"))
                continue
            if name in seen:
                issues.append(_issue(category, name, "duplicate-name", ERROR, "name appears more than once"))
            seen.add(name)
            if previous is not None and name < previous:
                issues.append(
                    _issue(category, name, "unsorted", WARNING, f"listed after {previous!r}")
                )
            previous = name
            if "\n" in summary or "\r" in summary:
                issues.append(
                    _issue(category, name, "multiline-summary", WARNING, "summary spans several lines")
                )
        return issues


def _issue(category: str, name: Optional[str], code: str, severity: str, detail: str) -> ValidationIssue:
    return ValidationIssue(category=category, name=name, code=code, severity=severity, detail=detail)


__all__ = ["IndexValidator"]
