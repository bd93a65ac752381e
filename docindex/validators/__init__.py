"""Integrity checks for generated sidebar data."""

from .base import ValidationError, ValidationIssue, Validator
from .integrity import IndexValidator

__all__ = [
    "IndexValidator",
    "ValidationError",
    "ValidationIssue",
    "Validator",
]
