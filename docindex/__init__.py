"""Immutable documentation sidebar indexes."""

from .index import IndexBuilder, SidebarIndex
from .models import DocIndexError, DuplicateEntryError, Entry, IndexFormatError

__all__ = [
    "DocIndexError",
    "DuplicateEntryError",
    "Entry",
    "IndexBuilder",
    "IndexFormatError",
    "SidebarIndex",
]
