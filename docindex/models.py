"""Core data models shared across docindex components."""

from typing import NamedTuple

KNOWN_CATEGORIES = frozenset(
    {
        "attr",
        "constant",
        "derive",
        "enum",
        "externcrate",
        "fn",
        "import",
        "keyword",
        "macro",
        "mod",
        "primitive",
        "static",
        "struct",
        "trait",
        "traitalias",
        "type",
        "union",
    }
)


class Entry(NamedTuple):
    """A documented symbol as shown in the sidebar."""

    name: str
    summary: str = ""


class DocIndexError(RuntimeError):
    """Base class for docindex failures."""


class IndexFormatError(DocIndexError):
    """Raised when serialized sidebar data does not have the expected shape."""


class DuplicateEntryError(IndexFormatError):
    """Raised when a name appears twice within one category."""

    def __init__(self, category: str, name: str) -> None:
        super().__init__(f"duplicate entry {name!r} in category {category!r}")
        self.category = category
        self.name = name
