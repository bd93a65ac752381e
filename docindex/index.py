"""Immutable sidebar index mapping categories to ordered entries."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .logging import get_logger
from .models import DuplicateEntryError, Entry, IndexFormatError

_LOGGER = get_logger("index")
_WHITESPACE = re.compile(r"\s+")


class SidebarIndex:
    """Read-only category -> entries mapping used to render a navigation tree.

    Entries are sorted by name inside each category and categories with no
    entries are dropped, so every category reported by :meth:`categories`
    has at least one entry. Instances hold only tuples behind a mapping
    proxy and can be shared between threads without locking.
    """

    def __init__(self, sections: Optional[Mapping[str, Iterable[Any]]] = None) -> None:
        frozen: Dict[str, Tuple[Entry, ...]] = {}
        for category, raw_entries in (sections or {}).items():
            entries = tuple(sorted((Entry(*raw) for raw in raw_entries), key=_entry_key))
            if not entries:
                _LOGGER.debug("Dropping empty category %s", category)
                continue
            for previous, current in zip(entries, entries[1:]):
                if previous.name == current.name:
                    raise DuplicateEntryError(category, current.name)
            frozen[category] = entries
        self._sections: Mapping[str, Tuple[Entry, ...]] = MappingProxyType(
            dict(sorted(frozen.items()))
        )

    @classmethod
    def from_mapping(cls, mapping: Any, *, strict: bool = True) -> "SidebarIndex":
        """Build an index from ``{category: [[name, summary], ...]}`` data.

        With ``strict`` disabled, malformed entries and repeated names are
        skipped with a warning instead of raising.
        """
        if not isinstance(mapping, Mapping):
            raise IndexFormatError("sidebar index must be a mapping of category to entries")

        sections: Dict[str, List[Entry]] = {}
        for category, raw_entries in mapping.items():
            if not isinstance(category, str):
                raise IndexFormatError(f"category keys must be strings, got {category!r}")
            if not isinstance(raw_entries, (list, tuple)):
                if strict:
                    raise IndexFormatError(f"entries for category {category!r} must be a list")
                _LOGGER.warning("Skipping category %s: entries are not a list", category)
                continue
            seen: set[str] = set()
            entries: List[Entry] = []
            for raw in raw_entries:
                entry = _entry_from_raw(raw)
                if entry is None:
                    if strict:
                        raise IndexFormatError(
                            f"malformed entry in category {category!r}: {raw!r}"
                        )
                    _LOGGER.warning("Skipping malformed entry in %s: %r", category, raw)
                    continue
                if entry.name in seen:
                    if strict:
                        raise DuplicateEntryError(category, entry.name)
                    _LOGGER.warning("Dropping duplicate entry %s in %s", entry.name, category)
                    continue
                seen.add(entry.name)
                entries.append(entry)
            sections[category] = entries
        return cls(sections)

    # ------------------------------------------------------------------
    # Read operations

    def get(self, category: str) -> Tuple[Entry, ...]:
        """Return the entries of ``category``, or an empty tuple when absent."""
        return self._sections.get(category, ())

    def categories(self) -> frozenset[str]:
        return frozenset(self._sections)

    def all_entries(self) -> Tuple[Tuple[str, Entry], ...]:
        """Flatten the index into ``(category, entry)`` pairs."""
        return tuple(
            (category, entry)
            for category, entries in self._sections.items()
            for entry in entries
        )

    def lookup(self, category: str, name: str) -> Optional[Entry]:
        for entry in self.get(category):
            if entry.name == name:
                return entry
        return None

    def entry_count(self) -> int:
        return sum(len(entries) for entries in self._sections.values())

    def to_mapping(self) -> Dict[str, List[List[str]]]:
        """Return the serializable ``{category: [[name, summary], ...]}`` shape."""
        return {
            category: [[entry.name, entry.summary] for entry in entries]
            for category, entries in self._sections.items()
        }

    # ------------------------------------------------------------------
    # Container protocol

    def __contains__(self, category: object) -> bool:
        return category in self._sections

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SidebarIndex):
            return NotImplemented
        return dict(self._sections) == dict(other._sections)

    def __hash__(self) -> int:
        return hash(tuple(self._sections.items()))

    def __repr__(self) -> str:
        return f"SidebarIndex(categories={len(self)}, entries={self.entry_count()})"


class IndexBuilder:
    """Collects extracted symbols and freezes them into a :class:`SidebarIndex`."""

    def __init__(self) -> None:
        self._sections: Dict[str, Dict[str, Entry]] = {}

    def add(self, category: str, name: str, summary: str = "") -> "IndexBuilder":
        category = category.strip()
        name = name.strip()
        if not category or not name:
            raise IndexFormatError("category and name must be non-empty")
        bucket = self._sections.setdefault(category, {})
        if name in bucket:
            raise DuplicateEntryError(category, name)
        bucket[name] = Entry(name, normalize_summary(summary))
        return self

    def extend(self, triples: Iterable[Tuple[str, str, str]]) -> "IndexBuilder":
        for category, name, summary in triples:
            self.add(category, name, summary)
        return self

    def build(self) -> SidebarIndex:
        index = SidebarIndex(
            {category: bucket.values() for category, bucket in self._sections.items()}
        )
        _LOGGER.debug("Built %r", index)
        return index

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._sections.values())


def normalize_summary(summary: str) -> str:
    """Collapse a summary onto a single line."""
    return _WHITESPACE.sub(" ", summary).strip()


def _entry_key(entry: Entry) -> str:
    return entry.name


def _entry_from_raw(raw: Any) -> Optional[Entry]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        return None
    name, summary = raw
    if not isinstance(name, str) or not isinstance(summary, str) or not name.strip():
        return None
    return Entry(name, summary)


__all__ = ["IndexBuilder", "SidebarIndex", "normalize_summary"]
