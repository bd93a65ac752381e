"""Load-once holder for a sidebar index file, replaced wholesale on rebuild."""

from __future__ import annotations

import hashlib
import threading
from pathlib import Path
from typing import Optional

from .. import codec
from ..index import SidebarIndex
from ..logging import get_logger

_LOGGER = get_logger("stores.index_store")


class IndexStore:
    """Keeps the current :class:`SidebarIndex` for a file on disk.

    Readers always see a complete index: :meth:`refresh` parses the new file
    contents fully before swapping the reference.
    """

    def __init__(self, path: Path, fmt: Optional[str] = None, *, strict: bool = True) -> None:
        self._path = Path(path)
        self._fmt = fmt
        self._strict = strict
        self._lock = threading.Lock()
        self._index: Optional[SidebarIndex] = None
        self._fingerprint: Optional[str] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def fingerprint(self) -> Optional[str]:
        return self._fingerprint

    def current(self) -> SidebarIndex:
        index = self._index
        if index is not None:
            return index
        with self._lock:
            if self._index is None:
                self._reload(self._path.read_bytes())
            assert self._index is not None
            return self._index

    def refresh(self) -> bool:
        """Reload the file when its contents changed; return whether a swap happened."""
        payload = self._path.read_bytes()
        with self._lock:
            if self._index is not None and _fingerprint(payload) == self._fingerprint:
                _LOGGER.debug("Sidebar index at %s unchanged", self._path)
                return False
            self._reload(payload)
            return True

    def _reload(self, payload: bytes) -> None:
        fmt = self._fmt or codec.format_for_path(self._path)
        index = codec.loads(codec.decode(payload, self._path), fmt, strict=self._strict)
        self._index = index
        self._fingerprint = _fingerprint(payload)
        _LOGGER.info("Loaded sidebar index %s (%r)", self._path, index)


def _fingerprint(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


__all__ = ["IndexStore"]
