"""Serialization of sidebar indexes as JSON or rustdoc sidebar scripts."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .index import SidebarIndex
from .logging import get_logger
from .models import IndexFormatError

_LOGGER = get_logger("codec")

FORMATS = ("json", "js")

_SCRIPT_PATTERNS = (
    re.compile(r"^\s*initSidebarItems\(\s*(?P<body>\{.*\})\s*\)\s*;?\s*$", re.DOTALL),
    re.compile(r"^\s*window\.SIDEBAR_ITEMS\s*=\s*(?P<body>\{.*\})\s*;?\s*$", re.DOTALL),
)


def dumps(index: SidebarIndex, fmt: str = "json", *, indent: Optional[int] = None) -> str:
    """Serialize ``index``; the ``js`` format is always written on one line."""
    fmt = _check_format(fmt)
    mapping = index.to_mapping()
    if fmt == "js":
        body = json.dumps(mapping, ensure_ascii=False, separators=(",", ":"))
        return f"initSidebarItems({body});"
    if indent is None:
        return json.dumps(mapping, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(mapping, ensure_ascii=False, indent=indent)


def loads(text: str, fmt: Optional[str] = None, *, strict: bool = True) -> SidebarIndex:
    """Parse serialized sidebar data, detecting the format when ``fmt`` is None.

    Repeated category keys raise in strict mode; otherwise the last
    occurrence wins and a warning is logged.
    """
    data, repeated = parse(text, fmt)
    if repeated:
        if strict:
            raise IndexFormatError(f"duplicate category keys: {', '.join(repeated)}")
        _LOGGER.warning("Keeping last occurrence of repeated categories: %s", ", ".join(repeated))
    return SidebarIndex.from_mapping(data, strict=strict)


def parse(text: str, fmt: Optional[str] = None) -> Tuple[Any, List[str]]:
    """Decode sidebar text into raw data and the category keys it repeats."""
    fmt = _check_format(fmt) if fmt is not None else detect_format(text)
    body = unwrap(text) if fmt == "js" else text
    objects: List[List[Tuple[str, Any]]] = []

    def _collect(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
        objects.append(pairs)
        return dict(pairs)

    try:
        data = json.loads(body, object_pairs_hook=_collect)
    except json.JSONDecodeError as exc:
        raise IndexFormatError(f"invalid sidebar JSON: {exc}") from exc
    if not isinstance(data, dict):
        return data, []
    # The outermost object is completed, and therefore collected, last.
    return data, _repeated_keys(objects[-1])


def decode(payload: bytes, source: object = "<input>") -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise IndexFormatError(f"{source} is not valid UTF-8: {exc}") from exc


def load(path: Path, fmt: Optional[str] = None, *, strict: bool = True) -> SidebarIndex:
    path = Path(path)
    text = decode(path.read_bytes(), path)
    index = loads(text, fmt or format_for_path(path), strict=strict)
    _LOGGER.debug("Loaded %r from %s", index, path)
    return index


def dump(
    index: SidebarIndex,
    path: Path,
    fmt: Optional[str] = None,
    *,
    indent: Optional[int] = None,
) -> Path:
    path = Path(path)
    text = dumps(index, fmt or format_for_path(path), indent=indent)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    _LOGGER.debug("Wrote %r to %s", index, path)
    return path


def detect_format(text: str) -> str:
    return "json" if text.lstrip().startswith("{") else "js"


def format_for_path(path: Path) -> str:
    return "js" if Path(path).suffix.lower() == ".js" else "json"


def unwrap(text: str) -> str:
    """Return the JSON object wrapped by a sidebar script."""
    for pattern in _SCRIPT_PATTERNS:
        match = pattern.match(text)
        if match:
            return match.group("body")
    raise IndexFormatError(
        "expected `initSidebarItems({...});` or `window.SIDEBAR_ITEMS = {...};`"
    )


def _repeated_keys(pairs: List[Tuple[str, Any]]) -> List[str]:
    seen: set[str] = set()
    repeated: List[str] = []
    for key, _ in pairs:
        if key in seen and key not in repeated:
            repeated.append(key)
        seen.add(key)
    return repeated


def _check_format(fmt: str) -> str:
    normalized = fmt.strip().lower()
    if normalized not in FORMATS:
        raise IndexFormatError(f"unsupported format {fmt!r}; expected one of {', '.join(FORMATS)}")
    return normalized


__all__ = [
    "FORMATS",
    "decode",
    "detect_format",
    "dump",
    "dumps",
    "format_for_path",
    "load",
    "loads",
    "parse",
    "unwrap",
]
