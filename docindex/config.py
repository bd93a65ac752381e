"""Configuration loading for docindex (.docindex.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import DocIndexError

CONFIG_FILENAME = ".docindex.yml"


class ConfigError(DocIndexError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class IndexConfig:
    """Where the sidebar index lives and how to read it."""

    path: Optional[Path] = None
    format: Optional[str] = None
    strict: bool = True


@dataclass
class ValidateConfig:
    """Integrity check settings."""

    allow_unknown_categories: bool = False
    extra_categories: List[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    """Defaults for `docindex convert`."""

    format: str = "json"
    indent: Optional[int] = None


@dataclass
class ServiceConfig:
    """Bind address for `docindex serve`."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class DocIndexConfig:
    """Represents the settings defined in .docindex.yml."""

    root: Path
    index: IndexConfig = field(default_factory=IndexConfig)
    validate: ValidateConfig = field(default_factory=ValidateConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(config_path: Path) -> DocIndexConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocIndexConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    index_data = _as_dict(data.get("index"))
    index = IndexConfig()
    if index_data:
        path_str = _as_str(index_data.get("path"))
        index.path = root / path_str if path_str else None
        index.format = _as_str(index_data.get("format"))
        strict = _as_bool(index_data.get("strict"))
        index.strict = True if strict is None else strict

    validate_data = _as_dict(data.get("validate"))
    validate = ValidateConfig()
    if validate_data:
        validate.allow_unknown_categories = (
            _as_bool(validate_data.get("allow_unknown_categories")) or False
        )
        validate.extra_categories = _as_str_list(validate_data.get("extra_categories"))

    output_data = _as_dict(data.get("output"))
    output = OutputConfig()
    if output_data:
        output.format = _as_str(output_data.get("format")) or output.format
        output.indent = _as_int(output_data.get("indent"))

    service_data = _as_dict(data.get("service"))
    service = ServiceConfig()
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        port = _as_int(service_data.get("port"))
        if port is not None:
            service.port = port

    return DocIndexConfig(
        root=root,
        index=index,
        validate=validate,
        output=output,
        service=service,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
