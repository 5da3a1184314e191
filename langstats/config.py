"""Configuration loading for langstats (.langstats.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".langstats.yml"
DEFAULT_CACHE_FILENAME = "language-stats.cache"


@dataclass
class LangStatsConfig:
    """Represents the settings defined in .langstats.yml."""

    root: Path
    exclude_paths: List[str] = field(default_factory=list)
    vendored: List[str] = field(default_factory=list)
    languages: Dict[str, str] = field(default_factory=dict)
    include_documentation: bool = False
    cache_file: str = DEFAULT_CACHE_FILENAME

    def fingerprint_fields(self) -> Dict[str, Any]:
        """Return the settings that influence classification results."""
        return {
            "exclude_paths": sorted(self.exclude_paths),
            "vendored": sorted(self.vendored),
            "languages": dict(sorted(self.languages.items())),
            "include_documentation": self.include_documentation,
        }


def load_config(config_path: Path) -> LangStatsConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LangStatsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    languages: Dict[str, str] = {}
    for key, value in _as_dict(data.get("languages")).items():
        language = _as_str(value)
        if not isinstance(key, str) or not key or not language:
            raise ConfigError(f"Invalid language override in {config_file.name}: {key!r}")
        languages[key.lower() if key.startswith(".") else key] = language

    cache_file = _as_str(data.get("cache_file")) or DEFAULT_CACHE_FILENAME
    if "/" in cache_file or "\\" in cache_file:
        raise ConfigError("cache_file must be a bare file name")

    return LangStatsConfig(
        root=root,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        vendored=_as_str_list(data.get("vendored")),
        languages=languages,
        include_documentation=_as_bool(data.get("include_documentation")) or False,
        cache_file=cache_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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


__all__ = ["CONFIG_FILENAME", "ConfigError", "DEFAULT_CACHE_FILENAME", "LangStatsConfig", "load_config"]
