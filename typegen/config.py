"""Configuration loading for typegen (.typegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigurationError
from .models import Options, Preset

CONFIG_FILE_NAME = ".typegen.yml"


@dataclass
class TypegenConfig:
    """Represents the settings defined in .typegen.yml."""

    root: Path
    pkg_dir: Optional[Path] = None
    pkg_path: Optional[str] = None
    include: Optional[str] = None
    include_type: Optional[str] = None
    strip_prefix: bool = False
    disable_rename: bool = False
    mapper: Optional[str] = None
    out: Optional[Path] = None
    exclude_dirs: List[str] = field(default_factory=list)
    presets: Dict[str, Preset] = field(default_factory=dict)

    def defaults(self) -> Preset:
        """Return the top-level filter and naming settings as a preset."""
        return Preset(
            include_pattern=self.include or "",
            include_type=self.include_type or "",
            strip_prefix=self.strip_prefix,
            disable_rename=self.disable_rename,
        )

    def preset(self, name: str) -> Preset:
        """Return the named preset or raise ConfigurationError."""
        try:
            return self.presets[name]
        except KeyError:
            known = ", ".join(sorted(self.presets)) or "none defined"
            raise ConfigurationError(f"Unknown preset {name!r} (available: {known})") from None

    def options(self, preset: Optional[str] = None) -> Options:
        """Build run options from this config, optionally through a named preset."""
        source = self.preset(preset) if preset else self.defaults()
        options = source.options(
            str(self.pkg_dir) if self.pkg_dir else "",
            self.pkg_path or "",
        )
        options.exclude_dirs = list(self.exclude_dirs)
        return options


def load_config(config_path: Path, *, required: bool = False) -> TypegenConfig:
    """Load configuration from disk; a missing file yields defaults unless ``required``."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {config_file}")
        return TypegenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file.name} must contain a mapping at the root")

    pkg_dir_str = _as_str(data.get("pkg_dir"))
    out_str = _as_str(data.get("out"))

    config = TypegenConfig(
        root=root,
        pkg_dir=_resolve_relative(root, pkg_dir_str) if pkg_dir_str else None,
        pkg_path=_as_str(data.get("pkg_path")),
        include=_as_str(data.get("include")),
        include_type=_as_str(data.get("include_type")),
        strip_prefix=_as_bool(data.get("strip_prefix")) or False,
        disable_rename=_as_bool(data.get("disable_rename")) or False,
        mapper=_as_str(data.get("mapper")),
        out=_resolve_relative(root, out_str) if out_str else None,
        exclude_dirs=_as_str_list(data.get("exclude_dirs")),
    )

    presets_data = data.get("presets")
    if presets_data is not None and not isinstance(presets_data, dict):
        raise ConfigurationError("'presets' must be a mapping of preset names to settings")
    for name, raw in (presets_data or {}).items():
        config.presets[str(name)] = _parse_preset(str(name), raw, config.defaults())

    return config


def _parse_preset(name: str, raw: Any, base: Preset) -> Preset:
    # Keys a preset leaves out fall back to the top-level values.
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"preset {name!r} must be a mapping")
    strip_prefix = _as_bool(raw.get("strip_prefix"))
    disable_rename = _as_bool(raw.get("disable_rename"))
    include = _as_str(raw.get("include"))
    include_type = _as_str(raw.get("include_type"))
    return Preset(
        include_pattern=include if include is not None else base.include_pattern,
        include_type=include_type if include_type is not None else base.include_type,
        strip_prefix=strip_prefix if strip_prefix is not None else base.strip_prefix,
        disable_rename=disable_rename if disable_rename is not None else base.disable_rename,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _resolve_relative(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (root / path)


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILE_NAME", "TypegenConfig", "load_config"]
