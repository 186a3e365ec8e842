"""Project configuration for barrelguard stored in ``barrelguard.toml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import toml

from .boundaries import allow_list_from_barrels, find_closest_directory, normalize
from .config import (
    CONFIG_FILENAMES,
    CONFIG_SECTION,
    DEFAULT_BARREL_FILES,
    DEFAULT_EXTENSIONS,
    config_override,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)

_LIST_KEYS = ("include_modules", "barrel_files", "extensions", "exclude")


@dataclass
class LintConfig:
    """Settings that shape module-root lookups and specifier resolution."""

    include_modules: List[Path] = field(default_factory=list)
    barrel_files: Tuple[str, ...] = DEFAULT_BARREL_FILES
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    base_url: Optional[Path] = None
    paths: Dict[str, List[str]] = field(default_factory=dict)
    exclude: Tuple[str, ...] = ()
    source: Optional[Path] = None

    @property
    def allow_list(self):
        return allow_list_from_barrels(self.include_modules)

    def with_include_modules(self, include_modules: Sequence[Path]) -> "LintConfig":
        """Copy of this config with *include_modules* replaced (CLI override)."""
        return LintConfig(
            include_modules=[normalize(p) for p in include_modules],
            barrel_files=self.barrel_files,
            extensions=self.extensions,
            base_url=self.base_url,
            paths=dict(self.paths),
            exclude=self.exclude,
            source=self.source,
        )

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]], base_dir: Path) -> "LintConfig":
        """Build a config from the ``[barrelguard]`` table.

        Relative ``include_modules`` and ``base_url`` entries are taken
        relative to *base_dir* (the directory holding the config file).
        """
        if not d:
            return LintConfig()

        unknown = sorted(set(d) - set(_LIST_KEYS) - {"base_url", "paths"})
        if unknown:
            raise ConfigError(
                f"Unknown configuration key(s): {', '.join(unknown)}",
                context={"keys": unknown},
            )

        for key in _LIST_KEYS:
            value = d.get(key)
            if value is not None and (
                not isinstance(value, list) or not all(isinstance(v, str) for v in value)
            ):
                raise ConfigError(f"'{key}' must be a list of strings", context={"key": key})

        cfg = LintConfig()
        cfg.include_modules = [normalize(base_dir / p) for p in d.get("include_modules", [])]
        if d.get("barrel_files"):
            cfg.barrel_files = tuple(d["barrel_files"])
        if d.get("extensions"):
            cfg.extensions = tuple(
                ext if ext.startswith(".") else f".{ext}" for ext in d["extensions"]
            )
        cfg.exclude = tuple(d.get("exclude", []))

        base_url = d.get("base_url")
        if base_url is not None:
            if not isinstance(base_url, str):
                raise ConfigError("'base_url' must be a string", context={"key": "base_url"})
            cfg.base_url = normalize(base_dir / base_url)

        paths = d.get("paths", {})
        if not isinstance(paths, dict):
            raise ConfigError("'paths' must be a table", context={"key": "paths"})
        for alias, targets in paths.items():
            if isinstance(targets, str):
                targets = [targets]
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                raise ConfigError(
                    f"'paths.{alias}' must be a string or list of strings",
                    context={"key": f"paths.{alias}"},
                )
            cfg.paths[alias] = list(targets)
        if cfg.paths and cfg.base_url is None:
            cfg.base_url = normalize(base_dir)
        return cfg


def find_config_file(start: Path) -> Optional[Path]:
    """Locate the closest config file at or above *start*."""
    override = config_override()
    if override is not None:
        return override
    start = normalize(start)
    if start.is_file():
        start = start.parent
    directory = find_closest_directory(start, CONFIG_FILENAMES, start.anchor)
    if directory is None:
        return None
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Path] = None, start: Optional[Path] = None) -> LintConfig:
    """Load configuration from *path* or the file discovered from *start*.

    Returns default settings when no config file exists.
    """
    if path is None:
        path = find_config_file(start or Path.cwd())
    if path is None:
        logger.debug("No barrelguard config found; using defaults")
        return LintConfig()

    path = normalize(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}", context={"path": path})
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}", context={"path": path}) from exc

    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{CONFIG_SECTION}] must be a table", context={"path": path})
    cfg = LintConfig.from_dict(section, path.parent)
    cfg.source = path
    logger.debug("Loaded config from %s", path)
    return cfg


def default_config_dict() -> Dict[str, Any]:
    return {
        CONFIG_SECTION: {
            "barrel_files": list(DEFAULT_BARREL_FILES),
            "include_modules": [],
            "exclude": [],
        }
    }


def save_default_config(directory: Path, force: bool = False) -> Path:
    """Write a default ``barrelguard.toml`` into *directory*.

    Raises:
        ConfigError: if the file exists and *force* is not set.
    """
    path = directory / CONFIG_FILENAMES[0]
    if path.exists() and not force:
        raise ConfigError(f"{path} already exists (use --force to overwrite)", context={"path": path})
    directory.mkdir(parents=True, exist_ok=True)
    header = (
        "# barrelguard configuration\n"
        "# include_modules: barrel files that define virtual modules; empty means every barrel counts.\n"
        "# base_url / paths: optional tsconfig-style aliases, relative to this file.\n\n"
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(header)
        toml.dump(default_config_dict(), f)
    return path
