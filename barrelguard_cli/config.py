"""Configuration constants for barrelguard."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Set, Tuple

CONFIG_FILENAMES: Tuple[str, ...] = ("barrelguard.toml", ".barrelguard.toml")
CONFIG_SECTION = "barrelguard"

# Explicit config file, skips discovery when set
CONFIG_ENV_VAR = "BARRELGUARD_CONFIG"

PROJECT_MARKER = "package.json"
DEFAULT_BARREL_FILES: Tuple[str, ...] = ("index.ts",)

DEFAULT_EXTENSIONS: Tuple[str, ...] = (
    ".ts", ".tsx", ".d.ts", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts",
)

SKIP_DIRS: Set[str] = {
    "node_modules", ".git", "dist", "build", "coverage", ".next",
    ".turbo", ".cache", ".yarn", "out",
}


def config_override() -> Optional[Path]:
    """Return the config file forced through the environment, if any."""
    value = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if not value:
        return None
    return Path(value).expanduser()
