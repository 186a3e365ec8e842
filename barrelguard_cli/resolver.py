"""Resolve JavaScript/TypeScript module specifiers to files on disk.

Supports the subset of Node and TypeScript resolution that virtual module
checks need:

- relative and absolute specifiers (``./a``, ``../b``, ``/abs/c``)
- tsconfig-style ``paths`` aliases and ``baseUrl`` lookups
- bare packages found in ``node_modules`` directories
- extension probing, ``.js`` -> ``.ts`` rewriting and directory indexes
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .boundaries import PathLike, normalize
from .config import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)

NODE_BUILTINS = {
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
    "worker_threads", "zlib",
}

# Specifier suffixes that TypeScript maps back onto source files
_TS_SOURCE_FOR_JS: Dict[str, Sequence[str]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}

_PACKAGE_ENTRY_FIELDS = ("types", "typings", "module", "main")


def is_relative(specifier: str) -> bool:
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


def is_builtin(specifier: str) -> bool:
    """Return True for Node built-in modules (``fs``, ``node:path``, ``fs/promises``)."""
    if specifier.startswith("node:"):
        return True
    return specifier.split("/", 1)[0] in NODE_BUILTINS


def split_package(specifier: str) -> Tuple[str, str]:
    """Split a bare specifier into ``(package_name, subpath)``."""
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2]), "/".join(parts[2:])
    return parts[0], "/".join(parts[1:])


class SpecifierResolver:
    """Map ``(specifier, importing file)`` to an absolute file path or ``None``."""

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        base_url: Optional[PathLike] = None,
        paths: Optional[Dict[str, List[str]]] = None,
    ) -> None:
        self.extensions = tuple(extensions)
        self.base_url = normalize(base_url) if base_url is not None else None
        self.paths = dict(paths or {})

    def resolve(self, specifier: str, from_file: PathLike) -> Optional[Path]:
        if not specifier:
            return None
        from_dir = normalize(from_file).parent

        if is_relative(specifier) or specifier.startswith("/"):
            return self._resolve_path(normalize(from_dir / specifier))

        for candidate in self._alias_candidates(specifier):
            resolved = self._resolve_path(candidate)
            if resolved is not None:
                return resolved

        if self.base_url is not None:
            resolved = self._resolve_path(normalize(self.base_url / specifier))
            if resolved is not None:
                return resolved

        return self._resolve_package(specifier, from_dir)

    # ------------------------------------------------------------------
    # Aliases
    # ------------------------------------------------------------------

    def _alias_candidates(self, specifier: str) -> Iterator[Path]:
        base = self.base_url
        if base is None:
            return
        for pattern, targets in self.paths.items():
            if "*" in pattern:
                prefix, _, suffix = pattern.partition("*")
                if not (specifier.startswith(prefix) and specifier.endswith(suffix)):
                    continue
                if len(specifier) < len(prefix) + len(suffix):
                    continue
                captured = specifier[len(prefix): len(specifier) - len(suffix)]
                for target in targets:
                    yield normalize(base / target.replace("*", captured, 1))
            elif pattern == specifier:
                for target in targets:
                    yield normalize(base / target)

    # ------------------------------------------------------------------
    # node_modules
    # ------------------------------------------------------------------

    def _resolve_package(self, specifier: str, from_dir: Path) -> Optional[Path]:
        package_name, subpath = split_package(specifier)
        for directory in [from_dir, *from_dir.parents]:
            package_dir = directory / "node_modules" / package_name
            if not package_dir.is_dir():
                continue
            if subpath:
                return self._resolve_path(normalize(package_dir / subpath))
            return self._resolve_directory(package_dir)
        return None

    # ------------------------------------------------------------------
    # Files and directories
    # ------------------------------------------------------------------

    def _resolve_path(self, base: Path) -> Optional[Path]:
        resolved = self._resolve_file(base)
        if resolved is not None:
            return resolved
        if base.is_dir():
            return self._resolve_directory(base)
        return None

    def _resolve_file(self, base: Path) -> Optional[Path]:
        if base.is_file():
            return base
        if not base.name:
            return None
        for ext in self.extensions:
            candidate = base.with_name(base.name + ext)
            if candidate.is_file():
                return candidate
        for ts_ext in _TS_SOURCE_FOR_JS.get(base.suffix, ()):
            candidate = base.with_suffix(ts_ext)
            if candidate.is_file():
                return candidate
        return None

    def _resolve_directory(self, directory: Path) -> Optional[Path]:
        manifest = directory / "package.json"
        if manifest.is_file():
            try:
                data = json.loads(manifest.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Ignoring unreadable %s: %s", manifest, exc)
                data = {}
            for field_name in _PACKAGE_ENTRY_FIELDS:
                entry = data.get(field_name) if isinstance(data, dict) else None
                if isinstance(entry, str) and entry:
                    resolved = self._resolve_file(normalize(directory / entry))
                    if resolved is not None:
                        return resolved
        return self._resolve_file(directory / "index")
