"""Bounded upward directory search for project and virtual module roots.

A *module root* is the closest ancestor directory holding a barrel file
(``index.ts`` by default).  A *project root* is the closest ancestor
holding ``package.json``.  Module root searches never leave the project
root; project root searches stop at the filesystem root.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, Optional, Sequence, Tuple, Union

from .config import DEFAULT_BARREL_FILES, PROJECT_MARKER
from .errors import ProjectRootNotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
AcceptPredicate = Callable[[Path], bool]


def normalize(path: PathLike) -> Path:
    """Absolute, lexically normalised path (symlinks are not followed)."""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def is_within(path: Path, root: Path) -> bool:
    """True when *path* is *root* or lies below it, compared by component."""
    return path == root or root in path.parents


def iter_ancestors(start: PathLike, root_bound: PathLike) -> Iterator[Path]:
    """Yield *start* and each of its parents while inside *root_bound*."""
    current = normalize(start)
    bound = normalize(root_bound)
    while is_within(current, bound):
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def allow_list_predicate(allow_list: Optional[Iterable[PathLike]]) -> Optional[AcceptPredicate]:
    if allow_list is None:
        return None
    allowed = frozenset(normalize(p) for p in allow_list)

    def _accept(directory: Path) -> bool:
        return directory in allowed

    return _accept


def find_closest_directory(
    start: PathLike,
    marker_names: Sequence[str],
    root_bound: PathLike,
    accept: Optional[AcceptPredicate] = None,
) -> Optional[Path]:
    """Return the closest ancestor of *start* (inclusive) holding a marker.

    Candidates above *root_bound* are never inspected.  When *accept* is
    given, a directory only matches if the predicate also holds.
    """
    for candidate in iter_ancestors(start, root_bound):
        if not any((candidate / name).exists() for name in marker_names):
            continue
        if accept is None or accept(candidate):
            return candidate
    return None


def find_project_root(start: PathLike) -> Path:
    start_path = normalize(start)
    root = find_closest_directory(start_path, [PROJECT_MARKER], start_path.anchor)
    if root is None:
        raise ProjectRootNotFoundError(
            "Project root could not be found.",
            context={"start": start_path, "marker": PROJECT_MARKER},
        )
    return root


def find_module_root(
    start: PathLike,
    project_root: PathLike,
    allow_list: Optional[Iterable[PathLike]] = None,
    barrel_files: Sequence[str] = DEFAULT_BARREL_FILES,
) -> Optional[Path]:
    return find_closest_directory(
        start, barrel_files, project_root, allow_list_predicate(allow_list)
    )


def allow_list_from_barrels(include_modules: Optional[Iterable[PathLike]]) -> Optional[FrozenSet[Path]]:
    """Turn barrel file paths into the set of directories allowed as module roots.

    ``None`` or an empty list means every barrel-containing directory counts.
    """
    if not include_modules:
        return None
    allowed = frozenset(normalize(p).parent for p in include_modules)
    return allowed or None


class BoundaryResolver:
    """Project/module root lookups for one file-analysis session.

    Results are memoised per instance; create a new resolver for every
    analysed file so that filesystem changes between files are observed.
    """

    def __init__(
        self,
        barrel_files: Sequence[str] = DEFAULT_BARREL_FILES,
        allow_list: Optional[Iterable[PathLike]] = None,
    ) -> None:
        self.barrel_files: Tuple[str, ...] = tuple(barrel_files)
        self.allow_list: Optional[FrozenSet[Path]] = (
            frozenset(normalize(p) for p in allow_list) if allow_list is not None else None
        )
        self._accept = allow_list_predicate(self.allow_list)
        self._project_roots: Dict[Path, Path] = {}
        self._module_roots: Dict[Tuple[Path, Path], Optional[Path]] = {}

    def project_root(self, start: PathLike) -> Path:
        key = normalize(start)
        if key not in self._project_roots:
            self._project_roots[key] = find_project_root(key)
        return self._project_roots[key]

    def module_root(self, start: PathLike, project_root: PathLike) -> Optional[Path]:
        key = (normalize(start), normalize(project_root))
        if key not in self._module_roots:
            root = find_closest_directory(key[0], self.barrel_files, key[1], self._accept)
            logger.debug("module root for %s: %s", key[0], root)
            self._module_roots[key] = root
        return self._module_roots[key]

    def is_barrel(self, path: PathLike) -> bool:
        return Path(path).name in self.barrel_files
