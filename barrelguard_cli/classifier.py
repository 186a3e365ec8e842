"""Classification of a single import edge against virtual module boundaries."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .boundaries import BoundaryResolver, PathLike, normalize
from .models import Violation, ViolationKind

logger = logging.getLogger(__name__)


def display_path(path: Path, base: Path) -> str:
    """Render *path* relative to *base* with a leading slash (``/`` for *base* itself)."""
    rel = os.path.relpath(path, base)
    if rel == os.curdir:
        return "/"
    return "/" + Path(rel).as_posix()


class ImportClassifier:
    """Decide which boundary violation, if any, an import edge represents.

    Checks run in a fixed order and each assumes the earlier ones failed:

    1. target outside every virtual module -> valid
    2. same module root on both sides -> ``IndexImport`` for the barrel, else valid
    3. importer nested below the target's module root -> ``ParentModuleImport``
    4. target's module nested inside another module -> ``PrivateModuleImport``
    5. anything else is a legitimate cross-module import
    """

    def __init__(self, resolver: Optional[BoundaryResolver] = None) -> None:
        self.resolver = resolver or BoundaryResolver()

    def classify(
        self,
        current_dir: PathLike,
        target: PathLike,
        project_root: PathLike,
    ) -> Optional[Violation]:
        current_dir = normalize(current_dir)
        target = normalize(target)
        project_root = normalize(project_root)

        target_module_root = self.resolver.module_root(target, project_root)
        if target_module_root is None:
            return None

        current_module_root = self.resolver.module_root(current_dir, project_root)

        if current_module_root == target_module_root:
            if self.resolver.is_barrel(target):
                return Violation(kind=ViolationKind.INDEX_IMPORT, target=target)
            return None

        if target_module_root in current_dir.parents:
            return Violation(
                kind=ViolationKind.PARENT_MODULE_IMPORT,
                data={
                    "currentModule": display_path(current_dir, project_root),
                    "parentModule": display_path(target_module_root, project_root),
                },
                target=target,
            )

        target_parent_module_root = self.resolver.module_root(
            target_module_root.parent, project_root
        )
        if target_parent_module_root is not None:
            return Violation(
                kind=ViolationKind.PRIVATE_MODULE_IMPORT,
                data={
                    "privatePath": display_path(target, target_module_root),
                    "targetModule": display_path(target_parent_module_root, project_root),
                },
                target=target,
            )

        logger.info(
            "valid import: current=%s target_module=%s target_parent_module=%s",
            current_dir, target_module_root, target_parent_module_root,
        )
        return None
