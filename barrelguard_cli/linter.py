"""Run virtual module boundary checks over files and directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from .boundaries import BoundaryResolver, normalize
from .classifier import ImportClassifier
from .config import SKIP_DIRS
from .config_manager import LintConfig
from .errors import BarrelGuardError, UnresolvedImportError
from .models import FileReport, LintResult, Violation
from .parser import LANGUAGE_MAP, ImportEdgeSource, ImportParser, TreeSitterImportSource
from .resolver import SpecifierResolver, is_builtin

logger = logging.getLogger(__name__)


class VirtualModuleLinter:
    """Classify every import edge of the given files."""

    def __init__(self, config: Optional[LintConfig] = None, parser: Optional[ImportParser] = None) -> None:
        self.config = config or LintConfig()
        self.parser = parser or ImportParser()
        self.resolver = SpecifierResolver(
            extensions=self.config.extensions,
            base_url=self.config.base_url,
            paths=self.config.paths,
        )

    # ------------------------------------------------------------------
    # Single file
    # ------------------------------------------------------------------

    def lint_file(self, file_path: Path, source: Optional[ImportEdgeSource] = None) -> FileReport:
        """Lint one file.

        Errors raised while analysing the file abort that file only: the
        report carries the error and no violations.
        """
        file_path = normalize(file_path)
        report = FileReport(path=file_path)
        try:
            report.violations = self._check(file_path, source)
        except BarrelGuardError as exc:
            logger.error("Aborted %s: %s", file_path, exc.message)
            report.error = exc.message
        return report

    def _check(self, file_path: Path, source: Optional[ImportEdgeSource]) -> List[Violation]:
        boundaries = BoundaryResolver(self.config.barrel_files, self.config.allow_list)
        classifier = ImportClassifier(boundaries)
        current_dir = file_path.parent
        project_root: Optional[Path] = None

        if source is None:
            source = TreeSitterImportSource(file_path, self.parser)

        violations: List[Violation] = []
        for edge in source:
            if not edge.specifier:
                continue
            if project_root is None:
                project_root = boundaries.project_root(current_dir)

            target = self.resolver.resolve(edge.specifier, file_path)
            if target is None:
                if is_builtin(edge.specifier):
                    logger.debug("Skipping builtin %s in %s", edge.specifier, file_path)
                    continue
                logger.error("cannot resolve import %r in %s", edge.specifier, file_path)
                raise UnresolvedImportError(
                    f"Cannot resolve import '{edge.specifier}'.",
                    context={"specifier": edge.specifier, "file": file_path, "line": edge.line},
                )

            violation = classifier.classify(current_dir, target, project_root)
            if violation is not None:
                violation.edge = edge
                violations.append(violation)
        return violations

    # ------------------------------------------------------------------
    # Many files
    # ------------------------------------------------------------------

    def iter_source_files(self, paths: Iterable[Path]) -> Iterator[Path]:
        """Expand *paths* into lintable files, sorted and de-duplicated."""
        skip = SKIP_DIRS | set(self.config.exclude)
        seen: Set[Path] = set()
        for path in paths:
            path = normalize(path)
            if path.is_dir():
                candidates = sorted(
                    fp for fp in path.rglob("*")
                    if fp.is_file()
                    and fp.suffix in LANGUAGE_MAP
                    and not any(part in skip for part in fp.relative_to(path).parts)
                )
            elif path.is_file() and path.suffix in LANGUAGE_MAP:
                candidates = [path]
            else:
                logger.warning("Skipping %s: not a supported source file", path)
                continue
            for fp in candidates:
                if fp not in seen:
                    seen.add(fp)
                    yield fp

    def lint_paths(self, paths: Iterable[Path]) -> LintResult:
        result = LintResult()
        for file_path in self.iter_source_files(paths):
            result.reports.append(self.lint_file(file_path))
        return result
