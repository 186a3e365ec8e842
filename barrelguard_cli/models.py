"""Core data models shared by the parser, classifier, linter and reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class ViolationKind(str, Enum):
    INDEX_IMPORT = "IndexImport"
    PARENT_MODULE_IMPORT = "ParentModuleImport"
    PRIVATE_MODULE_IMPORT = "PrivateModuleImport"

    @property
    def message_id(self) -> str:
        return self.value[0].lower() + self.value[1:]


@dataclass(frozen=True)
class ImportEdge:
    source_file: Path
    specifier: str
    line: int = 1
    column: int = 1
    statement: str = "import"


@dataclass
class Violation:
    kind: ViolationKind
    data: Dict[str, str] = field(default_factory=dict)
    edge: Optional[ImportEdge] = None
    target: Optional[Path] = None


@dataclass
class FileReport:
    path: Path
    violations: List[Violation] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.violations


@dataclass
class LintResult:
    reports: List[FileReport] = field(default_factory=list)

    @property
    def files_checked(self) -> int:
        return len(self.reports)

    @property
    def violation_count(self) -> int:
        return sum(len(r.violations) for r in self.reports)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.reports if r.error is not None)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.reports)
