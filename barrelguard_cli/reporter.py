"""Render boundary violations as console text or JSON."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import FileReport, LintResult, Violation, ViolationKind

MESSAGES: Dict[ViolationKind, str] = {
    ViolationKind.INDEX_IMPORT: (
        "Cannot import virtual module index from within the virtual module itself."
    ),
    ViolationKind.PARENT_MODULE_IMPORT: (
        "Cannot import a parent virtual module. {parentModule} is a parent of {currentModule}."
    ),
    ViolationKind.PRIVATE_MODULE_IMPORT: (
        "Cannot import a private path. {privatePath} belongs to {targetModule} virtual module."
    ),
}

OUTPUT_FORMATS = ("text", "json")


def format_message(violation: Violation) -> str:
    return MESSAGES[violation.kind].format(**violation.data)


def violation_to_dict(violation: Violation) -> Dict[str, Any]:
    edge = violation.edge
    return {
        "kind": violation.kind.value,
        "messageId": violation.kind.message_id,
        "message": format_message(violation),
        "data": dict(violation.data),
        "specifier": edge.specifier if edge else None,
        "line": edge.line if edge else None,
        "column": edge.column if edge else None,
        "target": str(violation.target) if violation.target else None,
    }


def report_to_dict(report: FileReport) -> Dict[str, Any]:
    return {
        "file": str(report.path),
        "error": report.error,
        "violations": [violation_to_dict(v) for v in report.violations],
    }


def result_to_dict(result: LintResult) -> Dict[str, Any]:
    return {
        "files_checked": result.files_checked,
        "violations": result.violation_count,
        "errors": result.error_count,
        "files": [report_to_dict(r) for r in result.reports if not r.ok],
    }


class ViolationReporter:
    """Print a :class:`LintResult` to a rich console."""

    def __init__(self, console: Optional[Console] = None, fmt: str = "text", base_dir: Optional[Path] = None):
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{fmt}', expected one of {OUTPUT_FORMATS}")
        self.console = console or Console()
        self.fmt = fmt
        self.base_dir = base_dir or Path.cwd()

    def _display(self, path: Path) -> str:
        try:
            return os.path.relpath(path, self.base_dir)
        except ValueError:
            return str(path)

    def render(self, result: LintResult) -> None:
        if self.fmt == "json":
            self.console.out(json.dumps(result_to_dict(result), indent=2), highlight=False)
            return

        for report in result.reports:
            if report.ok:
                continue
            self._render_report(report)

        summary = (
            f"{result.files_checked} file(s) checked, "
            f"{result.violation_count} violation(s), {result.error_count} error(s)"
        )
        if result.ok:
            self.console.print(f"[green]✓[/green] {summary}")
        else:
            self.console.print(f"[red]✗[/red] {summary}")

    def _render_report(self, report: FileReport) -> None:
        name = escape(self._display(report.path))
        if report.error is not None:
            self.console.print(f"[bold]{name}[/bold]  [red]error[/red] {escape(report.error)}")
            return

        table = Table(title=name, title_justify="left", show_header=True, show_lines=False)
        table.add_column("Line", style="cyan", justify="right")
        table.add_column("Rule", style="magenta")
        table.add_column("Import", style="yellow")
        table.add_column("Message", min_width=30)
        for violation in report.violations:
            edge = violation.edge
            table.add_row(
                f"{edge.line}:{edge.column}" if edge else "-",
                violation.kind.message_id,
                escape(edge.specifier) if edge else "",
                escape(format_message(violation)),
            )
        self.console.print(table)

