"""Watch mode: re-check source files as they change."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Set

import typer
from rich.console import Console

from .config import SKIP_DIRS
from .parser import LANGUAGE_MAP

console = Console()


class SourceChangeHandler:
    """Collect changed source files from file system events.

    Events only queue files; ``flush`` runs the recheck callback and is
    called from the watch loop, never from the observer thread.
    """

    def __init__(
        self,
        recheck_callback: Callable[[Path], None],
        root: Optional[Path] = None,
        skip_dirs: Iterable[str] = SKIP_DIRS,
    ):
        self.recheck_callback = recheck_callback
        self.root = root
        self.skip_dirs = frozenset(skip_dirs)
        self._pending_files: Set[Path] = set()
        self._lock = threading.Lock()

    def dispatch(self, event) -> None:
        """Route a watchdog event to the change handler."""
        if event.is_directory:
            return
        if hasattr(event, "src_path"):
            self.handle_change(Path(event.src_path))

    def handle_change(self, file_path: Path) -> None:
        if file_path.suffix not in LANGUAGE_MAP:
            return
        if self.root is not None:
            try:
                parts = file_path.relative_to(self.root).parts
            except ValueError:
                return
        else:
            parts = file_path.parts
        if any(part in self.skip_dirs for part in parts):
            return

        with self._lock:
            self._pending_files.add(file_path)

    def flush(self) -> int:
        """Recheck every queued file that still exists; return how many ran."""
        with self._lock:
            files = sorted(self._pending_files)
            self._pending_files.clear()
        checked = 0
        for f in files:
            if f.exists():
                self.recheck_callback(f)
                checked += 1
        return checked


def watch(
    path: Path = typer.Argument(Path("."), help="Directory to watch for changes."),
    interval: float = typer.Option(1.0, "--interval", "-i", help="Debounce interval in seconds."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to barrelguard.toml."),
):
    """👀 Watch mode — re-check files when they change.

    Example:
      barrelguard watch
      barrelguard watch ./src --interval 3
    """
    try:
        from watchdog.observers import Observer
        from watchdog.events import FileSystemEventHandler
    except ImportError:
        console.print("[red]✗[/red] watchdog is not installed.")
        console.print("[dim]Install with: pip install watchdog[/dim]")
        raise typer.Exit(1)

    from .cli import build_config
    from .linter import VirtualModuleLinter
    from .models import LintResult
    from .reporter import ViolationReporter

    watch_path = path.resolve()
    if not watch_path.is_dir():
        console.print(f"[red]✗[/red] Directory not found: {path}")
        raise typer.Exit(2)

    cfg = build_config([watch_path], config_file, None)
    linter = VirtualModuleLinter(cfg)
    reporter = ViolationReporter(console)

    def recheck_file(file_path: Path) -> None:
        reporter.render(LintResult(reports=[linter.lint_file(file_path)]))

    console.print(f"\n[bold green]👀 Watching[/bold green] [cyan]{watch_path}[/cyan] for changes...")
    console.print(f"[dim]  Debounce:  {interval}s")
    console.print("  Press Ctrl+C to stop[/dim]\n")

    handler = SourceChangeHandler(
        recheck_file,
        root=watch_path,
        skip_dirs=SKIP_DIRS | set(cfg.exclude),
    )

    class WatchdogAdapter(FileSystemEventHandler):
        def on_modified(self, event):
            handler.dispatch(event)

        def on_created(self, event):
            handler.dispatch(event)

    observer = Observer()
    observer.schedule(WatchdogAdapter(), str(watch_path), recursive=True)
    observer.start()

    check_count = 0
    try:
        while True:
            time.sleep(interval)
            check_count += handler.flush()
    except KeyboardInterrupt:
        observer.stop()
        console.print(f"\n[yellow]Stopped watching.[/yellow] Re-checked {check_count} file(s).")

    observer.join()
