"""Typer-based CLI for barrelguard virtual module checks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .boundaries import BoundaryResolver, normalize
from .classifier import display_path
from .cli_watch import watch
from .config_manager import LintConfig, load_config, save_default_config
from .errors import BarrelGuardError, ConfigError
from .linter import VirtualModuleLinter
from .reporter import OUTPUT_FORMATS, ViolationReporter

console = Console()

app = typer.Typer(
    help="🛡️  barrelguard — keep imports behind virtual module barrels.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("watch")(watch)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"barrelguard v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """barrelguard: report imports that cross virtual module boundaries."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_config(
    paths: List[Path],
    config_file: Optional[Path],
    include_modules: Optional[List[Path]],
) -> LintConfig:
    """Load configuration and apply command-line overrides."""
    start = paths[0] if paths else Path.cwd()
    try:
        cfg = load_config(config_file, start=start)
    except ConfigError as exc:
        console.print(f"[red]✗[/red] {exc.message}")
        raise typer.Exit(2)
    if include_modules:
        cfg = cfg.with_include_modules(include_modules)
    return cfg


@app.command("check")
def check(
    paths: Optional[List[Path]] = typer.Argument(None, help="Files or directories to check (default: current directory)."),
    include_module: Optional[List[Path]] = typer.Option(
        None, "--include-module", "-m",
        help="Barrel file that defines a virtual module. Repeatable; overrides the config file.",
    ),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to barrelguard.toml."),
):
    """🔍 Check imports against virtual module boundaries.

    Example:
      barrelguard check
      barrelguard check src --format json
      barrelguard check src -m src/shared/index.ts -m src/app/index.ts
    """
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"--format must be one of: {', '.join(OUTPUT_FORMATS)}")

    targets = list(paths or [Path(".")])
    for target in targets:
        if not target.exists():
            console.print(f"[red]✗[/red] Path not found: {target}")
            raise typer.Exit(2)

    cfg = build_config(targets, config_file, include_module)
    linter = VirtualModuleLinter(cfg)
    result = linter.lint_paths(targets)

    ViolationReporter(console, fmt=output_format).render(result)
    if not result.ok:
        raise typer.Exit(1)


@app.command("explain")
def explain(
    file: Path = typer.Argument(..., exists=True, dir_okay=True, help="File or directory to explain."),
    include_module: Optional[List[Path]] = typer.Option(
        None, "--include-module", "-m", help="Barrel file that defines a virtual module. Repeatable.",
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to barrelguard.toml."),
):
    """🧭 Show the project root and virtual module roots for a path."""
    cfg = build_config([file], config_file, include_module)
    path = normalize(file)
    start = path.parent if path.is_file() else path

    boundaries = BoundaryResolver(cfg.barrel_files, cfg.allow_list)
    try:
        project_root = boundaries.project_root(start)
    except BarrelGuardError as exc:
        console.print(f"[red]✗[/red] {exc.message}")
        raise typer.Exit(1)

    module_root = boundaries.module_root(start, project_root)
    parent_root = (
        boundaries.module_root(module_root.parent, project_root) if module_root is not None else None
    )

    def _fmt(root: Optional[Path]) -> str:
        if root is None:
            return "[dim](none)[/dim]"
        return f"{escape(display_path(root, project_root))}  [dim]{escape(str(root))}[/dim]"

    console.print(f"[bold]Project root:[/bold]   {escape(str(project_root))}")
    console.print(f"[bold]Module root:[/bold]    {_fmt(module_root)}")
    console.print(f"[bold]Parent module:[/bold]  {_fmt(parent_root)}")
    if cfg.allow_list is not None:
        console.print(f"[dim]Allow-list: {len(cfg.allow_list)} module(s)[/dim]")


@app.command("init")
def init(
    directory: Path = typer.Argument(Path("."), file_okay=False, help="Directory to write barrelguard.toml into."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file."),
):
    """⚙️  Write a default barrelguard.toml."""
    try:
        path = save_default_config(directory, force=force)
    except ConfigError as exc:
        console.print(f"[red]✗[/red] {exc.message}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Wrote {path}")


if __name__ == "__main__":
    app()
