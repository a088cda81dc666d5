"""Typer-based CLI for depgraph repository dependency graphs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from . import __version__, config_manager
from .acquisition import cloned_repository
from .assembler import analyze_repository
from .config import AnalysisSettings
from .exceptions import DepGraphError, InvalidRepositoryURLError
from .extractor import extract_imports_by_pattern
from .graph_export import export_dot, export_json, graph_to_dot, graph_to_json
from .models import DependencyGraph
from .resolver import is_relative_specifier

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="🕸️  depgraph — file-level dependency graphs for any repository.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration — analysis settings stored in config.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")

FORMATS = ("json", "dot")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"depgraph v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress details to stderr."),
):
    """depgraph: scan a repository and emit its import graph."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _settings(workers: Optional[int]) -> AnalysisSettings:
    try:
        return config_manager.load_settings(max_workers=workers)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))


def _run_analysis(root: Path, settings: AnalysisSettings, show_progress: bool) -> DependencyGraph:
    if not show_progress:
        return analyze_repository(root, settings)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Resolving imports...", total=None)

        def _advance(done: int, total: int) -> None:
            progress.update(task, completed=done, total=total)

        return analyze_repository(root, settings, progress=_advance)


def _emit(graph: DependencyGraph, fmt: str, output: Optional[Path], focus: str) -> None:
    if output is None:
        if fmt == "json":
            typer.echo(graph_to_json(graph, focus))
        else:
            typer.echo(graph_to_dot(graph, focus))
        return

    if fmt == "json":
        export_json(graph, output, focus=focus)
    else:
        export_dot(graph, output, focus=focus)
    stats = graph.stats()
    typer.echo(f"Wrote {stats['nodes']} nodes and {stats['edges']} edges to {output}")


def _check_format(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise typer.BadParameter("Format must be one of: json, dot")
    return fmt


def _fail(exc: DepGraphError, code: int = 1) -> None:
    err_console.print(f"[red]✗[/red] {exc}")
    raise typer.Exit(code=code)


@app.command("analyze")
def analyze(
    path: Path = typer.Argument(..., exists=True, file_okay=False, help="Repository directory to analyse."),
    fmt: str = typer.Option("json", "--format", "-f", help="Output format: json or dot."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout."),
    focus: str = typer.Option("", "--focus", help="Only export nodes whose path contains this text, plus neighbours."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Thread pool size."),
):
    """Build the dependency graph of a local directory."""
    fmt = _check_format(fmt)
    settings = _settings(workers)
    try:
        graph = _run_analysis(path, settings, show_progress=output is not None)
    except DepGraphError as exc:
        _fail(exc)
    _emit(graph, fmt, output, focus)


@app.command("clone")
def clone(
    url: str = typer.Argument(..., help="Repository URL, e.g. https://github.com/owner/repo."),
    fmt: str = typer.Option("json", "--format", "-f", help="Output format: json or dot."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout."),
    focus: str = typer.Option("", "--focus", help="Only export nodes whose path contains this text, plus neighbours."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Thread pool size."),
):
    """Shallow-clone a remote repository, analyse it, then delete the clone."""
    fmt = _check_format(fmt)
    settings = _settings(workers)
    try:
        with cloned_repository(url) as root:
            graph = _run_analysis(root, settings, show_progress=output is not None)
    except InvalidRepositoryURLError as exc:
        _fail(exc, code=2)
    except DepGraphError as exc:
        _fail(exc)
    _emit(graph, fmt, output, focus)


@app.command("summary")
def summary(
    path: Path = typer.Argument(..., exists=True, file_okay=False, help="Repository directory to analyse."),
    top: int = typer.Option(10, "--top", "-n", min=1, max=200, help="Number of files to list."),
):
    """Show the most important files of a repository."""
    try:
        graph = analyze_repository(path, _settings(None))
    except DepGraphError as exc:
        _fail(exc)

    stats = graph.stats()
    console.print(f"[bold cyan]{stats['nodes']}[/bold cyan] files, [bold cyan]{stats['edges']}[/bold cyan] edges")

    ranked = sorted(graph.nodes, key=lambda n: (-n.importance, n.id))[:top]
    table = Table(title="Most important files", show_header=True)
    table.add_column("File", style="cyan", overflow="fold")
    table.add_column("Type", width=6)
    table.add_column("Lines", justify="right")
    table.add_column("In", justify="right")
    table.add_column("Out", justify="right")
    table.add_column("Importance", justify="right", style="bold")
    for node in ranked:
        table.add_row(
            node.id,
            node.extension,
            str(node.line_count),
            str(len(graph.incoming(node.id))),
            str(len(graph.outgoing(node.id))),
            f"{node.importance:.1f}",
        )
    console.print(table)


@app.command("imports")
def imports(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to scan."),
):
    """Show the import specifiers each pattern finds in one file."""
    try:
        content = file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        err_console.print(f"[red]✗[/red] Could not read {file}: {exc}")
        raise typer.Exit(code=1)
    found = extract_imports_by_pattern(content)

    table = Table(title=f"Specifiers in {file.name}", show_header=True)
    table.add_column("Pattern", style="cyan")
    table.add_column("Specifier", overflow="fold")
    table.add_column("Relative", justify="center")
    rows = 0
    for name, specifiers in found.items():
        for spec in sorted(specifiers):
            table.add_row(name, spec, "yes" if is_relative_specifier(spec) else "")
            rows += 1

    if not rows:
        console.print("No import-like specifiers found.")
        raise typer.Exit(code=0)
    console.print(table)


@config_app.command("show")
def config_show():
    """Print the effective analysis settings."""
    try:
        settings = config_manager.load_settings()
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    table = Table(show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("config_file", str(config_manager.CONFIG_FILE))
    table.add_row("max_workers", str(settings.max_workers))
    table.add_row("min_batch_size", str(settings.min_batch_size))
    table.add_row("max_batch_size", str(settings.max_batch_size))
    table.add_row("skip_dirs", ", ".join(sorted(settings.skip_dirs)))
    table.add_row("extensions", ", ".join(sorted(settings.extensions)))
    console.print(table)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help=f"One of: {', '.join(config_manager.ANALYSIS_KEYS)}."),
    value: str = typer.Argument(..., help="New value; comma-separated for list settings."),
):
    """Persist an analysis setting to config.toml."""
    try:
        stored = config_manager.save_analysis_value(key, value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(f"Set {key} = {stored!r}")


if __name__ == "__main__":
    app()
