from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from routenote.config import CliOverrides
from routenote.orchestrator.pipeline import list_endpoints, resolve_workspace_port, run_annotate


app = typer.Typer(no_args_is_help=True, add_completion=False)

endpoints_app = typer.Typer(no_args_is_help=True)
app.add_typer(endpoints_app, name="endpoints")

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _target(path: str) -> Path:
    target = Path(path).expanduser().resolve()
    if not target.exists():
        raise typer.BadParameter(f"Path does not exist: {target}")
    return target


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    _configure_logging(verbose)


@app.command()
def annotate(
    path: str = typer.Argument(..., help="Project directory or a single controller file"),
    base_url: Optional[str] = typer.Option(None, help="Base URL; {port} is replaced with the project port"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Plan edits without saving"),
    check: bool = typer.Option(False, "--check", help="Dry run; exit 1 if any file would change"),
) -> None:
    """Regenerate the endpoint comments above every route annotation."""
    target = _target(path)
    try:
        result = run_annotate(target, CliOverrides(base_url=base_url), dry_run=dry_run or check)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(f"[bold green]routenote[/bold green] annotate: {result.root}")
    port_from = result.port.source or "default"
    console.print(f"Base URL: [bold]{result.base_url}[/bold] (port from {port_from})")
    console.print(f"Controller files: {result.files_scanned}")
    console.print(f"Endpoints: {result.endpoint_count}")

    if result.touched:
        console.print("")
    label = "would update" if result.dry_run else "updated"
    for doc in result.touched:
        console.print(
            f"  {label:<12} {doc.rel_path} (-{doc.deleted} +{doc.inserted})",
            markup=False,
            soft_wrap=True,
        )
    for doc in result.failures:
        console.print(f"  [bold red]failed[/bold red]       {escape(doc.rel_path)}: {escape(doc.error or '')}")

    console.print("")
    console.print(result.summary())

    if result.failures:
        raise typer.Exit(code=2)
    if check and result.touched:
        raise typer.Exit(code=1)


@endpoints_app.command("list")
def endpoints_list(
    path: str = typer.Argument(..., help="Project directory or a single controller file"),
    base_url: Optional[str] = typer.Option(None, help="Base URL; {port} is replaced with the project port"),
    method: Optional[str] = typer.Option(None, help="Filter by HTTP method (GET/POST/...)"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    target = _target(path)
    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    try:
        rows = list_endpoints(target, CliOverrides(base_url=base_url))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if method:
        rows = [r for r in rows if r.method == method.upper()]

    if fmt == "json":
        payload = [
            {"method": r.method, "url": r.url, "file": r.rel_path, "line": r.line}
            for r in rows
        ]
        console.print(json.dumps(payload, indent=2), markup=False, highlight=False, soft_wrap=True)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("URL")
    table.add_column("FILE:LINE", no_wrap=True)

    for r in rows:
        table.add_row(r.method, r.url, f"{r.rel_path}:{r.line}")

    console.print(f"[bold]Endpoints:[/bold] {len(rows)}")
    console.print(table)


@app.command()
def port(
    path: str = typer.Argument(..., help="Project directory"),
) -> None:
    """Show the server port the project is configured with."""
    try:
        resolution = resolve_workspace_port(_target(path))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"{resolution.port} ({resolution.source or 'default'})", markup=False, soft_wrap=True)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
