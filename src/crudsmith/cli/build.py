"""
Build commands: smart build, full pipeline, health check.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from ..build.pipeline import Pipeline, StageStatus
from ..build.smart import BuildReport, SmartBuild
from ..validation import check_health
from .utils import app_option, cli_errors, console, err_console, load_app

_STATUS_STYLE = {
    StageStatus.PASSED: "[green]passed[/green]",
    StageStatus.FAILED: "[red]failed[/red]",
    StageStatus.SKIPPED: "[dim]skipped[/dim]",
}


def _print_build_report(report: BuildReport) -> None:
    if report.preventive.changed:
        console.print(f"Preventive fixes: {len(report.preventive.files)} file(s)")
    for attempt in report.attempts:
        status = "[green]ok[/green]" if attempt.ok else "[red]failed[/red]"
        console.print(f"Attempt {attempt.number}: {status} ({attempt.command.duration:.1f}s)")
        for diagnostic in attempt.diagnostics:
            console.print(f"  {diagnostic.describe()}", highlight=False, markup=False)
        if attempt.fixes:
            for change in attempt.fixes.files:
                console.print(f"  fixed {change.path.name}: {len(change.changes)} change(s)", highlight=False)
    console.print(f"Duration: {report.duration:.1f}s, files changed: {len(report.files_changed)}")


def build_command(
    app: Path = app_option(),
    retries: int | None = typer.Option(None, "--retries", "-r", min=1, help="Maximum build attempts"),
    timeout: int | None = typer.Option(None, "--timeout", "-t", min=1, help="Seconds per build attempt"),
) -> None:
    """
    Build the app, fixing known failures between attempts.
    """
    with cli_errors():
        app_root, config = load_app(app)
        if timeout is not None:
            config.build.timeout = timeout
        report = SmartBuild(app_root, config).run(max_retries=retries)

    _print_build_report(report)
    if not report.success:
        tail = "\n".join(report.last_output.strip().splitlines()[-20:])
        if tail:
            err_console.print(tail, highlight=False, markup=False)
        err_console.print("[red]Build failed[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Build succeeded[/green]")


def pipeline_command(
    app: Path = app_option(),
    skip_db: bool = typer.Option(False, "--skip-db", help="Do not push the schema to the database"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite files marked CUSTOM"),
) -> None:
    """
    Generate, sync Prisma and build in one go.
    """
    with cli_errors():
        app_root, config = load_app(app)
        report = Pipeline(app_root, config, skip_db=skip_db, force=force).run()

    table = Table("Stage", "Status", "Time", "Details")
    for stage in report.stages:
        table.add_row(
            stage.name,
            _STATUS_STYLE[stage.status],
            f"{stage.duration:.1f}s",
            stage.message or "",
        )
    console.print(table)

    if not report.success:
        raise typer.Exit(code=1)


def healthcheck_command(
    app: Path = app_option(),
    base_url: str | None = typer.Option(None, "--base-url", help="Override the configured base URL"),
) -> None:
    """Probe the running app's health endpoints."""
    with cli_errors():
        _, config = load_app(app)
        results = check_health(config, base_url=base_url)

    unhealthy = 0
    for result in results:
        if result.healthy:
            console.print(f"[green]✓[/green] {result.url} {result.status_code} ({result.elapsed_ms:.0f}ms)")
        else:
            unhealthy += 1
            detail = result.error or f"HTTP {result.status_code}"
            console.print(f"[red]✗[/red] {result.url} {detail}", highlight=False)

    if unhealthy:
        raise typer.Exit(code=1)
