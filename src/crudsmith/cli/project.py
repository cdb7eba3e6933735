"""
Project commands: generate, fix, validate, hash, restore.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

import typer
from rich.table import Table

from ..build.diagnostics import parse_build_output
from ..codegen import GENERATOR_CLASSES, GeneratorResult, SystemGenerator
from ..core.backup import restore_latest
from ..core.config import CrudsmithConfig
from ..core.errors import CrudsmithError
from ..core.state import hash_directory, hash_file, types_changed
from ..core.types_parser import parse_types_file
from ..fixers import FixReport, apply_fixers, build_fixers, select_fixers
from ..prisma import repair_schema_file, repair_schema_text, validate_schema_text
from ..validation import find_server_code_in_client, validate_input_structure
from .utils import app_option, cli_errors, console, load_app, print_warnings, relative


class GenerateTarget(StrEnum):
    ALL = "all"
    SCHEMA = "schema"
    SERVICE = "service"
    ROUTES = "routes"
    HOOKS = "hooks"
    AUTH = "auth"
    ENV = "env"
    NEXT_CONFIG = "next-config"


class FixTarget(StrEnum):
    ALL = "all"
    BARREL = "barrel"
    IMPORTS = "imports"
    DECLARATIONS = "declarations"
    EXPORTS = "exports"
    MISSING_EXPORTS = "missing-exports"
    TYPES = "types"
    SCHEMA = "schema"
    REDIRECTS = "redirects"


def _print_generation(result: GeneratorResult, app_root: Path) -> None:
    for path in result.files_created:
        console.print(f"  [green]wrote[/green]   {relative(path, app_root)}", highlight=False)
    for path in result.files_skipped:
        console.print(f"  [dim]skipped[/dim] {relative(path, app_root)}", highlight=False)
    print_warnings(result.warnings)
    for error in result.errors:
        console.print(f"[red]ERROR:[/red] {error}", highlight=False)


def generate_command(
    target: GenerateTarget = typer.Argument(GenerateTarget.ALL, help="What to generate"),
    app: Path = app_option(),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite files marked CUSTOM"),
) -> None:
    """
    Regenerate parts of the app from its TypeScript types.

    Files containing a "// CUSTOM:" comment are left alone unless --force
    is given.
    """
    with cli_errors():
        app_root, config = load_app(app)
        types_file = config.resolve(app_root, "types")
        types = parse_types_file(types_file)

        if target == GenerateTarget.ALL:
            if not types_changed(app_root, types_file):
                console.print("[dim]Types unchanged since last generation[/dim]")
            generator = SystemGenerator(types, app_root, config, force=force)
        else:
            generator = GENERATOR_CLASSES[target.value](types, app_root, config, force=force)

        console.print(f"Generating [bold]{target.value}[/bold] for {app_root}")
        result = generator.generate()
        _print_generation(result, app_root)

    if not result.success:
        raise typer.Exit(code=1)
    console.print(
        f"[green]Done:[/green] {len(result.files_created)} written, {len(result.files_skipped)} skipped"
    )


def _print_fix_report(report: FixReport, app_root: Path) -> None:
    verb = "would change" if report.dry_run else "changed"
    for change in report.files:
        console.print(f"  [cyan]{relative(change.path, app_root)}[/cyan]", highlight=False)
        for line in change.changes:
            console.print(f"    - {line}", highlight=False)
    console.print(f"{len(report.files)} of {report.scanned} file(s) {verb}, {report.total_changes} change(s)")


def _fix_schema(app_root: Path, config: CrudsmithConfig, dry_run: bool) -> None:
    schema_path = config.resolve(app_root, "schema")
    if dry_run:
        if not schema_path.exists():
            console.print(f"Schema would be generated at {relative(schema_path, app_root)}")
            return
        result = repair_schema_text(schema_path.read_text(encoding="utf-8"))
        result.issues = validate_schema_text(result.content)
    else:
        result = repair_schema_file(app_root, config)

    if not result.changes:
        console.print("Schema: no changes")
    for change in result.changes:
        console.print(f"  schema: {change}", highlight=False)
    for issue in result.issues:
        console.print(f"[yellow]Schema issue:[/yellow] {issue}", highlight=False)


def fix_command(
    target: FixTarget = typer.Argument(FixTarget.ALL, help="Which fixer to run"),
    app: Path = app_option(),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report changes without writing"),
    log: Path | None = typer.Option(
        None,
        "--log",
        help="Build output to read diagnostics from (enables missing-exports and types)",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Apply text fixers to the app source and schema."""
    with cli_errors():
        app_root, config = load_app(app)

        if target in (FixTarget.ALL, FixTarget.SCHEMA):
            _fix_schema(app_root, config, dry_run)
        if target == FixTarget.SCHEMA:
            return

        diagnostics = []
        if log is not None:
            diagnostics = parse_build_output(log.read_text(encoding="utf-8", errors="replace"))
            console.print(f"Read {len(diagnostics)} diagnostic(s) from {log}")

        types_file = config.resolve(app_root, "types")
        types = parse_types_file(types_file) if types_file.exists() else None
        fixers = select_fixers(build_fixers(app_root, config, types), [target.value])
        if not fixers:
            raise CrudsmithError(f"Fixer '{target.value}' needs the types file at {types_file}")
        if not diagnostics and not any(f.preventive for f in fixers):
            console.print("[yellow]This fixer only acts on build diagnostics; pass --log[/yellow]")

        report = apply_fixers(config.resolve(app_root, "src_dir"), fixers, diagnostics, dry_run=dry_run)
        _print_fix_report(report, app_root)


def validate_command(app: Path = app_option()) -> None:
    """
    Check the app's input files, schema and client/server split.

    Exits with code 1 when anything is wrong.
    """
    problems = 0
    with cli_errors():
        app_root, config = load_app(app)

        console.print("[bold]Input structure[/bold]")
        issues = validate_input_structure(app_root, config)
        for issue in issues:
            console.print(f"  [red]✗[/red] {issue}", highlight=False)
        if not issues:
            console.print("  [green]✓[/green] types and data files look valid")
        problems += len(issues)

        console.print("[bold]Prisma schema[/bold]")
        schema_path = config.resolve(app_root, "schema")
        if schema_path.exists():
            schema_issues = validate_schema_text(schema_path.read_text(encoding="utf-8"))
            for issue in schema_issues:
                console.print(f"  [red]✗[/red] {issue}", highlight=False)
            if not schema_issues:
                console.print(f"  [green]✓[/green] {relative(schema_path, app_root)}")
            problems += len(schema_issues)
        else:
            console.print(f"  [yellow]-[/yellow] no schema at {relative(schema_path, app_root)}")

        console.print("[bold]Client components[/bold]")
        src_dir = config.resolve(app_root, "src_dir")
        violations = find_server_code_in_client(src_dir) if src_dir.is_dir() else []
        if violations:
            table = Table("File", "Line", "Kind", "Source")
            for v in violations:
                table.add_row(relative(v.file, app_root), str(v.line), v.kind, v.text)
            console.print(table)
        else:
            console.print("  [green]✓[/green] no server code in .tsx files")
        problems += len(violations)

    if problems:
        console.print(f"[red]{problems} problem(s) found[/red]")
        raise typer.Exit(code=1)
    console.print("[green]OK[/green]")


def hash_command(
    path: Path = typer.Argument(..., help="File or directory to hash", exists=True),
) -> None:
    """Print the SHA-256 digest of a file or directory tree."""
    with cli_errors():
        digest = hash_directory(path) if path.is_dir() else hash_file(path)
    typer.echo(digest)


def restore_command(
    path: Path = typer.Argument(..., help="File to roll back to its latest backup"),
) -> None:
    """Restore a file from its most recent ``.backup.<timestamp>`` copy."""
    with cli_errors():
        backup = restore_latest(path.resolve())
    console.print(f"Restored {path} from {backup.name}", highlight=False)
