"""
Database commands.

Wraps the Prisma CLI:
- setup: repair the schema, generate the client, push the schema
- generate: regenerate the Prisma client only
"""

from __future__ import annotations

from pathlib import Path

import typer

from ..build.prisma import prisma_db_push, prisma_generate
from ..build.process import CommandResult
from ..prisma import repair_schema_file
from .utils import app_option, cli_errors, console, err_console, load_app

db_app = typer.Typer(
    help="Database commands (Prisma)",
    no_args_is_help=True,
)


def _check(result: CommandResult, what: str) -> None:
    if result.ok:
        console.print(f"[green]{what} succeeded[/green] ({result.duration:.1f}s)")
        return
    err_console.print(result.output.strip(), highlight=False, markup=False)
    reason = "timed out" if result.timed_out else f"exited {result.returncode}"
    err_console.print(f"[red]{what} failed: {reason}[/red]")
    raise typer.Exit(code=1)


@db_app.command(name="setup")
def setup_command(
    app: Path = app_option(),
    force_reset: bool = typer.Option(
        False,
        "--force-reset",
        help="Drop and recreate the database (destroys data)",
    ),
) -> None:
    """Repair the schema, generate the client and push the schema."""
    with cli_errors():
        app_root, config = load_app(app)
        repair = repair_schema_file(app_root, config)
        for change in repair.changes:
            console.print(f"schema: {change}", highlight=False)
        if repair.issues:
            for issue in repair.issues:
                err_console.print(f"[red]Schema issue:[/red] {issue}", highlight=False)
            raise typer.Exit(code=1)

        _check(prisma_generate(app_root, config), "prisma generate")
        _check(prisma_db_push(app_root, config, force_reset=force_reset), "prisma db push")


@db_app.command(name="generate")
def generate_client_command(app: Path = app_option()) -> None:
    """Regenerate the Prisma client."""
    with cli_errors():
        app_root, config = load_app(app)
        _check(prisma_generate(app_root, config), "prisma generate")
