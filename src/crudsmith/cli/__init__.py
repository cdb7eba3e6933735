"""
crudsmith CLI.

- project.py: generate, fix, validate, hash, restore
- build.py: build, pipeline, healthcheck
- db.py: Prisma database commands
- doctor.py: environment check
- utils.py: shared helpers
"""

from __future__ import annotations

import typer

from .build import build_command, healthcheck_command, pipeline_command
from .db import db_app
from .doctor import doctor_command
from .project import fix_command, generate_command, hash_command, restore_command, validate_command
from .utils import configure_logging, version_callback

app = typer.Typer(
    help="""crudsmith – regenerate and repair Next.js + Prisma CRUD apps

  • Generation: generate
    → Prisma schema, service, API routes, hooks, auth, .env, next.config.js

  • Repair: fix, build, pipeline
    → Patch known build failures, retry the build

  • Checks: validate, healthcheck, doctor, hash

  • Rollback: restore
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """crudsmith CLI main callback for global options."""
    configure_logging(verbose)


app.command(name="generate")(generate_command)
app.command(name="fix")(fix_command)
app.command(name="validate")(validate_command)
app.command(name="hash")(hash_command)
app.command(name="restore")(restore_command)
app.command(name="build")(build_command)
app.command(name="pipeline")(pipeline_command)
app.command(name="healthcheck")(healthcheck_command)
app.command(name="doctor")(doctor_command)
app.add_typer(db_app, name="db")


def main() -> None:
    """Entry point for the ``crudsmith`` console script."""
    app()


__all__ = ["app", "main"]
