"""
Shared CLI helpers: version output, logging setup, error reporting.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from ..core.config import CrudsmithConfig, load_config
from ..core.errors import CrudsmithError
from .._version import get_version

console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"crudsmith version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        node = shutil.which("node")
        typer.echo(f"  Node.js:       {node or 'not found'}")
        raise typer.Exit()


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging for a CLI run.

    ``--verbose`` selects DEBUG; otherwise ``CRUDSMITH_LOG_LEVEL`` decides,
    defaulting to WARNING so command output stays readable.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv("CRUDSMITH_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def app_option() -> Any:
    return typer.Option(
        Path("."),
        "--app",
        "-a",
        help="Root directory of the Next.js app",
        file_okay=False,
    )


def load_app(app: Path) -> tuple[Path, CrudsmithConfig]:
    """Resolve the app root and load its configuration."""
    app_root = app.resolve()
    if not app_root.is_dir():
        raise CrudsmithError(f"App directory not found: {app_root}")
    return app_root, load_config(app_root)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn crudsmith errors into ``Error: ...`` on stderr and exit code 1."""
    try:
        yield
    except CrudsmithError as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(code=1) from e


def relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]WARNING:[/yellow] {warning}", highlight=False)
