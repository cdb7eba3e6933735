"""
crudsmith doctor: environment and app layout check.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import typer

from ..core.config import CONFIG_FILENAME
from ..core.errors import CrudsmithError
from .utils import app_option, load_app


def doctor_command(app: Path = app_option()) -> None:
    """Check that Node tooling is installed and the app looks generatable."""
    ok_count = 0
    warn_count = 0
    fail_count = 0

    def _ok(msg: str) -> None:
        nonlocal ok_count
        ok_count += 1
        typer.echo(f"  [ok] {msg}")

    def _warn(msg: str) -> None:
        nonlocal warn_count
        warn_count += 1
        typer.echo(f"  [warn] {msg}")

    def _fail(msg: str) -> None:
        nonlocal fail_count
        fail_count += 1
        typer.echo(f"  [FAIL] {msg}")

    typer.echo("crudsmith doctor\n")

    typer.echo("Tools:")
    for tool in ("node", "npm", "npx"):
        if not shutil.which(tool):
            _fail(f"{tool} not found on PATH")
            continue
        try:
            result = subprocess.run([tool, "--version"], capture_output=True, text=True, timeout=10)
            version = result.stdout.strip() if result.returncode == 0 else "unknown version"
            _ok(f"{tool} {version}")
        except (subprocess.TimeoutExpired, OSError):
            _warn(f"{tool} found but not responding")

    typer.echo("\nApp:")
    try:
        app_root, config = load_app(app)
    except CrudsmithError as e:
        _fail(str(e))
    else:
        if (app_root / CONFIG_FILENAME).exists():
            _ok(f"{CONFIG_FILENAME} loaded")
        else:
            _warn(f"No {CONFIG_FILENAME}; using defaults")

        if (app_root / "package.json").exists():
            _ok("package.json")
        else:
            _fail("package.json not found (is this a Next.js app?)")

        if (app_root / "node_modules").is_dir():
            _ok("node_modules installed")
        else:
            _warn("node_modules missing (run: npm install)")

        checks = [
            ("types", True),
            ("schema", False),
            ("service", False),
            ("next_config", False),
        ]
        for name, required in checks:
            path = config.resolve(app_root, name)
            shown = path.relative_to(app_root) if path.is_relative_to(app_root) else path
            if path.exists():
                _ok(str(shown))
            elif required:
                _fail(f"{shown} not found")
            else:
                _warn(f"{shown} not generated yet")

    typer.echo(f"\n{'=' * 40}")
    typer.echo(f"  {ok_count} ok, {warn_count} warnings, {fail_count} failures")

    if fail_count > 0:
        typer.echo("\nSome checks failed. Fix the issues above.")
        raise typer.Exit(code=1)
    elif warn_count > 0:
        typer.echo("\nEnvironment is usable but has warnings.")
    else:
        typer.echo("\nEnvironment is healthy!")
