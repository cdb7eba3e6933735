"""
Prisma CLI helpers.

Each helper runs ``npx prisma <command>`` in the app root with the configured
``DATABASE_URL`` in the environment.
"""

from __future__ import annotations

from pathlib import Path

from ..core.config import CrudsmithConfig
from .process import CommandResult, run_command


def _prisma(app_root: Path, config: CrudsmithConfig, *args: str) -> CommandResult:
    schema = config.resolve(app_root, "schema")
    command = ["npx", "prisma", *args, f"--schema={schema}"]
    return run_command(command, cwd=app_root, env=config.child_env(), timeout=config.build.fix_timeout)


def prisma_generate(app_root: Path, config: CrudsmithConfig) -> CommandResult:
    """Regenerate the Prisma client."""
    return _prisma(app_root, config, "generate")


def prisma_db_push(app_root: Path, config: CrudsmithConfig, force_reset: bool = False) -> CommandResult:
    """Push the schema to the database, optionally dropping existing data."""
    args = ["db", "push", "--skip-generate"]
    if force_reset:
        args.append("--force-reset")
    return _prisma(app_root, config, *args)
