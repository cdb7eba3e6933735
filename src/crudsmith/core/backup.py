"""
Backups taken before a file is rewritten in place.

Every fixer and every generator that overwrites an existing file copies it to
``<name>.backup.<timestamp>`` first, so a bad patch can be rolled back with
``restore_latest``.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path

from .errors import PatchError

logger = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."


def backup_file(path: Path) -> Path:
    """
    Copy a file next to itself with a timestamp suffix.

    Args:
        path: File about to be modified

    Returns:
        Path of the backup copy

    Raises:
        PatchError: If the file does not exist or cannot be copied
    """
    if not path.is_file():
        raise PatchError(f"Cannot back up missing file: {path}")

    stamp = time.time_ns() // 1_000_000
    target = path.with_name(f"{path.name}{BACKUP_MARKER}{stamp}")
    while target.exists():
        stamp += 1
        target = path.with_name(f"{path.name}{BACKUP_MARKER}{stamp}")

    try:
        shutil.copy2(path, target)
    except OSError as e:
        raise PatchError(f"Failed to back up {path}: {e}") from e

    logger.debug("Backed up %s -> %s", path.name, target.name)
    return target


def list_backups(path: Path) -> list[Path]:
    """Backups of ``path``, oldest first."""
    prefix = f"{path.name}{BACKUP_MARKER}"
    backups = []
    for candidate in path.parent.glob(f"{prefix}*"):
        suffix = candidate.name[len(prefix) :]
        if suffix.isdigit():
            backups.append((int(suffix), candidate))
    return [p for _, p in sorted(backups)]


def latest_backup(path: Path) -> Path | None:
    backups = list_backups(path)
    return backups[-1] if backups else None


def restore_latest(path: Path) -> Path:
    """
    Restore the most recent backup of ``path`` over it.

    Returns:
        The backup that was restored

    Raises:
        PatchError: If no backup exists
    """
    backup = latest_backup(path)
    if backup is None:
        raise PatchError(f"No backup found for {path}")
    shutil.copy2(backup, path)
    logger.info("Restored %s from %s", path.name, backup.name)
    return backup

