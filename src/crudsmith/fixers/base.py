"""
Base classes for source fixers.

A fixer is a pure text transformation: ``fix`` takes a file's content and
returns the new content plus a description of each change. ``apply_fixers``
does the file I/O, backing every file up before it is rewritten.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from ..core.backup import backup_file
from ..validation import iter_source_files

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".mjs")


@dataclass
class FixResult:
    """New content of one file and what changed in it."""

    content: str
    changes: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


@dataclass
class FileChange:
    """Changes written to one file."""

    path: Path
    changes: list[str]
    backup: Path | None = None


@dataclass
class FixReport:
    """Everything a fixer pass did."""

    files: list[FileChange] = field(default_factory=list)
    scanned: int = 0
    dry_run: bool = False

    @property
    def files_changed(self) -> list[Path]:
        return [f.path for f in self.files]

    @property
    def total_changes(self) -> int:
        return sum(len(f.changes) for f in self.files)

    @property
    def changed(self) -> bool:
        return bool(self.files)

    def merge(self, other: FixReport) -> None:
        self.files.extend(other.files)
        self.scanned += other.scanned


class Fixer(ABC):
    """
    Base class for all fixers.

    Attributes:
        name: Short name used on the command line
        handles: Diagnostic kinds this fixer responds to
        preventive: Whether the fixer is useful without diagnostics
    """

    name = "fixer"
    handles: frozenset[DiagnosticKind] = frozenset()
    preventive = False

    def applies_to(self, path: Path) -> bool:
        """Whether ``fix`` should be offered this file."""
        return path.suffix in SOURCE_SUFFIXES

    def extra_targets(self) -> list[Path]:
        """Files outside the scanned tree this fixer also edits."""
        return []

    @abstractmethod
    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        """
        Transform one file's content.

        Args:
            content: Current file content
            path: File being fixed
            diagnostics: Diagnostics of the kinds in ``handles`` (may be empty)

        Returns:
            FixResult; unchanged content with no changes when nothing applies
        """
        pass

    def relevant(self, diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
        return [d for d in diagnostics if d.kind in self.handles]


def diagnostic_targets(diagnostic: Diagnostic, path: Path) -> bool:
    """Whether a diagnostic's ``./src/...`` location is ``path``."""
    if not diagnostic.file:
        return False
    return path.as_posix().endswith(diagnostic.file.lstrip("./").lstrip("/"))


def apply_fixers(
    root: Path,
    fixers: list[Fixer],
    diagnostics: Iterable[Diagnostic] = (),
    dry_run: bool = False,
) -> FixReport:
    """
    Run fixers over every source file under ``root``.

    ``node_modules``, ``.next`` and ``.git`` are skipped, as are backup
    copies. Each file is offered to every fixer in order, each fixer seeing
    the previous one's output; the file is written once at the end.

    Args:
        root: Directory to scan (normally the app's ``src``)
        fixers: Fixers to run, in order
        diagnostics: Build diagnostics to pass to the fixers
        dry_run: Report changes without writing anything

    Returns:
        FixReport listing changed files
    """
    diagnostics = list(diagnostics)
    report = FixReport(dry_run=dry_run)

    files = iter_source_files(root, SOURCE_SUFFIXES)
    for fixer in fixers:
        for extra in fixer.extra_targets():
            if extra.exists() and extra not in files:
                files.append(extra)

    for path in files:
        report.scanned += 1
        active = [f for f in fixers if f.applies_to(path)]
        if not active:
            continue

        try:
            original = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping non-UTF-8 file %s", path)
            continue

        content = original
        changes: list[str] = []
        for fixer in active:
            result = fixer.fix(content, path, fixer.relevant(diagnostics))
            if result.changed:
                content = result.content
                changes.extend(f"{fixer.name}: {change}" for change in result.changes)

        if content == original:
            continue

        backup = None
        if not dry_run:
            backup = backup_file(path)
            path.write_text(content, encoding="utf-8")
        logger.info("%s %s (%d change(s))", "Would fix" if dry_run else "Fixed", path, len(changes))
        report.files.append(FileChange(path=path, changes=changes, backup=backup))

    return report
