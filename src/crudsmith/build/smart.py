"""
Smart build: run the app build, read the failures, patch, retry.

A preventive pass of the fixers that need no diagnostics runs first. Each
failed attempt is parsed into diagnostics, which are handed to the fixers
that handle their kinds. When no fixer changes anything the build stops
early; retrying an unchanged tree only reproduces the same failure.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.config import CrudsmithConfig
from ..core.ir import TypesModule
from ..core.types_parser import parse_types_file
from ..fixers import Fixer, FixReport, apply_fixers, build_fixers
from .diagnostics import Diagnostic, DiagnosticKind, group_by_kind, parse_build_output
from .process import CommandResult, run_command

logger = logging.getLogger(__name__)


@dataclass
class BuildAttempt:
    """One run of the build command."""

    number: int
    command: CommandResult
    diagnostics: list[Diagnostic] = field(default_factory=list)
    fixes: FixReport | None = None

    @property
    def ok(self) -> bool:
        return self.command.ok


@dataclass
class BuildReport:
    """
    Outcome of a smart build.

    Attributes:
        attempts: Every build run, in order
        preventive: Changes made before the first build
        success: Whether the last attempt succeeded
        duration: Wall time in seconds, fixes included
        stopped_early: Whether the loop ended because nothing could be fixed
    """

    attempts: list[BuildAttempt] = field(default_factory=list)
    preventive: FixReport = field(default_factory=FixReport)
    success: bool = False
    duration: float = 0.0
    stopped_early: bool = False

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Every diagnostic seen, across attempts."""
        seen: list[Diagnostic] = []
        for attempt in self.attempts:
            for diagnostic in attempt.diagnostics:
                if diagnostic not in seen:
                    seen.append(diagnostic)
        return seen

    @property
    def fixes(self) -> list[str]:
        changes = [c for f in self.preventive.files for c in f.changes]
        for attempt in self.attempts:
            if attempt.fixes:
                changes.extend(c for f in attempt.fixes.files for c in f.changes)
        return changes

    @property
    def files_changed(self) -> list[Path]:
        files: list[Path] = []
        reports = [self.preventive] + [a.fixes for a in self.attempts if a.fixes]
        for report in reports:
            for path in report.files_changed:
                if path not in files:
                    files.append(path)
        return files

    @property
    def last_output(self) -> str:
        return self.attempts[-1].command.output if self.attempts else ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "attempts": len(self.attempts),
            "duration": round(self.duration, 2),
            "stopped_early": self.stopped_early,
            "diagnostics": [d.describe() for d in self.diagnostics],
            "fixes": self.fixes,
            "files_changed": [str(p) for p in self.files_changed],
        }


class SmartBuild:
    """
    Build-fix-retry loop for one app.

    Args:
        app_root: Root directory of the Next.js app
        config: Loaded configuration
        fixers: Fixers to use; defaults to ``build_fixers`` for the app
    """

    def __init__(
        self,
        app_root: Path,
        config: CrudsmithConfig,
        fixers: list[Fixer] | None = None,
    ):
        self.app_root = app_root
        self.config = config
        self.src_dir = config.resolve(app_root, "src_dir")
        self.fixers = fixers if fixers is not None else build_fixers(app_root, config, self._load_types())

    def _load_types(self) -> TypesModule | None:
        types_file = self.config.resolve(self.app_root, "types")
        if not types_file.exists():
            logger.warning("No types file at %s; model-aware fixers disabled", types_file)
            return None
        return parse_types_file(types_file)

    def _build(self) -> CommandResult:
        return run_command(
            self.config.build.command,
            cwd=self.app_root,
            env=self.config.child_env(),
            timeout=self.config.build.timeout,
        )

    def _dispatch(self, diagnostics: list[Diagnostic]) -> FixReport:
        grouped = group_by_kind(diagnostics)
        for kind, items in grouped.items():
            logger.info("%d %s diagnostic(s)", len(items), kind.value)

        kinds = set(grouped)
        selected = [f for f in self.fixers if f.handles & kinds]
        if not selected:
            unhandled = ", ".join(k.value for k in grouped) or "none"
            logger.warning("No fixer handles the diagnostics seen (%s)", unhandled)
            return FixReport()
        return apply_fixers(self.src_dir, selected, diagnostics)

    def run(self, max_retries: int | None = None) -> BuildReport:
        """
        Run the loop.

        Args:
            max_retries: Attempts before giving up; defaults to
                ``config.build.max_retries``

        Returns:
            BuildReport; ``success`` tells whether the final attempt passed
        """
        retries = max_retries if max_retries is not None else self.config.build.max_retries
        report = BuildReport()
        start = time.monotonic()

        preventive = [f for f in self.fixers if f.preventive]
        report.preventive = apply_fixers(self.src_dir, preventive)
        if report.preventive.changed:
            logger.info("Preventive fixes changed %d file(s)", len(report.preventive.files))

        for number in range(1, retries + 1):
            logger.info("Build attempt %d/%d", number, retries)
            result = self._build()
            attempt = BuildAttempt(number=number, command=result)
            report.attempts.append(attempt)

            if result.ok:
                report.success = True
                break

            if result.timed_out:
                logger.error("Build timed out after %ss", self.config.build.timeout)
                break

            attempt.diagnostics = parse_build_output(result.output)
            if not attempt.diagnostics:
                logger.error("Build failed with no recognisable diagnostics")
                report.stopped_early = True
                break

            if number == retries:
                break

            attempt.fixes = self._dispatch(attempt.diagnostics)
            if not attempt.fixes.changed:
                kinds = {d.kind for d in attempt.diagnostics}
                if kinds <= {DiagnosticKind.GENERIC}:
                    logger.error("Build failed; output did not name a fixable error")
                else:
                    logger.error("No fixer could change anything; stopping")
                report.stopped_early = True
                break

        report.duration = time.monotonic() - start
        return report
