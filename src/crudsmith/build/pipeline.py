"""
End-to-end pipeline: regenerate, sync Prisma, build.

Stages run in order and the first failure stops the run; later stages are
reported as skipped.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from ..codegen import SystemGenerator
from ..core.config import CrudsmithConfig
from ..core.errors import CrudsmithError
from ..core.types_parser import parse_types_file
from .prisma import prisma_db_push, prisma_generate
from .process import CommandResult
from .smart import BuildReport, SmartBuild

logger = logging.getLogger(__name__)


class StageStatus(StrEnum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StageResult:
    """Result of one pipeline stage."""

    name: str
    status: StageStatus = StageStatus.SKIPPED
    duration: float = 0.0
    message: str | None = None
    details: Any = None

    @property
    def passed(self) -> bool:
        return self.status == StageStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == StageStatus.FAILED


@dataclass
class PipelineReport:
    stages: list[StageResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(not s.failed for s in self.stages) and any(s.passed for s in self.stages)

    @property
    def failed_stage(self) -> StageResult | None:
        for stage in self.stages:
            if stage.failed:
                return stage
        return None


def _command_outcome(result: CommandResult) -> tuple[bool, str | None]:
    if result.ok:
        return True, None
    if result.timed_out:
        return False, f"{result.command_line} timed out"
    tail = result.output.strip().splitlines()[-5:]
    return False, "\n".join(tail) or f"{result.command_line} exited {result.returncode}"


class Pipeline:
    """
    Generate, ``prisma generate``, ``prisma db push``, smart build.

    Args:
        app_root: Root directory of the Next.js app
        config: Loaded configuration
        skip_db: Leave out ``prisma db push``
        force: Overwrite customised files when generating
    """

    def __init__(self, app_root: Path, config: CrudsmithConfig, skip_db: bool = False, force: bool = False):
        self.app_root = app_root
        self.config = config
        self.skip_db = skip_db
        self.force = force

    def stages(self) -> list[tuple[str, Callable[[], tuple[bool, str | None, Any]]]]:
        stages = [
            ("generate", self._generate),
            ("prisma-generate", self._prisma_generate),
        ]
        if not self.skip_db:
            stages.append(("db-push", self._db_push))
        stages.append(("build", self._build))
        return stages

    def run(self) -> PipelineReport:
        report = PipelineReport()
        failed = False
        for name, stage in self.stages():
            result = StageResult(name=name)
            if failed:
                result.message = "Skipped due to previous stage failure"
                report.stages.append(result)
                continue

            logger.info("Pipeline stage: %s", name)
            start = time.monotonic()
            try:
                ok, message, details = stage()
            except CrudsmithError as e:
                ok, message, details = False, str(e), None
            result.duration = time.monotonic() - start
            result.status = StageStatus.PASSED if ok else StageStatus.FAILED
            result.message = message
            result.details = details
            report.stages.append(result)

            if not ok:
                logger.error("Stage %s failed: %s", name, message)
                failed = True

        return report

    def _generate(self) -> tuple[bool, str | None, Any]:
        types = parse_types_file(self.config.resolve(self.app_root, "types"))
        generator = SystemGenerator(types, self.app_root, self.config, force=self.force)
        result = generator.generate()
        message = "; ".join(result.errors) if result.errors else f"{len(result.files_created)} file(s) written"
        return result.success, message, result

    def _prisma_generate(self) -> tuple[bool, str | None, Any]:
        result = prisma_generate(self.app_root, self.config)
        ok, message = _command_outcome(result)
        return ok, message, result

    def _db_push(self) -> tuple[bool, str | None, Any]:
        result = prisma_db_push(self.app_root, self.config)
        ok, message = _command_outcome(result)
        return ok, message, result

    def _build(self) -> tuple[bool, str | None, BuildReport]:
        report = SmartBuild(self.app_root, self.config).run()
        if report.success:
            return True, f"built in {len(report.attempts)} attempt(s)", report
        return False, f"build failed after {len(report.attempts)} attempt(s)", report
