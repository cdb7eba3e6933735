"""Tests for the generate / prisma / build pipeline."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from crudsmith.build.pipeline import Pipeline, StageStatus
from crudsmith.build.process import CommandResult
from crudsmith.build.smart import BuildReport
from crudsmith.core.config import CrudsmithConfig


def _command(returncode: int = 0, stderr: str = "") -> CommandResult:
    return CommandResult(args=["npx", "prisma"], returncode=returncode, stdout="", stderr=stderr, duration=0.1)


def _smart_build(success: bool = True) -> MagicMock:
    smart = MagicMock()
    smart.return_value.run.return_value = BuildReport(success=success)
    return smart


class TestPipeline:
    def test_all_stages_pass(self, app_root: Path, config: CrudsmithConfig) -> None:
        with (
            patch("crudsmith.build.pipeline.prisma_generate", return_value=_command()),
            patch("crudsmith.build.pipeline.prisma_db_push", return_value=_command()) as db_push,
            patch("crudsmith.build.pipeline.SmartBuild", _smart_build()),
        ):
            report = Pipeline(app_root, config).run()

        assert report.success
        assert [s.name for s in report.stages] == ["generate", "prisma-generate", "db-push", "build"]
        assert all(s.status is StageStatus.PASSED for s in report.stages)
        db_push.assert_called_once_with(app_root, config)
        assert (app_root / "prisma" / "schema.prisma").exists()

    def test_failure_skips_later_stages(self, app_root: Path, config: CrudsmithConfig) -> None:
        smart = _smart_build()
        failing = _command(1, "Error: P1001 Can't reach database server\nat localhost:5432")
        with (
            patch("crudsmith.build.pipeline.prisma_generate", return_value=_command()),
            patch("crudsmith.build.pipeline.prisma_db_push", return_value=failing),
            patch("crudsmith.build.pipeline.SmartBuild", smart),
        ):
            report = Pipeline(app_root, config).run()

        assert not report.success
        assert report.failed_stage.name == "db-push"
        assert "P1001" in report.failed_stage.message
        build = report.stages[-1]
        assert build.status is StageStatus.SKIPPED
        assert build.message == "Skipped due to previous stage failure"
        smart.assert_not_called()

    def test_skip_db(self, app_root: Path, config: CrudsmithConfig) -> None:
        with (
            patch("crudsmith.build.pipeline.prisma_generate", return_value=_command()),
            patch("crudsmith.build.pipeline.prisma_db_push") as db_push,
            patch("crudsmith.build.pipeline.SmartBuild", _smart_build()),
        ):
            report = Pipeline(app_root, config, skip_db=True).run()

        assert [s.name for s in report.stages] == ["generate", "prisma-generate", "build"]
        db_push.assert_not_called()

    def test_generate_error_is_a_failed_stage(self, tmp_path: Path, config: CrudsmithConfig) -> None:
        with patch("crudsmith.build.pipeline.prisma_generate") as prisma_generate:
            report = Pipeline(tmp_path, config).run()

        assert report.failed_stage.name == "generate"
        assert "Types file not found" in report.failed_stage.message
        prisma_generate.assert_not_called()

    def test_build_failure(self, app_root: Path, config: CrudsmithConfig) -> None:
        with (
            patch("crudsmith.build.pipeline.prisma_generate", return_value=_command()),
            patch("crudsmith.build.pipeline.prisma_db_push", return_value=_command()),
            patch("crudsmith.build.pipeline.SmartBuild", _smart_build(success=False)),
        ):
            report = Pipeline(app_root, config).run()

        assert report.failed_stage.name == "build"
        assert report.failed_stage.message == "build failed after 0 attempt(s)"
