"""Tests for the build-fix-retry loop."""

from pathlib import Path
from unittest.mock import patch

import pytest

from crudsmith.build.process import CommandResult
from crudsmith.build.smart import SmartBuild
from crudsmith.core.config import CrudsmithConfig

MISSING_EXPORT = """\
Failed to compile.

./src/app/rooms/page.tsx:3:10
Type error: Module '"@/lib/prisma-service"' has no exported member 'getRoomsByHost'.
"""


def _result(returncode: int = 0, stdout: str = "", timed_out: bool = False) -> CommandResult:
    return CommandResult(
        args=["npm", "run", "build"],
        returncode=returncode,
        stdout=stdout,
        stderr="",
        duration=0.5,
        timed_out=timed_out,
    )


@pytest.fixture
def service(app_root: Path) -> Path:
    path = app_root / "src" / "lib" / "prisma-service.ts"
    path.write_text("import { PrismaClient } from '@prisma/client';\n\nexport const prisma = new PrismaClient();\n")
    return path


class TestSmartBuild:
    def test_success_first_try(self, app_root: Path, config: CrudsmithConfig) -> None:
        with patch("crudsmith.build.smart.run_command", return_value=_result()) as mock_run:
            report = SmartBuild(app_root, config).run()

        assert report.success
        assert len(report.attempts) == 1
        assert not report.stopped_early
        args, kwargs = mock_run.call_args
        assert args[0] == ["npm", "run", "build"]
        assert kwargs["cwd"] == app_root
        assert kwargs["timeout"] == config.build.timeout
        assert kwargs["env"]["DATABASE_URL"] == config.database.url

    def test_fixes_then_retries(self, app_root: Path, config: CrudsmithConfig, service: Path) -> None:
        results = [_result(1, MISSING_EXPORT), _result()]
        with patch("crudsmith.build.smart.run_command", side_effect=results):
            report = SmartBuild(app_root, config).run()

        assert report.success
        assert len(report.attempts) == 2
        assert report.attempts[0].diagnostics[0].symbol == "getRoomsByHost"
        assert "missing-exports: added Prisma-backed export getRoomsByHost" in report.fixes
        assert report.files_changed == [service]
        assert "export async function getRoomsByHost(host: unknown)" in service.read_text()

    def test_gives_up_after_max_retries(self, app_root: Path, config: CrudsmithConfig, service: Path) -> None:
        with patch("crudsmith.build.smart.run_command", return_value=_result(1, MISSING_EXPORT)) as mock_run:
            report = SmartBuild(app_root, config).run(max_retries=2)

        assert not report.success
        assert mock_run.call_count == 2
        assert not report.stopped_early
        assert report.attempts[-1].fixes is None
        assert "getRoomsByHost" in report.last_output

    def test_stops_when_nothing_recognised(self, app_root: Path, config: CrudsmithConfig) -> None:
        with patch("crudsmith.build.smart.run_command", return_value=_result(1, "npm ERR! missing script")) as mock_run:
            report = SmartBuild(app_root, config).run()

        assert not report.success
        assert report.stopped_early
        assert mock_run.call_count == 1

    def test_stops_when_no_fixer_applies(self, app_root: Path, config: CrudsmithConfig) -> None:
        output = "Type error: Property 'colour' does not exist on type 'Room'.\n"
        with patch("crudsmith.build.smart.run_command", return_value=_result(1, output)) as mock_run:
            report = SmartBuild(app_root, config).run()

        assert report.stopped_early
        assert mock_run.call_count == 1
        assert report.attempts[0].fixes is not None
        assert not report.attempts[0].fixes.changed

    def test_timeout_ends_loop(self, app_root: Path, config: CrudsmithConfig) -> None:
        with patch("crudsmith.build.smart.run_command", return_value=_result(-1, timed_out=True)) as mock_run:
            report = SmartBuild(app_root, config).run()

        assert not report.success
        assert mock_run.call_count == 1
        assert report.attempts[0].diagnostics == []

    def test_preventive_pass_runs_before_build(self, app_root: Path, config: CrudsmithConfig) -> None:
        page = app_root / "src" / "app" / "page.tsx"
        page.parent.mkdir(parents=True)
        page.write_text("import { Menu } from '__barrel_optimize__?names=Menu!=!lucide-react';\n")

        with patch("crudsmith.build.smart.run_command", return_value=_result()):
            report = SmartBuild(app_root, config).run()

        assert page.read_text() == "import { Menu } from 'lucide-react';\n"
        assert report.preventive.files_changed == [page]
        assert report.fixes == ["barrel: barrel request -> lucide-react"]

    def test_preventive_pass_adds_redirects(self, app_root: Path, config: CrudsmithConfig) -> None:
        next_config = app_root / "next.config.js"
        next_config.write_text("const nextConfig = {\n  reactStrictMode: true\n};\n\nmodule.exports = nextConfig;\n")

        with patch("crudsmith.build.smart.run_command", return_value=_result()):
            report = SmartBuild(app_root, config).run()

        assert "async redirects()" in next_config.read_text()
        assert report.preventive.files_changed == [next_config]

    def test_missing_types_disables_model_fixers(self, tmp_path: Path, config: CrudsmithConfig) -> None:
        names = [f.name for f in SmartBuild(tmp_path, config).fixers]
        assert "missing-exports" not in names

    def test_report_to_dict(self, app_root: Path, config: CrudsmithConfig, service: Path) -> None:
        results = [_result(1, MISSING_EXPORT), _result()]
        with patch("crudsmith.build.smart.run_command", side_effect=results):
            data = SmartBuild(app_root, config).run().to_dict()

        assert data["success"] is True
        assert data["attempts"] == 2
        assert data["diagnostics"][0].startswith("[missing-export]")
        assert data["files_changed"] == [str(service)]
