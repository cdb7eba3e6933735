"""
Tests for the app code generators.

Each generator is run against the sample app in a temporary directory and
its output checked for the pieces the app relies on.
"""

from pathlib import Path

import pytest

from crudsmith.codegen import (
    CUSTOM_MARKER,
    ApiRoutesGenerator,
    AuthGenerator,
    EnvFileGenerator,
    GeneratorResult,
    HooksGenerator,
    NextConfigGenerator,
    PrismaSchemaGenerator,
    PrismaServiceGenerator,
    SystemGenerator,
    is_customized,
)
from crudsmith.codegen.generators.env import parse_env_keys
from crudsmith.core.config import CrudsmithConfig, SchemaConfig
from crudsmith.core.errors import GenerationError
from crudsmith.core.ir import IdStrategy
from crudsmith.core.state import load_state
from crudsmith.core.types_parser import parse_types


# =============================================================================
# Base behaviour
# =============================================================================


class TestWriteFile:
    def test_generated_headers_are_not_customised(self, app_root: Path, sample_types) -> None:
        PrismaServiceGenerator(sample_types, app_root).generate()
        service = app_root / "src" / "lib" / "prisma-service.ts"
        assert "Generated by crudsmith" in service.read_text()
        assert not is_customized(service)

    def test_custom_marker_preserves_file(self, app_root: Path, sample_types) -> None:
        service = app_root / "src" / "lib" / "prisma-service.ts"
        service.write_text(f"{CUSTOM_MARKER} hand-tuned\nexport const x = 1;\n")

        result = PrismaServiceGenerator(sample_types, app_root).generate()

        assert service.read_text().startswith(CUSTOM_MARKER)
        assert service in result.files_skipped
        assert any("customised" in w for w in result.warnings)

    def test_force_overwrites_custom_file(self, app_root: Path, sample_types) -> None:
        service = app_root / "src" / "lib" / "prisma-service.ts"
        service.write_text(f"{CUSTOM_MARKER} hand-tuned\n")

        result = PrismaServiceGenerator(sample_types, app_root, force=True).generate()

        assert service in result.files_created
        assert "getAllRooms" in service.read_text()
        assert list(service.parent.glob("prisma-service.ts.backup.*"))

    def test_unchanged_file_is_skipped(self, app_root: Path, sample_types) -> None:
        PrismaServiceGenerator(sample_types, app_root).generate()
        result = PrismaServiceGenerator(sample_types, app_root).generate()
        assert result.files_created == []
        assert len(result.files_skipped) == 1

    def test_result_merge(self) -> None:
        a = GeneratorResult(files_created=[Path("a")], warnings=["w"])
        b = GeneratorResult(files_created=[Path("b")], errors=["e"])
        a.merge(b)
        assert a.files_created == [Path("a"), Path("b")]
        assert not a.success


# =============================================================================
# Individual generators
# =============================================================================


class TestSchemaGenerator:
    def test_writes_schema(self, app_root: Path, sample_types) -> None:
        result = PrismaSchemaGenerator(sample_types, app_root).generate()
        assert result.success
        assert result.artifacts["model_names"] == ["User", "Room", "Booking"]
        assert "model Room {" in (app_root / "prisma" / "schema.prisma").read_text()

    def test_no_models_is_an_error(self, app_root: Path) -> None:
        result = PrismaSchemaGenerator(parse_types(""), app_root).generate()
        assert not result.success


class TestServiceGenerator:
    def test_crud_functions(self, app_root: Path, sample_types) -> None:
        result = PrismaServiceGenerator(sample_types, app_root).generate()
        content = (app_root / "src" / "lib" / "prisma-service.ts").read_text()

        assert "globalThis.prisma" in content
        assert "export default prisma;" in content
        for name in ("getBookingById", "getAllBookings", "createBooking", "updateBooking", "deleteBooking"):
            assert f"export async function {name}(" in content
            assert name in result.artifacts["service_functions"]
        assert "getRoomById(id: number)" in content

    def test_cuid_ids_are_strings(self, app_root: Path, sample_types) -> None:
        config = CrudsmithConfig(schema=SchemaConfig(id_strategy=IdStrategy.CUID))
        PrismaServiceGenerator(sample_types, app_root, config).generate()
        content = (app_root / "src" / "lib" / "prisma-service.ts").read_text()
        assert "getRoomById(id: string)" in content


class TestRoutesGenerator:
    def test_route_per_model(self, app_root: Path, sample_types) -> None:
        result = ApiRoutesGenerator(sample_types, app_root).generate()
        api = app_root / "src" / "app" / "api"

        assert result.artifacts["api_segments"] == ["users", "rooms", "bookings"]
        route = (api / "rooms" / "route.ts").read_text()
        for method in ("GET", "POST", "PUT", "DELETE"):
            assert f"export async function {method}(request: NextRequest)" in route
        assert "parseInt(value, 10)" in route
        assert "prisma.room.findUnique" in route
        assert "{ status: 201 }" in route

    def test_status_route(self, app_root: Path, sample_types) -> None:
        ApiRoutesGenerator(sample_types, app_root).generate()
        status = (app_root / "src" / "app" / "api" / "status" / "route.ts").read_text()
        assert "SELECT 1" in status
        assert '["User", "Room", "Booking"]' in status

    def test_cuid_ids_are_not_parsed(self, app_root: Path, sample_types) -> None:
        config = CrudsmithConfig(schema=SchemaConfig(id_strategy=IdStrategy.CUID))
        ApiRoutesGenerator(sample_types, app_root, config).generate()
        route = (app_root / "src" / "app" / "api" / "rooms" / "route.ts").read_text()
        assert "parseInt" not in route


class TestHooksGenerator:
    def test_hook_per_model_and_index(self, app_root: Path, sample_types) -> None:
        result = HooksGenerator(sample_types, app_root).generate()
        hooks = app_root / "src" / "hooks"

        assert result.artifacts["hooks"] == ["useUsers", "useRooms", "useBookings"]
        hook = (hooks / "useRooms.ts").read_text()
        assert "'use client';" in hook
        assert "const ENDPOINT = '/api/rooms';" in hook
        assert "export function useRooms()" in hook
        index = (hooks / "index.ts").read_text()
        assert "export { useBookings } from './useBookings';" in index


class TestAuthGenerator:
    def test_generates_auth_files(self, app_root: Path, sample_types) -> None:
        result = AuthGenerator(sample_types, app_root).generate()
        assert result.artifacts["auth"] is True

        lib = (app_root / "src" / "lib" / "auth.ts").read_text()
        assert "from 'bcryptjs'" in lib
        assert "SignJWT" in lib
        assert "user.password" in lib
        for route in ("login", "logout", "me"):
            assert (app_root / "src" / "app" / "api" / "auth" / route / "route.ts").exists()

    def test_skipped_without_user_email(self, app_root: Path) -> None:
        types = parse_types("export interface User {\n  name: string;\n}\n")
        result = AuthGenerator(types, app_root).generate()
        assert result.artifacts["auth"] is False
        assert not (app_root / "src" / "lib" / "auth.ts").exists()

    def test_warns_without_password(self, app_root: Path) -> None:
        types = parse_types("export interface User {\n  email: string;\n}\n")
        result = AuthGenerator(types, app_root).generate()
        assert result.warnings
        assert (app_root / "src" / "lib" / "auth.ts").exists()


class TestEnvGenerator:
    def test_creates_env(self, app_root: Path, sample_types) -> None:
        result = EnvFileGenerator(sample_types, app_root).generate()
        keys = parse_env_keys((app_root / ".env").read_text())
        assert keys == {"DATABASE_URL", "NODE_ENV", "JWT_SECRET"}
        assert result.artifacts["env_keys_added"] == ["DATABASE_URL", "JWT_SECRET", "NODE_ENV"]

    def test_keeps_existing_values(self, app_root: Path, sample_types) -> None:
        env = app_root / ".env"
        env.write_text('DATABASE_URL="postgresql://me@db/prod"')
        EnvFileGenerator(sample_types, app_root).generate()
        content = env.read_text()
        assert content.startswith('DATABASE_URL="postgresql://me@db/prod"\n')
        assert content.count("DATABASE_URL") == 1
        assert "JWT_SECRET=" in content

    def test_complete_env_is_untouched(self, app_root: Path, sample_types) -> None:
        env = app_root / ".env"
        env.write_text("DATABASE_URL=x\nNODE_ENV=production\n# comment\nexport JWT_SECRET=s\n")
        result = EnvFileGenerator(sample_types, app_root).generate()
        assert result.files_created == []

    def test_parse_env_keys_ignores_comments(self) -> None:
        assert parse_env_keys("# A=1\nB = 2\n") == {"B"}


class TestNextConfigGenerator:
    def test_disables_barrel_optimisation(self, app_root: Path, sample_types) -> None:
        NextConfigGenerator(sample_types, app_root).generate()
        content = (app_root / "next.config.js").read_text()
        assert "optimizePackageImports: []" in content
        assert "'lucide-react': require.resolve('lucide-react')" in content
        assert "__barrel_optimize__" in content
        assert "async redirects()" in content
        assert "source: '/api-custom/:path*'" in content
        assert content.rstrip().endswith("module.exports = nextConfig;")

    def test_without_redirects(self, app_root: Path, sample_types) -> None:
        config = CrudsmithConfig()
        config.next.redirects = []
        NextConfigGenerator(sample_types, app_root, config).generate()
        assert "redirects" not in (app_root / "next.config.js").read_text()

    def test_warns_about_other_config(self, app_root: Path, sample_types) -> None:
        (app_root / "next.config.mjs").write_text("export default {};\n")
        result = NextConfigGenerator(sample_types, app_root).generate()
        assert any("next.config.mjs" in w for w in result.warnings)


# =============================================================================
# System generator
# =============================================================================


class TestSystemGenerator:
    def test_generates_everything(self, app_root: Path, sample_types) -> None:
        result = SystemGenerator(sample_types, app_root).generate()

        assert result.success
        for rel in (
            "prisma/schema.prisma",
            "src/lib/prisma-service.ts",
            "src/app/api/bookings/route.ts",
            "src/hooks/useBookings.ts",
            "src/lib/auth.ts",
            ".env",
            "next.config.js",
        ):
            assert (app_root / rel).exists(), rel

        state = load_state(app_root)
        assert state is not None
        assert "schema" in state.generators

    def test_invalid_input_raises(self, tmp_path: Path, sample_types) -> None:
        with pytest.raises(GenerationError):
            SystemGenerator(sample_types, tmp_path).generate()
