"""Tests for schema.prisma text repairs."""

from pathlib import Path

import pytest

from crudsmith.core.config import CrudsmithConfig
from crudsmith.core.errors import PatchError
from crudsmith.prisma import (
    dedupe_model_fields,
    repair_schema_file,
    repair_schema_text,
    validate_schema_text,
)

GOOD = """\
generator client {
  provider = "prisma-client-js"
}

datasource db {
  provider = "postgresql"
  url      = env("DATABASE_URL")
}

model Room {
  id   Int    @id @default(autoincrement())
  name String
}
"""

MANGLED = """\
generator client {
  provider = "prisma-client-js"
}

datasource db {
  = "postgresql"
  url      = env("DATABASE_URL")
}
DateTime @default(now())


Room {
  id   Int    @id @default(autoincrement())
  name String
  name String
}
"""


class TestRepairText:
    def test_clean_schema_unchanged(self) -> None:
        result = repair_schema_text(GOOD)
        assert not result.changed
        assert result.content == GOOD

    def test_repairs_every_pattern(self) -> None:
        result = repair_schema_text(MANGLED)
        assert result.changed
        assert '  provider = "postgresql"' in result.content
        assert "model Room {" in result.content
        assert "DateTime @default(now())" not in result.content
        assert result.content.count("name String") == 1
        assert "\n\n\n" not in result.content
        assert validate_schema_text(result.content) == []

    def test_changes_are_described(self) -> None:
        changes = " | ".join(repair_schema_text(MANGLED).changes)
        assert "orphan type line" in changes
        assert "provider key" in changes
        assert "model keyword on Room" in changes
        assert "Room.name" in changes


class TestDedupe:
    def test_first_field_wins(self) -> None:
        text = "model A {\n  x String\n  x Int\n  @@index([x])\n}\nmodel B {\n  x Int\n}\n"
        new_text, removed = dedupe_model_fields(text)
        assert removed == ["A.x"]
        assert "x String" in new_text
        assert "  x Int\n  @@index" not in new_text
        assert "model B {\n  x Int\n}" in new_text


class TestValidate:
    def test_good_schema(self) -> None:
        assert validate_schema_text(GOOD) == []

    def test_missing_blocks(self) -> None:
        issues = validate_schema_text("model A {\n  id Int @id\n}\n")
        assert "Missing generator block" in issues
        assert "Missing datasource block" in issues

    def test_duplicate_model(self) -> None:
        text = GOOD + "\nmodel Room {\n  id Int @id\n}\n"
        assert "Model Room declared 2 times" in validate_schema_text(text)

    def test_unbalanced_braces(self) -> None:
        issues = validate_schema_text(GOOD + "\nmodel Broken {\n  id Int @id\n")
        assert any(issue.startswith("Unbalanced braces") for issue in issues)

    def test_no_models(self) -> None:
        text = GOOD.split("model Room")[0]
        assert "No models declared" in validate_schema_text(text)


class TestRepairFile:
    def _schema(self, app_root: Path) -> Path:
        path = app_root / "prisma" / "schema.prisma"
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def test_repairs_and_backs_up(self, app_root: Path, config: CrudsmithConfig) -> None:
        path = self._schema(app_root)
        path.write_text(MANGLED)
        result = repair_schema_file(app_root, config)
        assert result.changed
        assert not result.regenerated
        assert "model Room {" in path.read_text()
        backups = list(path.parent.glob("schema.prisma.backup.*"))
        assert backups and backups[0].read_text() == MANGLED

    def test_regenerates_when_still_broken(self, app_root: Path, config: CrudsmithConfig) -> None:
        path = self._schema(app_root)
        path.write_text("model Room {\n  id Int @id\n")
        result = repair_schema_file(app_root, config)
        assert result.regenerated
        assert result.issues == []
        assert "model Booking {" in path.read_text()

    def test_missing_schema_is_generated(self, app_root: Path, config: CrudsmithConfig) -> None:
        result = repair_schema_file(app_root, config)
        assert result.regenerated
        assert (app_root / "prisma" / "schema.prisma").exists()

    def test_missing_schema_without_regenerate(self, app_root: Path, config: CrudsmithConfig) -> None:
        with pytest.raises(PatchError):
            repair_schema_file(app_root, config, regenerate=False)
