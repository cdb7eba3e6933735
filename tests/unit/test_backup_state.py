"""Tests for file backups and generation state."""

import json
from pathlib import Path

import pytest

from crudsmith.core.backup import backup_file, latest_backup, list_backups, restore_latest
from crudsmith.core.errors import PatchError
from crudsmith.core.state import (
    StateError,
    get_state_file_path,
    hash_directory,
    hash_file,
    load_state,
    save_state,
    types_changed,
)


class TestBackups:
    def test_backup_copies_content(self, tmp_path: Path) -> None:
        path = tmp_path / "page.tsx"
        path.write_text("original")
        backup = backup_file(path)
        assert backup.name.startswith("page.tsx.backup.")
        assert backup.read_text() == "original"

    def test_backups_never_collide(self, tmp_path: Path) -> None:
        path = tmp_path / "page.tsx"
        path.write_text("a")
        first = backup_file(path)
        second = backup_file(path)
        assert first != second
        assert list_backups(path) == [first, second]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PatchError):
            backup_file(tmp_path / "nope.ts")

    def test_restore_latest(self, tmp_path: Path) -> None:
        path = tmp_path / "page.tsx"
        path.write_text("v1")
        backup_file(path)
        path.write_text("v2")
        backup = backup_file(path)
        path.write_text("broken")

        assert latest_backup(path) == backup
        restore_latest(path)
        assert path.read_text() == "v2"

    def test_restore_without_backup(self, tmp_path: Path) -> None:
        path = tmp_path / "page.tsx"
        path.write_text("x")
        assert latest_backup(path) is None
        with pytest.raises(PatchError):
            restore_latest(path)


class TestHashing:
    def test_hash_file_is_stable(self, tmp_path: Path) -> None:
        path = tmp_path / "types.ts"
        path.write_text("export interface A {}\n")
        assert hash_file(path) == hash_file(path)
        assert len(hash_file(path)) == 64

    def test_hash_directory_tracks_content(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.ts").write_text("a")
        before = hash_directory(tmp_path)
        (tmp_path / "sub" / "a.ts").write_text("b")
        assert hash_directory(tmp_path) != before

    def test_hash_directory_tracks_renames(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "types.ts").write_text("export interface Room {}")
        before = hash_directory(tmp_path)

        (tmp_path / "sub" / "types.ts").rename(tmp_path / "sub" / "models.ts")
        renamed = hash_directory(tmp_path)
        (tmp_path / "sub" / "models.ts").rename(tmp_path / "models.ts")

        assert renamed != before
        assert hash_directory(tmp_path) != renamed

    def test_hash_missing(self, tmp_path: Path) -> None:
        with pytest.raises(StateError):
            hash_file(tmp_path / "missing")
        with pytest.raises(StateError):
            hash_directory(tmp_path / "missing")


class TestState:
    def test_round_trip(self, app_root: Path) -> None:
        types_file = app_root / "src" / "lib" / "types.ts"
        saved = save_state(app_root, types_file, ["schema", "routes"])

        loaded = load_state(app_root)
        assert loaded == saved
        assert get_state_file_path(app_root) == app_root / ".crudsmith" / "state.json"

    def test_no_state(self, tmp_path: Path) -> None:
        assert load_state(tmp_path) is None

    def test_corrupt_state(self, tmp_path: Path) -> None:
        state_file = get_state_file_path(tmp_path)
        state_file.parent.mkdir()
        state_file.write_text(json.dumps({"unexpected": 1}))
        with pytest.raises(StateError):
            load_state(tmp_path)

    def test_types_changed(self, app_root: Path) -> None:
        types_file = app_root / "src" / "lib" / "types.ts"
        assert types_changed(app_root, types_file)

        save_state(app_root, types_file, ["schema"])
        assert not types_changed(app_root, types_file)

        types_file.write_text(types_file.read_text() + "\nexport interface Extra {\n  id: string;\n}\n")
        assert types_changed(app_root, types_file)
