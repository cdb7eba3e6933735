"""
Generation state for incremental regeneration.

Tracks:
- SHA-256 of the types file at the last successful generation
- Which generators ran and when
"""

import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .errors import CrudsmithError

STATE_DIR = ".crudsmith"


class StateError(CrudsmithError):
    """Raised when state operations fail."""

    pass


@dataclass
class GenerationState:
    """State of the previous generation run."""

    timestamp: str  # ISO format datetime
    types_hash: str
    generators: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "GenerationState":
        """Create GenerationState from dict."""
        return GenerationState(**data)


def hash_file(file_path: Path) -> str:
    """
    Compute SHA256 hash of a file.

    Args:
        file_path: Path to file

    Returns:
        Hex-encoded SHA256 hash

    Raises:
        StateError: If file cannot be read
    """
    try:
        sha256 = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)
        return sha256.hexdigest()
    except OSError as e:
        raise StateError(f"Failed to hash file {file_path}: {e}") from e


def hash_directory(dir_path: Path) -> str:
    """
    Compute a SHA256 digest over a directory tree.

    Files are visited in sorted order. Each contributes its path relative to
    ``dir_path`` followed by its own hash, so renames change the digest.

    Raises:
        StateError: If the directory does not exist or a file cannot be read
    """
    if not dir_path.is_dir():
        raise StateError(f"Not a directory: {dir_path}")

    digest = hashlib.sha256()
    for entry in sorted(dir_path.rglob("*")):
        if entry.is_file():
            digest.update(entry.relative_to(dir_path).as_posix().encode() + b"\0")
            digest.update(hash_file(entry).encode())
    return digest.hexdigest()


def get_state_file_path(app_root: Path) -> Path:
    """
    Get path to state file for an app.

    Returns:
        Path to .crudsmith/state.json
    """
    return app_root / STATE_DIR / "state.json"


def load_state(app_root: Path) -> GenerationState | None:
    """
    Load previous generation state.

    Returns:
        GenerationState if exists, None otherwise

    Raises:
        StateError: If state file is corrupted
    """
    state_file = get_state_file_path(app_root)

    if not state_file.exists():
        return None

    try:
        with open(state_file, encoding="utf-8") as f:
            data = json.load(f)
        return GenerationState.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        raise StateError(f"Failed to load generation state: {e}") from e


def save_state(app_root: Path, types_file: Path, generators: list[str]) -> GenerationState:
    """
    Save generation state after a successful run.

    Raises:
        StateError: If state cannot be saved
    """
    state_file = get_state_file_path(app_root)
    state = GenerationState(
        timestamp=datetime.now(UTC).isoformat(),
        types_hash=hash_file(types_file),
        generators=generators,
    )
    try:
        state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(state_file, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2)
    except OSError as e:
        raise StateError(f"Failed to save generation state: {e}") from e
    return state


def types_changed(app_root: Path, types_file: Path) -> bool:
    """Whether the types file differs from the one last generated from."""
    state = load_state(app_root)
    if state is None or not types_file.exists():
        return True
    return state.types_hash != hash_file(types_file)


__all__ = [
    "StateError",
    "GenerationState",
    "hash_file",
    "hash_directory",
    "get_state_file_path",
    "load_state",
    "save_state",
    "types_changed",
]
