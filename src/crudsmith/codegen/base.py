"""
Base generator classes for the app codegen.

Generators are responsible for specific parts of the app:
- PrismaSchemaGenerator: prisma/schema.prisma
- PrismaServiceGenerator: the shared Prisma client and CRUD helpers
- ApiRoutesGenerator: src/app/api/<segment>/route.ts
- HooksGenerator: src/hooks/use<Plural>.ts
- etc.

Each generator writes through ``_write_file``, which refuses to overwrite
files carrying the custom marker and backs up anything it replaces.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.backup import backup_file
from ..core.config import CrudsmithConfig
from ..core.ir import PrismaSchema, TypesModule
from ..prisma.generator import build_schema

logger = logging.getLogger(__name__)

CUSTOM_MARKER = "// CUSTOM:"


@dataclass
class GeneratorResult:
    """
    Result from a generator execution.

    Attributes:
        files_created: Files that were created or rewritten
        files_skipped: Files left alone (unchanged or customised)
        artifacts: Data to share with other generators
        errors: Any non-fatal errors encountered
        warnings: Any warnings to display to user
    """

    files_created: list[Path] = field(default_factory=list)
    files_skipped: list[Path] = field(default_factory=list)
    artifacts: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether generation succeeded (no errors)."""
        return len(self.errors) == 0

    def add_file(self, path: Path) -> None:
        self.files_created.append(path)

    def add_artifact(self, key: str, value: Any) -> None:
        """Add an artifact for other generators."""
        self.artifacts[key] = value

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def merge(self, other: GeneratorResult) -> None:
        """Merge another result into this one."""
        self.files_created.extend(other.files_created)
        self.files_skipped.extend(other.files_skipped)
        self.artifacts.update(other.artifacts)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


def is_customized(path: Path) -> bool:
    """Whether a file carries the marker that protects manual edits."""
    try:
        return CUSTOM_MARKER in path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False


class Generator(ABC):
    """
    Base class for all generators.

    A generator creates specific files of the app from its parsed types.

    Example:
        class StatusRouteGenerator(Generator):
            name = "status"

            def generate(self) -> GeneratorResult:
                result = GeneratorResult()
                path = self.resolve("api_dir") / "status" / "route.ts"
                self._write_file(path, render("api/status.ts.j2"), result)
                return result
    """

    name = "generator"

    def __init__(
        self,
        types: TypesModule,
        app_root: Path,
        config: CrudsmithConfig | None = None,
        force: bool = False,
        schema: PrismaSchema | None = None,
    ):
        """
        Initialize generator.

        Args:
            types: Interfaces and aliases read from the app's types file
            app_root: Root directory of the Next.js app
            config: Project configuration (defaults when None)
            force: Overwrite files even when they carry the custom marker
            schema: Prebuilt schema to share between generators
        """
        self.types = types
        self.app_root = app_root
        self.config = config or CrudsmithConfig()
        self.force = force
        self._schema = schema

    @property
    def schema(self) -> PrismaSchema:
        """Prisma schema built from the types, computed once."""
        if self._schema is None:
            self._schema = build_schema(self.types, self.config.schema_settings)
        return self._schema

    def resolve(self, name: str) -> Path:
        return self.config.resolve(self.app_root, name)

    @abstractmethod
    def generate(self) -> GeneratorResult:
        """
        Generate files.

        Returns:
            GeneratorResult with files created and artifacts
        """
        pass

    def _ensure_dir(self, path: Path) -> None:
        """Ensure a directory exists."""
        path.mkdir(parents=True, exist_ok=True)

    def _write_file(self, path: Path, content: str, result: GeneratorResult) -> bool:
        """
        Write content to a file, creating parent directories if needed.

        Existing files are backed up before being replaced. Files carrying
        the custom marker are left untouched unless ``force`` is set, and a
        warning is recorded instead.

        Returns:
            True if the file was written
        """
        if path.exists():
            if not self.force and is_customized(path):
                result.add_warning(f"Kept customised file {self._display(path)}")
                result.files_skipped.append(path)
                return False
            if path.read_text(encoding="utf-8") == content:
                result.files_skipped.append(path)
                return False
            backup_file(path)

        self._ensure_dir(path.parent)
        path.write_text(content, encoding="utf-8")
        result.add_file(path)
        logger.debug("Wrote %s", path)
        return True

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.app_root))
        except ValueError:
            return str(path)


class CompositeGenerator(Generator):
    """
    Generator that runs multiple sub-generators.

    Sub-generators share this generator's types, config and ``force`` flag.
    """

    name = "composite"

    @abstractmethod
    def get_generators(self) -> list[Generator]:
        """
        Get the list of sub-generators to run.

        Returns:
            List of Generator instances
        """
        pass

    def generate(self) -> GeneratorResult:
        """
        Run all sub-generators and merge results.

        Returns:
            Combined GeneratorResult from all sub-generators
        """
        combined = GeneratorResult()

        for generator in self.get_generators():
            logger.info("Running %s generator", generator.name)
            result = generator.generate()
            combined.merge(result)

            # Stop if a generator had errors
            if not result.success:
                break

        return combined
