"""
Regex text fixers for generated and hand-written app source.

Each fixer targets one recognisable build failure; ``build_fixers`` returns
them in the order the smart build runs them.
"""

from __future__ import annotations

from pathlib import Path

from ..core.config import CrudsmithConfig
from ..core.ir import TypesModule
from .barrel import BarrelImportFixer
from .base import (
    FileChange,
    Fixer,
    FixReport,
    FixResult,
    apply_fixers,
    diagnostic_targets,
)
from .declarations import DuplicateDeclarationFixer
from .exports import DuplicateExportFixer
from .imports import DuplicateImportFixer
from .missing_exports import MissingExportFixer
from .redirects import NextConfigRedirectsPatch
from .type_imports import MissingTypeImportFixer

FIXER_NAMES = ("barrel", "imports", "declarations", "exports", "missing-exports", "types", "redirects")


def build_fixers(app_root: Path, config: CrudsmithConfig, types: TypesModule | None = None) -> list[Fixer]:
    """
    Instantiate every fixer for an app.

    Args:
        app_root: Root directory of the Next.js app
        config: Loaded configuration
        types: Parsed types file; fixers that need it are left out when None

    Returns:
        Fixers in run order
    """
    fixers: list[Fixer] = [
        BarrelImportFixer(),
        DuplicateImportFixer(),
        DuplicateDeclarationFixer(),
        DuplicateExportFixer(),
    ]
    if types is not None:
        fixers.append(
            MissingExportFixer(
                src_dir=config.resolve(app_root, "src_dir"),
                types=types,
                id_strategy=config.schema_settings.id_strategy,
                service_path=config.resolve(app_root, "service"),
            )
        )
        fixers.append(MissingTypeImportFixer(types, types_path=config.resolve(app_root, "types")))
    fixers.append(NextConfigRedirectsPatch(app_root, config.next.redirects))
    return fixers


def select_fixers(fixers: list[Fixer], names: list[str]) -> list[Fixer]:
    """Fixers whose ``name`` is in ``names``; ``all`` selects everything."""
    if "all" in names:
        return list(fixers)
    return [f for f in fixers if f.name in names]


__all__ = [
    "FIXER_NAMES",
    "BarrelImportFixer",
    "DuplicateDeclarationFixer",
    "DuplicateExportFixer",
    "DuplicateImportFixer",
    "FileChange",
    "FixReport",
    "FixResult",
    "Fixer",
    "MissingExportFixer",
    "MissingTypeImportFixer",
    "NextConfigRedirectsPatch",
    "apply_fixers",
    "build_fixers",
    "diagnostic_targets",
    "select_fixers",
]
