"""Add ``import type`` statements for interfaces a file uses but never imports."""

from __future__ import annotations

import re
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from ..core.ir import TypesModule
from .base import Fixer, FixResult, diagnostic_targets
from .text import insert_import, local_name, split_specifiers


class MissingTypeImportFixer(Fixer):
    """
    Fix "Cannot find name 'X'" for names declared in the types file.

    Names the types file does not declare are left alone; the diagnostic is
    most likely a typo or a missing package.
    """

    name = "types"
    handles = frozenset({DiagnosticKind.CANNOT_FIND_NAME})

    def __init__(self, types: TypesModule, module: str = "@/lib/types", types_path: Path | None = None):
        self.types = types
        self.module = module
        self.types_path = types_path
        self._existing = re.compile(
            rf"import\s+type\s*\{{([^}}]*)\}}\s*from\s*(['\"]){re.escape(module)}\2;?"
        )

    def applies_to(self, path: Path) -> bool:
        if self.types_path is not None and path.resolve() == self.types_path.resolve():
            return False
        return path.suffix in (".ts", ".tsx")

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        wanted = []
        for diagnostic in diagnostics:
            name = diagnostic.symbol
            if not name or name in wanted or not diagnostic_targets(diagnostic, path):
                continue
            if self.types.declares(name):
                wanted.append(name)
        if not wanted:
            return FixResult(content)

        existing = self._existing.search(content)
        if existing:
            specifiers = split_specifiers(existing.group(1))
            bound = {local_name(s) for s in specifiers}
            missing = [name for name in wanted if name not in bound]
            if not missing:
                return FixResult(content)
            quote = existing.group(2)
            statement = f"import type {{ {', '.join(specifiers + missing)} }} from {quote}{self.module}{quote};"
            content = content[: existing.start()] + statement + content[existing.end() :]
        else:
            missing = wanted
            content = insert_import(content, f"import type {{ {', '.join(missing)} }} from '{self.module}';")

        return FixResult(content, [f"imported type {name} from {self.module}" for name in missing])
