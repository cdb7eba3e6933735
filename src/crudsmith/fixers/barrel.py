"""
Barrel import fixer.

Next.js rewrites ``import { X } from 'lucide-react'`` into a
``__barrel_optimize__?names=X!=!lucide-react`` request; when that leaks into
source the build fails. The request is replaced by the bare package name,
keeping the original quotes.
"""

import re
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from .base import Fixer, FixResult

BARREL_REQUEST = re.compile(r"""(["'])__barrel_optimize__\?names=[^"'\n]*?!=!([^"'\n]+)\1""")


class BarrelImportFixer(Fixer):
    name = "barrel"
    handles = frozenset({DiagnosticKind.BARREL_OPTIMIZE})
    preventive = True

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        packages: list[str] = []

        def _replace(match: re.Match[str]) -> str:
            quote, package = match.group(1), match.group(2)
            packages.append(package)
            return f"{quote}{package}{quote}"

        new_content = BARREL_REQUEST.sub(_replace, content)
        changes = [f"barrel request -> {p}" for p in packages]
        return FixResult(new_content, changes)
