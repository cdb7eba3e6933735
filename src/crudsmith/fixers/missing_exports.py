"""
Missing export fixer.

Pages written against the old mock-data layer import helpers such as
``getBookings`` or ``getRoomById`` that the generated service does not
define. For each "has no exported member" diagnostic the fixer appends the
function to the module that was imported from. The body is inferred from the
name when it refers to a known model; anything else gets a stub that throws,
so the build passes and the gap stays visible at runtime.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from ..core.ir import IdStrategy, TypesModule
from ..core.naming import lower_first, pluralize
from .base import Fixer, FixResult
from .text import insert_import

logger = logging.getLogger(__name__)

PRISMA_BINDING = re.compile(
    r"import\s+prisma\b|import\s*\{[^}]*\bprisma\b[^}]*\}|^(?:export\s+)?(?:const|let|var)\s+prisma\b",
    re.MULTILINE,
)
PRISMA_NAMESPACE = re.compile(r"import\s+(?:type\s+)?\{[^}]*\bPrisma\b[^}]*\}")

_MODULE_SUFFIXES = (".ts", ".tsx", ".js", "/index.ts")


def _defines(content: str, symbol: str) -> bool:
    """Whether ``content`` already declares or exports ``symbol``."""
    escaped = re.escape(symbol)
    declared = re.search(
        rf"\b(?:function\*?|const|let|var|class|interface|type|enum)\s+{escaped}\b", content
    )
    if declared:
        return True
    return any(
        re.search(rf"(?:^|[\s,{{]){escaped}(?:[\s,}}]|$)", m.group(1))
        for m in re.finditer(r"export\s*\{([^}]*)\}", content)
    )


class MissingExportFixer(Fixer):
    """
    Append missing service functions.

    Args:
        src_dir: The app's ``src`` directory, target of the ``@/`` alias
        types: Parsed types file; its interfaces are the known models
        id_strategy: Decides the TypeScript type of ``id`` parameters
        service_path: Module assumed when a diagnostic names none
    """

    name = "missing-exports"
    handles = frozenset({DiagnosticKind.MISSING_EXPORT})

    def __init__(
        self,
        src_dir: Path,
        types: TypesModule,
        id_strategy: IdStrategy = IdStrategy.AUTOINCREMENT,
        service_path: Path | None = None,
    ):
        self.src_dir = src_dir
        self.types = types
        self.id_ts = "number" if id_strategy is IdStrategy.AUTOINCREMENT else "string"
        self.service_path = service_path or src_dir / "lib" / "prisma-service.ts"
        self._models = {name: name for name in types.names}
        self._plurals = {pluralize(name): name for name in types.names}

    def extra_targets(self) -> list[Path]:
        return [self.service_path]

    def resolve_module(self, diagnostic: Diagnostic) -> Path | None:
        """File a diagnostic's module specifier points to."""
        module = diagnostic.module
        if module is None:
            return self.service_path
        if module.startswith("@/"):
            base = self.src_dir / module[2:]
        elif module.startswith(".") and diagnostic.file:
            importer = self.src_dir.parent / diagnostic.file
            base = (importer.parent / module).resolve()
        else:
            # Package imports are not ours to patch
            return None

        if base.suffix in (".ts", ".tsx", ".js") and base.exists():
            return base
        for suffix in _MODULE_SUFFIXES:
            candidate = base.parent / (base.name + suffix)
            if candidate.exists():
                return candidate
        return base.parent / (base.name + ".ts")

    def _targets(self, path: Path, diagnostics: list[Diagnostic]) -> list[str]:
        symbols = []
        resolved = path.resolve()
        for diagnostic in diagnostics:
            if not diagnostic.symbol:
                continue
            target = self.resolve_module(diagnostic)
            if target is not None and target.resolve() == resolved and diagnostic.symbol not in symbols:
                symbols.append(diagnostic.symbol)
        return symbols

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        changes = []
        blocks = []
        for symbol in self._targets(path, diagnostics):
            if _defines(content, symbol):
                continue
            if symbol[:1].isupper():
                logger.warning("Not generating missing type export %s in %s", symbol, path)
                continue
            code, inferred = self.implementation(symbol)
            blocks.append(code)
            changes.append(f"added {'Prisma-backed' if inferred else 'stub'} export {symbol}")

        if not blocks:
            return FixResult(content)

        uses_prisma = any("prisma." in block for block in blocks)
        uses_namespace = any("Prisma." in block for block in blocks)
        if uses_prisma and not PRISMA_BINDING.search(content):
            content = insert_import(content, "import prisma from '@/lib/prisma-service';")
        if uses_namespace and not PRISMA_NAMESPACE.search(content):
            content = insert_import(content, "import type { Prisma } from '@prisma/client';")

        content = content.rstrip("\n") + "\n\n" + "\n\n".join(blocks) + "\n"
        return FixResult(content, changes)

    def _model(self, name: str) -> str | None:
        return self._models.get(name)

    def _plural_model(self, name: str) -> str | None:
        return self._plurals.get(name)

    def implementation(self, symbol: str) -> tuple[str, bool]:
        """
        Source for ``symbol`` and whether it was inferred from a model.

        ``getRoomById``, ``getAllRooms`` / ``getRooms``,
        ``getRoomsByFloor``, ``createRoom`` / ``addRoom``, ``updateRoom``
        and ``deleteRoom`` / ``removeRoom`` are recognised.
        """
        match = re.fullmatch(r"get([A-Z]\w*?)ById", symbol)
        if match and self._model(match.group(1)):
            accessor = lower_first(match.group(1))
            return (
                f"export async function {symbol}(id: {self.id_ts}) {{\n"
                f"  return prisma.{accessor}.findUnique({{ where: {{ id }} }});\n"
                f"}}"
            ), True

        match = re.fullmatch(r"get([A-Z]\w*?)By([A-Z]\w*)", symbol)
        if match and self._plural_model(match.group(1)):
            model = self._plural_model(match.group(1))
            field = lower_first(match.group(2))
            return (
                f"export async function {symbol}({field}: unknown) {{\n"
                f"  return prisma.{lower_first(model)}.findMany({{\n"
                f"    where: {{ {field} }} as Prisma.{model}WhereInput,\n"
                f"  }});\n"
                f"}}"
            ), True

        match = re.fullmatch(r"get(?:All)?([A-Z]\w*)", symbol)
        if match and self._plural_model(match.group(1)):
            model = self._plural_model(match.group(1))
            return (
                f"export async function {symbol}() {{\n"
                f"  return prisma.{lower_first(model)}.findMany();\n"
                f"}}"
            ), True

        match = re.fullmatch(r"(?:create|add)([A-Z]\w*)", symbol)
        if match and self._model(match.group(1)):
            model = match.group(1)
            return (
                f"export async function {symbol}(data: Prisma.{model}CreateInput) {{\n"
                f"  return prisma.{lower_first(model)}.create({{ data }});\n"
                f"}}"
            ), True

        match = re.fullmatch(r"update([A-Z]\w*)", symbol)
        if match and self._model(match.group(1)):
            model = match.group(1)
            return (
                f"export async function {symbol}(id: {self.id_ts}, data: Prisma.{model}UpdateInput) {{\n"
                f"  return prisma.{lower_first(model)}.update({{ where: {{ id }}, data }});\n"
                f"}}"
            ), True

        match = re.fullmatch(r"(?:delete|remove)([A-Z]\w*)", symbol)
        if match and self._model(match.group(1)):
            return (
                f"export async function {symbol}(id: {self.id_ts}) {{\n"
                f"  return prisma.{lower_first(match.group(1))}.delete({{ where: {{ id }} }});\n"
                f"}}"
            ), True

        return (
            f"export async function {symbol}(..._args: unknown[]): Promise<never> {{\n"
            f"  throw new Error('{symbol} is not implemented');\n"
            f"}}"
        ), False
