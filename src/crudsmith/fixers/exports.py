"""Remove names from ``export { ... }`` lists that are already exported."""

from __future__ import annotations

import re
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from .base import Fixer, FixResult
from .text import remove_span, split_specifiers

EXPORTED_DECL = re.compile(
    r"^export[ \t]+(?:default[ \t]+)?(?:declare[ \t]+)?(?:async[ \t]+)?"
    r"(?:function\*?|const|let|var|class|interface|type|enum)[ \t]+([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)
# Local export lists only; ``export { x } from '...'`` re-exports are left alone
EXPORT_LIST = re.compile(r"^export[ \t]+(type[ \t]+)?\{([^}]*)\}[ \t]*(?!\s*from\b);?", re.MULTILINE)


def _exported_name(specifier: str) -> str:
    spec = specifier[len("type ") :] if specifier.startswith("type ") else specifier
    if " as " in spec:
        return spec.split(" as ", 1)[1].strip()
    return spec.strip()


class DuplicateExportFixer(Fixer):
    name = "exports"
    handles = frozenset({DiagnosticKind.DUPLICATE_EXPORT})
    preventive = True

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        exported = {m.group(1) for m in EXPORTED_DECL.finditer(content)}

        edits: list[tuple[re.Match[str], list[str], list[str]]] = []
        for match in EXPORT_LIST.finditer(content):
            specifiers = split_specifiers(match.group(2))
            kept, dropped = [], []
            for spec in specifiers:
                name = _exported_name(spec)
                if name in exported:
                    dropped.append(name)
                else:
                    exported.add(name)
                    kept.append(spec)
            if dropped:
                edits.append((match, kept, dropped))

        if not edits:
            return FixResult(content)

        changes = []
        for match, kept, dropped in reversed(edits):
            if kept:
                type_prefix = match.group(1) or ""
                statement = f"export {type_prefix}{{ {', '.join(kept)} }};"
                content = content[: match.start()] + statement + content[match.end() :]
            else:
                content = remove_span(content, match.start(), match.end())
            changes.append(f"removed duplicate export(s) {', '.join(dropped)}")
        changes.reverse()
        return FixResult(content, changes)
