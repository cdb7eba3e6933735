"""
Duplicate import fixer.

Merges several ``import { ... } from 'm'`` statements of the same module into
the first one, and drops any specifier whose local name was already bound by
an earlier named import. Both cases make the bundler report
"Identifier 'X' has already been declared".
"""

import re
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from .base import Fixer, FixResult
from .text import local_name, remove_span, split_specifiers

NAMED_IMPORT = re.compile(
    r"""^import[ \t]+(type[ \t]+)?\{([^}]*)\}[ \t]*from[ \t]*(['"])([^'"]+)\3[ \t]*;?[ \t]*$""",
    re.MULTILINE,
)


def _render(is_type: bool, specifiers: list[str], quote: str, module: str, multiline: bool) -> str:
    keyword = "import type" if is_type else "import"
    if multiline:
        body = "".join(f"  {s},\n" for s in specifiers)
        return f"{keyword} {{\n{body}}} from {quote}{module}{quote};"
    return f"{keyword} {{ {', '.join(specifiers)} }} from {quote}{module}{quote};"


class DuplicateImportFixer(Fixer):
    name = "imports"
    handles = frozenset({DiagnosticKind.DUPLICATE_IDENTIFIER})
    preventive = True

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        matches = list(NAMED_IMPORT.finditer(content))
        if not matches:
            return FixResult(content)

        bound: set[str] = set()
        first_of: dict[tuple[bool, str], int] = {}
        kept: list[list[str]] = []
        changes: list[str] = []

        for index, match in enumerate(matches):
            is_type = bool(match.group(1))
            module = match.group(4)
            specifiers = []
            for spec in split_specifiers(match.group(2)):
                name = local_name(spec)
                if name in bound:
                    changes.append(f"dropped repeated import {name} from {module}")
                    continue
                bound.add(name)
                specifiers.append(spec)

            key = (is_type, module)
            if key in first_of:
                kept[first_of[key]].extend(specifiers)
                kept.append([])
                changes.append(f"merged import from {module}")
            else:
                first_of[key] = index
                kept.append(specifiers)

        if not changes:
            return FixResult(content)

        # Rewrite back to front so earlier offsets stay valid
        for index in range(len(matches) - 1, -1, -1):
            match = matches[index]
            specifiers = kept[index]
            if specifiers == split_specifiers(match.group(2)):
                continue
            if not specifiers:
                content = remove_span(content, match.start(), match.end())
                continue
            statement = _render(
                bool(match.group(1)),
                specifiers,
                match.group(3),
                match.group(4),
                multiline="\n" in match.group(2) or len(specifiers) > 6,
            )
            content = content[: match.start()] + statement + content[match.end() :]

        return FixResult(content, changes)
