"""
Duplicate declaration fixer.

Repeated text patches tend to append a function that already exists. Later
top-level ``function`` and ``const``/``let`` declarations of a name
already declared are removed, body included; the first one wins. Overload
signatures (no body) are not declarations for this purpose, and ``var``
may legally be redeclared so it is left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..build.diagnostics import Diagnostic, DiagnosticKind
from .base import Fixer, FixResult
from .text import find_matching, find_statement_end, remove_span, skip_non_code

FUNCTION_DECL = re.compile(
    r"^(?:export[ \t]+)?(?:default[ \t]+)?(?:async[ \t]+)?function\*?[ \t]+([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)
VARIABLE_DECL = re.compile(r"^(?:export[ \t]+)?(?:const|let)[ \t]+([A-Za-z_$][\w$]*)[ \t]*[:=]", re.MULTILINE)

_TYPE_POSITION = set(":<,|&=")


@dataclass
class _Declaration:
    name: str
    start: int
    end: int


def _function_end(text: str, name_end: int) -> int | None:
    """End of a function declaration, or None for an overload signature."""
    paren = text.find("(", name_end)
    if paren == -1:
        return None
    close = find_matching(text, paren)
    if close == -1:
        return None

    i = close + 1
    last = ")"
    while i < len(text):
        skipped = skip_non_code(text, i)
        if skipped != i:
            i = skipped
            continue
        ch = text[i]
        if ch == ";":
            return None
        if ch == "{":
            end = find_matching(text, i)
            if end == -1:
                return None
            if last in _TYPE_POSITION:
                # Object type in the return annotation
                last = "}"
                i = end + 1
                continue
            return end + 1
        if not ch.isspace():
            last = ch
        i += 1
    return None


def find_declarations(text: str) -> list[_Declaration]:
    """Top-level function and variable declarations, in source order."""
    found = []
    for match in FUNCTION_DECL.finditer(text):
        end = _function_end(text, match.end())
        if end is not None:
            found.append(_Declaration(match.group(1), match.start(), end))
    for match in VARIABLE_DECL.finditer(text):
        found.append(_Declaration(match.group(1), match.start(), find_statement_end(text, match.start())))

    # Unindented code inside a body is not top level
    top_level: list[_Declaration] = []
    for decl in sorted(found, key=lambda d: d.start):
        if top_level and decl.start < top_level[-1].end:
            continue
        top_level.append(decl)
    return top_level


class DuplicateDeclarationFixer(Fixer):
    name = "declarations"
    handles = frozenset({DiagnosticKind.DUPLICATE_IDENTIFIER})
    preventive = True

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        seen: set[str] = set()
        duplicates = []
        for decl in find_declarations(content):
            if decl.name in seen:
                duplicates.append(decl)
            else:
                seen.add(decl.name)

        if not duplicates:
            return FixResult(content)

        changes = []
        for decl in reversed(duplicates):
            content = remove_span(content, decl.start, decl.end)
            changes.append(f"removed duplicate declaration of {decl.name}")
        changes.reverse()
        return FixResult(content, changes)
