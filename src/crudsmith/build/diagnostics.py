"""
Diagnostics extracted from ``next build`` / ``tsc`` output.

The build tools only print text, so every diagnostic is recognised by the
substring its tool prints. The file is taken from the nearest ``./src/...``
path printed before the message, which is where Next.js puts it.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class DiagnosticKind(StrEnum):
    """Known build failure patterns."""

    BARREL_OPTIMIZE = "barrel-optimize"
    DUPLICATE_IDENTIFIER = "duplicate-identifier"
    DUPLICATE_EXPORT = "duplicate-export"
    MISSING_EXPORT = "missing-export"
    CANNOT_FIND_NAME = "cannot-find-name"
    MODULE_NOT_FOUND = "module-not-found"
    TYPE_ERROR = "type-error"
    SYNTAX = "syntax"
    GENERIC = "generic"


@dataclass(frozen=True)
class Diagnostic:
    """
    One recognised error in build output.

    Attributes:
        kind: Which failure pattern matched
        message: The matched text
        file: ``./src/...`` path printed near the message, if any
        line: Line number printed with the file, if any
        symbol: Identifier the message is about, if any
        module: Module specifier the message is about, if any
    """

    kind: DiagnosticKind
    message: str
    file: str | None = None
    line: int | None = None
    symbol: str | None = None
    module: str | None = None

    def describe(self) -> str:
        location = ""
        if self.file:
            location = f"{self.file}:{self.line}: " if self.line else f"{self.file}: "
        return f"[{self.kind.value}] {location}{self.message}"


_Q = r"""['"`]"""

# (kind, pattern, symbol group, module group)
PATTERNS: list[tuple[DiagnosticKind, re.Pattern[str], int | None, int | None]] = [
    (
        DiagnosticKind.BARREL_OPTIMIZE,
        re.compile(r"__barrel_optimize__\?names=([^!\s'\"]*)!=!([^'\"\s]+)"),
        None,
        2,
    ),
    (
        DiagnosticKind.DUPLICATE_IDENTIFIER,
        re.compile(rf"Identifier {_Q}(\w+){_Q} has already been declared"),
        1,
        None,
    ),
    (
        DiagnosticKind.DUPLICATE_IDENTIFIER,
        re.compile(r"the name `(\w+)` is defined multiple times"),
        1,
        None,
    ),
    (
        DiagnosticKind.DUPLICATE_IDENTIFIER,
        re.compile(r"Duplicate identifier '(\w+)'"),
        1,
        None,
    ),
    (
        DiagnosticKind.DUPLICATE_EXPORT,
        re.compile(rf"Duplicate export {_Q}(\w+){_Q}"),
        1,
        None,
    ),
    (
        DiagnosticKind.DUPLICATE_EXPORT,
        re.compile(r"the name `(\w+)` is exported multiple times"),
        1,
        None,
    ),
    (
        DiagnosticKind.MISSING_EXPORT,
        re.compile(r"""(?:Module )?['"]+([^'"]+)['"]+ has no exported member(?: named)? ['"](\w+)['"]"""),
        2,
        1,
    ),
    (
        DiagnosticKind.MISSING_EXPORT,
        re.compile(r"""['"](\w+)['"] is not exported from ['"]([^'"]+)['"]"""),
        1,
        2,
    ),
    (
        DiagnosticKind.MISSING_EXPORT,
        re.compile(r"""has no exported member(?: named)? ['"](\w+)['"]"""),
        1,
        None,
    ),
    (
        DiagnosticKind.CANNOT_FIND_NAME,
        re.compile(r"Cannot find name '(\w+)'"),
        1,
        None,
    ),
    (
        DiagnosticKind.MODULE_NOT_FOUND,
        re.compile(r"""(?:Module not found: (?:Error: )?Can't resolve|Cannot resolve module|Cannot find module) ['"]([^'"]+)['"]"""),
        None,
        1,
    ),
    (
        DiagnosticKind.SYNTAX,
        re.compile(r"Expected [^\n,]+, got '([^']+)'"),
        None,
        None,
    ),
    (
        DiagnosticKind.SYNTAX,
        re.compile(r"(?:SyntaxError|Syntax Error|Unexpected token)[^\n]*"),
        None,
        None,
    ),
]

TYPE_ERROR = re.compile(r"Type error: ([^\n]+)")
FILE_REF = re.compile(r"(\./src/[^\s:'\"()]+)(?::(\d+)(?::\d+)?)?")
GENERIC_MARKERS = ("Failed to compile", "Build error")

_LOOKBEHIND = 400


def _locate(text: str, offset: int) -> tuple[str | None, int | None]:
    """Nearest ``./src/...`` path before ``offset``, else the first one after it."""
    window = text[max(0, offset - _LOOKBEHIND) : offset]
    refs = list(FILE_REF.finditer(window))
    if refs:
        match = refs[-1]
    else:
        match = FILE_REF.search(text, offset, offset + 200)
    if match is None:
        return None, None
    line = int(match.group(2)) if match.group(2) else None
    return match.group(1), line


def parse_build_output(text: str) -> list[Diagnostic]:
    """
    Extract diagnostics from build output.

    ``generic`` is reported only when nothing more specific matched and the
    output says the compile failed. Identical diagnostics are reported once.

    Args:
        text: Combined stdout and stderr of the build

    Returns:
        Diagnostics in the order they appear
    """
    found: list[tuple[int, Diagnostic]] = []
    claimed: list[tuple[int, int]] = []

    for kind, pattern, symbol_group, module_group in PATTERNS:
        for match in pattern.finditer(text):
            if any(match.start() < end and start < match.end() for start, end in claimed):
                continue
            claimed.append(match.span())
            file, line = _locate(text, match.start())
            found.append(
                (
                    match.start(),
                    Diagnostic(
                        kind=kind,
                        message=match.group(0).strip(),
                        file=file,
                        line=line,
                        symbol=match.group(symbol_group) if symbol_group else None,
                        module=match.group(module_group) if module_group else None,
                    ),
                )
            )

    # Type errors not already explained by a more specific pattern
    for match in TYPE_ERROR.finditer(text):
        if any(match.start() <= start < match.end() for start, _ in claimed):
            continue
        file, line = _locate(text, match.start())
        found.append(
            (match.start(), Diagnostic(DiagnosticKind.TYPE_ERROR, match.group(1).strip(), file, line))
        )

    if not found and any(marker in text for marker in GENERIC_MARKERS):
        found.append((0, Diagnostic(DiagnosticKind.GENERIC, "Build failed without a recognised error")))

    diagnostics: list[Diagnostic] = []
    seen: set[Diagnostic] = set()
    for _, diagnostic in sorted(found, key=lambda item: item[0]):
        if diagnostic not in seen:
            seen.add(diagnostic)
            diagnostics.append(diagnostic)

    logger.debug("Parsed %d diagnostics from %d chars of output", len(diagnostics), len(text))
    return diagnostics


def group_by_kind(diagnostics: list[Diagnostic]) -> dict[DiagnosticKind, list[Diagnostic]]:
    """Diagnostics grouped by kind, kinds in first-seen order."""
    grouped: dict[DiagnosticKind, list[Diagnostic]] = defaultdict(list)
    for diagnostic in diagnostics:
        grouped[diagnostic.kind].append(diagnostic)
    return dict(grouped)
