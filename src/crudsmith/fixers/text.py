"""
Scanning helpers for TypeScript source text.

Just enough lexing to balance brackets: string literals, template literals
and comments are skipped so braces inside them do not count.
"""

from __future__ import annotations

_PAIRS = {"{": "}", "(": ")", "[": "]"}


def skip_non_code(text: str, i: int) -> int:
    """
    If a string, template literal or comment starts at ``i``, return the index
    just past it; otherwise return ``i`` unchanged.
    """
    ch = text[i]
    if ch in "\"'`":
        j = i + 1
        while j < len(text):
            if text[j] == "\\":
                j += 2
                continue
            if text[j] == ch:
                return j + 1
            if ch != "`" and text[j] == "\n":
                return j
            j += 1
        return len(text)
    if text.startswith("//", i):
        end = text.find("\n", i)
        return len(text) if end == -1 else end
    if text.startswith("/*", i):
        end = text.find("*/", i + 2)
        return len(text) if end == -1 else end + 2
    return i


def find_matching(text: str, open_pos: int) -> int:
    """
    Index of the bracket closing the one at ``open_pos``, or -1.

    All bracket kinds are tracked together; a mismatched closer ends the
    scan with -1.
    """
    stack: list[str] = []
    i = open_pos
    while i < len(text):
        skipped = skip_non_code(text, i)
        if skipped != i:
            i = skipped
            continue
        ch = text[i]
        if ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch in ")]}":
            if not stack or stack.pop() != ch:
                return -1
            if not stack:
                return i
        i += 1
    return -1


def find_statement_end(text: str, start: int) -> int:
    """
    Index just past the statement starting at ``start``.

    The statement ends at a ``;`` outside brackets, or at a newline outside
    brackets when the next line starts in column 0.
    """
    depth = 0
    i = start
    while i < len(text):
        skipped = skip_non_code(text, i)
        if skipped != i:
            i = skipped
            continue
        ch = text[i]
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == ";" and depth == 0:
            return i + 1
        elif ch == "\n" and depth == 0:
            following = text[i + 1 : i + 2]
            if following and not following.isspace() and following not in ".?:|&+-*/=)]}":
                return i
        i += 1
    return len(text)


def line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def remove_span(text: str, start: int, end: int) -> str:
    """Remove ``text[start:end]`` together with one trailing newline and the blank line it leaves."""
    if text[end : end + 1] == "\n":
        end += 1
    if text[end : end + 1] == "\n" and (start == 0 or text[start - 2 : start] == "\n\n"):
        end += 1
    return text[:start] + text[end:]


def split_specifiers(body: str) -> list[str]:
    """``"A, B as C,\\n type D"`` -> ``["A", "B as C", "type D"]``."""
    parts = []
    for raw in body.replace("\n", " ").split(","):
        part = " ".join(raw.split())
        if part:
            parts.append(part)
    return parts


def local_name(specifier: str) -> str:
    """Binding a specifier introduces: ``B as C`` -> ``C``, ``type D`` -> ``D``."""
    spec = specifier
    if spec.startswith("type "):
        spec = spec[len("type ") :]
    if " as " in spec:
        return spec.split(" as ", 1)[1].strip()
    return spec.strip()


def insert_import(content: str, statement: str) -> str:
    """
    Insert an import statement after a leading ``'use client'`` / ``'use
    server'`` directive, else before the first import, else at the top.
    """
    lines = content.split("\n")
    index = 0
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue
        if stripped.rstrip(";") in ("'use client'", '"use client"', "'use server'", '"use server"'):
            index = i + 1
            continue
        index = i
        break
    lines.insert(index, statement)
    return "\n".join(lines)
