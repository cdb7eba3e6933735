"""
Reader for the app's TypeScript type definitions.

Extracts exported interfaces and type aliases from ``types.ts`` and the typed
arrays exported from ``data.ts``. This is deliberately not a TypeScript
parser: it understands the flat, declaration-only shape these files have, and
scans braces by depth so nested object types do not cut an interface short.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .errors import ParseError, make_parse_error
from .ir import DataArray, TsField, TsInterface, TsTypeAlias, TypesModule

logger = logging.getLogger(__name__)

INTERFACE_HEADER = re.compile(
    r"export\s+interface\s+(\w+)\s*(?:<[^>{]*>)?\s*(?:extends\s+([^{]+?))?\s*\{"
)
TYPE_ALIAS_HEADER = re.compile(r"export\s+type\s+(\w+)\s*(?:<[^>=]*>)?\s*=\s*")
MEMBER = re.compile(
    r"""^(?:readonly\s+)?(["']?)([A-Za-z_$][\w$]*)\1(\?)?\s*:\s*(.+)$""",
    re.DOTALL,
)
DATA_ARRAY_PATTERNS = [
    re.compile(r"export\s+(?:let|const)\s+(\w+InMemory)\s*:\s*(\w+)\[\]"),
    re.compile(r"export\s+(?:let|const)\s+(\w+Data)\s*:\s*(\w+)\[\]"),
    re.compile(r"export\s+(?:let|const)\s+(\w+)\s*:\s*(\w+)\[\]"),
]
EXPORTED_ARRAY = re.compile(r"export\s+const\s+\w+(?:\s*:[^=]+)?\s*=\s*\[[\s\S]*?\]")

_OPENERS = {"{": "}", "(": ")", "[": "]", "<": ">"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


def _strip_block_comments(text: str) -> str:
    """Blank out /* */ comments, keeping newlines so offsets map to lines."""

    def _blank(match: re.Match[str]) -> str:
        return "".join("\n" if ch == "\n" else " " for ch in match.group(0))

    return re.sub(r"/\*[\s\S]*?\*/", _blank, text)


def _line_col(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    col = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, col


def _find_closing_brace(text: str, open_pos: int) -> int:
    """
    Return the index of the brace closing the one at ``open_pos``, or -1.

    String literals and ``//`` comments are skipped.
    """
    depth = 0
    i = open_pos
    quote: str | None = None
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == "/" and text.startswith("//", i):
            newline = text.find("\n", i)
            if newline == -1:
                return -1
            i = newline
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_members(body: str) -> list[tuple[str, str | None]]:
    """
    Split an interface body into (member_text, trailing_comment) pairs.

    Members end at ``;`` or ``,`` or a newline, but only at nesting depth 0.
    Comments on a line of their own are dropped.
    """
    members: list[tuple[str, str | None]] = []
    current: list[str] = []
    comment: str | None = None
    stack: list[str] = []
    quote: str | None = None
    i = 0

    def _pending() -> str:
        return "".join(current).strip()

    def _flush() -> None:
        nonlocal comment
        text = _pending()
        if text:
            members.append((text, comment))
        current.clear()
        comment = None

    def _line_end(pos: int) -> int:
        end = body.find("\n", pos)
        return len(body) if end == -1 else end

    while i < len(body):
        ch = body[i]
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in "\"'`":
            quote = ch
            current.append(ch)
        elif ch == "/" and body.startswith("//", i):
            end = _line_end(i)
            if _pending():
                comment = body[i + 2 : end].strip() or None
            i = end
            continue
        elif ch in _OPENERS:
            stack.append(ch)
            current.append(ch)
        elif ch in _CLOSERS:
            # `>` of an arrow (`() => void`) closes nothing
            if stack and stack[-1] == _CLOSERS[ch]:
                stack.pop()
            current.append(ch)
        elif ch in ";," and not stack:
            end = _line_end(i)
            rest = body[i + 1 : end].strip()
            if _pending() and rest.startswith("//"):
                comment = rest[2:].strip() or None
                _flush()
                i = end
                continue
            _flush()
        elif ch == "\n" and not stack:
            pending = _pending()
            nxt = body[i + 1 :].lstrip()
            # A union continued on the next line stays in the same member
            if pending and not pending.endswith(("|", "&", ":")) and not nxt.startswith(("|", "&")):
                _flush()
            else:
                current.append(" ")
        else:
            current.append(ch)
        i += 1

    _flush()
    return members


def _parse_member(text: str, comment: str | None) -> TsField | None:
    if "(" in text.split(":", 1)[0]:
        # Method signature
        return None
    match = MEMBER.match(text)
    if not match:
        return None
    raw_type = " ".join(match.group(4).split())
    raw_type = raw_type.rstrip(";,").strip()
    if not raw_type:
        return None
    return TsField(
        name=match.group(2),
        type=raw_type,
        optional=match.group(3) == "?",
        comment=comment,
    )


def _read_alias_body(text: str, start: int) -> str:
    """Read a type alias right-hand side up to its terminating ``;``."""
    depth = 0
    i = start
    while i < len(text):
        ch = text[i]
        if ch in "{([":
            depth += 1
        elif ch in "})]":
            depth -= 1
        elif ch == ";" and depth <= 0:
            return text[start:i]
        elif ch == "\n" and depth <= 0:
            nxt = text[i + 1 :].lstrip()
            if not nxt.startswith(("|", "&")):
                return text[start:i]
        i += 1
    return text[start:]


def parse_types(text: str, file: Path | None = None) -> TypesModule:
    """
    Parse TypeScript source into a TypesModule.

    Args:
        text: Content of a types file
        file: Source path, used for error locations

    Returns:
        TypesModule with interfaces and aliases in declaration order

    Raises:
        ParseError: If an interface body is never closed
    """
    source = _strip_block_comments(text)
    interfaces: list[TsInterface] = []
    aliases: list[TsTypeAlias] = []

    for match in INTERFACE_HEADER.finditer(source):
        name = match.group(1)
        open_pos = match.end() - 1
        close_pos = _find_closing_brace(source, open_pos)
        if close_pos == -1:
            line, col = _line_col(source, match.start())
            snippet = source[match.start() : source.find("\n", match.start())]
            raise make_parse_error(
                f"Unterminated body for interface '{name}'", file, line, col, snippet
            )

        body = source[open_pos + 1 : close_pos]
        fields: list[TsField] = []
        seen: set[str] = set()
        for member_text, comment in _split_members(body):
            field = _parse_member(member_text, comment)
            if field is None:
                logger.debug("Skipping member of %s: %r", name, member_text)
                continue
            if field.name in seen:
                logger.warning("Duplicate member %s.%s ignored", name, field.name)
                continue
            seen.add(field.name)
            fields.append(field)

        extends = []
        if match.group(2):
            extends = [e.strip() for e in match.group(2).split(",") if e.strip()]

        interfaces.append(TsInterface(name=name, fields=fields, extends=extends))
        logger.debug("Interface %s (%d fields)", name, len(fields))

    for match in TYPE_ALIAS_HEADER.finditer(source):
        body = " ".join(_read_alias_body(source, match.end()).split())
        aliases.append(TsTypeAlias(name=match.group(1), body=body.lstrip("| ").strip()))

    return TypesModule(interfaces=_merge_extends(interfaces), aliases=aliases)


def _merge_extends(interfaces: list[TsInterface]) -> list[TsInterface]:
    """Copy inherited fields from base interfaces declared in the same file."""
    by_name = {i.name: i for i in interfaces}
    merged = []
    for iface in interfaces:
        if not iface.extends:
            merged.append(iface)
            continue
        fields = list(iface.fields)
        names = {f.name for f in fields}
        for base_name in iface.extends:
            base = by_name.get(base_name.split("<")[0].strip())
            if base is None:
                continue
            for f in base.fields:
                if f.name not in names:
                    fields.append(f)
                    names.add(f.name)
        merged.append(iface.model_copy(update={"fields": fields}))
    return merged


def parse_types_file(path: Path) -> TypesModule:
    """
    Read and parse a types file.

    Raises:
        ParseError: If the file is missing or malformed
    """
    if not path.exists():
        raise ParseError(f"Types file not found: {path}")
    module = parse_types(path.read_text(encoding="utf-8"), file=path)
    logger.info("Read %d interface(s) from %s", len(module.interfaces), path.name)
    return module


def extract_data_arrays(text: str) -> list[DataArray]:
    """
    Find typed arrays exported from a data file.

    ``xInMemory`` and ``xData`` names win over plain names for the same type.
    """
    found: dict[str, DataArray] = {}
    for pattern in DATA_ARRAY_PATTERNS:
        for match in pattern.finditer(text):
            type_name = match.group(2)
            if type_name not in found:
                found[type_name] = DataArray(name=match.group(1), type_name=type_name)
    return list(found.values())


def has_exported_array(text: str) -> bool:
    """Whether the data file exports at least one array constant."""
    return bool(EXPORTED_ARRAY.search(text))
