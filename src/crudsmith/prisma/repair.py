"""
Repairs for a ``schema.prisma`` that was mangled by earlier text patches.

The failure patterns are the ones string concatenation leaves behind: type
names orphaned on their own line, a datasource ``provider`` that lost its key,
model blocks that lost the ``model`` keyword, and fields emitted twice.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from ..core.backup import backup_file
from ..core.config import CrudsmithConfig
from ..core.errors import PatchError
from .generator import generate_schema_file

logger = logging.getLogger(__name__)

ORPHAN_TYPE_LINE = re.compile(
    r"^[ \t]*(?:String|Int|Float|Boolean|DateTime|Json|BigInt|Decimal|Bytes)\??"
    r"(?:[ \t]+@default\(now\(\)\))?[ \t]*$\n?",
    re.MULTILINE,
)
KEYLESS_PROVIDER = re.compile(r'^[ \t]*=[ \t]*"(\w+)"[ \t]*$', re.MULTILINE)
BLOCK_HEADER = re.compile(r"^\s*(model|enum|type|view|generator|datasource)\s+\w+\s*\{")
BARE_BLOCK_HEADER = re.compile(r"^\s*([A-Z]\w*)\s*\{\s*$")
FIELD_LINE = re.compile(r"^\s*(\w+)\s+\S")
MODEL_NAME = re.compile(r"^\s*model\s+(\w+)\s*\{", re.MULTILINE)


@dataclass
class RepairResult:
    """Repaired schema text and what was done to it."""

    content: str
    changes: list[str] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)
    regenerated: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def dedupe_model_fields(text: str) -> tuple[str, list[str]]:
    """
    Drop repeated field lines inside each model block; the first one wins.

    Returns:
        (new text, descriptions of the removed fields)
    """
    out: list[str] = []
    removed: list[str] = []
    model: str | None = None
    seen: set[str] = set()

    for line in text.split("\n"):
        header = MODEL_NAME.match(line)
        if header:
            model = header.group(1)
            seen = set()
            out.append(line)
            continue
        if model is not None:
            if line.strip() == "}":
                model = None
            else:
                match = FIELD_LINE.match(line)
                if match and not line.strip().startswith(("//", "@@")):
                    name = match.group(1)
                    if name in seen:
                        removed.append(f"{model}.{name}")
                        continue
                    seen.add(name)
        out.append(line)

    return "\n".join(out), removed


def _restore_model_keywords(text: str) -> tuple[str, list[str]]:
    out = []
    restored = []
    depth = 0
    for line in text.split("\n"):
        if depth == 0 and not BLOCK_HEADER.match(line):
            bare = BARE_BLOCK_HEADER.match(line)
            if bare:
                line = f"model {bare.group(1)} {{"
                restored.append(bare.group(1))
        depth += line.count("{") - line.count("}")
        depth = max(depth, 0)
        out.append(line)
    return "\n".join(out), restored


def repair_schema_text(text: str) -> RepairResult:
    """
    Apply every text repair to a schema and report what changed.

    Args:
        text: Current ``schema.prisma`` content

    Returns:
        RepairResult; ``changes`` is empty when the text was already clean
    """
    changes: list[str] = []

    text, count = ORPHAN_TYPE_LINE.subn("", text)
    if count:
        changes.append(f"Removed {count} orphan type line(s)")

    text, count = KEYLESS_PROVIDER.subn(r'  provider = "\1"', text)
    if count:
        changes.append(f"Restored {count} provider key(s)")

    text, restored = _restore_model_keywords(text)
    if restored:
        changes.append(f"Restored model keyword on {', '.join(restored)}")

    text, removed = dedupe_model_fields(text)
    if removed:
        changes.append(f"Removed duplicate fields {', '.join(removed)}")

    collapsed = re.sub(r"\n{3,}", "\n\n", text)
    if collapsed != text:
        changes.append("Collapsed blank lines")
        text = collapsed

    for change in changes:
        logger.debug("Schema repair: %s", change)
    return RepairResult(content=text, changes=changes)


def validate_schema_text(text: str) -> list[str]:
    """
    Structural checks that do not need the Prisma CLI.

    Returns:
        Issue descriptions; empty when the schema looks sound
    """
    issues = []
    if not re.search(r"^\s*generator\s+\w+\s*\{", text, re.MULTILINE):
        issues.append("Missing generator block")
    if not re.search(r"^\s*datasource\s+\w+\s*\{", text, re.MULTILINE):
        issues.append("Missing datasource block")

    names = MODEL_NAME.findall(text)
    if not names:
        issues.append("No models declared")
    for name, count in Counter(names).items():
        if count > 1:
            issues.append(f"Model {name} declared {count} times")

    stripped = re.sub(r"//.*", "", text)
    opened, closed = stripped.count("{"), stripped.count("}")
    if opened != closed:
        issues.append(f"Unbalanced braces: {opened} opening, {closed} closing")

    if ORPHAN_TYPE_LINE.search(text):
        issues.append("Orphan type line without a field name")

    return issues


def repair_schema_file(app_root: Path, config: CrudsmithConfig, regenerate: bool = True) -> RepairResult:
    """
    Repair the app's schema file in place.

    The file is backed up before it is rewritten. When issues remain after the
    text repairs and ``regenerate`` is set, the schema is rebuilt from the
    types file instead.

    Raises:
        PatchError: If the schema is missing and regeneration is disabled
    """
    schema_path = config.resolve(app_root, "schema")

    if not schema_path.exists():
        if not regenerate:
            raise PatchError(f"Schema not found: {schema_path}")
        logger.info("No schema at %s, generating from types", schema_path)
        generate_schema_file(app_root, config)
        return RepairResult(
            content=schema_path.read_text(encoding="utf-8"),
            changes=["Generated schema from types"],
            regenerated=True,
        )

    original = schema_path.read_text(encoding="utf-8")
    result = repair_schema_text(original)
    if result.changed:
        backup_file(schema_path)
        schema_path.write_text(result.content, encoding="utf-8")
        logger.info("Repaired %s: %s", schema_path.name, "; ".join(result.changes))

    result.issues = validate_schema_text(result.content)
    if result.issues and regenerate:
        logger.warning("Schema still invalid (%s), regenerating", "; ".join(result.issues))
        generate_schema_file(app_root, config)
        result.content = schema_path.read_text(encoding="utf-8")
        result.changes.append("Regenerated schema from types")
        result.issues = validate_schema_text(result.content)
        result.regenerated = True

    return result
