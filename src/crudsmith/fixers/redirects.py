"""
Inject a ``redirects()`` block into an existing Next.js config.

The block goes inside the exported config object, just before its closing
brace. Configs that already define ``redirects`` are left alone.
"""

from __future__ import annotations

import re
from pathlib import Path

from ..build.diagnostics import Diagnostic
from ..codegen.templating import render
from ..core.config import RedirectRule
from .base import Fixer, FixResult
from .text import find_matching, skip_non_code

CONFIG_NAMES = ("next.config.js", "next.config.mjs", "next.config.ts")

HAS_REDIRECTS = re.compile(r"\bredirects\s*(?:\(|:)")
CONFIG_OBJECT = re.compile(
    r"^(?:const\s+nextConfig(?:\s*:\s*[\w.]+)?\s*=|module\.exports\s*=|export\s+default)\s*\{",
    re.MULTILINE,
)


def _last_code_char(text: str, end: int) -> int:
    """Index of the last non-space, non-comment character before ``end``, or -1."""
    last = -1
    i = 0
    while i < end:
        skipped = skip_non_code(text, i)
        if skipped != i:
            if text[i] in "\"'`":
                last = min(skipped, end) - 1
            i = skipped
            continue
        if not text[i].isspace():
            last = i
        i += 1
    return last


class NextConfigRedirectsPatch(Fixer):
    """
    Add the configured redirects to ``next.config.*``.

    Args:
        app_root: App root holding the config file
        redirects: Rules to write
    """

    name = "redirects"
    preventive = True

    def __init__(self, app_root: Path, redirects: list[RedirectRule]):
        self.app_root = app_root
        self.redirects = redirects

    def extra_targets(self) -> list[Path]:
        return [self.app_root / name for name in CONFIG_NAMES]

    def applies_to(self, path: Path) -> bool:
        return path.name in CONFIG_NAMES and path.parent.resolve() == self.app_root.resolve()

    def fix(self, content: str, path: Path, diagnostics: list[Diagnostic]) -> FixResult:
        if not self.redirects or HAS_REDIRECTS.search(content):
            return FixResult(content)

        match = CONFIG_OBJECT.search(content)
        if match is None:
            return FixResult(content)
        close = find_matching(content, match.end() - 1)
        if close == -1:
            return FixResult(content)

        block = render("next/redirects.js.j2", redirects=self.redirects)

        body_start = match.end()
        last = _last_code_char(content[:close], close)
        head = content[:close]
        if last >= body_start and content[last] not in ",{":
            head = content[: last + 1] + "," + content[last + 1 : close]
        head = head.rstrip() + "\n\n" if last >= body_start else head.rstrip() + "\n"

        content = head + block + content[close:]
        return FixResult(content, [f"added redirects() with {len(self.redirects)} rule(s)"])
