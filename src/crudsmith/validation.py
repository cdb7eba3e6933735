"""
Pre-generation and post-deploy checks for an app.

- Input structure: the types file exports interfaces, the data file (if any)
  exports arrays typed with declared interfaces.
- Client/server split: ``.tsx`` files must not reach Prisma directly.
- Health: the running app answers its configured endpoints.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

import httpx

from .core.config import CrudsmithConfig
from .core.types_parser import INTERFACE_HEADER, TYPE_ALIAS_HEADER, extract_data_arrays, has_exported_array

logger = logging.getLogger(__name__)

SKIP_DIRS = {"node_modules", ".next", ".git"}


@dataclass(frozen=True)
class Violation:
    """Server-only code found in a client component."""

    file: Path
    line: int
    kind: str  # "import" or "direct-call"
    text: str

    def describe(self) -> str:
        label = "server import" if self.kind == "import" else "direct Prisma call"
        return f"{self.file}:{self.line}: {label}: {self.text}"


@dataclass(frozen=True)
class HealthResult:
    """Outcome of one health probe."""

    url: str
    status_code: int | None
    elapsed_ms: float
    error: str | None = None

    @property
    def healthy(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


def validate_input_structure(app_root: Path, config: CrudsmithConfig) -> list[str]:
    """
    Check the generator inputs before anything is written.

    Returns:
        Problems found; empty when the inputs are usable
    """
    problems = []
    declared: set[str] | None = None

    types_path = config.resolve(app_root, "types")
    if not types_path.exists():
        problems.append(f"Types file not found: {config.paths.types}")
    else:
        types_text = types_path.read_text(encoding="utf-8")
        if not INTERFACE_HEADER.search(types_text):
            problems.append(f"No exported interface in {config.paths.types}")
        declared = {m.group(1) for m in INTERFACE_HEADER.finditer(types_text)}
        declared.update(m.group(1) for m in TYPE_ALIAS_HEADER.finditer(types_text))

    data_path = config.resolve(app_root, "data")
    if data_path.exists():
        data_text = data_path.read_text(encoding="utf-8")
        if not has_exported_array(data_text):
            problems.append(f"No exported array in {config.paths.data}")
        elif declared is not None:
            for array in extract_data_arrays(data_text):
                if array.type_name not in declared:
                    problems.append(
                        f"Data array {array.name} is typed {array.type_name}, "
                        f"which {config.paths.types} does not export"
                    )

    for problem in problems:
        logger.debug("Input structure: %s", problem)
    return problems


def iter_source_files(root: Path, suffixes: tuple[str, ...]) -> list[Path]:
    """Source files under ``root`` with the given suffixes, build dirs skipped."""
    if not root.is_dir():
        return []
    files = []
    for path in sorted(root.rglob("*")):
        if any(part in SKIP_DIRS for part in path.relative_to(root).parts):
            continue
        if path.is_file() and path.suffix in suffixes and ".backup." not in path.name:
            files.append(path)
    return files


def find_server_code_in_client(src_dir: Path) -> list[Violation]:
    """
    Find ``.tsx`` files that import the Prisma service or call ``prisma.``.

    Files starting with ``'use server'`` are server actions and are skipped.
    """
    violations = []
    for path in iter_source_files(src_dir, (".tsx",)):
        content = path.read_text(encoding="utf-8", errors="replace")
        if content.lstrip().startswith(("'use server'", '"use server"')):
            continue
        for number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if stripped.startswith("//"):
                continue
            if stripped.startswith("import"):
                if "prisma-service" in stripped or "@prisma/client" in stripped:
                    violations.append(Violation(path, number, "import", stripped))
            elif "prisma." in stripped:
                violations.append(Violation(path, number, "direct-call", stripped))
    return violations


def check_health(config: CrudsmithConfig, base_url: str | None = None) -> list[HealthResult]:
    """
    GET each configured health path; any 2xx response is healthy.

    Connection errors are recorded on the result rather than raised.
    """
    settings = config.healthcheck
    base = (base_url or settings.base_url).rstrip("/")
    results = []

    with httpx.Client(timeout=settings.timeout) as client:
        for path in settings.paths:
            url = f"{base}/{path.lstrip('/')}"
            start = time.monotonic()
            try:
                response = client.get(url)
                result = HealthResult(url, response.status_code, (time.monotonic() - start) * 1000)
            except httpx.HTTPError as e:
                result = HealthResult(url, None, (time.monotonic() - start) * 1000, error=str(e))
            logger.info("Health %s -> %s", url, result.status_code or result.error)
            results.append(result)

    return results
