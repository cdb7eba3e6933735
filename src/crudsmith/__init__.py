"""
crudsmith - code generation and repair toolkit for Next.js + Prisma CRUD apps.

Reads the TypeScript interfaces of an app, regenerates its Prisma schema,
service layer, API routes and React hooks, and patches the generated source
when `next build` trips over known failure patterns.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    BuildError,
    ConfigError,
    CrudsmithError,
    GenerationError,
    ParseError,
    PatchError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "CrudsmithError",
    "ParseError",
    "GenerationError",
    "PatchError",
    "BuildError",
    "ConfigError",
]
