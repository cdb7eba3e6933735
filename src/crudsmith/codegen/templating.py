"""
Jinja2 environment for the TypeScript templates shipped with the package.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from ..core.errors import GenerationError
from ..core.ir import IdStrategy, PrismaModel
from ..core.naming import api_segment, hook_name, lower_first, plural_accessor, pluralize

TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class ModelContext:
    """Names a template needs for one model."""

    name: str
    accessor: str
    plural: str
    plural_var: str
    segment: str
    hook: str
    id_ts: str
    order_by: str

    @classmethod
    def from_model(cls, model: PrismaModel, id_strategy: IdStrategy) -> ModelContext:
        # Fall back to id ordering when timestamps are off
        order_by = "createdAt" if model.has_field("createdAt") else "id"
        return cls(
            name=model.name,
            accessor=lower_first(model.name),
            plural=pluralize(model.name),
            plural_var=plural_accessor(model.name),
            segment=api_segment(model.name),
            hook=hook_name(model.name),
            id_ts="number" if id_strategy is IdStrategy.AUTOINCREMENT else "string",
            order_by=order_by,
        )


def create_jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


# Module-level singleton
_env: Environment | None = None


def get_jinja_env() -> Environment:
    """Get the shared Jinja2 environment (lazy singleton)."""
    global _env
    if _env is None:
        _env = create_jinja_env()
    return _env


def render(template_name: str, **context: Any) -> str:
    """
    Render a packaged template.

    Raises:
        GenerationError: If the template is missing or fails to render
    """
    try:
        return get_jinja_env().get_template(template_name).render(**context)
    except TemplateError as e:
        raise GenerationError(f"Template {template_name} failed to render: {e}") from e
