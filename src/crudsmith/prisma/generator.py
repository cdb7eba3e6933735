"""
Prisma schema generation from the app's TypeScript interfaces.

Every exported interface becomes a model. Ids, relation fields, reverse
back-references and timestamps are added so ``prisma validate`` accepts the
result without hand edits.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.backup import backup_file
from ..core.config import CrudsmithConfig, SchemaConfig
from ..core.errors import GenerationError
from ..core.ir import (
    PrismaField,
    PrismaModel,
    PrismaSchema,
    Relation,
    RelationKind,
    TsInterface,
    TypesModule,
)
from ..core.naming import is_identifier
from ..core.types_parser import parse_types_file
from .mapping import map_field
from .relations import back_reference_name, detect_relations, reverse_relations

logger = logging.getLogger(__name__)

HEADER = """\
generator client {{
  provider = "prisma-client-js"
}}

datasource db {{
  provider = "{provider}"
  url      = env("DATABASE_URL")
}}
"""


class _FieldSet:
    """Ordered field list that refuses repeated names (first wins)."""

    def __init__(self) -> None:
        self.fields: list[PrismaField] = []
        self._names: set[str] = set()

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def add(self, field: PrismaField) -> bool:
        if field.name in self._names:
            logger.debug("Dropping duplicate field %s", field.name)
            return False
        self._names.add(field.name)
        self.fields.append(field)
        return True

    def free_name(self, name: str, suffix: str) -> str:
        while name in self._names:
            name += suffix
        return name


def _build_model(
    iface: TsInterface,
    types: TypesModule,
    relations: list[Relation],
    settings: SchemaConfig,
) -> PrismaModel:
    id_type = settings.id_strategy.prisma_type
    fields = _FieldSet()
    fields.add(PrismaField(name="id", type=id_type, attributes=["@id", settings.id_strategy.default]))

    own = [r for r in relations if r.model == iface.name and r.kind is RelationKind.BELONGS_TO]
    fk_fields = {r.field: r for r in own}
    replaced = {r.source_field for r in own if r.source_field}

    for ts_field in iface.fields:
        name = ts_field.name
        if name == "id" or name in replaced:
            continue
        if not is_identifier(name):
            logger.warning("Skipping %s.%s: not a valid Prisma identifier", iface.name, name)
            continue

        if name in fk_fields:
            fields.add(PrismaField(name=name, type=id_type, optional=True))
            continue

        mapped = map_field(ts_field, types, settings.provider)
        attributes = []
        if name == "email" and mapped.type == "String" and not mapped.is_list:
            attributes.append("@unique")
        fields.add(
            PrismaField(
                name=name,
                type=mapped.type,
                optional=mapped.optional,
                is_list=mapped.is_list,
                attributes=attributes,
            )
        )

    # Synthesised foreign keys (owner -> ownerId)
    for rel in own:
        if rel.implicit and rel.field not in fields:
            fields.add(PrismaField(name=rel.field, type=id_type, optional=True))

    for rel in own:
        relation_name = fields.free_name(rel.relation_field, "Ref")
        fields.add(
            PrismaField(
                name=relation_name,
                type=rel.related_model,
                optional=True,
                attributes=[f'@relation("{rel.name}", fields: [{rel.field}], references: [id])'],
            )
        )

    for rel in reverse_relations(iface.name, relations):
        back_name = fields.free_name(back_reference_name(rel, relations), "List")
        fields.add(
            PrismaField(
                name=back_name,
                type=rel.model,
                is_list=True,
                attributes=[f'@relation("{rel.name}")'],
            )
        )

    if settings.timestamps:
        if "createdAt" not in fields:
            fields.add(PrismaField(name="createdAt", type="DateTime", attributes=["@default(now())"]))
        if "updatedAt" not in fields:
            fields.add(PrismaField(name="updatedAt", type="DateTime", attributes=["@updatedAt"]))

    return PrismaModel(name=iface.name, fields=fields.fields)


def build_schema(types: TypesModule, settings: SchemaConfig | None = None) -> PrismaSchema:
    """
    Build a Prisma schema from parsed interfaces.

    Args:
        types: Interfaces and aliases read from the types file
        settings: Provider, id strategy and timestamp settings

    Returns:
        PrismaSchema with one model per interface, in declaration order
    """
    settings = settings or SchemaConfig()
    relations = detect_relations(types)

    models = []
    seen: set[str] = set()
    for iface in types.interfaces:
        if iface.name in seen:
            logger.warning("Interface %s declared twice; keeping the first", iface.name)
            continue
        seen.add(iface.name)
        models.append(_build_model(iface, types, relations, settings))

    return PrismaSchema(provider=settings.provider, models=models, relations=relations)


def render_schema(schema: PrismaSchema, source: str | None = None) -> str:
    """Render a schema to ``schema.prisma`` text."""
    parts = []
    if source:
        parts.append(f"// Generated by crudsmith from {source}\n")
    parts.append(HEADER.format(provider=schema.provider))
    parts.extend(model.render() + "\n" for model in schema.models)
    return "\n".join(parts)


def generate_schema_file(app_root: Path, config: CrudsmithConfig) -> Path:
    """
    Regenerate ``schema.prisma`` from the configured types file.

    The previous schema, if any, is backed up first.

    Returns:
        Path of the written schema

    Raises:
        ParseError: If the types file is missing or malformed
        GenerationError: If the types file declares no interfaces
    """
    types_path = config.resolve(app_root, "types")
    types = parse_types_file(types_path)
    if not types.interfaces:
        raise GenerationError(f"No exported interfaces found in {types_path}")

    schema = build_schema(types, config.schema_settings)
    content = render_schema(schema, source=config.paths.types)

    schema_path = config.resolve(app_root, "schema")
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    if schema_path.exists():
        backup_file(schema_path)
    schema_path.write_text(content, encoding="utf-8")

    logger.info("Wrote %s with %d models: %s", schema_path, len(schema.models), ", ".join(schema.model_names))
    return schema_path
