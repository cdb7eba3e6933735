"""Prisma schema generation, relation detection and schema text repair."""

from .generator import build_schema, generate_schema_file, render_schema
from .mapping import MappedType, map_field, map_type_text
from .relations import detect_relations, reverse_relations
from .repair import RepairResult, dedupe_model_fields, repair_schema_file, repair_schema_text, validate_schema_text

__all__ = [
    "build_schema",
    "render_schema",
    "generate_schema_file",
    "MappedType",
    "map_field",
    "map_type_text",
    "detect_relations",
    "reverse_relations",
    "RepairResult",
    "dedupe_model_fields",
    "repair_schema_text",
    "validate_schema_text",
    "repair_schema_file",
]
