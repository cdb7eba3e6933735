"""
TypeScript to Prisma scalar type mapping.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.ir import TsField, TypesModule

# A number field whose name contains one of these is a Float, anything else an Int
FLOAT_HINTS = (
    "price",
    "prix",
    "amount",
    "montant",
    "rate",
    "taux",
    "total",
    "cost",
    "balance",
    "latitude",
    "longitude",
    "percent",
)

# Providers with native scalar lists
LIST_PROVIDERS = {"postgresql", "cockroachdb", "mongodb"}

_STRING_LITERAL = re.compile(r"""^(["'`])[^"'`]*\1$""")
_NULLISH = {"undefined", "null"}


@dataclass(frozen=True)
class MappedType:
    """Result of mapping one TypeScript type."""

    type: str
    is_list: bool = False
    optional: bool = False


def split_union(type_text: str) -> list[str]:
    """Split a type on top-level ``|``, ignoring bars nested in brackets."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    prev = ""
    for ch in type_text:
        if ch in "<({[":
            depth += 1
        elif ch in ">)}]" and not (ch == ">" and prev == "="):
            depth -= 1
        prev = ch
        if ch == "|" and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _number_type(field_name: str) -> str:
    lowered = field_name.lower()
    if any(hint in lowered for hint in FLOAT_HINTS):
        return "Float"
    return "Int"


def _scalar(type_text: str, field_name: str, types: TypesModule, depth: int = 0) -> str:
    """Map a single non-union, non-array type to a Prisma scalar."""
    t = type_text.strip()

    if t in ("string", "String"):
        return "String"
    if t in ("number", "Number", "bigint"):
        return _number_type(field_name)
    if t in ("boolean", "Boolean"):
        return "Boolean"
    if t in ("Date", "DateTime") or "Timestamp" in t:
        return "DateTime"
    if t.startswith("DocumentReference"):
        # Stored as the referenced document's id
        return "String"
    if "GeoPoint" in t:
        return "Json"
    if t in ("any", "object", "unknown", "Object") or t.startswith(("Record<", "{", "Map<")):
        return "Json"
    if _STRING_LITERAL.match(t):
        return "String"
    if re.fullmatch(r"-?\d+", t):
        return "Int"

    alias = types.alias(t)
    if alias is not None and depth < 5:
        if alias.literal_values is not None:
            return "String"
        mapped = map_type_text(alias.body, field_name, types, depth=depth + 1)
        return "Json" if mapped.is_list else mapped.type

    if types.interface(t) is not None:
        # Embedded object: stored as JSON
        return "Json"

    return "String"


def map_type_text(
    type_text: str,
    field_name: str,
    types: TypesModule,
    provider: str = "postgresql",
    depth: int = 0,
) -> MappedType:
    """
    Map raw TypeScript type text to a Prisma type.

    Args:
        type_text: TypeScript type, e.g. ``string[] | undefined``
        field_name: Name of the field, used for the Int/Float heuristic
        types: Module the field comes from, used to resolve aliases
        provider: Datasource provider; scalar lists need native support
        depth: Alias resolution depth guard

    Returns:
        MappedType with Prisma type name, list flag and optionality
    """
    parts = split_union(type_text)
    optional = any(p in _NULLISH for p in parts)
    parts = [p for p in parts if p not in _NULLISH]

    if not parts:
        return MappedType("Json", optional=True)

    if len(parts) > 1:
        if all(_STRING_LITERAL.match(p) for p in parts):
            return MappedType("String", optional=optional)
        return MappedType("Json", optional=optional)

    t = parts[0]
    if t.startswith("(") and t.endswith(")"):
        return map_type_text(t[1:-1], field_name, types, provider, depth)

    array_base = None
    if t.endswith("[]"):
        array_base = t[:-2].strip()
    elif t.startswith("Array<") and t.endswith(">"):
        array_base = t[len("Array<") : -1].strip()

    if array_base is not None:
        if array_base.startswith("(") and array_base.endswith(")"):
            array_base = array_base[1:-1]
        element = split_union(array_base)
        if len(element) == 1 and not element[0].endswith("[]"):
            scalar = _scalar(element[0], field_name, types, depth)
        elif all(_STRING_LITERAL.match(p) for p in element):
            scalar = "String"
        else:
            scalar = "Json"
        if scalar in ("String", "Int", "Float", "Boolean", "DateTime") and provider in LIST_PROVIDERS:
            return MappedType(scalar, is_list=True)
        return MappedType("Json", optional=optional)

    return MappedType(_scalar(t, field_name, types, depth), optional=optional)


def map_field(field: TsField, types: TypesModule, provider: str = "postgresql") -> MappedType:
    """
    Map an interface field to a Prisma type.

    The field's own ``?`` and any ``| undefined`` / ``| null`` both make the
    result optional; list types are never optional in Prisma.
    """
    mapped = map_type_text(field.type, field.name, types, provider)
    if mapped.is_list:
        return mapped
    return MappedType(mapped.type, optional=mapped.optional or field.optional)
