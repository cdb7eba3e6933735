"""
Intermediate representation for crudsmith.

Two halves:

- The TypeScript side: interfaces and type aliases read from ``types.ts``,
  plus the typed arrays exported from ``data.ts``.
- The Prisma side: models, fields and relations rendered into
  ``schema.prisma``.
"""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

_STRING_LITERAL = re.compile(r"""^\s*(["'])([^"']*)\1\s*$""")


# =============================================================================
# TypeScript side
# =============================================================================


class TsField(BaseModel):
    """
    A member of an exported TypeScript interface.

    Attributes:
        name: Property name
        type: Raw TypeScript type text, comments and terminators removed
        optional: Whether the property was declared with ``?``
        comment: Trailing ``//`` comment, if any
    """

    name: str
    type: str
    optional: bool = False
    comment: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_array(self) -> bool:
        """Whether the type is an array (``T[]`` or ``Array<T>``)."""
        t = self.type.strip()
        return t.endswith("[]") or t.startswith("Array<")

    @property
    def base_type(self) -> str:
        """Type with array markers removed."""
        t = self.type.strip()
        if t.startswith("Array<") and t.endswith(">"):
            return t[len("Array<") : -1].strip()
        while t.endswith("[]"):
            t = t[:-2].strip()
        if t.startswith("(") and t.endswith(")"):
            t = t[1:-1].strip()
        return t


class TsInterface(BaseModel):
    """An exported TypeScript interface."""

    name: str
    fields: list[TsField] = Field(default_factory=list)
    extends: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def field(self, name: str) -> TsField | None:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_field(self, name: str) -> bool:
        return self.field(name) is not None


class TsTypeAlias(BaseModel):
    """An exported ``type Name = ...`` alias."""

    name: str
    body: str

    model_config = ConfigDict(frozen=True)

    @property
    def literal_values(self) -> list[str] | None:
        """
        Values of a string-literal union, or None if the alias is anything else.

        ``"admin" | "host"`` -> ``["admin", "host"]``
        """
        values = []
        for part in self.body.split("|"):
            if not part.strip():
                continue
            match = _STRING_LITERAL.match(part)
            if not match:
                return None
            values.append(match.group(2))
        return values or None


class TypesModule(BaseModel):
    """Everything read from one types file."""

    interfaces: list[TsInterface] = Field(default_factory=list)
    aliases: list[TsTypeAlias] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def names(self) -> list[str]:
        """Interface names in declaration order."""
        return [i.name for i in self.interfaces]

    def interface(self, name: str) -> TsInterface | None:
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None

    def alias(self, name: str) -> TsTypeAlias | None:
        for a in self.aliases:
            if a.name == name:
                return a
        return None

    def declares(self, name: str) -> bool:
        """Whether an interface or alias with this name exists."""
        return self.interface(name) is not None or self.alias(name) is not None


class DataArray(BaseModel):
    """An exported typed array in ``data.ts``, e.g. ``export const users: User[]``."""

    name: str
    type_name: str

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Prisma side
# =============================================================================


class IdStrategy(StrEnum):
    """How primary keys are generated."""

    AUTOINCREMENT = "autoincrement"
    CUID = "cuid"

    @property
    def prisma_type(self) -> str:
        return "Int" if self is IdStrategy.AUTOINCREMENT else "String"

    @property
    def default(self) -> str:
        return "@default(autoincrement())" if self is IdStrategy.AUTOINCREMENT else "@default(cuid())"


class RelationKind(StrEnum):
    """Kinds of relations detected from interface fields."""

    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"


class Relation(BaseModel):
    """
    A relation between two models.

    Attributes:
        kind: belongs_to (FK on this model) or has_many (list of ids)
        model: Model owning the field
        field: Scalar field holding the foreign key(s), e.g. ``hostId``
        related_model: Target model name
        name: Prisma relation name, unique per schema
        optional: Whether the FK is optional
        implicit: True when the FK field was synthesised (``owner`` -> ``ownerId``)
        source_field: Interface field the synthesised FK replaces
    """

    kind: RelationKind
    model: str
    field: str
    related_model: str
    name: str
    optional: bool = False
    implicit: bool = False
    source_field: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def relation_field(self) -> str:
        """Name of the object relation field: ``hostId`` -> ``host``."""
        if self.field.endswith("Id"):
            return self.field[:-2]
        return self.field + "Ref"


class PrismaField(BaseModel):
    """A single line inside a Prisma model block."""

    name: str
    type: str
    optional: bool = False
    is_list: bool = False
    attributes: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def type_text(self) -> str:
        if self.is_list:
            return f"{self.type}[]"
        if self.optional:
            return f"{self.type}?"
        return self.type

    def render(self, name_width: int = 15, type_width: int = 12) -> str:
        line = f"  {self.name.ljust(name_width)} {self.type_text.ljust(type_width)}"
        if self.attributes:
            line += " " + " ".join(self.attributes)
        return line.rstrip()


class PrismaModel(BaseModel):
    """A ``model Name { ... }`` block."""

    name: str
    fields: list[PrismaField] = Field(default_factory=list)

    def field(self, name: str) -> PrismaField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_field(self, name: str) -> bool:
        return self.field(name) is not None

    def render(self) -> str:
        name_width = max([15] + [len(f.name) for f in self.fields])
        type_width = max([12] + [len(f.type_text) for f in self.fields])
        lines = [f"model {self.name} {{"]
        lines.extend(f.render(name_width, type_width) for f in self.fields)
        lines.append("}")
        return "\n".join(lines)


class PrismaSchema(BaseModel):
    """A complete Prisma schema."""

    provider: str = "postgresql"
    models: list[PrismaModel] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)

    def model(self, name: str) -> PrismaModel | None:
        for m in self.models:
            if m.name == name:
                return m
        return None

    @property
    def model_names(self) -> list[str]:
        return [m.name for m in self.models]
