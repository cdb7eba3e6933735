"""
Relation detection between interfaces.

Relations are inferred from naming conventions only:

- ``hostId`` on any interface, when an interface ``Host`` exists -> belongs_to Host
- ``tagIds: string[]`` when ``Tag`` exists -> has_many Tag (kept as a scalar list)
- ``author: DocumentReference<User>`` -> belongs_to User through ``authorId``
- ``owner`` / ``author`` / ``creator`` / ``user`` / ``host`` / ``client`` typed
  ``string``, when the matching interface exists -> belongs_to through ``<name>Id``
"""

from __future__ import annotations

import logging
import re
from collections import Counter

from ..core.ir import Relation, RelationKind, TsField, TsInterface, TypesModule
from ..core.naming import lower_first, pluralize, upper_first

logger = logging.getLogger(__name__)

IMPLICIT_NAMES = ("owner", "author", "creator", "user", "host", "client")

_DOC_REF = re.compile(r"DocumentReference<\s*(\w+)\s*>")


def _belongs_to(iface: TsInterface, field: TsField, types: TypesModule) -> Relation | None:
    name = field.name

    if name.endswith("Id") and len(name) > 2 and not field.is_array:
        target = upper_first(name[:-2])
        if types.interface(target) is not None:
            return Relation(
                kind=RelationKind.BELONGS_TO,
                model=iface.name,
                field=name,
                related_model=target,
                name="",
                optional=field.optional,
            )

    doc_ref = _DOC_REF.search(field.type)
    if doc_ref and types.interface(doc_ref.group(1)) is not None:
        return Relation(
            kind=RelationKind.BELONGS_TO,
            model=iface.name,
            field=f"{name}Id",
            related_model=doc_ref.group(1),
            name="",
            optional=True,
            implicit=True,
            source_field=name,
        )

    if name.lower() in IMPLICIT_NAMES and field.type == "string":
        target = upper_first(name)
        if types.interface(target) is not None and not iface.has_field(f"{name}Id"):
            return Relation(
                kind=RelationKind.BELONGS_TO,
                model=iface.name,
                field=f"{name}Id",
                related_model=target,
                name="",
                optional=field.optional,
                implicit=True,
                source_field=name,
            )

    return None


def _has_many(iface: TsInterface, field: TsField, types: TypesModule) -> Relation | None:
    name = field.name
    if name.endswith("Ids") and len(name) > 3 and field.is_array:
        target = upper_first(name[:-3])
        if types.interface(target) is not None:
            return Relation(
                kind=RelationKind.HAS_MANY,
                model=iface.name,
                field=name,
                related_model=target,
                name=f"{iface.name}_{pluralize(target)}",
                optional=field.optional,
            )
    return None


def detect_relations(types: TypesModule) -> list[Relation]:
    """
    Detect relations across all interfaces of a module.

    Relation names are ``Model_Related``. When a model points at the same
    target more than once the field stem is appended, so every belongs_to
    relation name is unique in the schema.

    Returns:
        Relations in interface and field declaration order
    """
    raw: list[Relation] = []
    for iface in types.interfaces:
        for field in iface.fields:
            rel = _belongs_to(iface, field, types) or _has_many(iface, field, types)
            if rel is not None:
                raw.append(rel)

    pair_counts = Counter(
        (r.model, r.related_model) for r in raw if r.kind is RelationKind.BELONGS_TO
    )

    relations = []
    for rel in raw:
        if rel.kind is RelationKind.BELONGS_TO:
            name = f"{rel.model}_{rel.related_model}"
            if pair_counts[(rel.model, rel.related_model)] > 1:
                name = f"{name}_{rel.relation_field}"
            rel = rel.model_copy(update={"name": name})
        relations.append(rel)
        logger.debug(
            "Relation %s.%s -> %s (%s)", rel.model, rel.field, rel.related_model, rel.kind.value
        )

    return relations


def reverse_relations(target: str, relations: list[Relation]) -> list[Relation]:
    """belongs_to relations pointing at ``target``."""
    return [
        r for r in relations if r.kind is RelationKind.BELONGS_TO and r.related_model == target
    ]


def back_reference_name(rel: Relation, relations: list[Relation]) -> str:
    """
    Name of the list field a belongs_to relation adds on its target.

    ``Order.hostId -> Host`` gives ``orders`` on Host; when Order points at
    Host through several fields, the stem prefixes it: ``buyerOrders``.
    """
    plural = lower_first(pluralize(rel.model))
    same_pair = [
        r
        for r in relations
        if r.kind is RelationKind.BELONGS_TO
        and r.model == rel.model
        and r.related_model == rel.related_model
    ]
    if len(same_pair) > 1:
        return f"{rel.relation_field}{upper_first(plural)}"
    return plural
