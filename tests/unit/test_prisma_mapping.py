"""Tests for TypeScript to Prisma type mapping."""

import pytest

from crudsmith.core.ir import TsField, TypesModule
from crudsmith.core.types_parser import parse_types
from crudsmith.prisma.mapping import map_field, map_type_text, split_union

EMPTY = TypesModule()


@pytest.mark.parametrize(
    "ts_type, field_name, expected",
    [
        ("string", "title", "String"),
        ("number", "capacity", "Int"),
        ("number", "pricePerNight", "Float"),
        ("number", "totalAmount", "Float"),
        ("boolean", "active", "Boolean"),
        ("Date", "checkIn", "DateTime"),
        ("Timestamp", "createdAt", "DateTime"),
        ("any", "meta", "Json"),
        ("Record<string, number>", "scores", "Json"),
        ("{ lat: number; lng: number }", "location", "Json"),
        ("'a' | 'b'", "kind", "String"),
        ("DocumentReference<User>", "author", "String"),
        ("SomethingUnknown", "thing", "String"),
    ],
)
def test_scalar_mapping(ts_type: str, field_name: str, expected: str) -> None:
    assert map_type_text(ts_type, field_name, EMPTY).type == expected


def test_nullish_union_is_optional() -> None:
    mapped = map_type_text("string | null", "nickname", EMPTY)
    assert mapped.type == "String"
    assert mapped.optional


def test_mixed_union_is_json() -> None:
    assert map_type_text("string | number", "value", EMPTY).type == "Json"


def test_scalar_list_on_postgres() -> None:
    mapped = map_type_text("string[]", "tags", EMPTY, provider="postgresql")
    assert mapped.type == "String"
    assert mapped.is_list


@pytest.mark.parametrize(
    "field_name, expected",
    [("nightsBooked", "Int"), ("dailyRates", "Float"), ("priceHistory", "Float")],
)
def test_number_list_follows_money_names(field_name: str, expected: str) -> None:
    mapped = map_type_text("number[]", field_name, EMPTY)
    assert mapped.type == expected
    assert mapped.is_list


def test_scalar_list_falls_back_to_json_on_sqlite() -> None:
    mapped = map_type_text("string[]", "tags", EMPTY, provider="sqlite")
    assert mapped.type == "Json"
    assert not mapped.is_list


def test_object_list_is_json() -> None:
    assert map_type_text("Array<{ a: string }>", "items", EMPTY).type == "Json"


def test_alias_resolution() -> None:
    types = parse_types("export type Role = 'admin' | 'guest';\nexport type Score = number;\n")
    assert map_type_text("Role", "role", types).type == "String"
    assert map_type_text("Score", "score", types).type == "Int"


def test_embedded_interface_is_json() -> None:
    types = parse_types("export interface Address {\n  city: string;\n}\n")
    assert map_type_text("Address", "address", types).type == "Json"


def test_map_field_optional_marker() -> None:
    mapped = map_field(TsField(name="notes", type="string", optional=True), EMPTY)
    assert mapped.optional


def test_list_is_never_optional() -> None:
    mapped = map_field(TsField(name="tags", type="string[]", optional=True), EMPTY)
    assert mapped.is_list
    assert not mapped.optional


def test_split_union_respects_nesting() -> None:
    assert split_union("Array<'a' | 'b'> | null") == ["Array<'a' | 'b'>", "null"]
