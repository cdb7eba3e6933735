"""Tests for model name conversions."""

import pytest

from crudsmith.core.naming import (
    api_segment,
    camel_to_kebab,
    hook_name,
    is_identifier,
    lower_first,
    plural_accessor,
    pluralize,
)


@pytest.mark.parametrize(
    "word, expected",
    [
        ("Room", "Rooms"),
        ("Category", "Categories"),
        ("Day", "Days"),
        ("Box", "Boxes"),
        ("Class", "Classes"),
        ("Status", "Statuses"),
        ("Person", "People"),
        ("SalesPerson", "SalesPeople"),
        ("child", "children"),
    ],
)
def test_pluralize(word: str, expected: str) -> None:
    assert pluralize(word) == expected


def test_camel_to_kebab() -> None:
    assert camel_to_kebab("RoomOrTable") == "room-or-table"
    assert camel_to_kebab("APIKey") == "api-key"


def test_model_derived_names() -> None:
    assert lower_first("ServiceCategory") == "serviceCategory"
    assert api_segment("ServiceCategory") == "service-categories"
    assert plural_accessor("ServiceCategory") == "serviceCategories"
    assert hook_name("serviceCategory") == "useServiceCategories"


def test_is_identifier() -> None:
    assert is_identifier("_id2")
    assert not is_identifier("first-name")
    assert not is_identifier("2fa")
