"""
Naming helpers shared by the generators and fixers.

Model names come from TypeScript interfaces (``RoomOrTable``); the generated
app needs them as Prisma client accessors (``roomOrTable``), route folders
(``room-or-tables``) and hook names (``useRoomOrTables``).
"""

import re

_IRREGULAR = {
    "person": "people",
    "child": "children",
    "status": "statuses",
}


def lower_first(name: str) -> str:
    """``ServiceCategory`` -> ``serviceCategory`` (the Prisma client accessor)."""
    return name[:1].lower() + name[1:]


def upper_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def pluralize(word: str) -> str:
    """
    Simple pluralization of English words.

    Args:
        word: Singular word, any case

    Returns:
        Plural form (simple heuristic), case of the stem preserved
    """
    lower = word.lower()
    for singular, plural in _IRREGULAR.items():
        if lower.endswith(singular):
            return word[: len(word) - len(singular)] + _match_case(word[-len(singular) :], plural)
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


def _match_case(original: str, replacement: str) -> str:
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def camel_to_kebab(name: str) -> str:
    """
    Convert CamelCase to kebab-case.

    ``RoomOrTable`` -> ``room-or-table``
    """
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1-\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1-\2", s1).lower()


def api_segment(model: str) -> str:
    """Route folder under ``src/app/api`` for a model: ``ServiceCategory`` -> ``service-categories``."""
    return camel_to_kebab(pluralize(model))


def plural_accessor(model: str) -> str:
    """``ServiceCategory`` -> ``serviceCategories``."""
    return lower_first(pluralize(model))


def hook_name(model: str) -> str:
    """``ServiceCategory`` -> ``useServiceCategories``."""
    return "use" + pluralize(upper_first(model))


def is_identifier(name: str) -> bool:
    """Whether ``name`` is a valid Prisma / TypeScript identifier."""
    return bool(re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", name))
