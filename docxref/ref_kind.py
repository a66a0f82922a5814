"""Cross-reference kinds and predicates over them."""

from enum import Enum


class RefKind(str, Enum):
    """The marker keywords understood by the scanner."""

    RESOURCE = "ash"
    MODULE = "exdoc"
    DEV_DOC = "dev"
    USER_DOC = "user"


INTERNAL_KINDS = frozenset({RefKind.DEV_DOC, RefKind.USER_DOC})

KIND_LABELS = {
    RefKind.RESOURCE: "Ash resource",
    RefKind.MODULE: "Module",
    RefKind.DEV_DOC: "Dev document",
    RefKind.USER_DOC: "User document",
}


def parse_kind(value: object) -> RefKind | None:
    """Return the kind for a keyword or enum member, or None when unknown."""
    if isinstance(value, RefKind):
        return value
    if isinstance(value, str):
        try:
            return RefKind(value.strip().lower())
        except ValueError:
            return None
    return None


def is_internal_kind(kind: object) -> bool:
    """Check if the kind points at documentation pages rather than code."""
    return parse_kind(kind) in INTERNAL_KINDS
