"""Logic for building hover-preview data for cross-references."""

import dataclasses
from typing import Any

from docxref.cross_reference import CrossReference
from docxref.ref_kind import RefKind, parse_kind
from docxref.registry import Registries, describe_target
from docxref.suggest_targets import last_segment
from docxref.validator import lookup_registry


def humanize_target(target: str) -> str:
    """Turn 'features/getting-started' into 'Getting Started'."""
    tail = target.rstrip("/").split("/")[-1]
    return " ".join(w.capitalize() for w in tail.replace("-", " ").split())


def domain_of(target: str) -> str:
    """Return the first two dotted segments of a resource name."""
    return ".".join(target.split(".")[:2])


def build_preview(
    reference: CrossReference, registries: Registries | None = None
) -> dict[str, Any] | None:
    """Return preview data for a reference, or None for unknown kinds.

    Kind-specific defaults are overlaid with whatever the registry describes.
    """
    kind = parse_kind(reference.kind)
    if kind is None:
        return None

    target = reference.target
    if kind is RefKind.RESOURCE:
        preview: dict[str, Any] = {
            "resource_type": "ash_resource",
            "domain": domain_of(target),
            "description": f"Resource for {target}",
        }
    elif kind is RefKind.MODULE:
        preview = {
            "module_type": "module",
            "name": last_segment(target),
            "description": f"Module documentation for {target}",
        }
    else:
        preview = {
            "title": humanize_target(target),
            "category": kind.value.capitalize(),
            "description": f"Documentation for {target}",
        }

    registry = lookup_registry(registries or {}, kind)
    if registry is not None:
        preview.update(describe_target(registry, target) or {})
    return preview


def with_previews(
    references: list[CrossReference], registries: Registries | None = None
) -> list[CrossReference]:
    """Return references with preview data attached."""
    return [
        dataclasses.replace(ref, preview=build_preview(ref, registries))
        for ref in references
    ]
