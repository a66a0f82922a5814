"""Logic for validating cross-references against per-kind registries."""

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from docxref.cross_reference import CrossReference
from docxref.process_options import CustomValidator, ProcessOptions
from docxref.ref_kind import KIND_LABELS, RefKind, parse_kind
from docxref.registry import (
    Registries,
    Registry,
    as_registry,
    describe_target,
    known_targets_of,
)
from docxref.resolve_url import resolve_url
from docxref.severity import Severity
from docxref.suggest_targets import suggest_targets

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3

_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(CrossReference))


def validate_reference(
    reference: CrossReference,
    registries: Registries | None = None,
    options: ProcessOptions | None = None,
) -> CrossReference:
    """Return a copy of reference with valid/exists/error/suggestions filled in."""
    opts = options or ProcessOptions()
    kind = parse_kind(reference.kind)
    if kind is not None and kind in opts.skip_validation:
        return _skipped(reference, kind, opts)
    result = _check_registry(reference, registries or {}, opts)
    return apply_custom_validators(result, reference, opts.custom_validators)


def _skipped(
    reference: CrossReference, kind: RefKind, opts: ProcessOptions
) -> CrossReference:
    return dataclasses.replace(
        reference,
        kind=kind,
        url=reference.url or resolve_url(kind, reference.target, opts),
        valid=True,
        exists=None,
        error=None,
        severity=None,
        metadata={
            **reference.metadata,
            "validation_skipped": True,
            "skip_reason": f"{kind.value} validation disabled",
        },
    )


def lookup_registry(registries: Registries, kind: RefKind) -> Registry | None:
    """Find the registry for kind, accepting enum or keyword keys."""
    registry = registries.get(kind)
    if registry is None:
        registry = registries.get(kind.value)  # type: ignore[call-overload]
    return None if registry is None else as_registry(registry)


def _check_registry(
    reference: CrossReference, registries: Registries, opts: ProcessOptions
) -> CrossReference:
    kind = parse_kind(reference.kind)
    if kind is None:
        return dataclasses.replace(
            reference,
            valid=False,
            exists=False,
            error=f"unknown cross-reference kind: {reference.kind_name}",
            severity=Severity.ERROR,
            suggestions=(),
        )

    url = reference.url or resolve_url(kind, reference.target, opts)
    registry = lookup_registry(registries, kind)
    if registry is None:
        logger.debug("No registry for %s, accepting %s", kind.value, reference.target)
        return dataclasses.replace(
            reference,
            kind=kind,
            url=url,
            valid=True,
            exists=None,
            error=None,
            severity=None,
            metadata={**reference.metadata, "registry": "missing"},
        )

    try:
        found = registry.exists(reference.target)
    except Exception as exc:
        logger.warning(
            "Registry for %s failed on %s: %r", kind.value, reference.target, exc
        )
        return dataclasses.replace(
            reference,
            kind=kind,
            url=url,
            valid=True,
            exists=None,
            error=None,
            severity=None,
            metadata={**reference.metadata, "registry_error": repr(exc)},
        )

    if found:
        metadata = dict(reference.metadata)
        try:
            metadata.update(describe_target(registry, reference.target) or {})
        except Exception as exc:
            logger.warning("Describing %s failed: %r", reference.target, exc)
            metadata["registry_error"] = repr(exc)
        return dataclasses.replace(
            reference,
            kind=kind,
            url=url,
            valid=True,
            exists=True,
            error=None,
            severity=None,
            suggestions=(),
            metadata=metadata,
        )

    if opts.comparison_targets is not None:
        pool = list(opts.comparison_targets)
    else:
        try:
            pool = known_targets_of(registry)
        except Exception as exc:
            logger.warning("Listing %s targets failed: %r", kind.value, exc)
            pool = []
    suggestions = suggest_targets(
        reference.target,
        pool,
        limit=min(opts.suggestion_limit, MAX_SUGGESTIONS),
        cutoff=opts.suggestion_cutoff,
    )
    return dataclasses.replace(
        reference,
        kind=kind,
        url=url,
        valid=False,
        exists=False,
        error=f"{KIND_LABELS[kind]} '{reference.target}' not found",
        severity=Severity.ERROR,
        suggestions=tuple(suggestions),
    )


def apply_custom_validators(
    result: CrossReference,
    reference: CrossReference,
    validators: Sequence[CustomValidator],
) -> CrossReference:
    """Merge each validator's override map over the result, later ones winning."""
    for validator in validators:
        try:
            overrides = validator(result, reference) or {}
        except Exception as exc:
            logger.warning("Custom validator failed on %s: %r", reference.target, exc)
            result = dataclasses.replace(
                result,
                valid=False,
                error=f"custom validator failed: {exc}",
                severity=Severity.ERROR,
            )
            break
        result = _merge_overrides(result, overrides)
    if validators:
        result = _restore_invariants(result)
    return result


def _merge_overrides(
    result: CrossReference, overrides: Mapping[str, Any]
) -> CrossReference:
    changes: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in overrides.items():
        if key in {"kind", "target", "line_number", "display_text"}:
            # Identity of the occurrence is not up for override.
            extra[key] = value
        elif key == "metadata" and isinstance(value, Mapping):
            extra.update(value)
        elif key in _FIELD_NAMES:
            changes[key] = value
        else:
            extra[key] = value
    if "suggestions" in changes:
        changes["suggestions"] = tuple(changes["suggestions"] or ())[:MAX_SUGGESTIONS]
    if isinstance(changes.get("severity"), str):
        changes["severity"] = Severity(changes["severity"].lower())
    if extra:
        changes["metadata"] = {**result.metadata, **extra}
    return dataclasses.replace(result, **changes)


def _restore_invariants(result: CrossReference) -> CrossReference:
    if result.valid is False:
        return dataclasses.replace(
            result,
            error=result.error or "rejected by custom validator",
            severity=result.severity or Severity.ERROR,
        )
    if result.valid is True:
        return dataclasses.replace(result, error=None, severity=None)
    return result
