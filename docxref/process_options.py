"""Options recognized by the cross-reference pipeline."""

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from docxref.ref_kind import RefKind, parse_kind

if TYPE_CHECKING:
    from docxref.cross_reference import CrossReference

logger = logging.getLogger(__name__)

DEFAULT_LINK_CLASS_PATTERN = "cross-ref cross-ref-{{type}}"

# (result so far, original reference) -> override map
CustomValidator = Callable[["CrossReference", "CrossReference"], Mapping[str, Any]]

_ALIASES = {"timeout": "timeout_ms"}

# None for these keeps the current value.
_NUMERIC_OPTIONS = frozenset(
    {
        "max_workers",
        "timeout_ms",
        "concurrency_threshold",
        "suggestion_limit",
        "suggestion_cutoff",
    }
)


@dataclass(frozen=True)
class ProcessOptions:
    """Flags and tunables for scanning, rendering and validating a document."""

    disabled_types: frozenset[RefKind] = frozenset()
    skip_validation: frozenset[RefKind] = frozenset()
    url_patterns: dict[str, str] = field(default_factory=dict)
    exdoc_base_url: str | None = None
    link_class_pattern: str = DEFAULT_LINK_CLASS_PATTERN
    validate_cross_refs: bool = False
    fail_on_broken_links: bool = False
    generate_previews: bool = False
    generate_error_reports: bool = False
    export_data: bool = False
    concurrent: bool = False
    cache: bool = False
    cache_key: str | None = None
    file_path: str | None = None
    max_workers: int = 4
    timeout_ms: int = 30_000
    concurrency_threshold: int = 10
    suggestion_limit: int = 3
    suggestion_cutoff: float = 0.6
    custom_validators: tuple[CustomValidator, ...] = ()
    comparison_targets: tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "ProcessOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        return cls().with_changes(**dict(mapping or {}))

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], **overrides: Any
    ) -> "ProcessOptions":
        """Build options from a loaded configuration plus per-call overrides."""
        batch = config.get("batch") or {}
        suggestions = config.get("suggestions") or {}
        values: dict[str, Any] = {
            "disabled_types": config.get("disabled_types") or [],
            "skip_validation": config.get("skip_validation") or [],
            "url_patterns": config.get("url_patterns") or {},
            "exdoc_base_url": config.get("exdoc_base_url"),
            "link_class_pattern": config.get(
                "link_class_pattern", DEFAULT_LINK_CLASS_PATTERN
            ),
        }
        for key in ("concurrency_threshold", "timeout_ms", "max_workers"):
            if batch.get(key) is not None:
                values[key] = batch[key]
        if suggestions.get("limit") is not None:
            values["suggestion_limit"] = suggestions["limit"]
        if suggestions.get("cutoff") is not None:
            values["suggestion_cutoff"] = suggestions["cutoff"]
        values.update(overrides)
        return cls().with_changes(**values)

    def with_changes(self, **changes: Any) -> "ProcessOptions":
        """Return a copy with the given options replaced.

        ``skip_ash_validation=True`` is shorthand for adding ash to
        ``skip_validation``.
        """
        known = {f.name for f in dataclasses.fields(self)}
        clean: dict[str, Any] = {}
        skip_ash = False
        for raw_key, value in changes.items():
            key = _ALIASES.get(raw_key, raw_key)
            if key == "skip_ash_validation":
                skip_ash = bool(value)
                continue
            if key not in known:
                logger.warning("Ignoring unknown option: %s", raw_key)
                continue
            if value is None and key in _NUMERIC_OPTIONS:
                continue
            clean[key] = value
        if "disabled_types" in clean:
            clean["disabled_types"] = _parse_kinds(
                clean["disabled_types"], "disabled_types"
            )
        if "skip_validation" in clean:
            clean["skip_validation"] = _parse_kinds(
                clean["skip_validation"], "skip_validation"
            )
        if skip_ash:
            skipped = clean.get("skip_validation", self.skip_validation)
            clean["skip_validation"] = skipped | {RefKind.RESOURCE}
        if "url_patterns" in clean:
            clean["url_patterns"] = _normalize_patterns(clean["url_patterns"])
        if "custom_validators" in clean:
            clean["custom_validators"] = tuple(clean["custom_validators"] or ())
        if clean.get("comparison_targets") is not None:
            clean["comparison_targets"] = tuple(clean["comparison_targets"])
        return dataclasses.replace(self, **clean)

    def signature(self) -> dict[str, Any]:
        """Return the JSON-safe settings that influence a processed result."""
        return {
            "disabled_types": sorted(k.value for k in self.disabled_types),
            "skip_validation": sorted(k.value for k in self.skip_validation),
            "file_path": self.file_path,
            "url_patterns": dict(sorted(self.url_patterns.items())),
            "exdoc_base_url": self.exdoc_base_url,
            "link_class_pattern": self.link_class_pattern,
            "validate_cross_refs": self.validate_cross_refs,
            "fail_on_broken_links": self.fail_on_broken_links,
            "generate_previews": self.generate_previews,
            "generate_error_reports": self.generate_error_reports,
            "export_data": self.export_data,
            "suggestion_limit": self.suggestion_limit,
            "suggestion_cutoff": self.suggestion_cutoff,
            "custom_validators": [
                getattr(v, "__qualname__", repr(v)) for v in self.custom_validators
            ],
            "comparison_targets": (
                sorted(self.comparison_targets)
                if self.comparison_targets is not None
                else None
            ),
        }


def _parse_kinds(values: Iterable[Any], option: str) -> frozenset[RefKind]:
    kinds = set()
    for value in values or ():
        kind = parse_kind(value)
        if kind is None:
            logger.warning("Ignoring unknown kind in %s: %s", option, value)
            continue
        kinds.add(kind)
    return frozenset(kinds)


def _normalize_patterns(patterns: Mapping[Any, str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, pattern in (patterns or {}).items():
        kind = parse_kind(key)
        if kind is None:
            logger.warning("Ignoring URL pattern for unknown kind: %s", key)
            continue
        out[kind.value] = pattern
    return out
