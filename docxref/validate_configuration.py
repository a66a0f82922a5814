"""Sanity checks for a loaded cross-reference configuration."""

from dataclasses import dataclass, field
from typing import Any

from docxref.load_config import DEFAULT_CONFIG
from docxref.ref_kind import parse_kind
from docxref.resolve_url import TARGET_PLACEHOLDER


@dataclass
class ConfigCheck:
    """Outcome of validate_configuration."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _is_url_like(value: str) -> bool:
    return value.startswith("/") or value.startswith("http")


def validate_configuration(config: dict[str, Any]) -> ConfigCheck:
    """Check URL patterns, numeric limits and unknown keys."""
    errors: list[str] = []
    warnings: list[str] = []

    for key, pattern in (config.get("url_patterns") or {}).items():
        if parse_kind(key) is None:
            warnings.append(f"Unknown kind in url_patterns: {key}")
            continue
        if not isinstance(pattern, str) or not _is_url_like(pattern):
            errors.append(f"Invalid url_patterns.{key}: {pattern!r}")
        elif TARGET_PLACEHOLDER not in pattern:
            errors.append(f"url_patterns.{key} is missing {TARGET_PLACEHOLDER}")

    base = config.get("exdoc_base_url")
    if base is not None and (not isinstance(base, str) or not _is_url_like(base)):
        errors.append(f"Invalid exdoc_base_url: {base!r}")

    for option in ("disabled_types", "skip_validation"):
        for kind in config.get(option) or []:
            if parse_kind(kind) is None:
                warnings.append(f"Unknown kind in {option}: {kind}")

    ttl = (config.get("cache") or {}).get("ttl_seconds")
    if ttl is not None and ttl < 0:
        errors.append("Invalid cache.ttl_seconds")

    for key, value in (config.get("batch") or {}).items():
        if not isinstance(value, int) or value < 0:
            errors.append(f"Invalid batch.{key}: {value!r}")

    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    warnings.extend(f"Unknown option: {key}" for key in unknown)

    return ConfigCheck(valid=not errors, errors=errors, warnings=warnings)
