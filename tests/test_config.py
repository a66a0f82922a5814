"""Tests for configuration loading, merging and option building."""

from pathlib import Path

import yaml

from docxref.compute_cache_key import compute_cache_key
from docxref.deep_merge import deep_merge
from docxref.load_config import DEFAULT_CONFIG, load_config
from docxref.process_options import ProcessOptions
from docxref.ref_kind import RefKind
from docxref.validate_configuration import validate_configuration


def test_deep_merge_scalars() -> None:
    """Verify scalar replacement in deep merge."""
    merged = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
    assert merged == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    merged = deep_merge({"batch": {"x": 1, "y": 2}}, {"batch": {"y": 3}})
    assert merged == {"batch": {"x": 1, "y": 3}}


def test_deep_merge_lists_replace() -> None:
    """Verify that lists are replaced by default."""
    assert deep_merge({"arr": [1, 2]}, {"arr": [3]}) == {"arr": [3]}


def test_deep_merge_disabled_types_additive() -> None:
    """Verify that disabled_types is merged additively."""
    merged = deep_merge({"disabled_types": ["dev"]}, {"disabled_types": ["ash", "dev"]})
    assert merged["disabled_types"] == ["ash", "dev"]


def test_load_config_defaults() -> None:
    """Verify that default config is loaded when no path is provided."""
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_with_file(tmp_path: Path) -> None:
    """Verify that user config correctly overrides defaults."""
    config_file = tmp_path / "docxref.yml"
    config_data = {
        "url_patterns": {"exdoc": "https://hexdocs.pm/app/{{target}}.html"},
        "batch": {"timeout_ms": 500},
    }
    config_file.write_text(yaml.dump(config_data))

    loaded = load_config(str(config_file))
    assert loaded["url_patterns"]["exdoc"] == "https://hexdocs.pm/app/{{target}}.html"
    assert loaded["url_patterns"]["ash"] == "/api/ash/{{target}}"
    assert loaded["batch"]["timeout_ms"] == 500  # noqa: PLR2004
    assert loaded["batch"]["max_workers"] == 4  # noqa: PLR2004


def test_load_config_missing_file(tmp_path: Path) -> None:
    """Verify a missing file falls back to defaults."""
    assert load_config(str(tmp_path / "nope.yml")) == DEFAULT_CONFIG


def test_options_from_config() -> None:
    """Verify config sections map onto options, with overrides winning."""
    config = deep_merge(
        DEFAULT_CONFIG,
        {"disabled_types": ["user"], "batch": {"max_workers": 8}},
    )
    opts = ProcessOptions.from_config(config, validate_cross_refs=True)
    assert opts.disabled_types == frozenset({RefKind.USER_DOC})
    assert opts.max_workers == 8  # noqa: PLR2004
    assert opts.validate_cross_refs is True
    assert opts.url_patterns["dev"] == "/dev/{{target}}"


def test_options_from_mapping_ignores_unknown_keys() -> None:
    """Verify unknown option names are dropped and aliases honored."""
    opts = ProcessOptions.from_mapping({"timeout": 250, "bogus": True})
    assert opts.timeout_ms == 250  # noqa: PLR2004


def test_cache_key_stability() -> None:
    """Verify equal inputs share a key and any change alters it."""
    first = compute_cache_key("# Doc", ProcessOptions(validate_cross_refs=True))
    second = compute_cache_key("# Doc", ProcessOptions(validate_cross_refs=True))
    assert first == second
    changed = compute_cache_key("# Doc!", ProcessOptions(validate_cross_refs=True))
    assert changed != first
    assert compute_cache_key("# Doc", ProcessOptions()) != first


def test_validate_default_configuration() -> None:
    """Verify the defaults pass validation."""
    check = validate_configuration(load_config(None))
    assert check.valid is True
    assert check.errors == []
    assert check.warnings == []


def test_validate_configuration_errors() -> None:
    """Verify broken settings are reported."""
    check = validate_configuration(
        {
            "url_patterns": {"ash": "not a url", "dev": "/dev/fixed", "wiki": "/w"},
            "exdoc_base_url": "ftp:nope",
            "disabled_types": ["gopher"],
            "batch": {"max_workers": -1},
            "cache": {"ttl_seconds": -5},
            "colour": "blue",
        }
    )
    assert check.valid is False
    assert "Invalid url_patterns.ash: 'not a url'" in check.errors
    assert "url_patterns.dev is missing {{target}}" in check.errors
    assert "Invalid exdoc_base_url: 'ftp:nope'" in check.errors
    assert "Invalid batch.max_workers: -1" in check.errors
    assert "Invalid cache.ttl_seconds" in check.errors
    assert "Unknown kind in url_patterns: wiki" in check.warnings
    assert "Unknown kind in disabled_types: gopher" in check.warnings
    assert "Unknown option: colour" in check.warnings


def test_none_numeric_options_keep_defaults() -> None:
    """Verify None for a numeric option leaves its default in place."""
    opts = ProcessOptions.from_mapping(
        {"max_workers": None, "timeout_ms": None, "suggestion_cutoff": None}
    )
    assert opts.max_workers == 4  # noqa: PLR2004
    assert opts.timeout_ms == 30_000  # noqa: PLR2004
    assert opts.suggestion_cutoff == 0.6  # noqa: PLR2004
    tuned = ProcessOptions(max_workers=8).with_changes(max_workers=None)
    assert tuned.max_workers == 8  # noqa: PLR2004


def test_skip_validation_options() -> None:
    """Verify skip lists parse like disabled_types and the ash shorthand adds ash."""
    opts = ProcessOptions.from_mapping({"skip_validation": ["dev", "wiki"]})
    assert opts.skip_validation == frozenset({RefKind.DEV_DOC})
    ash = ProcessOptions.from_mapping({"skip_ash_validation": True})
    assert ash.skip_validation == frozenset({RefKind.RESOURCE})
    both = opts.with_changes(skip_ash_validation=True)
    assert both.skip_validation == frozenset({RefKind.DEV_DOC, RefKind.RESOURCE})
    assert compute_cache_key("# Doc", opts) != compute_cache_key("# Doc", both)


def test_skip_validation_from_config() -> None:
    """Verify the config list reaches the options and unknown kinds warn."""
    config = deep_merge(DEFAULT_CONFIG, {"skip_validation": ["user", "gopher"]})
    assert ProcessOptions.from_config(config).skip_validation == frozenset(
        {RefKind.USER_DOC}
    )
    check = validate_configuration(config)
    assert "Unknown kind in skip_validation: gopher" in check.warnings
