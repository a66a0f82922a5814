"""Tests for batch validation of cross-references."""

import time
from typing import Any
from unittest.mock import patch

from docxref import batch_validate as batch_validate_module
from docxref.batch_validate import batch_validate
from docxref.cross_reference import CrossReference
from docxref.process_options import ProcessOptions
from docxref.ref_kind import RefKind
from docxref.registry import StaticRegistry

REGISTRIES = {RefKind.DEV_DOC: StaticRegistry([f"page-{i}" for i in range(0, 40, 2)])}


def make_refs(count: int) -> list[CrossReference]:
    """Create count dev references; odd pages are missing."""
    return [
        CrossReference(
            kind=RefKind.DEV_DOC,
            target=f"page-{i}",
            display_text=f"Page {i}",
            line_number=i + 1,
        )
        for i in range(count)
    ]


def test_small_batch_runs_sequentially() -> None:
    """Verify batches under the threshold never use threads."""
    opts = ProcessOptions(concurrent=True)
    result = batch_validate(make_refs(5), REGISTRIES, opts)
    assert result.concurrent is False
    assert result.total_count == 5  # noqa: PLR2004
    assert result.valid_count == 3  # noqa: PLR2004
    assert result.invalid_count == 2  # noqa: PLR2004
    assert result.timed_out is False


def test_large_batch_runs_concurrently() -> None:
    """Verify batches over the threshold fan out and keep input order."""
    opts = ProcessOptions(concurrent=True)
    refs = make_refs(25)
    result = batch_validate(refs, REGISTRIES, opts)
    assert result.concurrent is True
    assert result.timed_out is False
    assert [r.target for r in result.results] == [r.target for r in refs]
    assert result.valid_count + result.invalid_count == 25  # noqa: PLR2004


def test_concurrency_is_opt_in() -> None:
    """Verify large batches stay sequential without the flag."""
    result = batch_validate(make_refs(25), REGISTRIES, ProcessOptions())
    assert result.concurrent is False
    assert result.total_count == 25  # noqa: PLR2004


def test_exactly_threshold_stays_sequential() -> None:
    """Verify the threshold itself does not trigger threads."""
    opts = ProcessOptions(concurrent=True, concurrency_threshold=10)
    assert batch_validate(make_refs(10), REGISTRIES, opts).concurrent is False


def test_timeout_drops_unfinished_units() -> None:
    """Verify a tiny deadline returns a partial batch."""

    def slow(_result: CrossReference, _ref: CrossReference) -> dict[str, Any]:
        time.sleep(0.2)
        return {}

    opts = ProcessOptions(
        concurrent=True, timeout_ms=1, max_workers=4, custom_validators=(slow,)
    )
    result = batch_validate(make_refs(20), REGISTRIES, opts)
    assert result.concurrent is True
    assert result.timed_out is True
    assert result.total_count < 20  # noqa: PLR2004


def test_empty_batch() -> None:
    """Verify an empty batch yields an empty result."""
    result = batch_validate([], REGISTRIES, ProcessOptions(concurrent=True))
    assert result.total_count == 0
    assert result.results == ()


def test_to_dict_counts() -> None:
    """Verify the dict form carries the counts and results."""
    data = batch_validate(make_refs(4), REGISTRIES).to_dict()
    assert data["total_count"] == 4  # noqa: PLR2004
    assert data["valid_count"] == 2  # noqa: PLR2004
    assert len(data["results"]) == 4  # noqa: PLR2004


def test_one_failing_unit_keeps_the_rest() -> None:
    """Verify a unit that raises is reported without losing the others."""
    real = batch_validate_module.validate_reference

    def flaky(ref: CrossReference, *args: Any) -> CrossReference:
        if ref.target == "page-7":
            msg = "registry blew up"
            raise RuntimeError(msg)
        return real(ref, *args)

    opts = ProcessOptions(concurrent=True, max_workers=4)
    with patch.object(batch_validate_module, "validate_reference", side_effect=flaky):
        result = batch_validate(make_refs(20), REGISTRIES, opts)

    assert result.concurrent is True
    assert result.total_count == 20  # noqa: PLR2004
    failed = [r for r in result.results if r.error and "blew up" in r.error]
    assert [r.target for r in failed] == ["page-7"]
    assert failed[0].valid is False
    assert result.valid_count == 10  # noqa: PLR2004


def test_raising_custom_validator_in_concurrent_batch() -> None:
    """Verify a validator raising for one target leaves 19 results untouched."""

    def reject_page_4(_result: CrossReference, ref: CrossReference) -> dict[str, Any]:
        if ref.target == "page-4":
            msg = "bad page"
            raise ValueError(msg)
        return {}

    opts = ProcessOptions(concurrent=True, custom_validators=(reject_page_4,))
    result = batch_validate(make_refs(20), REGISTRIES, opts)
    assert result.total_count == 20  # noqa: PLR2004
    by_target = {r.target: r for r in result.results}
    assert by_target["page-4"].error == "custom validator failed: bad page"
    assert by_target["page-2"].valid is True
    assert by_target["page-3"].error == "Dev document 'page-3' not found"
