"""Validate many cross-references, optionally in parallel under a deadline."""

import concurrent.futures
import dataclasses
import logging
import time
from collections.abc import Sequence

from docxref.batch_result import BatchResult
from docxref.cross_reference import CrossReference
from docxref.process_options import ProcessOptions
from docxref.registry import Registries
from docxref.severity import Severity
from docxref.validator import validate_reference

logger = logging.getLogger(__name__)


def batch_validate(
    references: Sequence[CrossReference],
    registries: Registries | None = None,
    options: ProcessOptions | None = None,
) -> BatchResult:
    """Validate references, fanning out when the batch is large enough.

    Concurrent mode waits at most ``options.timeout_ms`` for the whole batch;
    units still running then are abandoned and left out of the results.
    """
    opts = options or ProcessOptions()
    start = time.perf_counter()
    use_threads = opts.concurrent and len(references) > opts.concurrency_threshold

    if use_threads:
        results, timed_out = _validate_concurrently(references, registries, opts)
    else:
        results = [_validate_one(ref, registries, opts) for ref in references]
        timed_out = False

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.debug(
        "Validated %d/%d reference(s) in %.1fms (concurrent=%s)",
        len(results),
        len(references),
        elapsed_ms,
        use_threads,
    )
    return BatchResult(
        results=tuple(results),
        processing_time_ms=elapsed_ms,
        concurrent=use_threads,
        timed_out=timed_out,
    )


def _validate_one(
    reference: CrossReference,
    registries: Registries | None,
    opts: ProcessOptions,
) -> CrossReference:
    """Validate one reference; a failing unit marks only itself invalid."""
    try:
        return validate_reference(reference, registries, opts)
    except Exception as exc:
        logger.exception("Validating %s failed", reference.target)
        return dataclasses.replace(
            reference,
            valid=False,
            exists=None,
            error=f"validation failed: {exc}",
            severity=Severity.ERROR,
        )


def _validate_concurrently(
    references: Sequence[CrossReference],
    registries: Registries | None,
    opts: ProcessOptions,
) -> tuple[list[CrossReference], bool]:
    """Run one unit per reference; return finished results in input order."""
    ex = concurrent.futures.ThreadPoolExecutor(max_workers=max(1, opts.max_workers))
    try:
        futures = [
            ex.submit(_validate_one, ref, registries, opts) for ref in references
        ]
        done, not_done = concurrent.futures.wait(
            futures, timeout=opts.timeout_ms / 1000
        )
    finally:
        # Abandon stragglers instead of blocking on them.
        ex.shutdown(wait=False, cancel_futures=True)

    if not_done:
        logger.warning(
            "Batch validation timed out after %dms; dropped %d unit(s)",
            opts.timeout_ms,
            len(not_done),
        )
    results = [f.result() for f in futures if f in done]
    return results, bool(not_done)
