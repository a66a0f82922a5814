"""Orchestration of the cross-reference pipeline for one or many documents."""

import concurrent.futures
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from docxref.batch_validate import batch_validate
from docxref.compute_cache_key import compute_cache_key
from docxref.cross_reference import CrossReference
from docxref.envelope import ProcessingFailure, ProcessingResult, ProcessingSuccess
from docxref.error_report import build_error_report
from docxref.errors import BrokenLinksError, RenderError
from docxref.export_data import build_export_data
from docxref.extract_title import extract_title
from docxref.markdown_renderer import Renderer
from docxref.preview_data import with_previews
from docxref.process_options import ProcessOptions
from docxref.registry import Registries
from docxref.render_pipeline import render_document
from docxref.result_cache import ResultCache
from docxref.validation_report import ValidationReport, build_validation_report

logger = logging.getLogger(__name__)

OptionsLike = ProcessOptions | Mapping[str, Any] | None


def as_options(options: OptionsLike) -> ProcessOptions:
    """Accept either a ProcessOptions or a plain mapping of option names."""
    if isinstance(options, ProcessOptions):
        return options
    return ProcessOptions.from_mapping(options)


def process_document(
    text: str,
    registries: Registries | None = None,
    options: OptionsLike = None,
    renderer: Renderer | None = None,
    cache: ResultCache | None = None,
) -> ProcessingResult:
    """Run scan -> render -> validate -> report for one document.

    Never raises: renderer failures, the broken-link gate and unexpected
    collaborator errors all come back as a ProcessingFailure.
    """
    opts = as_options(options)
    if opts.cache and cache is not None:
        key = opts.cache_key or compute_cache_key(text, opts)
        lookup = cache.get_or_compute(
            key,
            lambda: _process(text, registries, opts, renderer),
            should_store=lambda result: result.success,
        )
        return lookup.value.with_cache_hit(lookup.cache_hit)
    if opts.cache:
        logger.debug("Caching requested but no cache given; processing directly")
    return _process(text, registries, opts, renderer)


def process_documents(
    documents: Sequence[str],
    registries: Registries | None = None,
    options: OptionsLike = None,
    renderer: Renderer | None = None,
    cache: ResultCache | None = None,
) -> list[ProcessingResult]:
    """Process documents in parallel; results keep input order.

    Documents not finished within ``timeout_ms`` get a timeout failure instead
    of holding up the rest of the batch.
    """
    opts = as_options(options)
    if not documents:
        return []
    if opts.cache_key is not None:
        logger.warning("Ignoring cache_key for a multi-document batch")
        opts = opts.with_changes(cache_key=None)

    ex = concurrent.futures.ThreadPoolExecutor(max_workers=max(1, opts.max_workers))
    try:
        futures = [
            ex.submit(process_document, doc, registries, opts, renderer, cache)
            for doc in documents
        ]
        done, not_done = concurrent.futures.wait(
            futures, timeout=opts.timeout_ms / 1000
        )
    finally:
        ex.shutdown(wait=False, cancel_futures=True)

    if not_done:
        logger.warning(
            "%d of %d document(s) timed out after %dms",
            len(not_done),
            len(documents),
            opts.timeout_ms,
        )
    return [
        f.result()
        if f in done
        else ProcessingFailure(error="Processing timeout", kind="timeout")
        for f in futures
    ]


def _process(
    text: str,
    registries: Registries | None,
    opts: ProcessOptions,
    renderer: Renderer | None,
) -> ProcessingResult:
    try:
        return _run_pipeline(text, registries, opts, renderer)
    except RenderError as exc:
        logger.warning("Rendering failed: %s", exc)
        return ProcessingFailure(
            error=str(exc), kind="render", cause=exc.__cause__ or exc
        )
    except Exception as exc:
        logger.exception("Unexpected error while processing document")
        return ProcessingFailure(error=repr(exc), kind="internal", cause=exc)


def _run_pipeline(
    text: str,
    registries: Registries | None,
    opts: ProcessOptions,
    renderer: Renderer | None,
) -> ProcessingResult:
    title = extract_title(text)
    rendered = render_document(text, renderer, opts)
    refs = rendered.references

    report: ValidationReport | None = None
    if opts.validate_cross_refs:
        batch = batch_validate(refs, registries, opts)
        report = build_validation_report(batch.results)
        refs = _merge_validated(refs, batch.results)

    if opts.generate_previews:
        refs = with_previews(refs, registries)

    error_report = None
    if opts.generate_error_reports and report is not None:
        error_report = build_error_report(report, text, opts.file_path)

    if opts.fail_on_broken_links and report is not None and report.has_errors:
        broken = report.invalid_entries
        return ProcessingFailure(
            error=str(BrokenLinksError(broken)),
            kind="broken_links",
            broken_links=broken,
        )

    export = build_export_data(title, refs, report) if opts.export_data else None

    return ProcessingSuccess(
        html=rendered.html,
        cross_refs=refs,
        title=title,
        validation_report=report,
        error_report=error_report,
        export_data=export,
    )


def _occurrence_key(ref: CrossReference) -> tuple[int, str, str, str]:
    return (ref.line_number, ref.kind_name, ref.target, ref.display_text)


def _merge_validated(
    refs: list[CrossReference], validated: Sequence[CrossReference]
) -> list[CrossReference]:
    """Swap in validated copies; references dropped by a batch timeout stay as-is."""
    by_key = {_occurrence_key(v): v for v in validated}
    return [by_key.get(_occurrence_key(r), r) for r in refs]
