"""Command-line entry point: check cross-references in markdown files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from docxref.cross_reference import CrossReference
from docxref.envelope import ProcessingFailure, ProcessingResult
from docxref.load_config import load_config
from docxref.load_registries import load_registries
from docxref.process_document import process_documents
from docxref.process_options import ProcessOptions
from docxref.validate_configuration import validate_configuration

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    ap = argparse.ArgumentParser(
        prog="docxref",
        description="Resolve and validate ash:/exdoc:/dev:/user: cross-references.",
    )
    sub = ap.add_subparsers(dest="command", required=True)
    check = sub.add_parser("check", help="Validate cross-references in files")
    check.add_argument("files", nargs="+", type=Path, help="Markdown files to check")
    check.add_argument("--registry", help="YAML file listing known targets per kind")
    check.add_argument("--config", help="Path to configuration file")
    check.add_argument(
        "--fail-on-broken-links",
        action="store_true",
        help="Treat any broken reference as a failure of its document",
    )
    check.add_argument(
        "--concurrent",
        action="store_true",
        help="Validate large documents' references in parallel",
    )
    check.add_argument(
        "--max-workers",
        type=int,
        help="Worker threads for documents and references (default: from config)",
    )
    check.add_argument(
        "--skip-validation",
        action="append",
        default=[],
        metavar="KIND",
        help="Accept references of this kind without checking them (repeatable)",
    )
    check.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    check.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap


def run_check(args: argparse.Namespace) -> int:
    """Check every file and print a report. Returns the exit code."""
    config = load_config(args.config)
    config_check = validate_configuration(config)
    for warning in config_check.warnings:
        logger.warning(warning)
    if not config_check.valid:
        for error in config_check.errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 2

    registries = load_registries(args.registry) if args.registry else {}
    overrides = {
        "validate_cross_refs": True,
        "generate_error_reports": True,
        "fail_on_broken_links": args.fail_on_broken_links,
        "concurrent": args.concurrent,
        "max_workers": args.max_workers,
    }
    if args.skip_validation:
        overrides["skip_validation"] = [
            *(config.get("skip_validation") or []),
            *args.skip_validation,
        ]
    options = ProcessOptions.from_config(config, **overrides)

    texts = []
    for path in args.files:
        if not path.is_file():
            print(f"No such file: {path}", file=sys.stderr)
            return 2
        texts.append(path.read_text(encoding="utf-8"))

    results = process_documents(texts, registries, options)

    if args.format == "json":
        payload = {str(p): r.to_dict() for p, r in zip(args.files, results)}
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        for path, result in zip(args.files, results):
            _print_result(path, result)

    return 1 if any(not r.success for r in results) else 0


def _print_result(path: Path, result: ProcessingResult) -> None:
    if isinstance(result, ProcessingFailure):
        print(f"{path}: FAILED ({result.kind}): {result.error}")
        for ref in result.broken_links:
            print(_describe_broken(ref))
        return
    report = result.validation_report
    if report is None:
        print(f"{path}: {len(result.cross_refs)} reference(s)")
        return
    print(f"{path}: {report.total_count} reference(s), {report.invalid_count} broken")
    for ref in report.invalid_entries:
        print(_describe_broken(ref))


def _describe_broken(ref: CrossReference) -> str:
    line = f"  line {ref.line_number}: {ref.error}"
    if ref.suggestions:
        line += f" (did you mean '{ref.suggestions[0]}'?)"
    return line


def main(argv: list[str] | None = None) -> int:
    """Run the docxref command line."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_check(args)


if __name__ == "__main__":
    raise SystemExit(main())
