"""Detailed diagnostics for broken cross-references."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from docxref.cross_reference import CrossReference
from docxref.severity import Severity
from docxref.validation_report import ValidationReport

SIMILAR_PREFIX_LEN = 3
SIMILAR_PER_ERROR = 3


@dataclass(frozen=True)
class ErrorInfo:
    """One broken reference, with enough context to fix it."""

    target: str
    kind: str
    error: str
    line_number: int
    context: str | None
    suggestions: list[str]
    severity: str
    fix_suggestion: str | None
    file_path: str | None = None


@dataclass(frozen=True)
class ErrorReport:
    """Summary of everything wrong with a document's references."""

    broken_links: int
    total_links: int
    success_rate: float
    errors: list[ErrorInfo]
    by_kind: dict[str, int] = field(default_factory=dict)
    by_severity: dict[str, int] = field(default_factory=dict)
    fix_suggestions: list[str] = field(default_factory=list)
    similar_references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "broken_links": self.broken_links,
            "total_links": self.total_links,
            "success_rate": self.success_rate,
            "errors": [vars(e) for e in self.errors],
            "by_kind": dict(self.by_kind),
            "by_severity": dict(self.by_severity),
            "fix_suggestions": list(self.fix_suggestions),
            "similar_references": list(self.similar_references),
        }


def build_error_report(
    report: ValidationReport,
    source_text: str | None = None,
    file_path: str | None = None,
) -> ErrorReport:
    """Build an ErrorReport from a ValidationReport.

    When source_text is given, each error carries the source line it was
    found on; file_path, when given, is stamped on every error.
    """
    lines = source_text.split("\n") if source_text is not None else None
    errors = [_error_info(ref, lines, file_path) for ref in report.invalid_entries]

    total = report.total_count
    if total > 0:
        success_rate = round(report.valid_count / total * 100, 2)
    else:
        success_rate = 100.0

    severity_counts = Counter(e.severity for e in errors)
    fixes: list[str] = []
    for e in errors:
        if e.fix_suggestion and e.fix_suggestion not in fixes:
            fixes.append(e.fix_suggestion)

    return ErrorReport(
        broken_links=report.invalid_count,
        total_links=total,
        success_rate=success_rate,
        errors=errors,
        by_kind=dict(Counter(e.kind_name for e in report.entries)),
        by_severity={s.value: severity_counts.get(s.value, 0) for s in Severity},
        fix_suggestions=fixes,
        similar_references=_similar_references(errors, report.entries),
    )


def _error_info(
    ref: CrossReference, lines: list[str] | None, file_path: str | None
) -> ErrorInfo:
    context = None
    if lines is not None and 0 < ref.line_number <= len(lines):
        context = lines[ref.line_number - 1]
    fix = f"Did you mean '{ref.suggestions[0]}'?" if ref.suggestions else None
    return ErrorInfo(
        target=ref.target,
        kind=ref.kind_name,
        error=ref.error or "Unknown error",
        line_number=ref.line_number,
        context=context,
        suggestions=list(ref.suggestions),
        severity=(ref.severity or Severity.ERROR).value,
        fix_suggestion=fix,
        file_path=file_path,
    )


def _similar_references(
    errors: list[ErrorInfo], entries: tuple[CrossReference, ...]
) -> list[str]:
    """Find valid targets in the same document that share a broken target's prefix."""
    valid_targets: list[str] = []
    for e in entries:
        if e.valid is True and e.target not in valid_targets:
            valid_targets.append(e.target)

    similar: list[str] = []
    for err in errors:
        prefix = err.target[:SIMILAR_PREFIX_LEN]
        matches = [t for t in valid_targets if prefix and prefix in t]
        for t in matches[:SIMILAR_PER_ERROR]:
            if t not in similar:
                similar.append(t)
    return similar
