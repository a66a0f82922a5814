"""Structured export of a processed document's cross-references."""

import csv
import io
import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import yaml

from docxref.cross_reference import CrossReference
from docxref.validation_report import ValidationReport

CSV_COLUMNS = [
    "kind",
    "target",
    "display_text",
    "line_number",
    "url",
    "valid",
    "error",
]


@dataclass(frozen=True)
class ExportData:
    """Title, references, kinds present and validation summary of one document."""

    title: str
    references: tuple[CrossReference, ...]
    kinds: tuple[str, ...]
    validation_summary: dict[str, int] | None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "document_title": self.title,
            "cross_references": [r.to_dict() for r in self.references],
            "cross_reference_types": list(self.kinds),
            "validation_summary": self.validation_summary,
        }

    def to_json(self) -> str:
        """Serialize to JSON."""
        return json.dumps(self.to_dict(), indent=2, sort_keys=True)

    def to_yaml(self) -> str:
        """Serialize to YAML."""
        return yaml.safe_dump(self.to_dict(), sort_keys=True, allow_unicode=True)

    def to_csv(self) -> str:
        """Serialize the references to CSV, one row each."""
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        for ref in self.references:
            writer.writerow(ref.to_dict())
        return buf.getvalue()

    def formats(self) -> dict[str, str]:
        """Return every supported serialization keyed by format name."""
        return {"json": self.to_json(), "yaml": self.to_yaml(), "csv": self.to_csv()}


def build_export_data(
    title: str,
    references: Sequence[CrossReference],
    report: ValidationReport | None = None,
) -> ExportData:
    """Create the export record for a processed document."""
    return ExportData(
        title=title,
        references=tuple(references),
        kinds=tuple(sorted({r.kind_name for r in references})),
        validation_summary=report.summary if report else None,
    )
