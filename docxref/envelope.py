"""Tagged success/failure results returned at the engine boundary."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from docxref.cross_reference import CrossReference
from docxref.error_report import ErrorReport
from docxref.errors import BrokenLinksError, CrossRefError, RenderError
from docxref.export_data import ExportData
from docxref.validation_report import ValidationReport


@dataclass(frozen=True)
class ProcessingSuccess:
    """A processed document."""

    html: str
    cross_refs: list[CrossReference]
    title: str
    validation_report: ValidationReport | None = None
    error_report: ErrorReport | None = None
    export_data: ExportData | None = None
    cache_hit: bool = False
    success: bool = field(default=True, init=False)

    def with_cache_hit(self, cache_hit: bool) -> "ProcessingSuccess":
        """Return a copy tagged with whether it came from the cache."""
        return dataclasses.replace(self, cache_hit=cache_hit)

    def unwrap(self) -> "ProcessingSuccess":
        """Return self; mirrors ProcessingFailure.unwrap."""
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "success": True,
            "title": self.title,
            "html": self.html,
            "cross_refs": [r.to_dict() for r in self.cross_refs],
            "validation_report": (
                self.validation_report.to_dict() if self.validation_report else None
            ),
            "error_report": self.error_report.to_dict() if self.error_report else None,
            "export_data": self.export_data.to_dict() if self.export_data else None,
            "cache_hit": self.cache_hit,
        }


@dataclass(frozen=True)
class ProcessingFailure:
    """A document that could not be processed.

    ``kind`` is one of "render", "broken_links", "timeout" or "internal".
    """

    error: str
    kind: str
    broken_links: list[CrossReference] = field(default_factory=list)
    cause: BaseException | None = field(default=None, compare=False, repr=False)
    cache_hit: bool = False
    success: bool = field(default=False, init=False)

    def with_cache_hit(self, cache_hit: bool) -> "ProcessingFailure":
        """Return a copy tagged with whether it came from the cache."""
        return dataclasses.replace(self, cache_hit=cache_hit)

    def unwrap(self) -> ProcessingSuccess:
        """Raise the typed error this failure stands for."""
        if self.kind == "broken_links":
            raise BrokenLinksError(self.broken_links)
        if self.kind == "render":
            raise RenderError(self.error) from self.cause
        raise CrossRefError(self.error) from self.cause

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "success": False,
            "error": self.error,
            "kind": self.kind,
            "broken_links": [r.to_dict() for r in self.broken_links],
        }


ProcessingResult = ProcessingSuccess | ProcessingFailure
