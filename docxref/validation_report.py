"""Aggregate validity counts for the cross-references of one document."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from docxref.cross_reference import CrossReference


@dataclass(frozen=True)
class ValidationReport:
    """Validated references for one document and their tallies."""

    entries: tuple[CrossReference, ...]

    @property
    def total_count(self) -> int:
        """Return the number of validated references."""
        return len(self.entries)

    @property
    def valid_count(self) -> int:
        """Return the number of references that validated."""
        return sum(1 for e in self.entries if e.valid is True)

    @property
    def invalid_count(self) -> int:
        """Return the number of references that did not validate."""
        return self.total_count - self.valid_count

    @property
    def has_errors(self) -> bool:
        """Return True if any reference is invalid."""
        return self.invalid_count > 0

    @property
    def invalid_entries(self) -> list[CrossReference]:
        """Return the invalid references in document order."""
        return [e for e in self.entries if e.valid is not True]

    @property
    def summary(self) -> dict[str, int]:
        """Return the counts as a small mapping."""
        return {
            "total": self.total_count,
            "valid": self.valid_count,
            "invalid": self.invalid_count,
        }

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "total_count": self.total_count,
            "valid_count": self.valid_count,
            "invalid_count": self.invalid_count,
            "has_errors": self.has_errors,
            "entries": [e.to_dict() for e in self.entries],
        }


def build_validation_report(entries: Iterable[CrossReference]) -> ValidationReport:
    """Create a fresh report over already validated references."""
    return ValidationReport(entries=tuple(entries))
