"""Data model for the outcome of a batch validation."""

from dataclasses import dataclass
from typing import Any

from docxref.cross_reference import CrossReference


@dataclass(frozen=True)
class BatchResult:
    """Validated references from one batch call, with timing information."""

    results: tuple[CrossReference, ...]
    processing_time_ms: float
    concurrent: bool
    timed_out: bool = False

    @property
    def total_count(self) -> int:
        """Return the number of references that produced a result."""
        return len(self.results)

    @property
    def valid_count(self) -> int:
        """Return the number of valid results."""
        return sum(1 for r in self.results if r.valid is True)

    @property
    def invalid_count(self) -> int:
        """Return the number of invalid results."""
        return self.total_count - self.valid_count

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "total_count": self.total_count,
            "valid_count": self.valid_count,
            "invalid_count": self.invalid_count,
            "processing_time_ms": self.processing_time_ms,
            "concurrent": self.concurrent,
            "timed_out": self.timed_out,
            "results": [r.to_dict() for r in self.results],
        }
