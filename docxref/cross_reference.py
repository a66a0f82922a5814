"""Data model for a single cross-reference occurrence."""

from dataclasses import dataclass, field
from typing import Any

from docxref.ref_kind import RefKind
from docxref.severity import Severity


@dataclass(frozen=True)
class CrossReference:
    """Represents one marker found in a document, plus what we learned about it."""

    kind: RefKind | str
    target: str
    display_text: str
    line_number: int
    url: str | None = None
    valid: bool | None = None
    exists: bool | None = None
    error: str | None = None
    suggestions: tuple[str, ...] = ()
    severity: Severity | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    preview: dict[str, Any] | None = field(default=None, compare=False)

    @property
    def kind_name(self) -> str:
        """Return the marker keyword for this reference's kind."""
        return self.kind.value if isinstance(self.kind, RefKind) else str(self.kind)

    @property
    def marker(self) -> str:
        """Return the source marker text, e.g. [User](ash:Accounts.User)."""
        return f"[{self.display_text}]({self.kind_name}:{self.target})"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation."""
        data: dict[str, Any] = {
            "kind": self.kind_name,
            "target": self.target,
            "display_text": self.display_text,
            "line_number": self.line_number,
            "url": self.url,
            "valid": self.valid,
            "exists": self.exists,
            "error": self.error,
            "suggestions": list(self.suggestions),
            "severity": self.severity.value if self.severity else None,
        }
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.preview is not None:
            data["preview"] = dict(self.preview)
        return data
