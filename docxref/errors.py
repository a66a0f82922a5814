"""Exception types raised by the cross-reference engine."""

from collections.abc import Sequence

from docxref.cross_reference import CrossReference


class CrossRefError(Exception):
    """Base class for engine errors."""


class RenderError(CrossRefError):
    """The markdown renderer failed; no HTML was produced."""


class BrokenLinksError(CrossRefError):
    """Validation found invalid references while broken links were fatal."""

    def __init__(self, broken_links: Sequence[CrossReference]) -> None:
        """Store the offending references."""
        self.broken_links = list(broken_links)
        super().__init__(f"Found {len(self.broken_links)} broken cross-reference(s)")
